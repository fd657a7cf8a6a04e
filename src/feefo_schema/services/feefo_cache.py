from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from feefo_schema.domain.models import CacheKey, RatingSummary, Review
from feefo_schema.repositories.base import AbstractCacheStore

logger = logging.getLogger(__name__)

_SCORE = TypeAdapter(int | float)
_COUNT = TypeAdapter(int)
_REVIEWS = TypeAdapter(list[Review])


class FeefoDataCache:
    """
    Typed access to the persisted Feefo state.

    Every key is ``<prefix><suffix>``. Reads never raise: a missing entry or one
    holding a value of the wrong type is reported as absent.
    """

    def __init__(self, store: AbstractCacheStore, prefix: str) -> None:
        self._store = store
        self._prefix = prefix

    def key(self, suffix: CacheKey) -> str:
        return f"{self._prefix}{suffix.value}"

    # ------------------------------------------------------------------
    # Writes (refresh service only)
    # ------------------------------------------------------------------

    def write_summary(self, summary: RatingSummary) -> None:
        self._store.set(self.key(CacheKey.SUMMARY_PRODUCT_RATING), summary.score)
        self._store.set(self.key(CacheKey.SUMMARY_PRODUCT_RATING_COUNT), summary.count)

    def write_reviews(self, reviews: list[Review]) -> None:
        self._store.set(self.key(CacheKey.REVIEWS), [r.to_schema() for r in reviews])

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_score(self) -> int | float | None:
        return self._read(CacheKey.SUMMARY_PRODUCT_RATING, _SCORE)

    def read_count(self) -> int | None:
        return self._read(CacheKey.SUMMARY_PRODUCT_RATING_COUNT, _COUNT)

    def read_reviews(self) -> list[Review] | None:
        return self._read(CacheKey.REVIEWS, _REVIEWS)

    def _read(self, suffix: CacheKey, adapter: TypeAdapter[Any]) -> Any | None:
        key = self.key(suffix)
        try:
            raw = self._store.get(key)
        except Exception:
            logger.exception("Cache read failed for '%s'", key)
            return None

        if raw is None:
            return None
        try:
            return adapter.validate_python(raw, strict=suffix is not CacheKey.REVIEWS)
        except ValidationError:
            logger.warning("Ignoring cached value of unexpected type under '%s'", key)
            return None
