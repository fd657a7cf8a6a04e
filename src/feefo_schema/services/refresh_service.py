# src/feefo_schema/services/refresh_service.py
from __future__ import annotations

import asyncio
import logging

from feefo_schema.core.metrics import REFRESH_RUNS
from feefo_schema.domain.models import RefreshOutcome
from feefo_schema.domain.ports import FetchError, ParseError, ReviewSourcePort
from feefo_schema.services.feefo_cache import FeefoDataCache
from feefo_schema.services.review_normalizer import normalize_batch

logger = logging.getLogger(__name__)


class RefreshService:
    """
    The fetch, normalize and store actions run by the scheduler.

    This is the only writer of the Feefo cache. A failed fetch leaves the
    previously cached values untouched; the next cycle is the retry. Every
    call records an outcome, whatever went wrong.
    """

    def __init__(self, source: ReviewSourcePort, cache: FeefoDataCache) -> None:
        self._source = source
        self._cache = cache
        self.last_outcomes: dict[str, RefreshOutcome] = {}

    async def refresh_summary(self) -> RefreshOutcome:
        try:
            summary = await self._source.fetch_summary()
            # Store I/O is blocking, keep it off the event loop
            await asyncio.to_thread(self._cache.write_summary, summary)
        except (FetchError, ParseError) as e:
            logger.warning("Summary refresh skipped, keeping cached values: %s", e)
            return self._record(RefreshOutcome(action="summary", ok=False, detail=str(e)))
        except Exception as e:
            logger.exception("Summary refresh failed unexpectedly")
            return self._record(RefreshOutcome(action="summary", ok=False, detail=repr(e)))

        logger.info("Cached product rating %s from %d ratings", summary.score, summary.count)
        return self._record(RefreshOutcome(action="summary", ok=True, items=summary.count))

    async def refresh_reviews(self) -> RefreshOutcome:
        try:
            raw_reviews = await self._source.fetch_reviews()
            reviews = normalize_batch(raw_reviews)
            await asyncio.to_thread(self._cache.write_reviews, reviews)
        except (FetchError, ParseError) as e:
            logger.warning("Reviews refresh skipped, keeping cached values: %s", e)
            return self._record(RefreshOutcome(action="reviews", ok=False, detail=str(e)))
        except Exception as e:
            logger.exception("Reviews refresh failed unexpectedly")
            return self._record(RefreshOutcome(action="reviews", ok=False, detail=repr(e)))

        logger.info("Cached %d of %d reviews", len(reviews), len(raw_reviews))
        return self._record(RefreshOutcome(action="reviews", ok=True, items=len(reviews)))

    def _record(self, outcome: RefreshOutcome) -> RefreshOutcome:
        REFRESH_RUNS.labels(action=outcome.action, status="ok" if outcome.ok else "error").inc()
        self.last_outcomes[outcome.action] = outcome
        return outcome
