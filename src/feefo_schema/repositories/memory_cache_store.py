# src/feefo_schema/repositories/memory_cache_store.py
from __future__ import annotations

import json
from typing import Any

from feefo_schema.core.metrics import CACHE_HITS, CACHE_MISSES
from feefo_schema.repositories.base import AbstractCacheStore


class InMemoryCacheStore(AbstractCacheStore):
    """
    In-memory store for tests and ephemeral runs.
    Values are kept as JSON text so callers never share mutable state with the store.
    """

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        if key not in self._store:
            CACHE_MISSES.inc()
            return None
        CACHE_HITS.inc()
        return json.loads(self._store[key])

    def set(self, key: str, value: Any) -> None:
        self._store[key] = json.dumps(value)
