from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AbstractCacheStore(ABC):
    """
    Durable key-value store for the last fetched Feefo data.
    Values are JSON-compatible; last write wins.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Returns the stored value, or None if the key was never written."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Creates or overwrites the value stored under key."""
        ...
