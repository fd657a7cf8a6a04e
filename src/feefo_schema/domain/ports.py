# src/feefo_schema/domain/ports.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from feefo_schema.domain.models import RatingSummary


class ReviewSourcePort(ABC):
    """
    Abstract interface of the remote reviews provider.
    The refresh service only knows this interface.
    """

    @abstractmethod
    async def fetch_summary(self) -> RatingSummary:
        """
        Fetches the aggregate product rating.

        Raises:
            FetchError: On network failure or a non-2xx status.
            ParseError: If the body is not JSON or lacks the expected fields.
        """
        ...

    @abstractmethod
    async def fetch_reviews(self) -> list[dict[str, Any]]:
        """Fetches the raw review records of the latest response, in provider order."""
        ...


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class FeefoError(Exception):
    """Base class of all errors raised by the refresh pipeline."""


class FetchError(FeefoError):
    def __init__(self, endpoint: str, detail: str):
        super().__init__(f"Fetching '{endpoint}' failed: {detail}")
        self.endpoint = endpoint
        self.detail = detail


class ParseError(FeefoError):
    def __init__(self, endpoint: str, detail: str):
        super().__init__(f"Unexpected response from '{endpoint}': {detail}")
        self.endpoint = endpoint
        self.detail = detail


class MalformedReviewError(FeefoError):
    def __init__(self, detail: str, index: int | None = None):
        where = f" at index {index}" if index is not None else ""
        super().__init__(f"Malformed review{where}: {detail}")
        self.detail = detail
        self.index = index
