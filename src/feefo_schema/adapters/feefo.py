# src/feefo_schema/adapters/feefo.py
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from feefo_schema.core.config import Settings
from feefo_schema.core.metrics import EXTERNAL_API_COUNT, EXTERNAL_API_DURATION
from feefo_schema.domain.models import RatingSummary
from feefo_schema.domain.ports import FetchError, ParseError, ReviewSourcePort

logger = logging.getLogger(__name__)

SUMMARY_ENDPOINT = "reviews/summary/product"
REVIEWS_ENDPOINT = "reviews/product"


# Only the fields read below are declared; extra keys are ignored
class _FeefoService(BaseModel):
    count: int


class _FeefoRating(BaseModel):
    rating: int | float
    service: _FeefoService


class _FeefoSummaryResponse(BaseModel):
    rating: _FeefoRating


class _FeefoReviewsResponse(BaseModel):
    # Records stay raw here; the normalizer decides per item what is usable
    reviews: list[dict[str, Any]]


class FeefoApiClient(ReviewSourcePort):
    """Adapter for the Feefo reviews API."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = http_client
        self._base_url = settings.feefo_api_base_url.rstrip("/")
        self._version = settings.feefo_api_version.strip("/")
        self._merchant_identifier = settings.merchant_identifier
        self._timeout = settings.request_timeout_seconds

    def build_url(self, endpoint_path: str) -> str:
        return f"{self._base_url}/{self._version}/{endpoint_path.lstrip('/')}"

    async def fetch(self, endpoint_path: str) -> Any:
        """
        GETs an endpoint below the versioned base URL and returns the decoded JSON body.

        Raises:
            FetchError: Network failure or non-2xx status.
            ParseError: Body is not valid JSON.
        """
        url = self.build_url(endpoint_path)
        params = {}
        if self._merchant_identifier:
            params["merchant_identifier"] = self._merchant_identifier

        with EXTERNAL_API_DURATION.labels(endpoint=endpoint_path).time():
            try:
                response = await self._client.get(url, params=params, timeout=self._timeout)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                EXTERNAL_API_COUNT.labels(endpoint=endpoint_path, status="error").inc()
                raise FetchError(endpoint_path, str(e)) from e
            except httpx.RequestError as e:
                EXTERNAL_API_COUNT.labels(endpoint=endpoint_path, status="error").inc()
                raise FetchError(endpoint_path, f"Connection error: {e}") from e

        EXTERNAL_API_COUNT.labels(endpoint=endpoint_path, status="ok").inc()
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(endpoint_path, f"Invalid JSON body: {e}") from e

    async def fetch_summary(self) -> RatingSummary:
        data = await self.fetch(SUMMARY_ENDPOINT)
        try:
            raw = _FeefoSummaryResponse.model_validate(data)
            return RatingSummary(score=raw.rating.rating, count=raw.rating.service.count)
        except ValidationError as e:
            raise ParseError(SUMMARY_ENDPOINT, str(e)) from e

    async def fetch_reviews(self) -> list[dict[str, Any]]:
        data = await self.fetch(REVIEWS_ENDPOINT)
        try:
            raw = _FeefoReviewsResponse.model_validate(data)
        except ValidationError as e:
            raise ParseError(REVIEWS_ENDPOINT, str(e)) from e

        logger.debug("Feefo returned %d reviews", len(raw.reviews))
        return raw.reviews
