# src/feefo_schema/domain/models.py
from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field

RatingValue = int | float | str


class CacheKey(StrEnum):
    """Key suffixes of the persisted state. The configured prefix is prepended."""

    SUMMARY_PRODUCT_RATING = "summary_product_rating"
    SUMMARY_PRODUCT_RATING_COUNT = "summary_product_rating_count"
    REVIEWS = "reviews"


class RatingSummary(BaseModel):
    """Aggregate product rating as reported by the summary endpoint."""

    score: int | float
    count: int = Field(ge=0)

    model_config = {"frozen": True}


class ReviewRating(BaseModel):
    type: Literal["Rating"] = Field(default="Rating", alias="@type")
    best_rating: Literal["5"] = Field(default="5", alias="bestRating")
    # Forwarded exactly as the provider returns it, number or string
    rating_value: RatingValue | None = Field(alias="ratingValue")
    worst_rating: Literal["1"] = Field(default="1", alias="worstRating")

    model_config = {"frozen": True, "populate_by_name": True}



class Review(BaseModel):
    type: Literal["Review"] = Field(default="Review", alias="@type")
    author: str = Field(min_length=1)
    # Empty when the provider timestamp is missing or unparseable
    date_published: str = Field(
        default="", alias="datePublished", pattern=r"^(\d{4}-\d{2}-\d{2})?$"
    )
    description: str = ""
    review_rating: ReviewRating = Field(alias="reviewRating")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_schema(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class DataLayerPayload(BaseModel):
    """Object pushed into ``window.dataLayer`` for the tag manager."""

    rating_score: int | float | None = Field(default=None, alias="RatingScore")
    rating_count: int | None = Field(default=None, alias="RatingCount")
    reviews: list[Review] = Field(default_factory=list, alias="Reviews")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_data_layer(self) -> dict[str, Any]:
        """Absent summary values are omitted, Reviews is always present."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RefreshOutcome(BaseModel):
    action: str
    ok: bool
    detail: str | None = None
    items: int | None = None

    model_config = {"frozen": True}


class SchedulerStatus(BaseModel):
    state: str
    jobs: list[str]
    running: list[str]
    last_outcomes: list[RefreshOutcome]
