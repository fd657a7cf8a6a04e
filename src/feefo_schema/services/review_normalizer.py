# src/feefo_schema/services/review_normalizer.py
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from feefo_schema.domain.models import Review, ReviewRating
from feefo_schema.domain.ports import MalformedReviewError

logger = logging.getLogger(__name__)

ANONYMOUS_AUTHOR = "anonymous"

# Feefo timestamps look like 2023-05-01T10:15:00+0000; only the date part is kept
_TIMESTAMP_DATE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)?"
    r"(?:Z|[+-]\d{2}:?\d{2})?$"
)


def extract_date(timestamp: str) -> str:
    """Returns the ``YYYY-MM-DD`` part of a provider timestamp."""
    value = timestamp.strip()
    match = _TIMESTAMP_DATE.match(value)
    try:
        if match:
            return date.fromisoformat(match.group(1)).isoformat()
        return datetime.fromisoformat(value).date().isoformat()
    except ValueError as e:
        raise MalformedReviewError(f"Unparseable created_at '{timestamp}'") from e


def _author(raw: dict[str, Any]) -> str:
    customer = raw.get("customer")
    if not isinstance(customer, dict):
        return ANONYMOUS_AUTHOR
    name = customer.get("display_name")
    if isinstance(name, str) and name:
        return name
    return ANONYMOUS_AUTHOR


def normalize(raw: dict[str, Any]) -> Review:
    """
    Transforms one raw Feefo review record into the Review schema.

    Only the first linked product is used as the source of date, rating and text.

    A missing or unparseable timestamp leaves ``datePublished`` empty.

    Raises:
        MalformedReviewError: If the record has no linked product entry.
    """
    if not isinstance(raw, dict):
        raise MalformedReviewError("Review record is not an object")

    products = raw.get("products")
    if not isinstance(products, list) or not products or not isinstance(products[0], dict):
        raise MalformedReviewError("No linked product entry")

    product = products[0]
    rating = product.get("rating")
    rating_value = rating.get("rating") if isinstance(rating, dict) else None

    try:
        return Review(
            author=_author(raw),
            date_published=_published_date(product.get("created_at")),
            description=_description(product.get("review")),
            review_rating=ReviewRating(rating_value=rating_value),
        )
    except ValidationError as e:
        raise MalformedReviewError(str(e)) from e


def _published_date(created_at: Any) -> str:
    if not isinstance(created_at, str):
        return ""
    try:
        return extract_date(created_at)
    except MalformedReviewError as e:
        logger.warning("Publishing review without date: %s", e.detail)
        return ""


def _description(text: Any) -> str:
    if text is None:
        return ""
    if isinstance(text, str):
        return text
    return str(text)


def normalize_batch(raws: Iterable[dict[str, Any]]) -> list[Review]:
    """Normalizes all records in provider order, skipping malformed ones."""
    reviews: list[Review] = []
    for index, raw in enumerate(raws):
        try:
            reviews.append(normalize(raw))
        except MalformedReviewError as e:
            logger.warning("Skipping malformed review at index %d: %s", index, e.detail)
    return reviews
