# tests/conftest.py
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from feefo_schema.core.config import Settings, get_settings
from feefo_schema.core.container import Container, build_container
from feefo_schema.core.rate_limit import limiter
from feefo_schema.domain.models import RatingSummary
from feefo_schema.domain.ports import ReviewSourcePort
from feefo_schema.main import app
from feefo_schema.repositories.memory_cache_store import InMemoryCacheStore


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        api_keys={"test-key-ops": "ops"},
        merchant_identifier="test-store",
        database_url="sqlite://",
        refresh_on_start=False,
        refresh_interval_seconds=3600,
    )


@pytest.fixture
def raw_reviews() -> list[dict[str, Any]]:
    return [
        {
            "customer": {"display_name": "Jane D."},
            "products": [
                {
                    "created_at": "2023-05-01T10:15:00+0000",
                    "rating": {"rating": 5},
                    "review": "Fits perfectly, great quality.",
                }
            ],
        },
        {
            "customer": {"display_name": ""},
            "products": [
                {
                    "created_at": "2023-04-20T08:00:00+0100",
                    "rating": {"rating": "4"},
                    "review": "Good, arrived a day late.",
                },
                {
                    "created_at": "2023-04-21T08:00:00+0100",
                    "rating": {"rating": 1},
                    "review": "Second product is ignored.",
                },
            ],
        },
        {
            "customer": {"display_name": "No Product"},
            "products": [],
        },
    ]


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def review_source(raw_reviews: list[dict[str, Any]]) -> AsyncMock:
    source = AsyncMock(spec=ReviewSourcePort)
    source.fetch_summary.return_value = RatingSummary(score=4.5, count=12)
    source.fetch_reviews.return_value = raw_reviews
    return source


@pytest.fixture
def client(
    test_settings: Settings, cache_store: InMemoryCacheStore, review_source: AsyncMock
) -> Generator[TestClient, None, None]:
    # The lifespan builds the container; swap in the in-memory store and a mocked source
    def _build(_settings: Settings) -> Container:
        return build_container(
            test_settings,
            http_client=httpx.AsyncClient(),
            store=cache_store,
            source=review_source,
        )

    app.dependency_overrides[get_settings] = lambda: test_settings
    limiter.reset()
    try:
        with patch("feefo_schema.main.build_container", side_effect=_build), TestClient(
            app
        ) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_settings, None)


@pytest.fixture
def ops_headers() -> dict:
    return {"X-API-Key": "test-key-ops"}
