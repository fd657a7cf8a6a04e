# tests/unit/test_feefo_adapter.py
import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from feefo_schema.adapters.feefo import REVIEWS_ENDPOINT, SUMMARY_ENDPOINT, FeefoApiClient
from feefo_schema.core.config import Settings
from feefo_schema.domain.ports import FetchError, ParseError

_SUMMARY_RESPONSE = {
    "meta": {"count": 12},
    "rating": {"min": 1.0, "max": 5.0, "rating": 4.5, "service": {"count": 12}},
}


def _mock_response(payload: object, status_code: int = 200) -> MagicMock:
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


def _client_returning(response: MagicMock) -> AsyncMock:
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = response
    return mock_client


@pytest.fixture
def settings() -> Settings:
    return Settings(
        feefo_api_base_url="https://api.feefo.com/api/",
        feefo_api_version="10",
        merchant_identifier="example-retail-merchant",
        request_timeout_seconds=5.0,
    )


def test_build_url_joins_base_version_and_endpoint(settings: Settings) -> None:
    adapter = FeefoApiClient(http_client=AsyncMock(spec=httpx.AsyncClient), settings=settings)

    assert adapter.build_url(SUMMARY_ENDPOINT) == "https://api.feefo.com/api/10/reviews/summary/product"
    assert adapter.build_url("/reviews/product") == "https://api.feefo.com/api/10/reviews/product"


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_sends_merchant_and_timeout(settings: Settings) -> None:
    mock_client = _client_returning(_mock_response({"ok": True}))
    adapter = FeefoApiClient(http_client=mock_client, settings=settings)

    data = await adapter.fetch(SUMMARY_ENDPOINT)

    assert data == {"ok": True}
    mock_client.get.assert_called_once_with(
        "https://api.feefo.com/api/10/reviews/summary/product",
        params={"merchant_identifier": "example-retail-merchant"},
        timeout=5.0,
    )


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_without_merchant_sends_no_params() -> None:
    mock_client = _client_returning(_mock_response({}))
    adapter = FeefoApiClient(http_client=mock_client, settings=Settings(merchant_identifier=""))

    await adapter.fetch(REVIEWS_ENDPOINT)

    assert mock_client.get.call_args.kwargs["params"] == {}


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_summary_extracts_score_and_count(settings: Settings) -> None:
    adapter = FeefoApiClient(
        http_client=_client_returning(_mock_response(_SUMMARY_RESPONSE)), settings=settings
    )

    summary = await adapter.fetch_summary()

    assert summary.score == 4.5
    assert summary.count == 12


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_summary_missing_fields_raises_parse_error(settings: Settings) -> None:
    adapter = FeefoApiClient(
        http_client=_client_returning(_mock_response({"rating": {"rating": 4.5}})),
        settings=settings,
    )

    with pytest.raises(ParseError) as exc_info:
        await adapter.fetch_summary()
    assert exc_info.value.endpoint == SUMMARY_ENDPOINT


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_reviews_returns_raw_records_in_order(settings: Settings) -> None:
    payload = {"reviews": [{"customer": {"display_name": "A"}}, {"customer": {"display_name": "B"}}]}
    adapter = FeefoApiClient(http_client=_client_returning(_mock_response(payload)), settings=settings)

    reviews = await adapter.fetch_reviews()

    assert [r["customer"]["display_name"] for r in reviews] == ["A", "B"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_reviews_without_reviews_key_raises_parse_error(settings: Settings) -> None:
    adapter = FeefoApiClient(
        http_client=_client_returning(_mock_response({"summary": {}})), settings=settings
    )

    with pytest.raises(ParseError):
        await adapter.fetch_reviews()


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_invalid_json_raises_parse_error(settings: Settings) -> None:
    response = _mock_response(None)
    response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
    adapter = FeefoApiClient(http_client=_client_returning(response), settings=settings)

    with pytest.raises(ParseError):
        await adapter.fetch(REVIEWS_ENDPOINT)


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_http_error_raises_fetch_error(settings: Settings) -> None:
    response = _mock_response(None, status_code=503)
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "503 Service Unavailable",
        request=httpx.Request("GET", "https://api.feefo.com/api/10/reviews/product"),
        response=MagicMock(spec=httpx.Response),
    )
    adapter = FeefoApiClient(http_client=_client_returning(response), settings=settings)

    with pytest.raises(FetchError) as exc_info:
        await adapter.fetch(REVIEWS_ENDPOINT)
    assert exc_info.value.endpoint == REVIEWS_ENDPOINT
    assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fetch_request_error_raises_fetch_error(settings: Settings) -> None:
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.ConnectTimeout("timed out")
    adapter = FeefoApiClient(http_client=mock_client, settings=settings)

    with pytest.raises(FetchError) as exc_info:
        await adapter.fetch_summary()
    assert "Connection error" in exc_info.value.detail
