"""Alpha Vantage client tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from moneymap.core.errors import ConfigurationError
from moneymap.providers.alpha_vantage import AlphaVantageClient, AlphaVantageError
from moneymap.schemas.market import PriceStatus


class StubResponse:
    def __init__(self, payload: dict[str, object], status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self) -> dict[str, object]:
        return self._payload


class StubClient:
    def __init__(self, payload: dict[str, object] | None = None, status_code: int = 200) -> None:
        self.calls: list[dict[str, object]] = []
        self._payload = payload if payload is not None else {"Global Quote": {"05. price": "2901.45"}}
        self._status_code = status_code

    async def get(self, url: str, params: dict[str, object], timeout: float) -> StubResponse:
        self.calls.append(params)
        return StubResponse(self._payload, self._status_code)

    async def aclose(self) -> None:  # pragma: no cover - included for interface completeness
        return None


@pytest.mark.asyncio
async def test_injects_api_key_and_parses_quote():
    client = AlphaVantageClient(api_key="test", requests_per_minute=10, client=StubClient())

    quote = await client.global_quote("RELIANCE.BSE")

    assert client._client.calls[0]["apikey"] == "test"
    assert client._client.calls[0]["function"] == "GLOBAL_QUOTE"
    assert quote.price == Decimal("2901.45")
    assert quote.status is PriceStatus.AVAILABLE


@pytest.mark.asyncio
async def test_raises_on_note():
    client = AlphaVantageClient(api_key="test", requests_per_minute=10, client=StubClient({"Note": "limit"}))

    with pytest.raises(AlphaVantageError):
        await client.global_quote("RELIANCE.BSE")


@pytest.mark.asyncio
async def test_empty_quote_is_an_error():
    client = AlphaVantageClient(api_key="test", requests_per_minute=10, client=StubClient({"Global Quote": {}}))

    with pytest.raises(AlphaVantageError):
        await client.global_quote("UNKNOWN")


@pytest.mark.asyncio
async def test_http_error_status_is_an_error():
    client = AlphaVantageClient(api_key="test", requests_per_minute=10, client=StubClient({}, status_code=503))

    with pytest.raises(AlphaVantageError):
        await client.symbol_search("Reliance")


@pytest.mark.asyncio
async def test_latest_indicator_value():
    payload = {
        "Technical Analysis: RSI": {
            "2024-06-27": {"RSI": "48.1000"},
            "2024-06-28": {"RSI": "52.3456"},
        }
    }
    client = AlphaVantageClient(api_key="test", requests_per_minute=10, client=StubClient(payload))

    assert await client.rsi("INFY.BSE") == Decimal("52.3456")
    assert client._client.calls[0]["time_period"] == 14


@pytest.mark.asyncio
async def test_missing_key_is_a_configuration_error():
    client = AlphaVantageClient(api_key="", client=StubClient())

    assert client.is_configured is False
    with pytest.raises(ConfigurationError):
        await client.global_quote("RELIANCE.BSE")
