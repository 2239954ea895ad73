"""Alpha Vantage client used for quotes and technical indicators."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from decimal import Decimal
from functools import lru_cache
from typing import Any, Deque, Dict, Optional

import httpx

from moneymap.config import get_settings
from moneymap.core.errors import ConfigurationError, EnrichmentError
from moneymap.schemas.common import parse_decimal
from moneymap.schemas.market import PriceQuote, PriceStatus

logger = logging.getLogger(__name__)

BASE_URL = "https://www.alphavantage.co/query"
NOT_CONFIGURED_MESSAGE = "Alpha Vantage API key is not configured"

_ERROR_KEYS = ("Note", "Information", "Error Message")


class AlphaVantageError(EnrichmentError):
    """Raised when Alpha Vantage returns an error payload."""


class AlphaVantageClient:
    """Throttled Alpha Vantage client with convenience helpers."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        requests_per_minute: int | None = None,
        timeout: float | None = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.alphavantage_api_key
        self._requests_per_minute = requests_per_minute or settings.alphavantage_requests_per_minute
        self._timeout = timeout or settings.enrichment_timeout_seconds
        self._client = client
        self._owns_client = client is None
        self._calls: Deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _throttle(self) -> None:
        """Keep at most ``requests_per_minute`` calls inside any 60 second window."""

        async with self._lock:
            now = time.monotonic()
            while self._calls and now - self._calls[0] >= 60:
                self._calls.popleft()
            if len(self._calls) >= self._requests_per_minute:
                wait_for = 60 - (now - self._calls[0])
                logger.debug("Alpha Vantage budget exhausted; sleeping %.1fs", wait_for)
                await asyncio.sleep(wait_for)
                self._calls.popleft()
            self._calls.append(time.monotonic())

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self._api_key:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        await self._throttle()
        query = {**params, "apikey": self._api_key}
        try:
            response = await self._http().get(BASE_URL, params=query, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise AlphaVantageError(f"Failed to reach Alpha Vantage: {exc}") from exc
        if response.status_code >= 400:
            raise AlphaVantageError(f"Alpha Vantage error {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise AlphaVantageError("Alpha Vantage returned invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise AlphaVantageError("Alpha Vantage response is not an object")
        for key in _ERROR_KEYS:
            if key in payload:
                raise AlphaVantageError(str(payload[key]))
        return payload

    async def symbol_search(self, keywords: str) -> Dict[str, Any]:
        return await self._request({"function": "SYMBOL_SEARCH", "keywords": keywords})

    async def global_quote(self, symbol: str) -> PriceQuote:
        payload = await self._request({"function": "GLOBAL_QUOTE", "symbol": symbol})
        quote = payload.get("Global Quote") or {}
        if not isinstance(quote, dict):
            raise AlphaVantageError(f"Malformed quote returned for {symbol}")
        try:
            price = parse_decimal(quote.get("05. price"))
        except ValueError as exc:
            raise AlphaVantageError(f"Malformed quote returned for {symbol}: {exc}") from exc
        if price is None:
            raise AlphaVantageError(f"No quote returned for {symbol}")
        return PriceQuote(symbol=symbol, price=price, status=PriceStatus.AVAILABLE)

    async def _latest_indicator(self, function: str, symbol: str, period: int) -> Optional[Decimal]:
        payload = await self._request(
            {
                "function": function,
                "symbol": symbol,
                "interval": "daily",
                "time_period": period,
                "series_type": "close",
            }
        )
        series = payload.get(f"Technical Analysis: {function}") or {}
        if not series:
            return None
        point = series[max(series)] if isinstance(series, dict) else None
        if not isinstance(point, dict):
            raise AlphaVantageError(f"Malformed {function} series returned for {symbol}")
        try:
            return parse_decimal(point.get(function))
        except ValueError as exc:
            raise AlphaVantageError(f"Malformed {function} value for {symbol}: {exc}") from exc

    async def rsi(self, symbol: str, period: int = 14) -> Optional[Decimal]:
        """Latest daily RSI value, ``None`` when the series is empty."""

        return await self._latest_indicator("RSI", symbol, period)

    async def sma(self, symbol: str, period: int = 20) -> Optional[Decimal]:
        return await self._latest_indicator("SMA", symbol, period)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None


@lru_cache(maxsize=1)
def get_alpha_vantage_client() -> AlphaVantageClient:
    """Shared client so the per-minute budget applies process-wide."""

    return AlphaVantageClient()


__all__ = [
    "AlphaVantageClient",
    "AlphaVantageError",
    "NOT_CONFIGURED_MESSAGE",
    "get_alpha_vantage_client",
]
