"""Finnhub client for company profiles and market news."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional

import httpx

from moneymap.config import get_settings
from moneymap.core.errors import ConfigurationError, EnrichmentError
from moneymap.schemas.market import CompanyProfile, MarketNewsArticle
from moneymap.services.payload import parse_date

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Finnhub API key is not configured"


class FinnhubError(EnrichmentError):
    """Raised when Finnhub is unreachable or returns an unusable payload."""


class FinnhubClient:
    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.finnhub_api_key
        self._base_url = (base_url or settings.finnhub_base_url).rstrip("/")
        self._timeout = timeout or settings.enrichment_timeout_seconds
        self._client = client
        self._owns_client = client is None

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        if not self._api_key:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        url = f"{self._base_url}{path}"
        try:
            response = await self._http().get(url, params={**params, "token": self._api_key}, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise FinnhubError(f"Failed to reach Finnhub: {exc}") from exc
        if response.status_code >= 400:
            detail: Any
            try:
                payload = response.json()
                detail = payload.get("error", payload) if isinstance(payload, dict) else payload
            except Exception:
                detail = response.text
            raise FinnhubError(f"Finnhub error {response.status_code}: {detail}")
        try:
            return response.json()
        except ValueError as exc:
            raise FinnhubError("Finnhub returned invalid JSON payload") from exc

    async def company_profile(self, isin: str) -> CompanyProfile:
        """Look up ``/stock/profile2`` by ISIN; an empty answer means no match."""

        payload = await self._get("/stock/profile2", {"isin": isin})
        if not isinstance(payload, dict) or not payload.get("name"):
            raise FinnhubError(f"No company profile found for {isin}")
        try:
            ipo_date = parse_date(payload.get("ipo"))
        except ValueError:
            ipo_date = None
        return CompanyProfile(
            isin=isin,
            name=str(payload["name"]),
            ticker=payload.get("ticker") or None,
            exchange=payload.get("exchange") or None,
            market_capitalization=payload.get("marketCapitalization"),
            ipo_date=ipo_date,
            website=payload.get("weburl") or None,
            industry=payload.get("finnhubIndustry") or None,
        )

    async def market_news(self, category: str = "general", limit: int | None = None) -> list[MarketNewsArticle]:
        payload = await self._get("/news", {"category": category})
        if not isinstance(payload, list):
            raise FinnhubError("Finnhub news response is not a list")
        articles: list[MarketNewsArticle] = []
        for item in payload:
            if not isinstance(item, dict) or not item.get("headline") or not item.get("url"):
                continue
            try:
                articles.append(
                    MarketNewsArticle(
                        id=int(item.get("id") or 0),
                        headline=str(item["headline"]),
                        summary=str(item.get("summary") or ""),
                        source=str(item.get("source") or ""),
                        url=str(item["url"]),
                        image=item.get("image") or None,
                        published_at=datetime.fromtimestamp(int(item.get("datetime") or 0), tz=timezone.utc),
                    )
                )
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed news item %s: %s", item.get("id"), exc)
        if limit is not None:
            articles = articles[:limit]
        return articles

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None


@lru_cache(maxsize=1)
def get_finnhub_client() -> FinnhubClient:
    return FinnhubClient()


__all__ = ["FinnhubClient", "FinnhubError", "NOT_CONFIGURED_MESSAGE", "get_finnhub_client"]
