"""Concurrent enrichment tests."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from moneymap.core.errors import EnrichmentError
from moneymap.schemas.market import CompanyProfile, PriceQuote, PriceStatus
from moneymap.services.enrichment import lookup_prices, resolve_company_profiles, resolve_display_names


class StubProfiles:
    def __init__(self, names: dict[str, str], configured: bool = True) -> None:
        self._names = names
        self._configured = configured
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def company_profile(self, isin: str) -> CompanyProfile:
        self.calls.append(isin)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        if isin not in self._names:
            raise EnrichmentError(f"No company profile found for {isin}")
        return CompanyProfile(isin=isin, name=self._names[isin], ticker=self._names[isin][:4].upper())


class StubQuotes:
    is_configured = True

    async def global_quote(self, symbol: str) -> PriceQuote:
        if symbol == "FAIL":
            raise EnrichmentError("rate limited")
        return PriceQuote(symbol=symbol, price=Decimal("101.5"), status=PriceStatus.AVAILABLE)


@pytest.mark.asyncio
async def test_one_failed_lookup_does_not_fail_the_batch():
    provider = StubProfiles({"INE1": "Alpha Ltd", "INE3": "Gamma Ltd"})

    names = await resolve_display_names(["INE1", "INE2", "INE3"], provider)

    assert names == {"INE1": "Alpha Ltd", "INE2": "INE2", "INE3": "Gamma Ltd"}


@pytest.mark.asyncio
async def test_lookups_run_concurrently_once_per_isin():
    provider = StubProfiles({"INE1": "Alpha Ltd", "INE2": "Beta Ltd"})

    batch = await resolve_company_profiles(["INE1", "INE2", "INE1"], provider)

    assert sorted(provider.calls) == ["INE1", "INE2"]
    assert provider.max_in_flight == 2
    assert set(batch.profiles) == {"INE1", "INE2"}
    assert batch.failures == {}


@pytest.mark.asyncio
async def test_failures_are_recorded():
    batch = await resolve_company_profiles(["INE9"], StubProfiles({}))

    assert batch.profiles == {}
    assert "INE9" in batch.failures["INE9"]


@pytest.mark.asyncio
async def test_unconfigured_provider_is_skipped():
    provider = StubProfiles({"INE1": "Alpha Ltd"}, configured=False)

    names = await resolve_display_names(["INE1"], provider)

    assert names == {"INE1": "INE1"}
    assert provider.calls == []


@pytest.mark.asyncio
async def test_failed_price_becomes_unavailable_sentinel():
    quotes = await lookup_prices(["ACME", "FAIL"], StubQuotes())

    assert quotes["ACME"].is_available
    assert quotes["ACME"].price == Decimal("101.5")
    assert quotes["FAIL"].status is PriceStatus.UNAVAILABLE
    assert quotes["FAIL"].price == Decimal("0")


@pytest.mark.asyncio
async def test_prices_without_provider_are_not_configured():
    quotes = await lookup_prices(["ACME"], None)

    assert quotes["ACME"].status is PriceStatus.NOT_CONFIGURED
