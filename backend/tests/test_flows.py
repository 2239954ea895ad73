"""Advisory flow tests with stub collaborators."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from moneymap.advisory.flows import (
    PLAN_SUMMARY_FALLBACK,
    analyze_isin_list,
    analyze_portfolio_isins,
    generate_financial_plan,
    months_until,
    project_future_value,
)
from moneymap.core.errors import AdvisoryError, EnrichmentError
from moneymap.schemas.advisory import PlanRequest, RiskAppetite
from moneymap.schemas.market import CompanyProfile, PriceQuote, PriceStatus
from moneymap.services.outcomes import run_action


class StubAdvisor:
    def __init__(self, replies: dict[str, object]) -> None:
        self._replies = replies
        self.prompts: dict[str, str] = {}

    async def generate(self, *, name, prompt, output_model, system=None, tools=()):
        self.prompts[name] = prompt
        reply = self._replies[name]
        if isinstance(reply, Exception):
            raise reply
        return output_model.model_validate(reply)


class StubProfiles:
    is_configured = True

    async def company_profile(self, isin: str) -> CompanyProfile:
        if isin == "BAD":
            raise EnrichmentError("No company profile found for BAD")
        return CompanyProfile(isin=isin, name=f"{isin} Ltd", ticker=f"{isin}.NS")


class StubTechnicals:
    is_configured = True

    async def global_quote(self, symbol: str) -> PriceQuote:
        return PriceQuote(symbol=symbol, price=Decimal("101.5"), status=PriceStatus.AVAILABLE)

    async def rsi(self, symbol: str, period: int = 14):
        return Decimal("55.2")

    async def sma(self, symbol: str, period: int = 20):
        raise EnrichmentError("rate limited")


def test_months_until_is_never_negative():
    assert months_until(date(2025, 7, 1), date(2024, 7, 15)) == 12
    assert months_until(date(2024, 1, 1), date(2024, 7, 1)) == 0


def test_projection_compounds_monthly_contributions():
    projected = project_future_value(Decimal("10000"), 12, Decimal("0.12"))

    assert Decimal("127000") < projected < Decimal("128500")
    assert project_future_value(Decimal("10000"), 0, Decimal("0.12")) == Decimal("0.00")


@pytest.mark.asyncio
async def test_plan_projects_allocation_and_falls_back_on_summary_failure():
    advisor = StubAdvisor(
        {
            "asset_allocation": {
                "assetAllocation": [{"asset": "Mutual Funds", "amount": 7000}, {"asset": "Fixed Deposits", "amount": 3000}]
            },
            "plan_summary": AdvisoryError("model returned no output"),
        }
    )
    request = PlanRequest(title="Buy a car", risk=RiskAppetite.MEDIUM, goal_amount=Decimal("100000"), deadline=date(2025, 7, 1))

    plan = await generate_financial_plan(request, advisor, today=date(2024, 7, 1))

    assert plan.asset_allocation == {"Mutual Funds": "₹7,000", "Fixed Deposits": "₹3,000"}
    assert plan.projected_returns == "₹1.3 Lakhs"
    assert plan.is_goal_achievable is True
    assert plan.summary == PLAN_SUMMARY_FALLBACK
    assert "Not provided." in advisor.prompts["asset_allocation"]


@pytest.mark.asyncio
async def test_plan_goal_not_achievable():
    advisor = StubAdvisor(
        {
            "asset_allocation": {"assetAllocation": [{"asset": "Mutual Funds", "amount": 1000}]},
            "plan_summary": {"summary": "Invest steadily."},
        }
    )
    request = PlanRequest(title="House", risk=RiskAppetite.LOW, goal_amount=Decimal("5000000"), deadline=date(2025, 7, 1))

    plan = await generate_financial_plan(request, advisor, today=date(2024, 7, 1))

    assert plan.is_goal_achievable is False
    assert plan.summary == "Invest steadily."


@pytest.mark.asyncio
async def test_isin_analysis_drops_failed_isins_and_marks_missing_values():
    output = await analyze_isin_list(["INE1", "BAD", "INE1"], StubProfiles(), StubTechnicals())

    assert len(output.analysis) == 1
    result = output.analysis[0]
    assert result.symbol == "INE1.NS"
    assert result.current_price == "101.5"
    assert result.rsi == "55.2"
    assert result.sma == "N/A"


@pytest.mark.asyncio
async def test_isin_analysis_without_technicals():
    output = await analyze_isin_list(["INE1"], StubProfiles())

    assert output.analysis[0].current_price == "N/A"


@pytest.mark.asyncio
async def test_isin_analysis_requires_input_and_one_success():
    with pytest.raises(AdvisoryError):
        await analyze_isin_list([" ", ""], StubProfiles())
    with pytest.raises(EnrichmentError):
        await analyze_isin_list(["BAD"], StubProfiles())


class UnconfiguredProfiles(StubProfiles):
    is_configured = False


@pytest.mark.asyncio
async def test_isin_analysis_without_finnhub_key_is_a_configuration_error():
    result = await run_action("analyze ISINs", analyze_isin_list(["INE1"], UnconfiguredProfiles()))

    assert result.success is False
    assert result.error_kind == "configuration"
    assert result.error == "Failed to analyze ISINs: Finnhub API key is not configured"


class StubStockMCP:
    def __init__(self, payload) -> None:
        self._payload = payload

    async def fetch_payload(self, tool):
        return self._payload


@pytest.mark.asyncio
async def test_portfolio_isin_analysis_uses_traded_isins_once():
    mcp = StubStockMCP(
        {
            "stockTransactions": [
                {"isin": "INE1", "txns": [[1, "2024-01-10", 10, 50], [2, "2024-03-01", 4, 55]]},
                {"isin": "INE2", "txns": [[1, "2024-02-01", 5, 20]]},
            ]
        }
    )

    output = await analyze_portfolio_isins(mcp, StubProfiles())

    assert sorted(item.isin for item in output.analysis) == ["INE1", "INE2"]


@pytest.mark.asyncio
async def test_portfolio_isin_analysis_with_no_stocks_is_empty():
    output = await analyze_portfolio_isins(StubStockMCP({"stockTransactions": []}), UnconfiguredProfiles())

    assert output.analysis == []
