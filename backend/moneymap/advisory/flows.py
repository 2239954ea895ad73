"""Advisory flows: planning, portfolio analysis and advice built on the advisor client."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Awaitable, Iterable, Optional

from moneymap.config import get_settings
from moneymap.core.errors import (
    AdvisoryError,
    ConfigurationError,
    EnrichmentError,
    MoneyMapError,
    SchemaValidationError,
)
from moneymap.ingest.client import MCPClient
from moneymap.providers.alpha_vantage import AlphaVantageClient
from moneymap.providers.finnhub import NOT_CONFIGURED_MESSAGE as FINNHUB_NOT_CONFIGURED
from moneymap.schemas.advisory import (
    AnalyzeIsinListOutput,
    AssetAllocationPlan,
    ComparisonRequest,
    FinancialAdvice,
    FinancialGoal,
    FinancialPlan,
    MfAnalysisOutput,
    OptimizedPlan,
    OptimizePlanRequest,
    PlanRequest,
    PlanSummary,
    PortfolioComparison,
    StockAnalysisOutput,
    StockAnalysisResult,
    StockDetails,
)
from moneymap.schemas.common import format_decimal
from moneymap.schemas.market import PriceQuote
from moneymap.schemas.mutual_funds import MfTransactionsResponse
from moneymap.schemas.stocks import StockTransactionsResponse
from moneymap.services.bank_transactions import fetch_bank_transactions
from moneymap.services.cashflow import describe_cashflow, summarize_monthly_cashflow
from moneymap.services.credit_report import fetch_credit_report
from moneymap.services.enrichment import ProfileProvider
from moneymap.services.epf import fetch_epf_details
from moneymap.services.formatting import format_inr, format_lakhs_or_inr
from moneymap.services.holdings import build_fund_holdings_view, build_stock_holdings_view
from moneymap.services.mf_transactions import fetch_mf_transactions
from moneymap.services.net_worth import fetch_net_worth, summarize_net_worth
from moneymap.services.stock_transactions import fetch_stock_transactions

from . import prompts
from .client import AdvisorClient
from .tools import amfi_nav_tool, build_financial_tools

logger = logging.getLogger(__name__)

PLAN_SUMMARY_FALLBACK = "Your personalized investment plan is ready!"
NOT_AVAILABLE = "N/A"


def months_until(deadline: date, today: date) -> int:
    """Whole calendar months between ``today`` and ``deadline``; never negative."""

    return max(0, (deadline.year - today.year) * 12 + (deadline.month - today.month))


def project_future_value(monthly_investment: Decimal, months: int, annual_growth: Decimal) -> Decimal:
    """Future value of a monthly SIP invested at the start of each month, compounded monthly."""

    monthly_rate = (Decimal(1) + annual_growth) ** (Decimal(1) / Decimal(12)) - Decimal(1)
    value = Decimal(0)
    for _ in range(months):
        value = (value + monthly_investment) * (Decimal(1) + monthly_rate)
    return value.quantize(Decimal("0.01"))


def monthly_investment_for(monthly_income: Optional[Decimal]) -> Decimal:
    settings = get_settings()
    if monthly_income is not None and monthly_income > 0:
        return (monthly_income * settings.investment_income_ratio).quantize(Decimal("0.01"))
    return settings.default_monthly_investment


def _rupees(amount: Decimal) -> str:
    return format_inr(amount, 0 if amount == amount.to_integral_value() else 2)


def _as_json(record: Any) -> str:
    if hasattr(record, "model_dump_json"):
        return record.model_dump_json(by_alias=True)
    return json.dumps(record, default=str, ensure_ascii=False)


async def _optional_context(label: str, awaitable: Awaitable[Any]) -> str:
    """Render an optional data source for a prompt; failures degrade to "Not provided."."""

    try:
        return _as_json(await awaitable)
    except MoneyMapError as exc:
        logger.warning("Optional context %s unavailable: %s", label, exc)
        return prompts.NOT_PROVIDED


async def _existing_investments(mcp: Optional[MCPClient]) -> str:
    if mcp is None:
        return prompts.NOT_PROVIDED
    try:
        snapshot = await fetch_net_worth(mcp)
    except MoneyMapError as exc:
        logger.warning("Planning without existing investments: %s", exc)
        return prompts.NOT_PROVIDED
    return summarize_net_worth(snapshot).summary


async def generate_financial_plan(
    request: PlanRequest,
    advisor: AdvisorClient,
    mcp: Optional[MCPClient] = None,
    *,
    today: Optional[date] = None,
) -> FinancialPlan:
    """Ask for a monthly allocation, project it locally, then ask for a short summary."""

    settings = get_settings()
    goal = FinancialGoal(
        title=request.title,
        deadline=request.deadline,
        risk=request.risk,
        monthly_investment=monthly_investment_for(request.monthly_income),
        target_amount=request.goal_amount,
    )
    existing = await _existing_investments(mcp)
    allocation = await advisor.generate(
        name="asset_allocation",
        system=prompts.PLANNER_SYSTEM,
        prompt=prompts.ALLOCATION_PROMPT.format(
            title=goal.title,
            target_amount=format_decimal(goal.target_amount),
            deadline=goal.deadline.isoformat(),
            monthly_investment=format_decimal(goal.monthly_investment),
            risk=goal.risk.value,
            existing_investments=existing,
        ),
        output_model=AssetAllocationPlan,
        tools=[amfi_nav_tool()],
    )

    months = months_until(goal.deadline, today or date.today())
    invested_monthly = sum((item.amount for item in allocation.asset_allocation), Decimal(0))
    projected = project_future_value(invested_monthly, months, settings.projected_annual_growth)

    allocation_json = json.dumps(
        [{"asset": item.asset, "amount": float(item.amount)} for item in allocation.asset_allocation]
    )
    try:
        summary_output = await advisor.generate(
            name="plan_summary",
            system=prompts.PLANNER_SYSTEM,
            prompt=prompts.PLAN_SUMMARY_PROMPT.format(allocation=allocation_json, existing_investments=existing),
            output_model=PlanSummary,
        )
        summary = summary_output.summary.strip() or PLAN_SUMMARY_FALLBACK
    except (AdvisoryError, SchemaValidationError) as exc:
        logger.warning("Plan summary unavailable: %s", exc)
        summary = PLAN_SUMMARY_FALLBACK

    return FinancialPlan(
        asset_allocation={item.asset: _rupees(item.amount) for item in allocation.asset_allocation},
        projected_returns=format_lakhs_or_inr(projected),
        projected_value=projected,
        is_goal_achievable=projected >= goal.target_amount,
        summary=summary,
    )


async def optimize_financial_plan(request: OptimizePlanRequest, advisor: AdvisorClient) -> OptimizedPlan:
    return await advisor.generate(
        name="optimize_plan",
        system=prompts.PLANNER_SYSTEM,
        prompt=prompts.OPTIMIZE_PLAN_PROMPT.format(
            initial_plan=request.initial_plan, user_preferences=request.user_preferences
        ),
        output_model=OptimizedPlan,
    )


async def get_financial_advice(
    advisor: AdvisorClient, mcp: MCPClient, profiles: Optional[ProfileProvider] = None
) -> FinancialAdvice:
    return await advisor.generate(
        name="financial_advice",
        system=prompts.ANALYST_SYSTEM,
        prompt=prompts.FINANCIAL_ADVICE_PROMPT,
        output_model=FinancialAdvice,
        tools=build_financial_tools(mcp, profiles),
    )


async def analyze_stock_portfolio(
    advisor: AdvisorClient,
    transactions: StockTransactionsResponse,
    quotes: Optional[dict[str, PriceQuote]] = None,
) -> StockAnalysisOutput:
    view = build_stock_holdings_view(transactions.transactions, quotes or {})
    return await advisor.generate(
        name="stock_analysis",
        system=prompts.ANALYST_SYSTEM,
        prompt=prompts.STOCK_ANALYSIS_PROMPT.format(holdings=_as_json(view), transactions=_as_json(transactions)),
        output_model=StockAnalysisOutput,
    )


async def analyze_mf_portfolio(advisor: AdvisorClient, transactions: MfTransactionsResponse) -> MfAnalysisOutput:
    view = build_fund_holdings_view(transactions.transactions)
    return await advisor.generate(
        name="mf_analysis",
        system=prompts.ANALYST_SYSTEM,
        prompt=prompts.MF_ANALYSIS_PROMPT.format(holdings=_as_json(view), transactions=_as_json(transactions)),
        output_model=MfAnalysisOutput,
    )


async def _indicator(label: str, awaitable: Awaitable[Any]) -> str:
    try:
        value = await awaitable
    except MoneyMapError as exc:
        logger.warning("%s unavailable: %s", label, exc)
        return NOT_AVAILABLE
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, PriceQuote):
        return format_decimal(value.price) if value.is_available else NOT_AVAILABLE
    return format_decimal(value)


async def _analyze_isin(
    isin: str, profiles: ProfileProvider, technicals: Optional[AlphaVantageClient]
) -> StockAnalysisResult:
    profile = await profiles.company_profile(isin)
    symbol = profile.ticker or NOT_AVAILABLE
    if technicals is None or not technicals.is_configured or not profile.ticker:
        price = rsi = sma = NOT_AVAILABLE
    else:
        price, rsi, sma = await asyncio.gather(
            _indicator(f"{symbol} quote", technicals.global_quote(symbol)),
            _indicator(f"{symbol} RSI", technicals.rsi(symbol, 14)),
            _indicator(f"{symbol} SMA", technicals.sma(symbol, 20)),
        )
    return StockAnalysisResult(isin=isin, symbol=symbol, name=profile.name, current_price=price, rsi=rsi, sma=sma)


async def analyze_isin_list(
    isins: Iterable[str],
    profiles: ProfileProvider,
    technicals: Optional[AlphaVantageClient] = None,
) -> AnalyzeIsinListOutput:
    """Quote, RSI(14) and SMA(20) per ISIN; failed ISINs are dropped unless all of them fail."""

    keys = list(dict.fromkeys(isin.strip() for isin in isins if isin and isin.strip()))
    if not keys:
        raise AdvisoryError("Missing 'isins'")
    if not profiles.is_configured:
        raise ConfigurationError(FINNHUB_NOT_CONFIGURED)
    results = await asyncio.gather(*(_analyze_isin(isin, profiles, technicals) for isin in keys), return_exceptions=True)
    analysis: list[StockAnalysisResult] = []
    failures: list[str] = []
    for isin, result in zip(keys, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("Failed to analyze ISIN %s: %s", isin, result)
            failures.append(f"{isin}: {result}")
        else:
            analysis.append(result)
    if not analysis:
        raise EnrichmentError(f"no ISIN could be analyzed ({'; '.join(failures)})")
    return AnalyzeIsinListOutput(analysis=analysis)


async def analyze_portfolio_isins(
    mcp: MCPClient,
    profiles: ProfileProvider,
    technicals: Optional[AlphaVantageClient] = None,
) -> AnalyzeIsinListOutput:
    """Run the ISIN analysis over every stock the user has traded; no stocks is an empty result."""

    transactions = await fetch_stock_transactions(mcp)
    isins = list(dict.fromkeys(txn.isin for txn in transactions.transactions))
    if not isins:
        logger.info("No stock transactions to analyze")
        return AnalyzeIsinListOutput(analysis=[])
    return await analyze_isin_list(isins, profiles, technicals)


async def get_stock_details(
    isin: str, advisor: AdvisorClient, profiles: Optional[ProfileProvider] = None
) -> StockDetails:
    profile_context = ""
    if profiles is not None and profiles.is_configured:
        try:
            profile = await profiles.company_profile(isin)
            profile_context = f"Known profile: {_as_json(profile)}"
        except MoneyMapError as exc:
            logger.info("No profile context for %s: %s", isin, exc)
    return await advisor.generate(
        name="stock_details",
        system=prompts.ANALYST_SYSTEM,
        prompt=prompts.STOCK_DETAILS_PROMPT.format(isin=isin, profile=profile_context),
        output_model=StockDetails,
    )


async def compare_portfolio_and_spending(
    request: ComparisonRequest,
    advisor: AdvisorClient,
    mcp: MCPClient,
    profiles: Optional[ProfileProvider] = None,
) -> PortfolioComparison:
    """Compare current funds with a projected plan alongside monthly cashflow."""

    mf_transactions, bank = await asyncio.gather(fetch_mf_transactions(mcp), fetch_bank_transactions(mcp))
    current_portfolio = build_fund_holdings_view(mf_transactions.transactions)
    cashflow = describe_cashflow(summarize_monthly_cashflow(bank.account_transactions))

    if request.include_optional_data:
        epf, stocks, credit = await asyncio.gather(
            _optional_context("epf", fetch_epf_details(mcp)),
            _optional_context("stocks", fetch_stock_transactions(mcp, profiles)),
            _optional_context("credit", fetch_credit_report(mcp)),
        )
    else:
        epf = stocks = credit = prompts.NOT_PROVIDED

    return await advisor.generate(
        name="portfolio_comparison",
        system=prompts.ANALYST_SYSTEM,
        prompt=prompts.COMPARISON_PROMPT.format(
            current_mf_portfolio=_as_json(current_portfolio),
            projected_mf_plan=request.projected_mf_plan,
            bank_transactions=cashflow,
            epf_details=epf,
            stock_data=stocks,
            credit_report=credit,
        ),
        output_model=PortfolioComparison,
    )


__all__ = [
    "PLAN_SUMMARY_FALLBACK",
    "analyze_isin_list",
    "analyze_mf_portfolio",
    "analyze_portfolio_isins",
    "analyze_stock_portfolio",
    "compare_portfolio_and_spending",
    "generate_financial_plan",
    "get_financial_advice",
    "get_stock_details",
    "monthly_investment_for",
    "months_until",
    "optimize_financial_plan",
    "project_future_value",
]
