"""Tool-assisted financial advice and portfolio comparison."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from moneymap.advisory.flows import compare_portfolio_and_spending, get_financial_advice
from moneymap.api.dependencies.clients import (
    AdvisorClient,
    FinnhubClient,
    MCPClient,
    get_advisor_client,
    get_finnhub_client,
    get_mcp_client,
)
from moneymap.schemas.advisory import ComparisonRequest, FinancialAdvice, PortfolioComparison
from moneymap.schemas.common import ActionResult
from moneymap.services.outcomes import run_action

router = APIRouter()


@router.get("", response_model=ActionResult[FinancialAdvice])
async def financial_advice(
    mcp: MCPClient = Depends(get_mcp_client),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
    advisor: AdvisorClient = Depends(get_advisor_client),
) -> ActionResult[FinancialAdvice]:
    return await run_action("get financial advice", get_financial_advice(advisor, mcp, finnhub))


@router.post("/comparison", response_model=ActionResult[PortfolioComparison])
async def portfolio_comparison(
    payload: ComparisonRequest,
    mcp: MCPClient = Depends(get_mcp_client),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
    advisor: AdvisorClient = Depends(get_advisor_client),
) -> ActionResult[PortfolioComparison]:
    return await run_action(
        "compare portfolio and spending",
        compare_portfolio_and_spending(payload, advisor, mcp, finnhub),
    )
