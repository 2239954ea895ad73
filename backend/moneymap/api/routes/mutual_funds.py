"""Mutual fund transaction, holdings and analysis endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from moneymap.advisory.flows import analyze_mf_portfolio
from moneymap.api.dependencies.clients import AdvisorClient, MCPClient, get_advisor_client, get_mcp_client
from moneymap.config import get_settings
from moneymap.schemas.advisory import MfAnalysisOutput
from moneymap.schemas.common import ActionResult
from moneymap.schemas.mutual_funds import FundHoldingsView, MfTransactionsResponse
from moneymap.services.holdings import build_fund_holdings_view
from moneymap.services.mf_transactions import fetch_mf_transactions
from moneymap.services.outcomes import run_action

router = APIRouter()


@router.get("/transactions", response_model=ActionResult[MfTransactionsResponse])
async def mf_transactions(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[MfTransactionsResponse]:
    return await run_action("fetch MF transactions", fetch_mf_transactions(mcp))


@router.get("/holdings", response_model=ActionResult[FundHoldingsView])
async def fund_holdings(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[FundHoldingsView]:
    async def _holdings() -> FundHoldingsView:
        response = await fetch_mf_transactions(mcp)
        return build_fund_holdings_view(response.transactions, get_settings().top_holdings_limit)

    return await run_action("derive mutual fund holdings", _holdings())


@router.get("/analysis", response_model=ActionResult[MfAnalysisOutput])
async def mf_analysis(
    mcp: MCPClient = Depends(get_mcp_client),
    advisor: AdvisorClient = Depends(get_advisor_client),
) -> ActionResult[MfAnalysisOutput]:
    async def _analysis() -> MfAnalysisOutput:
        return await analyze_mf_portfolio(advisor, await fetch_mf_transactions(mcp))

    return await run_action("get mutual fund analysis", _analysis())
