"""Technical analysis for the user's traded ISINs or an ad-hoc list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from moneymap.advisory.flows import analyze_isin_list, analyze_portfolio_isins
from moneymap.api.dependencies.clients import (
    AlphaVantageClient,
    FinnhubClient,
    MCPClient,
    get_alpha_vantage_client,
    get_finnhub_client,
    get_mcp_client,
)
from moneymap.schemas.advisory import AnalyzeIsinListOutput
from moneymap.schemas.common import ActionResult
from moneymap.services.outcomes import run_action

router = APIRouter()


@router.get("/portfolio", response_model=ActionResult[AnalyzeIsinListOutput])
async def portfolio_isin_analysis(
    mcp: MCPClient = Depends(get_mcp_client),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
    alpha_vantage: AlphaVantageClient = Depends(get_alpha_vantage_client),
) -> ActionResult[AnalyzeIsinListOutput]:
    return await run_action("analyze portfolio ISINs", analyze_portfolio_isins(mcp, finnhub, alpha_vantage))


@router.get("/isins", response_model=ActionResult[AnalyzeIsinListOutput])
async def isin_analysis(
    isins: list[str] = Query(default=[], description="ISINs, repeated or comma separated"),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
    alpha_vantage: AlphaVantageClient = Depends(get_alpha_vantage_client),
) -> ActionResult[AnalyzeIsinListOutput]:
    values = [part for raw in isins for part in raw.split(",")]
    return await run_action("analyze ISINs", analyze_isin_list(values, finnhub, alpha_vantage))
