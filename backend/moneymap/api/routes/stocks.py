"""Stock transaction, holdings and analysis endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from moneymap.advisory.flows import analyze_stock_portfolio, get_stock_details
from moneymap.api.dependencies.clients import (
    AdvisorClient,
    AlphaVantageClient,
    FinnhubClient,
    MCPClient,
    get_advisor_client,
    get_alpha_vantage_client,
    get_finnhub_client,
    get_mcp_client,
)
from moneymap.config import get_settings
from moneymap.schemas.advisory import StockAnalysisOutput, StockDetails
from moneymap.schemas.common import ActionResult
from moneymap.schemas.stocks import StockHoldingsView, StockTransactionsResponse
from moneymap.services.holdings import load_stock_holdings
from moneymap.services.outcomes import run_action
from moneymap.services.stock_transactions import fetch_stock_transactions

router = APIRouter()


@router.get("/transactions", response_model=ActionResult[StockTransactionsResponse])
async def stock_transactions(
    mcp: MCPClient = Depends(get_mcp_client),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
) -> ActionResult[StockTransactionsResponse]:
    return await run_action("fetch stock transactions", fetch_stock_transactions(mcp, finnhub))


@router.get("/holdings", response_model=ActionResult[StockHoldingsView])
async def stock_holdings(
    mcp: MCPClient = Depends(get_mcp_client),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
    alpha_vantage: AlphaVantageClient = Depends(get_alpha_vantage_client),
) -> ActionResult[StockHoldingsView]:
    limit = get_settings().top_holdings_limit
    return await run_action("derive stock holdings", load_stock_holdings(mcp, finnhub, alpha_vantage, limit))


@router.get("/analysis", response_model=ActionResult[StockAnalysisOutput])
async def stock_analysis(
    mcp: MCPClient = Depends(get_mcp_client),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
    advisor: AdvisorClient = Depends(get_advisor_client),
) -> ActionResult[StockAnalysisOutput]:
    async def _analysis() -> StockAnalysisOutput:
        transactions = await fetch_stock_transactions(mcp, finnhub)
        return await analyze_stock_portfolio(advisor, transactions)

    return await run_action("get stock analysis", _analysis())


@router.get("/{isin}/details", response_model=ActionResult[StockDetails])
async def stock_details(
    isin: str = Path(..., min_length=1, max_length=32),
    finnhub: FinnhubClient = Depends(get_finnhub_client),
    advisor: AdvisorClient = Depends(get_advisor_client),
) -> ActionResult[StockDetails]:
    return await run_action(f"get details for ISIN {isin}", get_stock_details(isin, advisor, finnhub))
