"""Dashboard endpoints: net worth and market news."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from moneymap.api.dependencies.clients import FinnhubClient, MCPClient, get_finnhub_client, get_mcp_client
from moneymap.config import get_settings
from moneymap.schemas.common import ActionResult
from moneymap.schemas.market import MarketNewsArticle
from moneymap.schemas.net_worth import NetWorthSnapshot, NetWorthSummary
from moneymap.services.net_worth import fetch_net_worth, summarize_net_worth
from moneymap.services.outcomes import run_action

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/net-worth", response_model=ActionResult[NetWorthSnapshot])
async def net_worth(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[NetWorthSnapshot]:
    return await run_action("fetch net worth data", fetch_net_worth(mcp))


@router.get("/net-worth/summary", response_model=ActionResult[NetWorthSummary])
async def net_worth_summary(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[NetWorthSummary]:
    async def _summary() -> NetWorthSummary:
        return summarize_net_worth(await fetch_net_worth(mcp))

    return await run_action("summarize net worth", _summary())


@router.get("/news", response_model=ActionResult[list[MarketNewsArticle]])
async def market_news(
    category: str = "general",
    finnhub: FinnhubClient = Depends(get_finnhub_client),
) -> ActionResult[list[MarketNewsArticle]]:
    limit = get_settings().market_news_limit
    logger.info("Fetching %s market news (limit %d)", category, limit)
    return await run_action("fetch market news", finnhub.market_news(category, limit=limit))
