"""Credit report endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from moneymap.api.dependencies.clients import MCPClient, get_mcp_client
from moneymap.schemas.common import ActionResult
from moneymap.schemas.credit import CreditReport
from moneymap.services.credit_report import fetch_credit_report
from moneymap.services.outcomes import run_action

router = APIRouter()


@router.get("", response_model=ActionResult[CreditReport])
async def credit_report(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[CreditReport]:
    return await run_action("fetch credit report", fetch_credit_report(mcp))
