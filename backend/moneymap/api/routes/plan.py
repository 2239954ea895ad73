"""Goal-based financial planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from moneymap.advisory.flows import generate_financial_plan, optimize_financial_plan
from moneymap.api.dependencies.clients import AdvisorClient, MCPClient, get_advisor_client, get_mcp_client
from moneymap.schemas.advisory import FinancialPlan, OptimizedPlan, OptimizePlanRequest, PlanRequest
from moneymap.schemas.common import ActionResult
from moneymap.services.outcomes import run_action

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=ActionResult[FinancialPlan])
async def financial_plan(
    payload: PlanRequest,
    mcp: MCPClient = Depends(get_mcp_client),
    advisor: AdvisorClient = Depends(get_advisor_client),
) -> ActionResult[FinancialPlan]:
    logger.info("Generating plan %r (risk=%s, deadline=%s)", payload.title, payload.risk.value, payload.deadline)
    return await run_action("generate financial plan", generate_financial_plan(payload, advisor, mcp))


@router.post("/optimize", response_model=ActionResult[OptimizedPlan])
async def optimize_plan(
    payload: OptimizePlanRequest,
    advisor: AdvisorClient = Depends(get_advisor_client),
) -> ActionResult[OptimizedPlan]:
    return await run_action("optimize financial plan", optimize_financial_plan(payload, advisor))
