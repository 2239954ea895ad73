"""EPF account endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from moneymap.api.dependencies.clients import MCPClient, get_mcp_client
from moneymap.schemas.common import ActionResult
from moneymap.schemas.epf import EpfProfile
from moneymap.services.epf import fetch_epf_details
from moneymap.services.outcomes import run_action

router = APIRouter()


@router.get("", response_model=ActionResult[EpfProfile])
async def epf_details(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[EpfProfile]:
    return await run_action("fetch EPF details", fetch_epf_details(mcp))
