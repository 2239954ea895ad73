"""Bank transaction endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from moneymap.api.dependencies.clients import MCPClient, get_mcp_client
from moneymap.config import get_settings
from moneymap.schemas.bank import BankTransactionsResponse, MonthlyCashflow
from moneymap.schemas.common import ActionResult
from moneymap.services.bank_transactions import fetch_bank_transactions
from moneymap.services.cashflow import summarize_monthly_cashflow
from moneymap.services.outcomes import run_action

router = APIRouter()


@router.get("/bank", response_model=ActionResult[BankTransactionsResponse])
async def bank_transactions(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[BankTransactionsResponse]:
    return await run_action("fetch bank transactions", fetch_bank_transactions(mcp))


@router.get("/bank/cashflow", response_model=ActionResult[list[MonthlyCashflow]])
async def bank_cashflow(mcp: MCPClient = Depends(get_mcp_client)) -> ActionResult[list[MonthlyCashflow]]:
    async def _cashflow() -> list[MonthlyCashflow]:
        response = await fetch_bank_transactions(mcp)
        return summarize_monthly_cashflow(response.account_transactions, get_settings().timezone)

    return await run_action("summarize monthly cashflow", _cashflow())
