"""Tools the advisor can call to pull the user's data during a prompt."""

from __future__ import annotations

from typing import Any, Optional

from moneymap.ingest.client import MCPClient
from moneymap.providers.amfi import fetch_amfi_nav_summary
from moneymap.services.bank_transactions import fetch_bank_transactions
from moneymap.services.credit_report import fetch_credit_report
from moneymap.services.enrichment import ProfileProvider
from moneymap.services.epf import fetch_epf_details
from moneymap.services.mf_transactions import fetch_mf_transactions
from moneymap.services.net_worth import fetch_net_worth
from moneymap.services.stock_transactions import fetch_stock_transactions

from .client import AdvisorTool


def amfi_nav_tool() -> AdvisorTool:
    async def handler(_: dict[str, Any]) -> str:
        return await fetch_amfi_nav_summary()

    return AdvisorTool(
        name="fetchAmfiNavData",
        description="Fetches a summary of the latest Net Asset Value (NAV) for top Indian mutual funds from AMFI.",
        handler=handler,
    )


def build_financial_tools(mcp: MCPClient, profiles: Optional[ProfileProvider] = None) -> list[AdvisorTool]:
    """One tool per aggregator domain; each runs the full fetch, decode and transform pipeline."""

    async def net_worth(_: dict[str, Any]) -> Any:
        return await fetch_net_worth(mcp)

    async def bank_transactions(_: dict[str, Any]) -> Any:
        return await fetch_bank_transactions(mcp)

    async def stock_transactions(_: dict[str, Any]) -> Any:
        return await fetch_stock_transactions(mcp, profiles)

    async def mf_transactions(_: dict[str, Any]) -> Any:
        return await fetch_mf_transactions(mcp)

    async def epf_details(_: dict[str, Any]) -> Any:
        return await fetch_epf_details(mcp)

    async def credit_report(_: dict[str, Any]) -> Any:
        return await fetch_credit_report(mcp)

    return [
        AdvisorTool(
            name="fetchNetWorth",
            description="Fetches the user's total net worth, asset and liability breakdown, and detailed investment holdings.",
            handler=net_worth,
        ),
        AdvisorTool(
            name="fetchBankTransactions",
            description="Fetches the user's recent bank transactions from all linked accounts.",
            handler=bank_transactions,
        ),
        AdvisorTool(
            name="fetchStockTransactions",
            description="Fetches the user's recent stock market transaction history.",
            handler=stock_transactions,
        ),
        AdvisorTool(
            name="fetchMfTransactions",
            description="Fetches the user's recent mutual fund transaction history.",
            handler=mf_transactions,
        ),
        AdvisorTool(
            name="fetchEpfDetails",
            description="Fetches the user's Employee Provident Fund (EPF) details, including balances and account information.",
            handler=epf_details,
        ),
        AdvisorTool(
            name="fetchCreditReport",
            description="Fetches the user's credit report, including credit score, open and closed accounts.",
            handler=credit_report,
        ),
    ]


__all__ = ["amfi_nav_tool", "build_financial_tools"]
