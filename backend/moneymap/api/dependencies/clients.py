"""Client dependencies for API routes; tests override these."""

from __future__ import annotations

from moneymap.advisory.client import AdvisorClient, get_advisor_client
from moneymap.ingest.client import MCPClient
from moneymap.providers.alpha_vantage import AlphaVantageClient, get_alpha_vantage_client
from moneymap.providers.finnhub import FinnhubClient, get_finnhub_client


def get_mcp_client() -> MCPClient:
    return MCPClient.from_settings()


__all__ = [
    "AdvisorClient",
    "AlphaVantageClient",
    "FinnhubClient",
    "MCPClient",
    "get_advisor_client",
    "get_alpha_vantage_client",
    "get_finnhub_client",
    "get_mcp_client",
]
