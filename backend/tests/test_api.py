"""HTTP route tests with stubbed upstream clients."""

from __future__ import annotations

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from moneymap.api.dependencies.clients import (
    get_alpha_vantage_client,
    get_finnhub_client,
    get_mcp_client,
)
from moneymap.api.routes import api_router
from moneymap.core.errors import TransportError
from moneymap.ingest.client import MCPTool
from moneymap.schemas.market import CompanyProfile

PAYLOADS = {
    MCPTool.FETCH_BANK_TRANSACTIONS: {
        "bankTransactions": [
            {"bank": "ACME", "txns": [["1500", "Salary", "2024-06-10T10:00:00+05:30", 1, "NEFT", "25000"]]}
        ]
    },
    MCPTool.FETCH_STOCK_TRANSACTIONS: {
        "stockTransactions": [
            {"isin": "INE001", "txns": [[1, "2024-01-10", 10, 50], [2, "2024-03-01", 4, 55]]},
        ]
    },
}


class StubMCP:
    def __init__(self, payloads=None, error: Exception | None = None) -> None:
        self._payloads = payloads or {}
        self._error = error

    async def fetch_payload(self, tool):
        if self._error is not None:
            raise self._error
        return self._payloads[tool]


class StubProvider:
    def __init__(self, configured: bool = False) -> None:
        self.is_configured = configured

    async def company_profile(self, isin: str) -> CompanyProfile:
        return CompanyProfile(isin=isin, name=f"{isin} Ltd")


def _app(mcp: StubMCP) -> FastAPI:
    app = FastAPI()
    app.include_router(api_router)
    app.dependency_overrides[get_mcp_client] = lambda: mcp
    app.dependency_overrides[get_finnhub_client] = lambda: StubProvider()
    app.dependency_overrides[get_alpha_vantage_client] = lambda: StubProvider()
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


async def test_bank_transactions_route_returns_action_result():
    response = await _get(_app(StubMCP(PAYLOADS)), "/transactions/bank")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    txn = body["data"]["accountTransactions"][0]["transactions"][0]
    assert txn["transactionId"] == "ACME-0-0"
    assert txn["transactionType"] == "CREDIT"


async def test_upstream_failure_becomes_failed_result():
    error = TransportError("MCP aggregator error 502: bad gateway", status_code=502)

    response = await _get(_app(StubMCP(error=error)), "/credit-report")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["errorKind"] == "transport"
    assert body["error"] == "Failed to fetch credit report: MCP aggregator error 502: bad gateway"
    assert body["data"] is None


async def test_stock_holdings_without_enrichment_keys():
    response = await _get(_app(StubMCP(PAYLOADS)), "/stocks/holdings")

    body = response.json()
    assert body["success"] is True
    holding = body["data"]["topHoldings"][0]
    assert holding["stockName"] == "INE001"
    assert holding["valuationBasis"] == "invested"
    assert holding["priceStatus"] == "not_configured"


async def test_isin_analysis_accepts_comma_separated_values():
    app = _app(StubMCP())
    app.dependency_overrides[get_finnhub_client] = lambda: StubProvider(configured=True)

    response = await _get(app, "/analysis/isins?isins=INE001,INE002")

    body = response.json()
    assert body["success"] is True
    assert [item["isin"] for item in body["data"]["analysis"]] == ["INE001", "INE002"]
    assert body["data"]["analysis"][0]["rsi"] == "N/A"


async def test_isin_analysis_without_isins_fails():
    response = await _get(_app(StubMCP()), "/analysis/isins")

    body = response.json()
    assert body["success"] is False
    assert body["errorKind"] == "advisory"


async def test_portfolio_isin_analysis_covers_traded_stocks():
    app = _app(StubMCP(PAYLOADS))
    app.dependency_overrides[get_finnhub_client] = lambda: StubProvider(configured=True)

    response = await _get(app, "/analysis/portfolio")

    body = response.json()
    assert body["success"] is True
    assert [item["isin"] for item in body["data"]["analysis"]] == ["INE001"]


async def test_portfolio_isin_analysis_with_no_stocks_succeeds_empty():
    response = await _get(_app(StubMCP({MCPTool.FETCH_STOCK_TRANSACTIONS: {"stockTransactions": []}})), "/analysis/portfolio")

    body = response.json()
    assert body["success"] is True
    assert body["data"]["analysis"] == []


async def test_isin_analysis_without_finnhub_key_reports_configuration():
    response = await _get(_app(StubMCP()), "/analysis/isins?isins=INE001")

    body = response.json()
    assert body["success"] is False
    assert body["errorKind"] == "configuration"
