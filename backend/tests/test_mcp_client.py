"""MCP aggregator client tests."""

from __future__ import annotations

import json

import httpx
import pytest

from moneymap.core.errors import ConfigurationError, TransportError
from moneymap.ingest.client import BODY_EXCERPT_LIMIT, MCPClient, MCPTool


def _rpc_body(payload: object) -> str:
    return "data: " + json.dumps({"result": {"content": [{"text": json.dumps(payload)}]}}) + "\n\n"


def _client(handler, **kwargs) -> MCPClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MCPClient("http://mcp.local/", client=http, **kwargs)


@pytest.mark.asyncio
async def test_posts_tools_call_with_session_header():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=_rpc_body({"netWorthResponse": {}}))

    client = _client(handler, session_id="session-123")
    payload = await client.fetch_payload(MCPTool.FETCH_NET_WORTH)

    assert payload == {"netWorthResponse": {}}
    request = seen[0]
    assert str(request.url) == "http://mcp.local/mcp/stream"
    assert request.headers["Mcp-Session-Id"] == "session-123"
    assert "text/event-stream" in request.headers["Accept"]
    body = json.loads(request.content)
    assert body["method"] == "tools/call"
    assert body["params"] == {"name": "fetch_net_worth", "arguments": {}}


@pytest.mark.asyncio
async def test_omits_session_header_when_not_configured():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="{}")

    await _client(handler).call_tool("fetch_epf_details")

    assert "Mcp-Session-Id" not in seen[0].headers


@pytest.mark.asyncio
async def test_non_2xx_raises_transport_error_with_excerpt():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="x" * 2000)

    with pytest.raises(TransportError) as excinfo:
        await _client(handler).call_tool(MCPTool.FETCH_CREDIT_REPORT)

    assert excinfo.value.status_code == 502
    assert len(excinfo.value.body_excerpt) == BODY_EXCERPT_LIMIT
    assert excinfo.value.kind == "transport"


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        await _client(handler).call_tool(MCPTool.FETCH_BANK_TRANSACTIONS)


@pytest.mark.asyncio
async def test_missing_base_url_is_a_configuration_error():
    client = MCPClient(None)

    with pytest.raises(ConfigurationError):
        await client.call_tool(MCPTool.FETCH_NET_WORTH)


@pytest.mark.asyncio
async def test_from_settings_uses_configured_endpoint_and_session(settings_factory):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=_rpc_body({"creditReports": []}))

    settings = settings_factory(mcp_base_url="http://aggregator.local", mcp_session_id="abc")
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = MCPClient.from_settings(settings, client=http)

    assert await client.fetch_payload(MCPTool.FETCH_CREDIT_REPORT) == {"creditReports": []}
    assert str(seen[0].url) == "http://aggregator.local/mcp/stream"
    assert seen[0].headers["Mcp-Session-Id"] == "abc"


def test_from_settings_without_base_url_is_not_configured():
    client = MCPClient.from_settings()

    with pytest.raises(ConfigurationError):
        client.endpoint
