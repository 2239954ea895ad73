"""HTTP client for the MCP aggregator's tool endpoint."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

import httpx
from opentelemetry.propagate import inject

from moneymap.config import AppSettings, get_settings
from moneymap.core.errors import ConfigurationError, TransportError

from .wire import decode_payload

logger = logging.getLogger(__name__)

BODY_EXCERPT_LIMIT = 500


class MCPTool(str, Enum):
    """Tools exposed by the aggregator, one per financial domain."""

    FETCH_NET_WORTH = "fetch_net_worth"
    FETCH_BANK_TRANSACTIONS = "fetch_bank_transactions"
    FETCH_STOCK_TRANSACTIONS = "fetch_stock_transactions"
    FETCH_MF_TRANSACTIONS = "fetch_mf_transactions"
    FETCH_EPF_DETAILS = "fetch_epf_details"
    FETCH_CREDIT_REPORT = "fetch_credit_report"


class MCPClient:
    """Calls ``tools/call`` on the aggregator and returns the raw or decoded response."""

    def __init__(
        self,
        base_url: str | None,
        *,
        session_id: str | None = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/") if base_url else None
        self._session_id = session_id
        self._timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None, **kwargs: Any) -> "MCPClient":
        settings = settings or get_settings()
        return cls(
            settings.mcp_base_url,
            session_id=settings.mcp_session_id,
            timeout=settings.mcp_timeout_seconds,
            **kwargs,
        )

    @property
    def endpoint(self) -> str:
        if not self._base_url:
            raise ConfigurationError("MCP base URL is not configured")
        return f"{self._base_url}/mcp/stream"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json, text/event-stream"}
        if self._session_id:
            headers["Mcp-Session-Id"] = self._session_id
        # Link the aggregator's spans to ours when tracing is active
        try:
            inject(headers)
        except Exception:
            # Best-effort; tracing injection is optional
            pass
        return headers

    async def call_tool(self, tool: MCPTool | str) -> str:
        """POST a ``tools/call`` request and return the response body text."""

        name = tool.value if isinstance(tool, MCPTool) else str(tool)
        url = self.endpoint
        body = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/call",
            "params": {"name": name, "arguments": {}},
        }
        logger.debug("Calling MCP tool %s at %s", name, url)
        try:
            if self._client is not None:
                resp = await self._client.post(url, json=body, headers=self._headers(), timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(url, json=body, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("MCP tool %s request failed: %s", name, exc)
            raise TransportError(f"request to MCP aggregator failed: {exc}") from exc

        if resp.status_code >= 400:
            excerpt = resp.text[:BODY_EXCERPT_LIMIT]
            logger.warning("MCP tool %s returned HTTP %s", name, resp.status_code)
            raise TransportError(
                f"MCP aggregator error {resp.status_code}: {excerpt}",
                status_code=resp.status_code,
                body_excerpt=excerpt,
            )
        return resp.text

    async def fetch_payload(self, tool: MCPTool | str) -> Any:
        """Call ``tool`` and decode the nested JSON payload it carries."""

        return decode_payload(await self.call_tool(tool))


__all__ = ["BODY_EXCERPT_LIMIT", "MCPClient", "MCPTool"]
