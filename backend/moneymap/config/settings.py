"""Application configuration and environment helpers."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_BASE_CURRENCY = "INR"


class AppSettings(BaseSettings):
    """Configuration options for the MoneyMap dashboard service."""

    app_name: str = Field(default="MoneyMap Personal Finance Dashboard")
    timezone: str = Field(default=DEFAULT_TIMEZONE)
    base_currency: str = Field(default=DEFAULT_BASE_CURRENCY)
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://localhost:9002"])

    mcp_base_url: str | None = Field(
        default=None,
        description="Base URL of the MCP aggregator; requests go to <base>/mcp/stream.",
    )
    mcp_session_id: str | None = Field(default=None, description="Value sent as the Mcp-Session-Id header.")
    mcp_timeout_seconds: float = Field(default=30.0)

    finnhub_api_key: str | None = Field(default=None)
    finnhub_base_url: str = Field(default="https://finnhub.io/api/v1")
    alphavantage_api_key: str | None = Field(default=None)
    alphavantage_requests_per_minute: int = Field(default=5)
    enrichment_timeout_seconds: float = Field(default=15.0)
    amfi_nav_url: str = Field(default="https://www.amfiindia.com/spages/NAVAll.txt")

    openai_api_key: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4.1-mini")
    openai_timeout_seconds: float = Field(default=60.0)
    openai_max_tool_rounds: int = Field(default=6, ge=1)

    default_monthly_investment: Decimal = Field(
        default=Decimal("25000"),
        description="Monthly investment assumed when the user gives no income.",
    )
    investment_income_ratio: Decimal = Field(
        default=Decimal("0.3"),
        description="Share of monthly income assumed to be investable.",
    )
    projected_annual_growth: Decimal = Field(default=Decimal("0.12"))
    top_holdings_limit: int = Field(default=5, ge=1)
    market_news_limit: int = Field(default=10, ge=1)

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="moneymap")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"finnhub_api_key", "alphavantage_api_key", "openai_api_key", "mcp_session_id"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_TIMEZONE",
    "DEFAULT_BASE_CURRENCY",
    "get_settings",
]
