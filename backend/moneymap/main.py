"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry import trace
from opentelemetry.baggage import get_baggage

from moneymap.api.routes import api_router
from moneymap.config import get_settings
from moneymap.core.logging import setup_logging
from moneymap.core.telemetry import setup_telemetry
from moneymap.providers.alpha_vantage import get_alpha_vantage_client
from moneymap.providers.finnhub import get_finnhub_client

settings = get_settings()
app = FastAPI(title=settings.app_name, version="0.1.0")
setup_logging()
setup_telemetry(app, settings)
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["traceparent", "tracestate", "baggage", "x-request-id"],
)


@app.on_event("startup")
async def startup() -> None:
    """Log the effective configuration with secrets masked."""

    logger.info("Starting %s with settings %s", settings.app_name, settings.dict_for_logging())
    if not settings.mcp_base_url:
        logger.warning("MCP_BASE_URL is not set; data endpoints will report a configuration error")


@app.on_event("shutdown")
async def shutdown() -> None:
    await get_finnhub_client().aclose()
    await get_alpha_vantage_client().aclose()


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Return service readiness metadata."""

    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "timezone": settings.timezone,
    }


def configure_app() -> FastAPI:
    """Attach routes and dependencies."""

    app.include_router(api_router)
    return app


configure_app()


# Attach end-user attributes from W3C Baggage to the active server span
@app.middleware("http")
async def _attach_user_baggage(request, call_next):  # type: ignore[no-redef]
    span = trace.get_current_span()
    try:
        for key in ("enduser.id", "enduser.session"):
            val = get_baggage(key)
            if val:
                span.set_attribute(key, val)
    except Exception:  # best-effort only
        logger.debug("Could not attach baggage to span", exc_info=True)
    response = await call_next(request)
    return response

__all__ = ["app", "configure_app"]
