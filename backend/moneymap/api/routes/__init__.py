"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .advice import router as advice_router
from .analysis import router as analysis_router
from .credit import router as credit_router
from .dashboard import router as dashboard_router
from .epf import router as epf_router
from .mutual_funds import router as mutual_funds_router
from .plan import router as plan_router
from .stocks import router as stocks_router
from .transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(transactions_router, prefix="/transactions", tags=["transactions"])
api_router.include_router(stocks_router, prefix="/stocks", tags=["stocks"])
api_router.include_router(analysis_router, prefix="/analysis", tags=["analysis"])
api_router.include_router(mutual_funds_router, prefix="/mutual-funds", tags=["mutual-funds"])
api_router.include_router(epf_router, prefix="/epf", tags=["epf"])
api_router.include_router(credit_router, prefix="/credit-report", tags=["credit"])
api_router.include_router(advice_router, prefix="/advice", tags=["advice"])
api_router.include_router(plan_router, prefix="/plan", tags=["plan"])

__all__ = ["api_router"]
