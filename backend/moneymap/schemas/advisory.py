"""Request bodies for the planning endpoints and the shapes the LLM must return.

Output models are only validated, never recomputed: the advisory layer hands
their JSON schema to the model and checks the answer against it before use.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import RecordModel


class RiskAppetite(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class PlanRequest(RecordModel):
    title: str = Field(..., min_length=1, examples=["Buy a car"])
    risk: RiskAppetite
    goal_amount: Decimal = Field(..., gt=0)
    deadline: date
    monthly_income: Optional[Decimal] = Field(default=None, ge=0)


class FinancialGoal(RecordModel):
    title: str
    deadline: date
    risk: RiskAppetite
    monthly_investment: Decimal
    target_amount: Decimal


class OptimizePlanRequest(RecordModel):
    initial_plan: str = Field(..., min_length=1)
    user_preferences: str = Field(..., min_length=1)


class ComparisonRequest(RecordModel):
    projected_mf_plan: str = Field(..., min_length=1, description="Goal-aligned mutual fund plan to compare against")
    include_optional_data: bool = Field(default=True, description="Also send EPF, stock and credit data")


class StockAnalysisResult(RecordModel):
    isin: str
    symbol: str = Field(..., description="The stock ticker symbol.")
    name: str = Field(..., description="The full name of the company.")
    current_price: str = Field(..., description="The latest known trading price of the stock.")
    rsi: str = Field(..., description="The 14-day Relative Strength Index (RSI).")
    sma: str = Field(..., description="The 20-day Simple Moving Average (SMA).")


class AnalyzeIsinListOutput(RecordModel):
    analysis: list[StockAnalysisResult] = Field(default_factory=list)


class StockTopHolding(RecordModel):
    stock_name: str
    invested_amount: str
    current_value: str
    sector: str


class SectorWeight(RecordModel):
    sector: str
    percentage: float


class StockAnalysisOutput(RecordModel):
    investor_profile: str = Field(..., description="One-sentence summary of the user's investment style.")
    top_holdings: list[StockTopHolding] = Field(..., max_length=5)
    sector_allocation: list[SectorWeight]
    recommendations: list[str] = Field(..., description="2-3 actionable recommendations.")


class FundTopHolding(RecordModel):
    fund_name: str
    invested_amount: str


class AssetClassWeight(RecordModel):
    asset_class: str = Field(..., description="Equity, Debt, Hybrid or Other.")
    percentage: float


class MfAnalysisOutput(RecordModel):
    portfolio_summary: str
    top_holdings: list[FundTopHolding] = Field(..., max_length=5)
    asset_allocation: list[AssetClassWeight]
    recommendations: list[str]


class AssetAllocationItem(RecordModel):
    asset: str = Field(..., description="The asset class, e.g. 'Mutual Funds'.")
    amount: Decimal = Field(..., ge=0, description="Monthly amount to allocate in rupees.")


class AssetAllocationPlan(RecordModel):
    asset_allocation: list[AssetAllocationItem] = Field(..., min_length=1)


class PlanSummary(RecordModel):
    summary: str


class FinancialPlan(RecordModel):
    asset_allocation: dict[str, str] = Field(..., examples=[{"Mutual Funds": "₹7,000"}])
    projected_returns: str = Field(..., examples=["₹11.2 Lakhs"])
    projected_value: Decimal
    is_goal_achievable: bool
    summary: str


class OptimizedPlan(RecordModel):
    optimized_plan: str


class FinancialAdvice(RecordModel):
    recommendations: list[str]
    ideal_asset_types: list[str]
    humor: str


class StockDetails(RecordModel):
    company_name: str
    stock_symbol: str
    description: str
    key_executives: list[str]
    recent_news: str


class PortfolioComparison(RecordModel):
    portfolio_comparison: str
    income_summary: str
    recommendations: list[str]
    final_action_plan: str


__all__ = [
    "AnalyzeIsinListOutput",
    "AssetAllocationItem",
    "AssetAllocationPlan",
    "AssetClassWeight",
    "ComparisonRequest",
    "FinancialAdvice",
    "FinancialGoal",
    "FinancialPlan",
    "FundTopHolding",
    "MfAnalysisOutput",
    "OptimizePlanRequest",
    "OptimizedPlan",
    "PlanRequest",
    "PlanSummary",
    "PortfolioComparison",
    "RiskAppetite",
    "SectorWeight",
    "StockAnalysisOutput",
    "StockAnalysisResult",
    "StockDetails",
    "StockTopHolding",
]
