"""Pydantic schema exports."""

from .advisory import (
    AnalyzeIsinListOutput,
    AssetAllocationPlan,
    ComparisonRequest,
    FinancialAdvice,
    FinancialPlan,
    MfAnalysisOutput,
    OptimizedPlan,
    OptimizePlanRequest,
    PlanRequest,
    PortfolioComparison,
    StockAnalysisOutput,
    StockAnalysisResult,
    StockDetails,
)
from .bank import BankAccountTransactions, BankTransactionsResponse, MonthlyCashflow, Transaction, TransactionType
from .common import ActionResult, AllocationSlice, DataAvailability, MoneyAmount
from .credit import CreditAccount, CreditReport, CreditScore
from .epf import EpfAccount, EpfContribution, EpfProfile
from .market import CompanyProfile, MarketNewsArticle, PriceQuote, PriceStatus
from .mutual_funds import FundHolding, FundHoldingsView, MfTransaction, MfTransactionsResponse, MfTransactionType
from .net_worth import AccountHoldings, NetWorthAttributeValue, NetWorthSnapshot, NetWorthSummary, SecurityHolding
from .stocks import (
    Holding,
    StockHoldingsView,
    StockTransaction,
    StockTransactionsResponse,
    StockTransactionType,
    ValuedHolding,
)
from .validation import validate_record

__all__ = [
    "AccountHoldings",
    "ActionResult",
    "AllocationSlice",
    "AnalyzeIsinListOutput",
    "AssetAllocationPlan",
    "BankAccountTransactions",
    "BankTransactionsResponse",
    "CompanyProfile",
    "ComparisonRequest",
    "CreditAccount",
    "CreditReport",
    "CreditScore",
    "DataAvailability",
    "EpfAccount",
    "EpfContribution",
    "EpfProfile",
    "FinancialAdvice",
    "FinancialPlan",
    "FundHolding",
    "FundHoldingsView",
    "Holding",
    "MarketNewsArticle",
    "MfAnalysisOutput",
    "MfTransaction",
    "MfTransactionType",
    "MfTransactionsResponse",
    "MoneyAmount",
    "MonthlyCashflow",
    "NetWorthAttributeValue",
    "NetWorthSnapshot",
    "NetWorthSummary",
    "OptimizePlanRequest",
    "OptimizedPlan",
    "PlanRequest",
    "PortfolioComparison",
    "PriceQuote",
    "PriceStatus",
    "SecurityHolding",
    "StockAnalysisOutput",
    "StockAnalysisResult",
    "StockDetails",
    "StockHoldingsView",
    "StockTransaction",
    "StockTransactionType",
    "StockTransactionsResponse",
    "Transaction",
    "TransactionType",
    "ValuedHolding",
    "validate_record",
]
