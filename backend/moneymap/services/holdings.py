"""Holdings, top-N and allocation derived from transaction lists.

Everything here is naive summation over already-validated records; there is
no cost-basis accounting.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional, Sequence, TypeVar

from moneymap.ingest.client import MCPClient, MCPTool
from moneymap.schemas.common import AllocationSlice
from moneymap.schemas.market import CompanyProfile, PriceQuote, PriceStatus
from moneymap.schemas.mutual_funds import FundHolding, FundHoldingsView, MfTransaction, MfTransactionType
from moneymap.schemas.stocks import (
    Holding,
    StockHoldingsView,
    StockTransaction,
    StockTransactionType,
    ValuedHolding,
)

from .enrichment import EnrichmentBatch, ProfileProvider, QuoteProvider, lookup_prices, resolve_company_profiles
from .stock_transactions import stock_isins, transform_stock_transactions

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")

DEFAULT_TOP_LIMIT = 5
OTHER = "Other"

_SECTOR_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Financials", ("bank", "financ", "insurance", "capital", "credit", "bajaj finserv", "hdfc")),
    ("Information Technology", ("tech", "software", "infosys", "tata consultancy", "wipro", "mindtree", "infotech")),
    ("Healthcare", ("pharma", "health", "hospital", "laborator", "life science")),
    ("Automobile", ("motor", "auto", "tyre", "maruti")),
    ("Energy", ("oil", "gas", "petrol", "power", "energy", "reliance", "coal")),
    ("Consumer Goods", ("consumer", "foods", "beverage", "unilever", "itc", "nestle", "britannia")),
    ("Materials", ("steel", "metal", "cement", "chemical", "alumin", "paint")),
    ("Telecom", ("telecom", "airtel", "communication")),
    ("Infrastructure", ("infra", "construction", "larsen", "ports", "realty")),
)

_SCHEME_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Hybrid", re.compile(r"hybrid|balanced|arbitrage|multi[- ]asset|equity savings|asset allocation", re.I)),
    (
        "Debt",
        re.compile(
            r"debt|liquid|gilt|bond|income|money market|overnight|corporate|credit risk|banking (and|&) psu|duration",
            re.I,
        ),
    ),
    (
        "Equity",
        re.compile(
            r"equity|index|nifty|sensex|elss|tax ?saver|cap|flexi|focused|value|contra|bluechip|midcap|smallcap|growth",
            re.I,
        ),
    ),
)


def derive_holdings(transactions: Iterable[StockTransaction]) -> list[Holding]:
    """Net quantity and invested amount per ISIN, in order of first appearance.

    BUY adds quantity and amount, SELL only reduces quantity, everything else
    (bonus, split, unknown codes) is ignored.
    """

    quantities: dict[str, Decimal] = {}
    invested: dict[str, Decimal] = {}
    names: dict[str, str] = {}
    for txn in transactions:
        if txn.type not in (StockTransactionType.BUY, StockTransactionType.SELL):
            continue
        quantities.setdefault(txn.isin, Decimal("0"))
        invested.setdefault(txn.isin, Decimal("0"))
        names.setdefault(txn.isin, txn.stock_name)
        if txn.type == StockTransactionType.BUY:
            quantities[txn.isin] += txn.quantity
            amount = txn.amount.as_decimal()
            if amount is None:
                logger.warning("BUY of %s on %s has no amount; invested total excludes it", txn.isin, txn.trade_date)
            else:
                invested[txn.isin] += amount
        else:
            quantities[txn.isin] -= txn.quantity
    return [
        Holding(isin=isin, stock_name=names[isin], net_quantity=quantities[isin], invested_amount=invested[isin])
        for isin in quantities
    ]


def value_holdings(holdings: Iterable[Holding], quotes: Mapping[str, PriceQuote]) -> list[ValuedHolding]:
    """Value at market when an ISIN's quote is available, otherwise at the invested amount."""

    valued = []
    for holding in holdings:
        quote = quotes.get(holding.isin)
        status = quote.status if quote is not None else PriceStatus.UNAVAILABLE
        if quote is not None and quote.is_available:
            current_value, basis = holding.net_quantity * quote.price, "market"
        else:
            current_value, basis = holding.invested_amount, "invested"
        valued.append(
            ValuedHolding(
                **holding.model_dump(),
                current_value=current_value,
                valuation_basis=basis,
                price_status=status,
            )
        )
    return valued


def top_holdings(
    items: Sequence[ItemT],
    limit: int = DEFAULT_TOP_LIMIT,
    key: Optional[Callable[[ItemT], Decimal]] = None,
) -> list[ItemT]:
    """Largest ``limit`` items by ``key``; ties keep their input order."""

    if limit <= 0:
        return []
    sort_key = key or (lambda item: getattr(item, "current_value"))
    return sorted(items, key=sort_key, reverse=True)[:limit]


def classify_sector(name: str, industry: str | None = None) -> str:
    if industry:
        return industry
    lowered = (name or "").lower()
    for sector, keywords in _SECTOR_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return sector
    return OTHER


def classify_scheme(name: str) -> str:
    for category, pattern in _SCHEME_PATTERNS:
        if pattern.search(name or ""):
            return category
    return OTHER


def allocation_breakdown(pairs: Iterable[tuple[str, Decimal]]) -> list[AllocationSlice]:
    """Group amounts by category, largest first, with percentages of the total to 2 dp."""

    totals: dict[str, Decimal] = {}
    for category, amount in pairs:
        totals[category] = totals.get(category, Decimal("0")) + amount
    grand_total = sum(totals.values(), Decimal("0"))
    if grand_total <= 0:
        return []
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        AllocationSlice(category=category, amount=amount, percentage=round(float(amount / grand_total * 100), 2))
        for category, amount in ordered
    ]


def derive_fund_holdings(transactions: Iterable[MfTransaction]) -> list[FundHolding]:
    """Sum PURCHASE amounts per scheme and folio; sells are not netted off."""

    invested: dict[tuple[str, str], Decimal] = {}
    for txn in transactions:
        if txn.type != MfTransactionType.PURCHASE:
            continue
        key = (txn.scheme_name, txn.folio_number)
        amount = txn.amount.as_decimal()
        invested[key] = invested.get(key, Decimal("0")) + (amount if amount is not None else Decimal("0"))
    return [
        FundHolding(
            scheme_name=scheme,
            folio_number=folio,
            invested_amount=amount,
            category=classify_scheme(scheme),
        )
        for (scheme, folio), amount in invested.items()
    ]


def build_stock_holdings_view(
    transactions: Iterable[StockTransaction],
    quotes: Mapping[str, PriceQuote],
    profiles: Optional[Mapping[str, CompanyProfile]] = None,
    limit: int = DEFAULT_TOP_LIMIT,
) -> StockHoldingsView:
    profiles = profiles or {}
    holdings = value_holdings(derive_holdings(transactions), quotes)
    sectors = allocation_breakdown(
        (
            classify_sector(holding.stock_name, getattr(profiles.get(holding.isin), "industry", None)),
            holding.current_value,
        )
        for holding in holdings
    )
    return StockHoldingsView(
        holdings=holdings,
        top_holdings=top_holdings(holdings, limit),
        sector_allocation=sectors,
    )


def build_fund_holdings_view(
    transactions: Iterable[MfTransaction], limit: int = DEFAULT_TOP_LIMIT
) -> FundHoldingsView:
    holdings = derive_fund_holdings(transactions)
    return FundHoldingsView(
        holdings=holdings,
        top_holdings=top_holdings(holdings, limit, key=lambda holding: holding.invested_amount),
        allocation=allocation_breakdown((holding.category, holding.invested_amount) for holding in holdings),
    )


async def load_stock_holdings(
    client: MCPClient,
    profiles: Optional[ProfileProvider] = None,
    quotes: Optional[QuoteProvider] = None,
    limit: int = DEFAULT_TOP_LIMIT,
) -> StockHoldingsView:
    """Fetch transactions, resolve each ISIN once for name and ticker, then value at market."""

    payload = await client.fetch_payload(MCPTool.FETCH_STOCK_TRANSACTIONS)
    isins = stock_isins(payload)
    if profiles is not None and profiles.is_configured:
        batch = await resolve_company_profiles(isins, profiles)
    else:
        batch = EnrichmentBatch()
    names = {isin: batch.profiles[isin].name for isin in batch.profiles}
    transactions = transform_stock_transactions(payload, names).transactions

    tickers = {isin: profile.ticker for isin, profile in batch.profiles.items() if profile.ticker}
    symbol_quotes = await lookup_prices(tickers.values(), quotes)
    missing_status = (
        PriceStatus.UNAVAILABLE if quotes is not None and quotes.is_configured else PriceStatus.NOT_CONFIGURED
    )
    by_isin: dict[str, PriceQuote] = {}
    for isin in isins:
        ticker = tickers.get(isin)
        by_isin[isin] = symbol_quotes[ticker] if ticker else PriceQuote(symbol=isin, status=missing_status)
    return build_stock_holdings_view(transactions, by_isin, batch.profiles, limit)


__all__ = [
    "DEFAULT_TOP_LIMIT",
    "allocation_breakdown",
    "build_fund_holdings_view",
    "build_stock_holdings_view",
    "classify_scheme",
    "classify_sector",
    "derive_fund_holdings",
    "derive_holdings",
    "load_stock_holdings",
    "top_holdings",
    "value_holdings",
]
