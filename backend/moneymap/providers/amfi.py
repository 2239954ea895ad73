"""AMFI NAVAll.txt download and summary for the planning prompts."""

from __future__ import annotations

import csv
import io
import logging
from typing import Optional

import httpx
import pandas as pd

from moneymap.config import get_settings

logger = logging.getLogger(__name__)

NAV_COLUMNS = ["scheme_code", "isin_growth", "isin_reinvestment", "scheme_name", "nav", "nav_date"]
UNAVAILABLE_MESSAGE = "Could not retrieve mutual fund data at this time."
SUMMARY_LIMIT = 20

# e.g. "Open Ended Schemes(Equity Scheme - Large Cap Fund)"
_SECTION_PATTERN = r"Schemes?\s*\("


def parse_nav_file(text: str) -> pd.DataFrame:
    """Parse the semicolon-separated NAV file, tagging each scheme with its section header."""

    frame = pd.read_csv(
        io.StringIO(text),
        sep=";",
        header=None,
        names=NAV_COLUMNS,
        dtype=str,
        quoting=csv.QUOTE_NONE,
        skip_blank_lines=True,
        on_bad_lines="skip",
        engine="python",
    )
    if frame.empty:
        return frame.assign(section=pd.Series(dtype=str))
    frame = frame.apply(lambda column: column.str.strip())
    is_header = frame["scheme_name"].isna()
    is_section = is_header & frame["scheme_code"].str.contains(_SECTION_PATTERN, regex=True, na=False)
    frame["section"] = frame["scheme_code"].where(is_section).ffill()
    schemes = frame[~is_header & (frame["scheme_code"] != "Scheme Code")]
    return schemes.reset_index(drop=True)


def equity_schemes(frame: pd.DataFrame, limit: int = SUMMARY_LIMIT) -> pd.DataFrame:
    if frame.empty:
        return frame
    in_equity_section = frame["section"].fillna("").str.contains("Equity")
    named_equity = frame["scheme_name"].fillna("").str.contains("Equity")
    return frame[in_equity_section | named_equity].head(limit)


def summarize_nav_file(text: str, limit: int = SUMMARY_LIMIT) -> str:
    rows = equity_schemes(parse_nav_file(text), limit)
    summary = ", ".join(f"{row.scheme_name}: {row.nav}" for row in rows.itertuples(index=False))
    return f"Top Mutual Funds Summary: {summary}"


async def fetch_amfi_nav_summary(
    *,
    url: str | None = None,
    timeout: float | None = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Download NAVAll.txt and summarise equity schemes; failures give a fixed message."""

    settings = get_settings()
    url = url or settings.amfi_nav_url
    timeout = timeout or settings.enrichment_timeout_seconds
    try:
        if client is not None:
            response = await client.get(url, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as http:
                response = await http.get(url)
        if response.status_code >= 400:
            raise ValueError(f"AMFI returned HTTP {response.status_code}")
        return summarize_nav_file(response.text)
    except (httpx.HTTPError, ValueError, pd.errors.ParserError) as exc:
        logger.warning("Failed to fetch or parse AMFI NAV data: %s", exc)
        return UNAVAILABLE_MESSAGE


__all__ = [
    "UNAVAILABLE_MESSAGE",
    "equity_schemes",
    "fetch_amfi_nav_summary",
    "parse_nav_file",
    "summarize_nav_file",
]
