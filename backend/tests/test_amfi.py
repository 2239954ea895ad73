"""AMFI NAV summary tests."""

from __future__ import annotations

import httpx
import pytest

from moneymap.providers.amfi import UNAVAILABLE_MESSAGE, fetch_amfi_nav_summary, parse_nav_file, summarize_nav_file

NAV_FILE = """\
Scheme Code;ISIN Div Payout/ ISIN Growth;ISIN Div Reinvestment;Scheme Name;Net Asset Value;Date

Open Ended Schemes(Equity Scheme - Large Cap Fund)

Aditya Birla Sun Life Mutual Fund

119551;INF209KA12Z1;INF209KA13Z9;Aditya Birla Sun Life Frontline Fund - Growth;450.12;01-Jul-2024
Open Ended Schemes(Debt Scheme - Liquid Fund)

119552;INF209K01VF1;-;ABSL Liquid Fund - Growth;390.5;01-Jul-2024
119553;INF209K01VG9;-;ABSL Equity Savings Plan;20.1;01-Jul-2024
"""


def test_rows_are_tagged_with_their_section():
    frame = parse_nav_file(NAV_FILE)

    assert list(frame["scheme_code"]) == ["119551", "119552", "119553"]
    assert frame.loc[0, "section"] == "Open Ended Schemes(Equity Scheme - Large Cap Fund)"
    assert frame.loc[1, "section"] == "Open Ended Schemes(Debt Scheme - Liquid Fund)"


def test_summary_lists_equity_schemes():
    summary = summarize_nav_file(NAV_FILE)

    assert summary == (
        "Top Mutual Funds Summary: "
        "Aditya Birla Sun Life Frontline Fund - Growth: 450.12, ABSL Equity Savings Plan: 20.1"
    )


@pytest.mark.asyncio
async def test_fetch_summarises_download():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=NAV_FILE)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        summary = await fetch_amfi_nav_summary(url="https://amfi.test/NAVAll.txt", client=client)

    assert summary.startswith("Top Mutual Funds Summary: Aditya Birla")


@pytest.mark.asyncio
async def test_fetch_failure_returns_fixed_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        summary = await fetch_amfi_nav_summary(url="https://amfi.test/NAVAll.txt", client=client)

    assert summary == UNAVAILABLE_MESSAGE
