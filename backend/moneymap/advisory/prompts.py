"""Prompt templates for the advisory flows.

Templates use ``str.format`` placeholders; every flow renders its prompt here
so wording changes stay in one place.
"""

from __future__ import annotations

PLANNER_SYSTEM = "You are a financial planning expert for a user in India. Amounts are in Indian rupees."
ANALYST_SYSTEM = "You are an expert financial analyst for Indian retail investors. Reply with JSON only."

ALLOCATION_PROMPT = """\
Based on the user's financial goal, risk appetite, and market data, generate a personalized investment plan.

First, use the 'fetchAmfiNavData' tool to get the latest NAV data for mutual funds.

**User Goal:**
- Title: {title}
- Target Amount: ₹{target_amount}
- Deadline: {deadline}
- Monthly Investment: ₹{monthly_investment}
- Risk Appetite: {risk}
- Existing Investments: {existing_investments}

Your only task is to create a JSON object detailing how to allocate the user's monthly investment (₹{monthly_investment}) across different asset classes.
Consider the fetched mutual fund data and the user's existing investments when deciding the allocation. The sum of allocations must equal the monthly investment.

Output a JSON object in the following structure:
{{
  "assetAllocation": [
    {{ "asset": "Mutual Funds", "amount": 25000 }},
    {{ "asset": "Gold", "amount": 15000 }},
    {{ "asset": "Fixed Deposit", "amount": 35000 }}
  ]
}}
"""

PLAN_SUMMARY_PROMPT = """\
Based on this asset allocation: {allocation}, and considering the user's existing investments ({existing_investments}), \
write a short, witty, and friendly summary of the investment strategy. For example: "Factoring in your current holdings, \
we're diversifying with top mutual funds for growth, while gold hedges against inflation. You're investing like a pro!"
Return JSON: {{"summary": "..."}}
"""

OPTIMIZE_PLAN_PROMPT = """\
Refine the given financial plan based on the user preferences.

Initial Plan: {initial_plan}

User Preferences: {user_preferences}

Return JSON: {{"optimizedPlan": "<the refined plan>"}}
"""

FINANCIAL_ADVICE_PROMPT = """\
Use the available tools to fetch the user's net worth, bank transactions, stock and mutual fund transactions, \
EPF details and credit report. Analyze all the data and return ONLY a valid JSON object with these keys:

{
  "recommendations": ["Smart investment ideas tailored to the user"],
  "idealAssetTypes": ["Types like SIPs, Gold, Stocks, EPF, FD"],
  "humor": "A sharp Gen-Z-style roast or motivation line"
}
"""

STOCK_ANALYSIS_PROMPT = """\
Analyze the user's stock portfolio and return a clear, concise analysis.

HOLDINGS DERIVED FROM THE TRANSACTIONS (net quantity, invested amount, current value where a market price was available):
{holdings}

USER'S STOCK TRANSACTIONS:
{transactions}

## TASKS:
1. Determine Investor Profile: one sentence on the user's likely investment style.
2. Top Holdings: the top 5 stocks by current value, with invested amount, current value and sector.
3. Sector Allocation: the portfolio's allocation across major industry sectors in percent.
4. Recommendations: 2-3 actionable recommendations.

Return a single JSON object with keys investorProfile, topHoldings, sectorAllocation and recommendations.
"""

MF_ANALYSIS_PROMPT = """\
Analyze the user's mutual fund portfolio and return a clear, concise analysis.

FUND HOLDINGS DERIVED FROM PURCHASES (scheme, folio, invested amount, category):
{holdings}

USER'S MUTUAL FUND TRANSACTIONS:
{transactions}

## TASKS:
1. Top Holdings: the top 5 funds by invested amount.
2. Asset Allocation: estimate the allocation across Equity, Debt, Hybrid and Other in percent.
3. Recommendations: 2-3 actionable recommendations. If the portfolio is concentrated, suggest diversification; if it looks balanced, commend the user.
4. Summary: a single sentence on the portfolio's overall state.

Return a single JSON object with keys portfolioSummary, topHoldings, assetAllocation and recommendations.
"""

STOCK_DETAILS_PROMPT = """\
You are a senior financial analyst. For the company associated with the ISIN "{isin}", provide a detailed report.

{profile}

Provide:
- The full company name.
- Its primary stock ticker symbol.
- A detailed description of the company's business, what it does, and its position in the market.
- A list of its key executives (e.g., CEO, CFO).
- A brief summary of any major news or developments related to the company in the last 6-12 months.

Return JSON with keys companyName, stockSymbol, description, keyExecutives and recentNews.
"""

COMPARISON_PROMPT = """\
You are an intelligent financial planning assistant for Indian users.

The user has provided:
- Their current mutual fund portfolio.
- A projected mutual fund plan aligned with a financial goal.
- Their bank transaction history, summarised per month.

Optionally, you also have EPF, stock, and credit data.

CURRENT MUTUAL FUND PORTFOLIO:
{current_mf_portfolio}

PROJECTED MUTUAL FUND PLAN:
{projected_mf_plan}

MONTHLY CASHFLOW FROM BANK TRANSACTIONS:
{bank_transactions}

EPF DETAILS:
{epf_details}

STOCK DATA:
{stock_data}

CREDIT REPORT:
{credit_report}

Step by step:
1. Mutual Fund Comparison: compare current funds with the projected plan; highlight overlaps, gaps and misalignments in fund type, risk or category; flag funds that could be replaced.
2. Spending Behaviour: infer monthly average income, spending categories and saving potential; group into essentials and non-essentials.
3. Recommendations: SIP changes or fund switches with clear reasoning, and expense reduction ideas. Consider EPF, stocks and loans in the risk analysis when provided.
4. Final Action Plan: what the user should do next month.

Tone: friendly, smart and clear, like a Gen Z financial coach, but grounded in realistic numbers.

Return JSON with keys portfolioComparison, incomeSummary, recommendations and finalActionPlan.
"""

NOT_PROVIDED = "Not provided."

__all__ = [
    "ALLOCATION_PROMPT",
    "ANALYST_SYSTEM",
    "COMPARISON_PROMPT",
    "FINANCIAL_ADVICE_PROMPT",
    "MF_ANALYSIS_PROMPT",
    "NOT_PROVIDED",
    "OPTIMIZE_PLAN_PROMPT",
    "PLANNER_SYSTEM",
    "PLAN_SUMMARY_PROMPT",
    "STOCK_ANALYSIS_PROMPT",
    "STOCK_DETAILS_PROMPT",
]
