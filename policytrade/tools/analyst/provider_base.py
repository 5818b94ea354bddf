# policytrade/tools/analyst/provider_base.py
"""
Deal Analyst Provider Interface

Purpose
-------
Define a minimal, provider-agnostic contract for turning a bundle of trade
facts into free-text commentary. The core simulation never depends on this
being available or correct.

Public API
----------
class DealAnalyst(Protocol):
    name: str
    def summarize(self, facts: DealFacts) -> str

build_prompt(facts) -> str
"""

from __future__ import annotations

import json
from typing import Protocol

from policytrade.reports.formatting import format_currency, format_percent
from policytrade.schemas.models import DealFacts


class DealAnalyst(Protocol):
    name: str

    def summarize(self, facts: DealFacts) -> str: ...


def build_prompt(facts: DealFacts) -> str:
    """Render the analyst prompt. Unavailable IRRs are spelled out as N/A."""
    cur = facts.currency
    reference = json.dumps([f"{y}:{round(v)}" for y, v in sorted(facts.reference_cash_values.items())])
    return f"""
You are a sophisticated financial analyst specializing in secondary market life insurance policies (Traded Endowment Policies).

Please analyze the following transaction scenario:

**Scenario:**
- Original Policy: {facts.policy_name}.
- Policy Age at Sale: {facts.sale_year} years.
- Original Principal: {format_currency(facts.original_principal, cur)}

**Seller (Original Holder A):**
- Sale Price (Net): {format_currency(facts.seller_proceeds, cur)}
- Exit IRR: {format_percent(facts.seller_irr)}
- Total Return on Premiums: {format_percent(facts.seller_roi)}

**Broker (Middleman B):**
- Transaction Profit: {format_currency(facts.broker_profit, cur)}

**Buyer (New Holder C):**
- Entry Cost: {format_currency(facts.buyer_entry_cost, cur)}
- Projected IRR (if held for +5 more years): {format_percent(facts.buyer_irr_5y)}
- Projected IRR (if held for +10 more years): {format_percent(facts.buyer_irr_10y)}

**Policy Data Reference (Year: TotalCashValue):**
{reference}

**Instructions:**
1. Evaluate if this is a good exit for the Seller compared to holding.
2. Evaluate the risk/reward for the Buyer given the entry cost and projected returns.
3. Comment on the Broker's cut - is it reasonable?
4. Provide a succinct verdict (Buy/Sell/Hold) for each party.

Keep the response concise (under 200 words), professional, and formatted with markdown.
""".strip()
