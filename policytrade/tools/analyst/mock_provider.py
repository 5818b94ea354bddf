# policytrade/tools/analyst/mock_provider.py
"""
Mock Deal Analyst

Purpose
-------
Deterministic, offline stand-in for the AI analyst. Produces short Markdown
commentary from fixed rules over the facts so tests and local runs exercise
the analysis path without network access.

Rules
-----
- Seller: SELL when the exit IRR is at or above SELLER_HURDLE, else HOLD.
  Without an IRR, fall back to total return (SELL only if positive).
- Buyer: BUY when the +10y projected IRR is at or above BUYER_HURDLE.
- Broker: cut is "reasonable" up to BROKER_FAIR_SHARE of the buyer's entry cost.
"""

from __future__ import annotations

from policytrade.reports.formatting import format_currency, format_percent
from policytrade.schemas.models import DealFacts

from .provider_base import DealAnalyst

SELLER_HURDLE = 0.02
BUYER_HURDLE = 0.03
BROKER_FAIR_SHARE = 0.03


class MockDealAnalyst(DealAnalyst):
    """Rule-based analyst; same facts always give the same text."""

    name = "mock"

    def summarize(self, facts: DealFacts) -> str:
        cur = facts.currency

        if facts.seller_irr is not None:
            seller_sell = facts.seller_irr >= SELLER_HURDLE
            seller_line = f"Exit IRR of {format_percent(facts.seller_irr)}"
        else:
            seller_sell = facts.seller_roi > 0
            seller_line = f"Total return of {format_percent(facts.seller_roi)} (IRR N/A)"

        buyer_irr = facts.buyer_irr_10y if facts.buyer_irr_10y is not None else facts.buyer_irr_5y
        buyer_buy = buyer_irr is not None and buyer_irr >= BUYER_HURDLE

        share = facts.broker_profit / facts.buyer_entry_cost if facts.buyer_entry_cost > 0 else 0.0
        broker_fair = share <= BROKER_FAIR_SHARE

        return "\n".join(
            [
                f"**Seller (A):** {seller_line} on a year-{facts.sale_year} sale. "
                f"Verdict: **{'SELL' if seller_sell else 'HOLD'}**.",
                f"**Buyer (C):** Entry at {format_currency(facts.buyer_entry_cost, cur)}; "
                f"+5y IRR {format_percent(facts.buyer_irr_5y)}, +10y IRR {format_percent(facts.buyer_irr_10y)}. "
                f"Verdict: **{'BUY' if buyer_buy else 'HOLD'}**.",
                f"**Broker (B):** {format_currency(facts.broker_profit, cur)} ({format_percent(share)} of entry) "
                f"is {'reasonable' if broker_fair else 'rich'}.",
            ]
        )
