# policytrade/agents/deal_analyst.py
"""
Deal Analyst Agent

Purpose
-------
Bridge a deterministic SimulationResult to the optional AI commentary seam:
  - build_deal_facts(): collect the scenario facts the analyst needs
  - analyze_deal():     call a DealAnalyst provider and never raise
  - analyze_deal_async(): same, off the event loop

Design
------
- The analysis is optional: every failure becomes a human-readable message
  with ok=False so the report can still be written.
- Provider selection mirrors the run options: "mock" (offline, deterministic)
  or "openai" (requires OPENAI_API_KEY).
"""

from __future__ import annotations

import asyncio
import os

from policytrade.core.finance.engine import buyer_projection_at
from policytrade.schemas.models import DealAnalysis, DealFacts, PolicyTable, SimulationResult
from policytrade.tools.analyst import DealAnalyst, MockDealAnalyst, OpenAIDealAnalyst
from policytrade.tools.analyst.debug_log import log_exception

MISSING_KEY_MESSAGE = "API Key not found. Please ensure OPENAI_API_KEY is set."
FAILURE_MESSAGE = "Failed to generate analysis. Please try again."
EMPTY_MESSAGE = "No analysis generated."

REFERENCE_SPAN_YEARS = 10


def build_deal_facts(table: PolicyTable, result: SimulationResult) -> DealFacts:
    """
    Collect the facts for the analyst prompt.

    Buyer reference points are the +5 and +10 holding-year projections; they are
    None when the table does not reach that far or the IRR did not converge.
    """
    hold5 = buyer_projection_at(result, 5)
    hold10 = buyer_projection_at(result, 10)
    reference = {
        r.year: r.total_cv
        for r in table.years
        if result.sale_year <= r.year <= result.sale_year + REFERENCE_SPAN_YEARS
    }
    return DealFacts(
        policy_name=table.name,
        currency=table.currency,
        original_principal=table.yearly_premium * table.payment_years,
        sale_year=result.sale_year,
        seller_proceeds=result.seller_proceeds,
        seller_irr=result.seller_irr,
        seller_roi=result.seller_roi,
        broker_profit=result.broker_profit,
        buyer_entry_cost=result.buyer_entry_cost,
        buyer_irr_5y=hold5.irr if hold5 else None,
        buyer_irr_10y=hold10.irr if hold10 else None,
        reference_cash_values=reference,
    )


def make_provider(name: str) -> DealAnalyst:
    """Instantiate a provider by name. Raises ValueError for unknown names, RuntimeError if it cannot be configured."""
    normalized = name.strip().lower()
    if normalized == "mock":
        return MockDealAnalyst()
    if normalized == "openai":
        return OpenAIDealAnalyst()
    raise ValueError(f"Unknown analyst provider: {name!r}")


def analyze_deal(facts: DealFacts, provider: DealAnalyst | None = None, *, provider_name: str = "openai") -> DealAnalysis:
    """
    Ask the analyst for commentary on the trade.

    Args:
        facts: Structured scenario facts.
        provider: Ready provider instance; when None one is built from provider_name.
        provider_name: "openai" or "mock".

    Returns:
        DealAnalysis. On any failure ok=False and text holds a failure message.
    """
    if provider is None:
        if provider_name.strip().lower() == "openai" and not os.getenv("OPENAI_API_KEY"):
            return DealAnalysis(text=MISSING_KEY_MESSAGE, ok=False, provider="none")
        try:
            provider = make_provider(provider_name)
        except RuntimeError as e:
            log_exception("Analyst provider unavailable", e)
            return DealAnalysis(text=FAILURE_MESSAGE, ok=False, provider="none")

    name = getattr(provider, "name", type(provider).__name__)
    try:
        text = provider.summarize(facts)
    except Exception as e:
        log_exception("Deal analysis failed", e)
        return DealAnalysis(text=FAILURE_MESSAGE, ok=False, provider=name)

    if not text or not text.strip():
        return DealAnalysis(text=EMPTY_MESSAGE, ok=False, provider=name)
    return DealAnalysis(text=text.strip(), ok=True, provider=name)


async def analyze_deal_async(
    facts: DealFacts, provider: DealAnalyst | None = None, *, provider_name: str = "openai"
) -> DealAnalysis:
    """Run analyze_deal in a worker thread so event-loop callers are not blocked."""
    return await asyncio.to_thread(analyze_deal, facts, provider, provider_name=provider_name)
