# policytrade/agents/trade_simulator.py
"""
Trade Simulator Agent

Purpose
-------
Thin agent wrapper around the deterministic trade engine. It normalizes the
adjustable parameters the same way the interactive calculator constrains its
sliders, invokes the core model, and returns the resulting SimulationResult.

Design
------
- Deterministic: no external calls, no randomness.
- Delegates all math to policytrade.core.finance.engine.
- Clamping returns copies; caller objects are never mutated.

Public API
----------
normalize_parameters(params) -> TradeParameters
simulate_trade(table, params) -> SimulationResult
"""

from __future__ import annotations

from policytrade.core.finance.engine import MAX_BROKER_FEE_PCT, max_seller_premium, run_trade_simulation
from policytrade.schemas.models import PolicyTable, SimulationResult, TradeParameters


def _clamp(x: float, lo: float, hi: float) -> float:
    """Clamp a float to the inclusive [lo, hi] range."""
    return lo if x < lo else hi if x > hi else x


def normalize_parameters(params: TradeParameters) -> TradeParameters:
    """
    Apply the calculator's parameter policy.

    Notes:
      - The seller premium may not exceed max_seller_premium(sale_year):
        60% for sales in years 1-6, 10% afterwards.
      - The broker fee stays within [0, 10]%.
    """
    premium = _clamp(params.seller_premium_pct, 0.0, max_seller_premium(params.sale_year))
    fee = _clamp(params.broker_fee_pct, 0.0, MAX_BROKER_FEE_PCT)
    if premium == params.seller_premium_pct and fee == params.broker_fee_pct:
        return params
    return params.model_copy(update={"seller_premium_pct": premium, "broker_fee_pct": fee})


def simulate_trade(table: PolicyTable, params: TradeParameters) -> SimulationResult:
    """
    Run the three-party trade simulation.

    Args:
        table: Policy illustration table (year -> cash value, premiums).
        params: Sale year, seller premium and broker fee.

    Returns:
        SimulationResult for seller, broker and buyer. A sale year missing from
        the table produces the all-zero result (found=False).
    """
    return run_trade_simulation(table, normalize_parameters(params))
