# policytrade/orchestrator/pipeline.py
"""
Trade analysis orchestrator (deterministic core, optional AI commentary)

Purpose
-------
Execute the pipeline in sequence:
  1) Trade Simulator -> SimulationResult
  2) Exit-timing sweep -> list[SellerExitPoint] (optional)
  3) Deal Analyst     -> DealAnalysis (optional; never raises)

Public API
----------
run_orchestration(table, params, *, analyze=False, analyst="mock", provider=None, sweep=True)
  -> OrchestrationResult(table, params, simulation, exit_points, analysis)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from policytrade.agents.deal_analyst import analyze_deal, build_deal_facts
from policytrade.agents.trade_simulator import normalize_parameters, simulate_trade
from policytrade.core.finance.engine import sweep_sale_years
from policytrade.schemas.models import (
    DealAnalysis,
    PolicyTable,
    SellerExitPoint,
    SimulationResult,
    TradeParameters,
)
from policytrade.tools.analyst import DealAnalyst


@dataclass(frozen=True)
class OrchestrationResult:
    """Bundle of final artifacts from the pipeline."""

    table: PolicyTable
    params: TradeParameters
    simulation: SimulationResult
    exit_points: list[SellerExitPoint] = field(default_factory=list)
    analysis: DealAnalysis | None = None


def run_orchestration(
    table: PolicyTable,
    params: TradeParameters,
    *,
    analyze: bool = False,
    analyst: str = "mock",
    provider: DealAnalyst | None = None,
    sweep: bool = True,
) -> OrchestrationResult:
    """
    Simulate the trade and optionally attach exit-timing and AI commentary.

    Args:
        table: Policy illustration table.
        params: Trade knobs; clamped to the calculator's policy before use.
        analyze: Request commentary from the analyst seam.
        analyst: Provider name used when no provider instance is given.
        provider: Explicit DealAnalyst instance (tests, custom backends).
        sweep: Compute seller outcomes for every sale year in the table.
    """
    effective = normalize_parameters(params)
    simulation = simulate_trade(table, effective)
    exit_points = sweep_sale_years(table, effective) if sweep else []

    analysis: DealAnalysis | None = None
    if analyze and simulation.found:
        facts = build_deal_facts(table, simulation)
        analysis = analyze_deal(facts, provider, provider_name=analyst)

    return OrchestrationResult(
        table=table,
        params=effective,
        simulation=simulation,
        exit_points=exit_points,
        analysis=analysis,
    )
