# main.py
"""
Entry Point — PolicyTrade Analyzer

Purpose
-------
Simulate a secondary-market sale of a life-insurance policy and emit a
Markdown report:
  1) Load the policy table and trade knobs (bundled sample or --config JSON).
  2) Orchestrate:
       - Trade Simulator (seller exit, broker commission, buyer projections)
       - Exit-timing sweep across sale years
       - Deal Analyst (optional AI commentary; mock or OpenAI)
  3) Generate a Markdown report.

Usage
-----
    python main.py
    python main.py --sale-year 8 --premium 5 --broker-fee 2 --out trade.md
    python main.py --config data/sample/inputs.json --analyze --analyst openai
"""

from __future__ import annotations

import argparse
import logging

from policytrade.inputs.inputs import AppInputs, InputsLoader
from policytrade.orchestrator.pipeline import run_orchestration
from policytrade.reports.formatting import format_currency, format_percent
from policytrade.reports.generator import seller_headline, write_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for configurable runs."""
    p = argparse.ArgumentParser(description="PolicyTrade Analyzer – second-hand insurance market simulator")
    p.add_argument("--config", type=str, default=None, help="Path to JSON config (TradeParameters or AppInputs).")
    p.add_argument("--policy", type=str, default=None, help="Path to a policy table JSON (overrides config).")
    p.add_argument("--sale-year", type=int, default=None, help="Policy year in which the seller exits.")
    p.add_argument("--premium", type=float, default=None, help="Seller premium over cash value, in percent.")
    p.add_argument("--broker-fee", type=float, default=None, help="Broker fee charged to the buyer, in percent.")
    p.add_argument("--out", type=str, default=None, help="Output Markdown path (overrides config).")
    p.add_argument("--analyze", action="store_true", default=None, help="Request AI deal commentary.")
    p.add_argument(
        "--analyst",
        type=str,
        default=None,
        choices=["mock", "openai"],
        help='Analyst provider: "mock" (offline) or "openai" (overrides config).',
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return p.parse_args(argv)


def load_config(args: argparse.Namespace) -> AppInputs:
    """Build AppInputs from --config (or defaults) and apply CLI overrides."""
    loader = InputsLoader()
    cfg = loader.load(args.config) if args.config else AppInputs()
    return loader.with_overrides(
        cfg,
        out=args.out,
        sale_year=args.sale_year,
        seller_premium_pct=args.premium,
        broker_fee_pct=args.broker_fee,
        analyze=args.analyze,
        analyst=args.analyst,
        policy=args.policy,
    )


def main(argv: list[str] | None = None) -> int:
    """Run the trade analysis and write trade_analysis.md (or chosen output)."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("Running PolicyTrade Analyzer...")

    cfg = load_config(args)
    result = run_orchestration(
        cfg.policy,
        cfg.trade,
        analyze=cfg.run.analyze,
        analyst=cfg.run.analyst,
        sweep=cfg.run.sweep,
    )

    write_report(
        cfg.run.out,
        result.table,
        result.params,
        result.simulation,
        exit_points=result.exit_points,
        analysis=result.analysis,
    )

    sim = result.simulation
    cur = cfg.policy.currency
    print(f"Report written to {cfg.run.out}")
    if not sim.found:
        print(f"Sale year {sim.sale_year} not found in policy table; all figures are zero.")
        return 1
    print(f"Seller proceeds: {format_currency(sim.seller_proceeds, cur)} ({seller_headline(sim)})")
    print(f"Broker profit:   {format_currency(sim.broker_profit, cur)} (margin {format_percent(sim.broker_margin)})")
    print(f"Buyer entry:     {format_currency(sim.buyer_entry_cost, cur)}")
    if result.analysis is not None and not result.analysis.ok:
        print(f"AI analysis: {result.analysis.text}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
