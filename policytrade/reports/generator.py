# policytrade/reports/generator.py
from __future__ import annotations

from policytrade.core.finance.engine import buyer_break_even_year
from policytrade.schemas.models import (
    DealAnalysis,
    PolicyTable,
    SellerExitPoint,
    SimulationResult,
    TradeParameters,
)

from .formatting import NOT_AVAILABLE, format_currency, format_percent

# Sales up to this year show the seller's total return instead of IRR (short, premium-heavy series).
SELLER_ROI_HEADLINE_LAST_YEAR = 6


def _section(title: str) -> str:
    """
    Render a level-2 heading for Markdown sections.
    """
    return f"\n## {title}\n"


# -----------------------
# Header & top sections
# -----------------------


def _render_header(table: PolicyTable, params: TradeParameters) -> str:
    principal = table.yearly_premium * table.payment_years
    lines = [
        f"# Policy Trade Analysis – {table.name}",
        "",
        f"**Premium schedule:** {format_currency(table.yearly_premium, table.currency)} × {table.payment_years} years "
        f"({format_currency(principal, table.currency)} total)",
        "",
        "**Transaction Settings:**",
        f"- Policy sale year: {params.sale_year}",
        f"- Seller premium (A): +{params.seller_premium_pct:g}% over total cash value",
        f"- Broker fee (B): +{params.broker_fee_pct:g}% charged to the buyer",
    ]
    return "\n".join(lines) + "\n"


def seller_headline(result: SimulationResult) -> str:
    """Seller sub-metric: total return for early sales, IRR afterwards."""
    if result.sale_year <= SELLER_ROI_HEADLINE_LAST_YEAR:
        return f"Total Return: {format_percent(result.seller_roi)}"
    return f"IRR: {format_percent(result.seller_irr)}"


def _render_parties(result: SimulationResult, currency: str) -> str:
    """
    Render the three party cards: seller exit, broker commission, buyer entry.
    """
    lines = [
        _section("Trade Summary"),
        f"- **Seller A – Realized Exit:** {format_currency(result.seller_proceeds, currency)} ({seller_headline(result)})",
        f"- **Broker B – Commission:** {format_currency(result.broker_profit, currency)} "
        f"(Margin: {format_percent(result.broker_margin)})",
        f"- **Buyer C – Entry Price:** {format_currency(result.buyer_entry_cost, currency)} "
        f"(Base CV: {format_currency(result.base_cash_value, currency)})",
    ]
    return "\n".join(lines) + "\n"


def _render_missing_year(result: SimulationResult, table: PolicyTable) -> str:
    lines = [
        _section("Trade Summary"),
        f"Sale year {result.sale_year} is not in the policy table "
        f"(years {table.first_year}–{table.last_year}). All figures are zero.",
    ]
    return "\n".join(lines) + "\n"


def _render_seller_cash_flows(result: SimulationResult, currency: str) -> str:
    """
    Render the seller's yearly cash flows as fed to the IRR solver.
    """
    header = [
        _section("Seller A – Cash Flows"),
        "| Policy Year | Cash Flow |",
        "|---:|---:|",
    ]
    rows = [f"| {i} | {format_currency(cf, currency)} |" for i, cf in enumerate(result.seller_cash_flows, start=1)]
    return "\n".join(header + rows) + "\n"


def _render_buyer_table(result: SimulationResult, currency: str) -> str:
    """
    Render projected buyer returns if the policy is surrendered in future years.

    Columns:
      Policy Year | Years Held | Cash Value (Exit) | Buyer's Gain | Buyer's IRR
    """
    breakeven = buyer_break_even_year(result)
    header = [
        _section("Buyer C – Projected Returns"),
        f"**Buyer Break-even:** Year {breakeven if breakeven is not None else NOT_AVAILABLE}",
        "",
        "| Policy Year | Years Held by Buyer | Cash Value (Exit) | Buyer's Gain | Buyer's IRR |",
        "|---:|---:|---:|---:|---:|",
    ]
    rows = [
        f"| {r.surrender_year} | {r.holding_years} | {format_currency(r.cash_value, currency)} | "
        f"{format_currency(r.gain, currency)} | {format_percent(r.irr)} |"
        for r in result.buyer_projected_irrs
    ]
    if not rows:
        rows = ["| – | – | – | – | " + NOT_AVAILABLE + " |"]
    return "\n".join(header + rows) + "\n"


def _render_exit_sweep(points: list[SellerExitPoint], currency: str) -> str:
    """
    Render the seller's outcome for every candidate sale year.
    """
    if not points:
        return ""
    header = [
        _section("Seller A – Exit Timing"),
        "| Sale Year | Seller Proceeds | Total Return | Exit IRR | Buyer Entry |",
        "|---:|---:|---:|---:|---:|",
    ]
    rows = [
        f"| {p.sale_year} | {format_currency(p.seller_proceeds, currency)} | {format_percent(p.seller_roi)} | "
        f"{format_percent(p.seller_irr)} | {format_currency(p.buyer_entry_cost, currency)} |"
        for p in points
    ]
    return "\n".join(header + rows) + "\n"


def _render_policy_table(table: PolicyTable) -> str:
    """
    Render the illustration data behind the trade (cash value growth vs. principal paid).
    """
    cur = table.currency
    header = [
        _section("Policy Reference Data"),
        "| Year | Principal Paid | Guaranteed CV | Total CV |",
        "|---:|---:|---:|---:|",
    ]
    rows = [
        f"| {r.year} | {format_currency(r.total_premium_paid, cur)} | {format_currency(r.guaranteed_cv, cur)} | "
        f"{format_currency(r.total_cv, cur)} |"
        for r in table.years
    ]
    return "\n".join(header + rows) + "\n"


def _render_analysis(analysis: DealAnalysis | None) -> str:
    if analysis is None:
        return ""
    title = "AI Deal Analysis" if analysis.ok else "AI Deal Analysis (unavailable)"
    return "\n".join([_section(title), analysis.text]) + "\n"


# -----------------------
# Orchestration
# -----------------------


def generate_report(
    table: PolicyTable,
    params: TradeParameters,
    result: SimulationResult,
    *,
    exit_points: list[SellerExitPoint] | None = None,
    analysis: DealAnalysis | None = None,
    include_policy_table: bool = True,
) -> str:
    """
    Generate a Markdown report for one simulated trade.

    Sections:
      - Header: policy and transaction settings
      - Trade Summary: seller exit, broker commission, buyer entry
      - AI Deal Analysis (if requested)
      - Seller cash flows
      - Buyer projected returns with break-even year
      - Seller exit timing (if swept)
      - Policy reference data

    IRRs that did not converge render as N/A.
    """
    cur = table.currency
    if not result.found:
        parts = [
            _render_header(table, params),
            _render_missing_year(result, table),
            _render_policy_table(table) if include_policy_table else "",
        ]
    else:
        parts = [
            _render_header(table, params),
            _render_parties(result, cur),
            _render_analysis(analysis),
            _render_seller_cash_flows(result, cur),
            _render_buyer_table(result, cur),
            _render_exit_sweep(exit_points or [], cur),
            _render_policy_table(table) if include_policy_table else "",
        ]
    return "\n".join(part for part in parts if part).strip() + "\n"


def write_report(
    path: str,
    table: PolicyTable,
    params: TradeParameters,
    result: SimulationResult,
    *,
    exit_points: list[SellerExitPoint] | None = None,
    analysis: DealAnalysis | None = None,
) -> None:
    """
    Convenience helper to write the generated report to disk.
    """
    md = generate_report(table, params, result, exit_points=exit_points, analysis=analysis)
    with open(path, "w", encoding="utf-8") as f:
        f.write(md)
