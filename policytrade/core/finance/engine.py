# policytrade/core/finance/engine.py
from __future__ import annotations

import logging
from collections.abc import Iterable

from policytrade.schemas.models import (
    BuyerProjectedIRR,
    PolicyTable,
    SellerExitPoint,
    SimulationResult,
    TradeParameters,
)

from .irr import irr

logger = logging.getLogger(__name__)

# Seller premium ceiling (percent): early sales may carry a large markup over a small cash value.
EARLY_SALE_LAST_YEAR = 6
EARLY_SALE_MAX_PREMIUM_PCT = 60.0
LATE_SALE_MAX_PREMIUM_PCT = 10.0
MAX_BROKER_FEE_PCT = 10.0


def max_seller_premium(sale_year: int) -> float:
    """Upper bound on the seller premium (percent) for a given sale year."""
    return EARLY_SALE_MAX_PREMIUM_PCT if sale_year <= EARLY_SALE_LAST_YEAR else LATE_SALE_MAX_PREMIUM_PCT


def seller_cash_flows(table: PolicyTable, sale_year: int, proceeds: float) -> list[float]:
    """
    Original holder's yearly cash flows, one entry per policy year 1..sale_year.

    Premiums are outflows during the payment years; the sale proceeds are added to
    the final year's entry (which may also carry a premium if the sale happens
    inside the payment period).
    """
    flows = [-table.yearly_premium if i <= table.payment_years else 0.0 for i in range(1, sale_year + 1)]
    flows[-1] += proceeds
    return flows


def buyer_cash_flows(entry_cost: float, exit_value: float, holding_years: int) -> list[float]:
    """Lump-sum series: -entry at T=0, zeros in between, +exit at T=holding_years."""
    return [-entry_cost] + [0.0] * (holding_years - 1) + [exit_value]


def _empty_result(sale_year: int) -> SimulationResult:
    return SimulationResult(
        sale_year=sale_year,
        found=False,
        seller_irr=0.0,
        seller_roi=0.0,
        buyer_entry_cost=0.0,
        broker_profit=0.0,
        buyer_projected_irrs=[],
    )


def run_trade_simulation(table: PolicyTable, params: TradeParameters) -> SimulationResult:
    """
    Simulate a sale of the policy from A to C through broker B.

    Rules:
      - Seller proceeds = total CV at sale year × (1 + premium%).
      - Buyer entry cost = seller proceeds × (1 + broker fee%).
      - Buyer projections cover every table year after the sale year.

    A sale year missing from the table yields an all-zero result (found=False).
    IRRs that fail to converge are reported as None.
    """
    sale_year = params.sale_year
    at_sale = table.row(sale_year)
    if at_sale is None:
        logger.debug("sale year %d not in policy table %r", sale_year, table.name)
        return _empty_result(sale_year)

    # 1) Seller A
    base_cv = at_sale.total_cv
    proceeds = base_cv * (1 + params.seller_premium_pct / 100)
    s_flows = seller_cash_flows(table, sale_year, proceeds)
    seller_irr = irr(s_flows)

    premiums = at_sale.total_premium_paid
    seller_roi = (proceeds - premiums) / premiums if premiums > 0 else 0.0

    # 2) Broker B
    broker_cost = proceeds
    entry_cost = broker_cost * (1 + params.broker_fee_pct / 100)
    broker_profit = entry_cost - broker_cost
    broker_margin = broker_profit / entry_cost if entry_cost > 0 else 0.0

    # 3) Buyer C
    projections: list[BuyerProjectedIRR] = []
    for future in table.years:
        if future.year <= sale_year:
            continue
        holding = future.year - sale_year
        exit_value = future.total_cv
        projections.append(
            BuyerProjectedIRR(
                surrender_year=future.year,
                holding_years=holding,
                cash_value=exit_value,
                irr=irr(buyer_cash_flows(entry_cost, exit_value, holding)),
                gain=exit_value - entry_cost,
            )
        )

    return SimulationResult(
        sale_year=sale_year,
        found=True,
        base_cash_value=base_cv,
        seller_proceeds=proceeds,
        seller_irr=seller_irr,
        seller_roi=seller_roi,
        seller_cash_flows=s_flows,
        broker_cost=broker_cost,
        buyer_entry_cost=entry_cost,
        broker_profit=broker_profit,
        broker_margin=broker_margin,
        buyer_projected_irrs=projections,
    )


def sweep_sale_years(
    table: PolicyTable, params: TradeParameters, years: Iterable[int] | None = None
) -> list[SellerExitPoint]:
    """
    Seller outcome for each candidate sale year, holding premium and fee fixed.

    Years default to every table year from 2 onwards (a one-year series has no IRR).
    The premium is capped per year with max_seller_premium(). Years missing from
    the table are skipped.
    """
    candidates = list(years) if years is not None else [r.year for r in table.years if r.year >= 2]
    out: list[SellerExitPoint] = []
    for y in candidates:
        if table.row(y) is None:
            continue
        p = params.model_copy(
            update={"sale_year": y, "seller_premium_pct": min(params.seller_premium_pct, max_seller_premium(y))}
        )
        res = run_trade_simulation(table, p)
        out.append(
            SellerExitPoint(
                sale_year=y,
                seller_proceeds=res.seller_proceeds,
                seller_irr=res.seller_irr,
                seller_roi=res.seller_roi,
                buyer_entry_cost=res.buyer_entry_cost,
            )
        )
    return out


def buyer_break_even_year(result: SimulationResult) -> int | None:
    """First surrender year in which the buyer's gain is positive."""
    for row in result.buyer_projected_irrs:
        if row.gain > 0:
            return row.surrender_year
    return None


def buyer_projection_at(result: SimulationResult, holding_years: int) -> BuyerProjectedIRR | None:
    """Projection row for surrender at sale_year + holding_years, if the table reaches it."""
    target = result.sale_year + holding_years
    for row in result.buyer_projected_irrs:
        if row.surrender_year == target:
            return row
    return None
