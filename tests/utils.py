# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from policytrade.schemas.models import (
    DealFacts,
    PolicyTable,
    PolicyYear,
    TradeParameters,
)

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_YEARLY_PREMIUM = 100.0
DEFAULT_PAYMENT_YEARS = 5
DEFAULT_LAST_YEAR = 20
# Cash value at the end of the payment period; grows at DEFAULT_CV_GROWTH afterwards.
DEFAULT_CV_AT_PAID_UP = 450.0
DEFAULT_CV_GROWTH = 0.05


# -----------------------------
# Policy factories
# -----------------------------


def cash_value_for(year: int, *, paid_up_cv: float = DEFAULT_CV_AT_PAID_UP, growth: float = DEFAULT_CV_GROWTH) -> float:
    """Linear ramp during the payment period, then compound growth."""
    if year <= DEFAULT_PAYMENT_YEARS:
        return paid_up_cv * year / DEFAULT_PAYMENT_YEARS
    return paid_up_cv * (1.0 + growth) ** (year - DEFAULT_PAYMENT_YEARS)


def make_policy_table(
    last_year: int = DEFAULT_LAST_YEAR,
    *,
    yearly_premium: float = DEFAULT_YEARLY_PREMIUM,
    payment_years: int = DEFAULT_PAYMENT_YEARS,
    growth: float = DEFAULT_CV_GROWTH,
    skip_years: tuple[int, ...] = (),
    name: str = "Test Policy",
) -> PolicyTable:
    rows = [
        PolicyYear(
            year=y,
            premium_paid_yearly=yearly_premium if y <= payment_years else 0.0,
            total_premium_paid=yearly_premium * min(y, payment_years),
            guaranteed_cv=0.8 * cash_value_for(y, growth=growth),
            total_cv=cash_value_for(y, growth=growth),
        )
        for y in range(1, last_year + 1)
        if y not in skip_years
    ]
    return PolicyTable(
        name=name,
        currency="HKD",
        yearly_premium=yearly_premium,
        payment_years=payment_years,
        years=rows,
    )


def make_trade_parameters(sale_year: int = 10, seller_premium_pct: float = 5.0, broker_fee_pct: float = 2.0) -> TradeParameters:
    return TradeParameters(sale_year=sale_year, seller_premium_pct=seller_premium_pct, broker_fee_pct=broker_fee_pct)


def make_deal_facts(**overrides: Any) -> DealFacts:
    base: dict[str, Any] = {
        "policy_name": "Test Policy",
        "currency": "HKD",
        "original_principal": 1_000_000.0,
        "sale_year": 10,
        "seller_proceeds": 1_228_578.0,
        "seller_irr": 0.035,
        "seller_roi": 0.2286,
        "broker_profit": 24_572.0,
        "buyer_entry_cost": 1_253_149.0,
        "buyer_irr_5y": 0.046,
        "buyer_irr_10y": 0.049,
        "reference_cash_values": {10: 1_170_074.0, 11: 1_230_918.0},
    }
    base.update(overrides)
    return DealFacts(**base)


# -----------------------------
# OpenAI client fakes (no network)
# -----------------------------


class FakeResponses:
    """Mimics client.responses.create(); pops scripted outcomes in order."""

    def __init__(self, outcomes: list[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(output_text=outcome)


def make_fake_openai_client(*outcomes: Any) -> SimpleNamespace:
    return SimpleNamespace(responses=FakeResponses(list(outcomes)))
