# policytrade/core/finance/__init__.py

from .engine import (
    buyer_break_even_year,
    buyer_projection_at,
    max_seller_premium,
    run_trade_simulation,
    sweep_sale_years,
)
from .irr import ConvergenceFailure, irr, npv, npv_derivative, solve_irr

__all__ = [
    "run_trade_simulation",
    "sweep_sale_years",
    "buyer_break_even_year",
    "buyer_projection_at",
    "max_seller_premium",
    "ConvergenceFailure",
    "irr",
    "npv",
    "npv_derivative",
    "solve_irr",
]
