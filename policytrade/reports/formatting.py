# policytrade/reports/formatting.py
from __future__ import annotations

import math

NOT_AVAILABLE = "N/A"

_SYMBOLS = {"HKD": "HK$", "USD": "$", "SGD": "S$", "GBP": "£", "EUR": "€"}


def format_currency(x: float, currency: str = "HKD") -> str:
    """
    Format an amount with thousands separators and no decimals.

    Example:
        1234567.4 -> HK$1,234,567
        -2000     -> -HK$2,000
    """
    symbol = _SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    rounded = round(x)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.0f}"


def format_percent(x: float | None) -> str:
    """
    Format a fraction as a percentage with two decimals.

    None or NaN (an IRR that did not converge) renders as "N/A", never 0%.

    Example:
        0.065 -> 6.50%
    """
    if x is None or math.isnan(x):
        return NOT_AVAILABLE
    return f"{x * 100:.2f}%"
