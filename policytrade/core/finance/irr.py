# policytrade/core/finance/irr.py
from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

CashFlows = Iterable[float]

MAX_ITERATIONS = 1000
TOLERANCE = 1e-7
FLAT_DERIVATIVE_NUDGE = 0.001
DIVERGENCE_LIMIT = 10.0
DEFAULT_GUESS = 0.1


class ConvergenceFailure(RuntimeError):
    """
    Raised when the Newton-Raphson search cannot find a root.

    Attributes:
        reason:     "diverged" (a Newton step left the ±1000% band) or
                    "max_iterations" (iteration budget exhausted).
        iterations: Number of iterations performed before giving up.
        last_rate:  Rate held by the solver when it stopped (may be NaN).
    """

    def __init__(self, reason: str, *, iterations: int, last_rate: float) -> None:
        super().__init__(f"IRR did not converge ({reason}) after {iterations} iterations; last rate {last_rate!r}")
        self.reason = reason
        self.iterations = iterations
        self.last_rate = last_rate


def _discount_factor(base: float, t: int) -> float:
    """(1 + rate) ** t, saturating to inf when the power leaves the float range."""
    try:
        return base**t
    except OverflowError:
        # The term's contribution is ±0.0, as under plain IEEE-754 arithmetic
        return math.inf


def _npv_and_derivative(amounts: Sequence[float], rate: float) -> tuple[float, float]:
    """Return (NPV, dNPV/drate). A zero discount factor yields NaNs."""
    npv_val = 0.0
    d_npv = 0.0
    base = 1.0 + rate
    try:
        for t, cf in enumerate(amounts):
            discount = _discount_factor(base, t)
            npv_val += cf / discount
            d_npv -= (t * cf) / (discount * base)
    except ZeroDivisionError:
        return math.nan, math.nan
    return npv_val, d_npv


def npv(cash_flows: CashFlows, rate: float) -> float:
    """Net present value of periodic cash flows; period 0 is not discounted."""
    return _npv_and_derivative([float(x) for x in cash_flows], rate)[0]


def npv_derivative(cash_flows: CashFlows, rate: float) -> float:
    """First derivative of NPV with respect to the rate."""
    return _npv_and_derivative([float(x) for x in cash_flows], rate)[1]


def solve_irr(cash_flows: CashFlows, guess: float = DEFAULT_GUESS) -> float:
    """
    Compute the periodic IRR with Newton-Raphson over NPV(rate).

    Accepts an iterable of cash amounts at integer periods 0..n-1, e.g.
    [-1000, 200, 200, ...]. Negative values are outflows.

    Iteration rules:
      - |NPV| < 1e-7            -> converged, return the rate
      - |dNPV| < 1e-7           -> flat spot: nudge the rate by +0.001, no Newton step
      - |Newton step| > 10      -> diverged (implied rate beyond ±1000%)
      - 1000 iterations reached -> give up

    A discount factor beyond the float range counts as inf, so its term is 0.
    NaN intermediates (zero discount factor) never satisfy the convergence
    test; they simply run the loop out.

    Returns:
        The rate as a decimal (0.12 for 12%).

    Raises:
        ValueError: if there are no cash flows.
        ConvergenceFailure: if no root is found.
    """
    amounts = [float(x) for x in cash_flows]
    if not amounts:
        raise ValueError("cash_flows must contain at least one period")

    rate = float(guess)
    for i in range(MAX_ITERATIONS):
        f, df = _npv_and_derivative(amounts, rate)

        if abs(f) < TOLERANCE:
            return rate

        if abs(df) < TOLERANCE:
            rate += FLAT_DERIVATIVE_NUDGE
            continue

        new_rate = rate - f / df
        if abs(new_rate) > DIVERGENCE_LIMIT:
            logger.debug("IRR diverged at iteration %d: %r -> %r", i, rate, new_rate)
            raise ConvergenceFailure("diverged", iterations=i + 1, last_rate=new_rate)

        rate = new_rate

    logger.debug("IRR exhausted %d iterations; last rate %r", MAX_ITERATIONS, rate)
    raise ConvergenceFailure("max_iterations", iterations=MAX_ITERATIONS, last_rate=rate)


def irr(cash_flows: CashFlows, guess: float = DEFAULT_GUESS) -> float | None:
    """
    Compute periodic IRR, returning None when the solver does not converge.

    None means "not available" and must never be displayed as 0%.
    """
    try:
        return solve_irr(cash_flows, guess)
    except ConvergenceFailure:
        return None
