# tests/unit/test_irr_properties.py

import hypothesis as h
import hypothesis.strategies as st

from policytrade.core.finance.irr import irr, npv

# Keep examples small/fast for CI
h.settings.register_profile("ci", max_examples=60, deadline=None)
h.settings.load_profile("ci")

amounts = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)


@st.composite
def investments(draw):
    """One outlay followed by non-negative returns that at least pay it back."""
    outlay = draw(st.floats(min_value=100.0, max_value=1e6))
    rest = draw(st.lists(st.floats(min_value=0.0, max_value=1e6), min_size=1, max_size=11))
    h.assume(sum(rest) >= outlay)
    return [-outlay] + rest


@h.given(flows=investments())
def test_returned_rate_is_a_root(flows):
    r = irr(flows)
    if r is not None:
        assert -1.0 < r <= 10.0
        assert abs(npv(flows, r)) <= 1e-6 * abs(flows[0])


@h.given(flows=st.lists(amounts, min_size=1, max_size=12), guess=st.floats(min_value=-0.5, max_value=1.0))
def test_deterministic(flows, guess):
    a = irr(flows, guess)
    b = irr(flows, guess)
    if a is None:
        assert b is None
    else:
        assert b is not None and a.hex() == b.hex()


@h.given(
    entry=st.floats(min_value=100.0, max_value=1e6),
    ratio=st.floats(min_value=1.01, max_value=5.0),
    bump=st.floats(min_value=1.01, max_value=2.0),
    periods=st.integers(min_value=1, max_value=10),
)
def test_larger_inflow_gives_larger_rate(entry, ratio, bump, periods):
    def lump(exit_value: float) -> list[float]:
        return [-entry] + [0.0] * (periods - 1) + [exit_value]

    low = irr(lump(entry * ratio))
    high = irr(lump(entry * ratio * bump))
    assert low is not None and high is not None
    assert high > low


@h.given(
    entry=st.floats(min_value=100.0, max_value=1e6),
    ratio=st.floats(min_value=1.0, max_value=4.0),
    periods=st.integers(min_value=1, max_value=15),
)
def test_lump_sum_closed_form(entry, ratio, periods):
    flows = [-entry] + [0.0] * (periods - 1) + [entry * ratio]
    r = irr(flows)
    assert r is not None
    assert abs(r - (ratio ** (1.0 / periods) - 1.0)) < 1e-6
