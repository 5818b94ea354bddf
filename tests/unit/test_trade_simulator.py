import pytest

from policytrade.agents.trade_simulator import normalize_parameters, simulate_trade
from policytrade.schemas.models import TradeParameters
from tests.utils import cash_value_for


def test_late_sale_premium_is_capped_at_ten_percent():
    params = TradeParameters(sale_year=10, seller_premium_pct=30, broker_fee_pct=2)
    out = normalize_parameters(params)
    assert out.seller_premium_pct == 10.0
    assert out.broker_fee_pct == 2.0
    # caller object untouched
    assert params.seller_premium_pct == 30


def test_early_sale_allows_large_premium():
    params = TradeParameters(sale_year=6, seller_premium_pct=45)
    assert normalize_parameters(params) is params
    capped = normalize_parameters(TradeParameters(sale_year=3, seller_premium_pct=75))
    assert capped.seller_premium_pct == 60.0


def test_broker_fee_clamped_even_when_unvalidated():
    params = TradeParameters.model_construct(sale_year=10, seller_premium_pct=5.0, broker_fee_pct=25.0)
    assert normalize_parameters(params).broker_fee_pct == 10.0


def test_simulate_trade_uses_clamped_premium(policy_table):
    res = simulate_trade(policy_table, TradeParameters(sale_year=12, seller_premium_pct=50, broker_fee_pct=0))
    assert res.seller_proceeds == pytest.approx(cash_value_for(12) * 1.10)
