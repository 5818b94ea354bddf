# tests/unit/test_inputs_loader.py

from __future__ import annotations

import json

import pytest

from policytrade.inputs.inputs import (
    AppInputs,
    InputsLoader,
    load_inputs,
    load_policy_table,
    sample_policy_table,
)
from tests.utils import make_policy_table


def _write(path, payload) -> str:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_sample_table_is_bundled():
    table = sample_policy_table()
    assert table.currency == "HKD"
    assert table.yearly_premium == 200_000.0
    assert table.payment_years == 5
    assert table.first_year == 1
    assert table.last_year == 40
    assert table.row(5).total_premium_paid == 1_000_000.0
    assert table.row(41) is None


def test_structured_shape_with_inline_policy(tmp_path):
    policy = make_policy_table(last_year=12).model_dump()
    path = _write(
        tmp_path / "inputs.json",
        {"policy": policy, "trade": {"sale_year": 8}, "run": {"out": "x.md", "analyze": True, "analyst": "MOCK"}},
    )
    cfg = load_inputs(path)
    assert cfg.policy.last_year == 12
    assert cfg.trade.sale_year == 8
    assert cfg.trade.seller_premium_pct == 5.0
    assert cfg.run.out == "x.md"
    assert cfg.run.analyze is True
    assert cfg.run.analyst == "mock"


def test_policy_reference_resolved_relative_to_inputs(tmp_path):
    _write(tmp_path / "policy.json", make_policy_table(last_year=9).model_dump())
    path = _write(tmp_path / "inputs.json", {"policy": "policy.json", "trade": {"sale_year": 4}})
    cfg = InputsLoader().load(path)
    assert cfg.policy.last_year == 9


def test_legacy_shape_wraps_trade_parameters(tmp_path):
    path = _write(tmp_path / "trade.json", {"sale_year": 12, "seller_premium_pct": 3, "broker_fee_pct": 1.5})
    cfg = InputsLoader().load(path)
    assert cfg.trade.sale_year == 12
    assert cfg.trade.broker_fee_pct == 1.5
    # falls back to the bundled table
    assert cfg.policy.last_year == 40


def test_load_json_string():
    cfg = InputsLoader().load_json('{"trade": {"sale_year": 15}}')
    assert cfg.trade.sale_year == 15
    with pytest.raises(ValueError):
        InputsLoader().load_json("{not json")
    with pytest.raises(ValueError):
        InputsLoader().load_json("[1, 2]")


def test_validation_errors_are_value_errors(tmp_path):
    path = _write(tmp_path / "bad.json", {"trade": {"sale_year": 0}})
    with pytest.raises(ValueError, match="validation failed"):
        InputsLoader().load(path)

    path = _write(tmp_path / "fee.json", {"trade": {"broker_fee_pct": 12}})
    with pytest.raises(ValueError):
        InputsLoader().load(path)

    path = _write(tmp_path / "analyst.json", {"run": {"analyst": "oracle"}})
    with pytest.raises(ValueError, match="Unknown analyst"):
        InputsLoader().load(path)


def test_duplicate_policy_years_rejected(tmp_path):
    policy = make_policy_table(last_year=3).model_dump()
    policy["years"].append(policy["years"][0])
    path = _write(tmp_path / "dup.json", policy)
    with pytest.raises(ValueError, match="validation failed"):
        load_policy_table(path)


def test_missing_and_unsupported_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        InputsLoader().load(tmp_path / "nope.json")
    yaml_path = tmp_path / "inputs.yaml"
    yaml_path.write_text("trade: {}", encoding="utf-8")
    with pytest.raises(ValueError, match="only .json"):
        InputsLoader().load(yaml_path)
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        InputsLoader().load(broken)


def test_default_search_order(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        InputsLoader().load()
    _write(tmp_path / "config.json", {"trade": {"sale_year": 11}})
    assert InputsLoader().load().trade.sale_year == 11


def test_env_overrides(tmp_path, monkeypatch):
    path = _write(tmp_path / "inputs.json", {"trade": {"sale_year": 8}})
    monkeypatch.setenv("POLICYTRADE_OUT", "env.md")
    monkeypatch.setenv("POLICYTRADE_SALE_YEAR", "14")
    monkeypatch.setenv("POLICYTRADE_ANALYZE", "yes")
    monkeypatch.setenv("POLICYTRADE_ANALYST", "openai")
    cfg = InputsLoader().load(path)
    assert cfg.run.out == "env.md"
    assert cfg.trade.sale_year == 14
    assert cfg.run.analyze is True
    assert cfg.run.analyst == "openai"


def test_bad_env_values_are_ignored(tmp_path, monkeypatch):
    path = _write(tmp_path / "inputs.json", {"trade": {"sale_year": 8}})
    monkeypatch.setenv("POLICYTRADE_SALE_YEAR", "soon")
    monkeypatch.setenv("POLICYTRADE_ANALYST", "crystal-ball")
    cfg = InputsLoader().load(path)
    assert cfg.trade.sale_year == 8
    assert cfg.run.analyst == "mock"


def test_with_overrides_is_non_destructive(tmp_path):
    base = AppInputs(policy=make_policy_table())
    loader = InputsLoader()
    assert loader.with_overrides(base) is base

    table_path = _write(tmp_path / "p.json", make_policy_table(last_year=7).model_dump())
    new = loader.with_overrides(
        base, out="o.md", sale_year=6, seller_premium_pct=20, broker_fee_pct=3, analyze=True, analyst="Mock", policy=table_path
    )
    assert new.run.out == "o.md"
    assert new.trade.sale_year == 6
    assert new.trade.seller_premium_pct == 20
    assert new.run.analyst == "mock"
    assert new.policy.last_year == 7
    # original untouched
    assert base.run.out == "trade_analysis.md"
    assert base.trade.sale_year == 10
    assert base.policy.last_year == 20


def test_with_overrides_validates_trade_values():
    with pytest.raises(ValueError, match="Invalid trade parameters"):
        InputsLoader().with_overrides(AppInputs(policy=make_policy_table()), broker_fee_pct=11)
