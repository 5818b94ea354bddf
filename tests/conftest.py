# tests/conftest.py
from __future__ import annotations

import os
import random

import pytest

from policytrade.inputs.inputs import sample_policy_table
from tests.utils import make_policy_table, make_trade_parameters


# -------- Global deterministic seed --------
@pytest.fixture(autouse=True, scope="session")
def _seed_session():
    random.seed(1337)
    os.environ.setdefault("PYTHONHASHSEED", "0")
    yield


# -------- Isolated environment --------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Drop POLICYTRADE_* / OPENAI_* overrides and keep debug logs out of the repo."""
    for key in list(os.environ):
        if key.startswith("POLICYTRADE_") or key.startswith("OPENAI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("POLICYTRADE_LOG_DIR", str(tmp_path / "logs"))
    yield


# -------- Policy fixtures --------
@pytest.fixture
def policy_table():
    """Synthetic 20-year table: 100/yr for 5 years, cash value grows 5%/yr once paid up."""
    return make_policy_table()


@pytest.fixture
def sample_table():
    """The bundled 5-pay whole-life illustration."""
    return sample_policy_table()


@pytest.fixture
def trade_params():
    """Factory for trade parameters (overridable)."""

    def _factory(**overrides):
        return make_trade_parameters(**overrides)

    return _factory

