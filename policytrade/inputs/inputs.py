# policytrade/inputs/inputs.py
"""
Inputs loader for the PolicyTrade Analyzer.

Goals
-----
- Deterministic, file-first inputs with validation via Pydantic.
- Accept a bare TradeParameters JSON (legacy shape) or the structured shape
  that bundles the policy table, trade knobs and run options.
- Minimal environment-variable overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Legacy (root = TradeParameters)
   { "sale_year": 10, "seller_premium_pct": 5, "broker_fee_pct": 2 }

2) Structured (root = AppInputs)
   {
     "policy": { ... PolicyTable ... },          (optional; bundled sample if omitted)
     "trade":  { ... TradeParameters ... },
     "run": {
       "out": "trade_analysis.md",
       "analyze": false,
       "analyst": "mock"
     }
   }

Environment overrides (optional)
--------------------------------
- POLICYTRADE_OUT        -> AppInputs.run.out
- POLICYTRADE_SALE_YEAR  -> AppInputs.trade.sale_year (int)
- POLICYTRADE_ANALYZE    -> AppInputs.run.analyze (1/true/yes/on)
- POLICYTRADE_ANALYST    -> AppInputs.run.analyst ("mock" | "openai")

Public API
----------
- class InputsLoader:
    - load(path: str | Path | None) -> AppInputs
    - load_json(text: str) -> AppInputs
    - with_overrides(cfg, **kwargs) -> AppInputs (non-destructive copies)
- function load_inputs(path) -> AppInputs
- function load_policy_table(path) -> PolicyTable
- function sample_policy_table() -> PolicyTable
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError

from policytrade.schemas.models import PolicyTable, TradeParameters

SAMPLE_POLICY_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_policy.json"

ANALYSTS = ("mock", "openai")
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling the analysis run."""

    out: str = Field("trade_analysis.md", description="Path to write the Markdown report.")
    analyze: bool = Field(False, description="Request AI commentary on the trade.")
    analyst: str = Field("mock", description='Analyst provider: "mock" or "openai".')
    sweep: bool = Field(True, description="Include the seller exit-timing sweep in the report.")


class AppInputs(BaseModel):
    """
    Full input payload.

    Attributes:
        policy: Policy illustration table (bundled sample when not supplied).
        trade:  The trade knobs (sale year, seller premium, broker fee).
        run:    Non-financial, runtime options for the current execution.
    """

    policy: PolicyTable = Field(default_factory=lambda: sample_policy_table())
    trade: TradeParameters = TradeParameters()
    run: RunOptions = RunOptions()


# ----------------------------
# Policy tables
# ----------------------------


def _read_json_file(p: Path) -> dict[str, Any]:
    if p.suffix.lower() != ".json":
        raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
    try:
        return cast(dict[str, Any], json.loads(p.read_text(encoding="utf-8")))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {p}: {e}") from e


def load_policy_table(path: str | Path) -> PolicyTable:
    """Load and validate a policy illustration table from JSON."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Policy table not found: {p}")
    try:
        return PolicyTable.model_validate(_read_json_file(p))
    except ValidationError as e:
        raise ValueError(f"Policy table validation failed:\n{e}") from e


def sample_policy_table() -> PolicyTable:
    """Bundled demo table: 5-pay participating whole life, HKD 1,000,000 total premium."""
    return load_policy_table(SAMPLE_POLICY_PATH)


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Default search (when path=None):
        1) ./data/sample/inputs.json
        2) ./config.json
    """

    env_prefix: str = "POLICYTRADE_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppInputs:
        """
        Load inputs from a JSON file (path). If path is None, try defaults.

        A "policy" value may also be a string path to a separate table file,
        resolved relative to the inputs file.
        """
        p = self._resolve_path(path)
        raw = _read_json_file(p)
        data = self._maybe_translate_legacy(raw)
        data = self._resolve_policy_ref(data, base_dir=p.parent)
        cfg = self._parse_root(data)
        return self._apply_env_overrides(cfg)

    def load_json(self, text: str) -> AppInputs:
        """Load inputs from a JSON string (legacy or structured shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Inputs payload must be a JSON object.")
        data = self._maybe_translate_legacy(raw)
        data = self._resolve_policy_ref(data, base_dir=Path.cwd())
        cfg = self._parse_root(data)
        return self._apply_env_overrides(cfg)

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        sale_year: int | None = None,
        seller_premium_pct: float | None = None,
        broker_fee_pct: float | None = None,
        analyze: bool | None = None,
        analyst: str | None = None,
        policy: str | Path | None = None,
    ) -> AppInputs:
        """
        Return a *new* AppInputs with provided non-null overrides applied.
        Does not mutate the original instance.
        """
        run_updates: dict[str, Any] = {}
        if out is not None:
            run_updates["out"] = out
        if analyze is not None:
            run_updates["analyze"] = analyze
        if analyst is not None:
            run_updates["analyst"] = self._normalize_analyst(analyst)

        trade_updates: dict[str, Any] = {}
        if sale_year is not None:
            trade_updates["sale_year"] = sale_year
        if seller_premium_pct is not None:
            trade_updates["seller_premium_pct"] = seller_premium_pct
        if broker_fee_pct is not None:
            trade_updates["broker_fee_pct"] = broker_fee_pct

        updates: dict[str, Any] = {}
        if run_updates:
            updates["run"] = cfg.run.model_copy(update=run_updates)
        if trade_updates:
            # Re-validate so CLI values obey the same bounds as file values
            try:
                updates["trade"] = TradeParameters.model_validate({**cfg.trade.model_dump(), **trade_updates})
            except ValidationError as e:
                raise ValueError(f"Invalid trade parameters:\n{e}") from e
        if policy is not None:
            updates["policy"] = load_policy_table(policy)

        if not updates:
            return cfg
        return cfg.model_copy(update=updates)

    # ---------- Internals ----------

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        for candidate in (Path("data/sample/inputs.json"), Path("config.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. Looked for ./data/sample/inputs.json and ./config.json."
        )

    def _maybe_translate_legacy(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Accept TradeParameters at the root and wrap it into the structured shape."""
        if any(k in raw for k in ("trade", "policy", "run")):
            return raw
        return {"trade": raw}

    def _resolve_policy_ref(self, data: dict[str, Any], *, base_dir: Path) -> dict[str, Any]:
        policy = data.get("policy")
        if isinstance(policy, str):
            ref = Path(policy)
            if not ref.is_absolute():
                ref = base_dir / ref
            return {**data, "policy": load_policy_table(ref)}
        return data

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        try:
            cfg = AppInputs.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e
        analyst = self._normalize_analyst(cfg.run.analyst)
        if analyst != cfg.run.analyst:
            cfg = cfg.model_copy(update={"run": cfg.run.model_copy(update={"analyst": analyst})})
        return cfg

    def _normalize_analyst(self, name: str) -> str:
        normalized = name.strip().lower()
        if normalized not in ANALYSTS:
            raise ValueError(f"Unknown analyst {name!r}; expected one of {', '.join(ANALYSTS)}.")
        return normalized

    def _apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        """Apply light, optional overrides from environment variables."""
        prefix = self.env_prefix
        run_updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            run_updates["out"] = out

        analyze = os.getenv(f"{prefix}ANALYZE", "").strip().lower()
        if analyze in _TRUTHY:
            run_updates["analyze"] = True
        elif analyze in _FALSY:
            run_updates["analyze"] = False

        analyst = os.getenv(f"{prefix}ANALYST", "").strip().lower()
        if analyst in ANALYSTS:
            run_updates["analyst"] = analyst

        trade_new = cfg.trade
        sale_year = os.getenv(f"{prefix}SALE_YEAR")
        if sale_year:
            try:
                year = int(sale_year)
            except ValueError:
                # Ignore bad value; keep validated sale year
                year = 0
            if year >= 1:
                trade_new = cfg.trade.model_copy(update={"sale_year": year})

        if not run_updates and trade_new is cfg.trade:
            return cfg

        return cfg.model_copy(update={"run": cfg.run.model_copy(update=run_updates), "trade": trade_new})


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)
