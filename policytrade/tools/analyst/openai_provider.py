# policytrade/tools/analyst/openai_provider.py
"""
OpenAI Deal Analyst

Purpose
-------
Production `DealAnalyst` backed by an OpenAI text model. Sends the rendered
trade prompt and returns the model's Markdown commentary.

Environment
-----------
OPENAI_API_KEY              : required
POLICYTRADE_AI_MODEL        : default "gpt-4o-mini"
POLICYTRADE_AI_TIMEOUT_S    : default "30"
POLICYTRADE_AI_MAX_RETRIES  : default "2"
"""

from __future__ import annotations

import os
import time
from typing import Any

from policytrade.schemas.models import DealFacts

from .debug_log import get_debug_logger, log_raw_preview, redact
from .provider_base import DealAnalyst, build_prompt


class OpenAIDealAnalyst(DealAnalyst):
    name = "openai"

    def __init__(self, client: Any | None = None) -> None:
        if client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise RuntimeError("OPENAI_API_KEY not set for OpenAIDealAnalyst.")
            try:
                from openai import OpenAI
            except ImportError as e:
                raise RuntimeError("OpenAI SDK not available. Install `openai>=1.0`.") from e
            client = OpenAI(api_key=api_key)
        self._client = client

        self._model = os.getenv("POLICYTRADE_AI_MODEL", "gpt-4o-mini")
        self._timeout_s = float(os.getenv("POLICYTRADE_AI_TIMEOUT_S", "30"))
        self._max_retries = int(os.getenv("POLICYTRADE_AI_MAX_RETRIES", "2"))

    def summarize(self, facts: DealFacts) -> str:
        prompt = build_prompt(facts)

        last_err: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                text = self._call(prompt)
                log_raw_preview(text, "analysis")
                return text
            except Exception as e:
                last_err = e
                # Reported once by the caller; attempts only go to the debug log
                get_debug_logger().debug(redact(f"OpenAI analysis attempt {attempt + 1} failed: {e!r}"))
                if attempt < self._max_retries:
                    time.sleep(min(0.5 * (attempt + 1), 2.0))
        assert last_err is not None
        raise last_err

    # ---------- OpenAI calls ----------
    def _call(self, prompt: str) -> str:
        if hasattr(self._client, "responses"):
            out = self._client.responses.create(
                model=self._model,
                input=prompt,
                timeout=self._timeout_s,
            )
            txt = getattr(out, "output_text", None)
            return txt if isinstance(txt, str) else ""

        resp = self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            timeout=self._timeout_s,
        )
        return resp.choices[0].message.content or ""
