"""
Deal analyst tools package

Re-exports the provider interface and implementations, so callers can do:

    from policytrade.tools.analyst import DealAnalyst, MockDealAnalyst, OpenAIDealAnalyst
"""

from __future__ import annotations

from .mock_provider import MockDealAnalyst
from .openai_provider import OpenAIDealAnalyst
from .provider_base import DealAnalyst, build_prompt

__all__ = [
    "DealAnalyst",
    "MockDealAnalyst",
    "OpenAIDealAnalyst",
    "build_prompt",
]
