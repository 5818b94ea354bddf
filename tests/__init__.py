# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_policy_table, make_trade_parameters
"""

from .utils import make_deal_facts, make_policy_table, make_trade_parameters

__all__ = ["make_policy_table", "make_trade_parameters", "make_deal_facts"]
