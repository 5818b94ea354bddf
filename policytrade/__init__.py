"""PolicyTrade Analyzer: secondary-market life-insurance trade simulator."""

__version__ = "1.0.0"
