"""Market data sources."""

from .clob import ClobPriceSource

__all__ = ["ClobPriceSource"]
