"""
Data quality error classifications for price processing.

These exceptions describe price data that cannot support a decision this
cycle. They are always handled gracefully: the strategy treats them as a
neutral signal and the monitor skips the market until the next tick.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class TemporalDataError(DataQualityError):
    """Stale or out-of-order timestamps in price data."""

    def __init__(self, message: str, timestamp: Optional[Any] = None,
                 expected_after: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.expected_after = expected_after


class MalformedDataError(DataQualityError):
    """Data exists but cannot be used as a price."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format


class InsufficientDataError(DataQualityError):
    """Not enough price history for an indicator calculation."""

    def __init__(self, message: str, required_count: Optional[int] = None,
                 available_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required_count = required_count
        self.available_count = available_count
