"""
System failure error classifications.

These exceptions represent broken invariants or unusable setup. Position
errors must never occur while the dispatcher is the only writer of position
state; when they do they are logged as internal logic errors.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PositionStateError(SystemFailureError):
    """Position state transition that would break one-position-per-market."""

    def __init__(self, message: str, market_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.market_id = market_id


class AlreadyOpenError(PositionStateError):
    """An open was requested for a market that already holds a position."""


class NoPositionError(PositionStateError):
    """A close was requested for a market with no open position."""


class ConfigurationError(SystemFailureError):
    """Invalid or repeated engine configuration."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
