"""
Error classification for the trading decision engine.

This module provides a structured exception hierarchy for the failures met
while fetching prices, computing indicators, tracking positions and
submitting orders.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MalformedDataError,
    InsufficientDataError,
)
from .system_failures import (
    SystemFailureError,
    PositionStateError,
    AlreadyOpenError,
    NoPositionError,
    ConfigurationError,
)
from .recovery import (
    RecoverableError,
    FetchError,
    SubmitError,
    RetryableSubmitError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MalformedDataError",
    "InsufficientDataError",
    # System Failures
    "SystemFailureError",
    "PositionStateError",
    "AlreadyOpenError",
    "NoPositionError",
    "ConfigurationError",
    # Recovery Categories
    "RecoverableError",
    "FetchError",
    "SubmitError",
    "RetryableSubmitError",
]
