"""
Recoverable collaborator failures.

Fetch and submit failures are isolated to one market and one cycle; the
monitor loop keeps running and the strategy may signal again next tick.
"""

from typing import Optional


class RecoverableError(Exception):
    """Mixin for errors that can be recovered from automatically."""

    def __init__(self, message: str, retry_count: int = 0,
                 max_retries: int = 0, **kwargs):
        super().__init__(message)
        self.retry_count = retry_count
        self.max_retries = max_retries
        self.recoverable = True


class FetchError(RecoverableError):
    """Price snapshot could not be fetched for a market."""

    def __init__(self, message: str, market_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.market_id = market_id


class SubmitError(RecoverableError):
    """Order submission failed; the order is not known to be placed."""

    def __init__(self, message: str, market_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.market_id = market_id


class RetryableSubmitError(SubmitError):
    """Order was rejected before reaching the book and may be resent."""
