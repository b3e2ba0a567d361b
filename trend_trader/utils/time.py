"""
Time semantics utilities and the polling scheduler.

Snapshot timestamps are authoritative for ordering price windows; the clock
is used for the polling schedule, staleness checks and position open times.
Both the clock and the ticker built on it are injectable so the monitor loop
can be driven deterministically in tests.
"""

import time
from datetime import datetime, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Source of wall-clock time and sleeping."""

    def now(self) -> datetime:
        ...

    def monotonic(self) -> float:
        ...

    def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    """Real clock backed by the time module."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class Ticker:
    """
    Fixed-interval schedule over a clock.

    Deadlines are computed from the first tick so a slow cycle does not push
    every later cycle back; if a cycle overruns one or more intervals the
    missed deadlines are skipped rather than run back to back.
    """

    def __init__(self, interval_ms: int, clock: Optional[Clock] = None):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.interval = interval_ms / 1000.0
        self.clock = clock or SystemClock()
        self._next_deadline: Optional[float] = None
        self.ticks = 0
        self.skipped = 0

    def wait_next(self) -> None:
        """Block until the next tick is due."""
        now = self.clock.monotonic()

        if self._next_deadline is None:
            self._next_deadline = now + self.interval
            self.ticks += 1
            return

        delay = self._next_deadline - now
        if delay > 0:
            self.clock.sleep(delay)
            self._next_deadline += self.interval
        else:
            missed = int(-delay // self.interval)
            self.skipped += missed
            self._next_deadline += self.interval * (missed + 1)

        self.ticks += 1

    def reset(self) -> None:
        self._next_deadline = None
        self.ticks = 0
        self.skipped = 0


def calculate_latency(market_ts: datetime, wall_clock_ts: Optional[datetime] = None) -> float:
    """
    Calculate latency between a snapshot timestamp and wall-clock receive time.

    Args:
        market_ts: Snapshot timestamp
        wall_clock_ts: Wall-clock receive time, defaults to now

    Returns:
        Latency in seconds (positive means the snapshot is older)
    """
    if wall_clock_ts is None:
        wall_clock_ts = datetime.now(timezone.utc)

    return (wall_clock_ts - market_ts).total_seconds()


def validate_market_time(
    market_ts: datetime,
    max_age_seconds: float = 60,
    now: Optional[datetime] = None,
    max_skew_seconds: float = 30
) -> bool:
    """
    Validate that a snapshot timestamp is reasonable (not too old/future).

    Args:
        market_ts: Snapshot timestamp to validate
        max_age_seconds: Maximum age in seconds
        now: Reference time, defaults to wall-clock now
        max_skew_seconds: Allowed clock skew into the future

    Returns:
        True if timestamp is valid, False otherwise
    """
    age_seconds = calculate_latency(market_ts, now)

    if age_seconds > max_age_seconds:
        return False

    if age_seconds < -max_skew_seconds:
        return False

    return True


def format_market_time(market_ts: datetime) -> str:
    """Format a timestamp as ISO8601 for logs and journals."""
    return market_ts.isoformat()

