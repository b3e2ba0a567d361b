"""
Canonical data models for price observations.

This module defines the immutable price snapshot and the bounded rolling
window each market keeps for indicator calculations.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional

from trend_trader.errors import TemporalDataError


class Side(str, Enum):
    """Position side."""
    LONG = "long"
    SHORT = "short"

    def opposite(self) -> "Side":
        return Side.SHORT if self is Side.LONG else Side.LONG


@dataclass(frozen=True)
class PricePoint:
    """Single price observation for one market."""
    market_id: str
    ts: datetime                        # UTC snapshot timestamp
    price: Decimal
    volume: Optional[Decimal] = None


class PriceWindow:
    """
    Bounded FIFO of price points for one market.

    Holds at most ``capacity`` points ordered strictly by timestamp; the
    oldest point is evicted when a new one arrives at capacity.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"Window capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._points: deque[PricePoint] = deque(maxlen=capacity)

    def append(self, point: PricePoint) -> None:
        """
        Append a point, evicting the oldest one at capacity.

        Raises:
            TemporalDataError: if the point is not newer than the latest point.
                The window is left unchanged.
        """
        latest = self.latest
        if latest is not None and point.ts <= latest.ts:
            raise TemporalDataError(
                f"Out-of-order price for {point.market_id}: {point.ts.isoformat()} "
                f"is not after {latest.ts.isoformat()}",
                timestamp=point.ts,
                expected_after=latest.ts,
                context={"market_id": point.market_id}
            )
        self._points.append(point)

    def prices(self) -> list[float]:
        """Prices as floats, oldest first."""
        return [float(p.price) for p in self._points]

    @property
    def latest(self) -> Optional[PricePoint]:
        return self._points[-1] if self._points else None

    @property
    def is_full(self) -> bool:
        return len(self._points) == self.capacity

    def clear(self) -> None:
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self._points)
