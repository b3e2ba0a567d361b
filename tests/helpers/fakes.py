"""Fake collaborators for driving the engine deterministically."""

import threading
from collections import deque
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional, Union

from trend_trader.data.models import PricePoint
from trend_trader.errors import FetchError
from trend_trader.ports import OrderConfirmation, OrderSide

START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock whose time only moves when slept or advanced."""

    def __init__(self, start: datetime = START):
        self._now = start
        self._monotonic = 1000.0
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._monotonic

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)
        self._monotonic += seconds


ScriptItem = Union[float, str, Decimal, Exception]


class ScriptedDataSource:
    """
    Serves a fixed sequence of prices per market.

    Each item is a price, or an exception instance to raise for that fetch.
    Snapshots are stamped with the clock's current time. A market whose
    script is exhausted raises FetchError.
    """

    def __init__(self, scripts: dict[str, Iterable[ScriptItem]], clock: FakeClock):
        self.scripts = {market: deque(items) for market, items in scripts.items()}
        self.clock = clock
        self.calls: list[tuple[str, Optional[float]]] = []
        self._lock = threading.Lock()

    def fetch_snapshot(self, market_id: str, timeout: Optional[float] = None) -> PricePoint:
        with self._lock:
            self.calls.append((market_id, timeout))
            script = self.scripts.get(market_id)
            if not script:
                raise FetchError(f"No scripted price for {market_id}", market_id=market_id)
            item = script.popleft()

        if isinstance(item, Exception):
            raise item

        return PricePoint(market_id=market_id, ts=self.clock.now(), price=Decimal(str(item)))


class RecordingSubmitter:
    """
    Order submitter that records every call.

    ``failures`` are raised in order by the first calls; once exhausted every
    order is confirmed.
    """

    def __init__(self, failures: Optional[Iterable[Exception]] = None):
        self.failures = deque(failures or [])
        self.calls: list[dict] = []
        self._counter = 0
        self._lock = threading.Lock()

    def submit(
        self,
        market_id: str,
        side: OrderSide,
        size: Decimal,
        timeout: Optional[float] = None
    ) -> OrderConfirmation:
        with self._lock:
            self.calls.append({"market_id": market_id, "side": side, "size": size, "timeout": timeout})
            if self.failures:
                raise self.failures.popleft()
            self._counter += 1
            order_id = f"live-{self._counter}"

        return OrderConfirmation(
            order_id=order_id,
            market_id=market_id,
            side=side,
            size=size,
            submitted_at=START
        )


def make_points(market_id: str, prices: Iterable[ScriptItem], start: datetime = START,
                step_seconds: float = 5.0) -> list[PricePoint]:
    """Price points at a fixed spacing, oldest first."""
    return [
        PricePoint(
            market_id=market_id,
            ts=start + timedelta(seconds=i * step_seconds),
            price=Decimal(str(price))
        )
        for i, price in enumerate(prices)
    ]


def falling_prices(start: float = 0.60, end: float = 0.40, count: int = 14) -> list[str]:
    """Evenly spaced strictly decreasing prices, as strings."""
    step = (start - end) / (count - 1)
    return [f"{start - i * step:.6f}" for i in range(count)]
