"""
Snapshot validation before a price enters a market's window.

Prediction-market contract prices are probabilities, so by default a usable
price lies in [0, 1]. Stale snapshots are rejected so that a stalled feed
repeating an old quote cannot drive decisions.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..errors import MalformedDataError, TemporalDataError
from ..utils.time import calculate_latency, validate_market_time
from .models import PricePoint


class SnapshotValidator:
    """Validates price snapshots against data quality rules."""

    def __init__(
        self,
        max_age_seconds: Optional[float] = 60,
        min_price: Decimal = Decimal("0"),
        max_price: Decimal = Decimal("1")
    ):
        """
        Args:
            max_age_seconds: Reject snapshots older than this; None disables the check
            min_price: Lowest acceptable price (inclusive)
            max_price: Highest acceptable price (inclusive)
        """
        self.max_age_seconds = max_age_seconds
        self.min_price = min_price
        self.max_price = max_price

    def validate(self, point: PricePoint, market_id: str, now: Optional[datetime] = None) -> None:
        """
        Validate a snapshot fetched for ``market_id``.

        Raises:
            MalformedDataError: wrong market, non-finite or out-of-range price
            TemporalDataError: snapshot too old or too far in the future
        """
        if point.market_id != market_id:
            raise MalformedDataError(
                f"Snapshot for {point.market_id} returned when fetching {market_id}",
                context={"market_id": market_id, "snapshot_market_id": point.market_id}
            )

        self._validate_price(point)

        if point.ts.tzinfo is None:
            raise MalformedDataError(
                "Snapshot timestamp must be timezone-aware",
                raw_data=str(point.ts),
                expected_format="UTC datetime",
                context={"market_id": market_id}
            )

        if self.max_age_seconds is not None and not validate_market_time(
            point.ts, max_age_seconds=self.max_age_seconds, now=now
        ):
            raise TemporalDataError(
                f"Stale or future snapshot for {market_id}",
                timestamp=point.ts,
                context={
                    "market_id": market_id,
                    "age_seconds": calculate_latency(point.ts, now),
                    "max_age_seconds": self.max_age_seconds
                }
            )

    def _validate_price(self, point: PricePoint) -> None:
        try:
            price = Decimal(point.price)
        except (InvalidOperation, TypeError, ValueError):
            raise MalformedDataError(
                f"Price is not a number: {point.price!r}",
                raw_data=repr(point.price),
                context={"market_id": point.market_id}
            )

        if not price.is_finite():
            raise MalformedDataError(
                f"Price is not finite: {price}",
                raw_data=str(price),
                context={"market_id": point.market_id}
            )

        if price < self.min_price or price > self.max_price:
            raise MalformedDataError(
                f"Price {price} outside [{self.min_price}, {self.max_price}]",
                raw_data=str(price),
                context={"market_id": point.market_id}
            )
