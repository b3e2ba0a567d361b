"""
Interfaces to the outside world.

The market data source and order submitter are opaque capabilities supplied
by the caller; the engine only depends on these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Protocol

from .data.models import PricePoint


class OrderSide(str, Enum):
    """Exchange order side."""
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class OrderConfirmation:
    """Acknowledgement that an order was accepted."""
    order_id: str
    market_id: str
    side: OrderSide
    size: Decimal
    submitted_at: datetime
    price: Optional[Decimal] = None


class MarketDataSource(Protocol):
    def fetch_snapshot(self, market_id: str, timeout: Optional[float] = None) -> PricePoint:
        """
        Fetch the latest price for a market.

        Raises:
            FetchError, TimeoutError or OSError when no snapshot is available
        """
        ...


class OrderSubmitter(Protocol):
    def submit(
        self,
        market_id: str,
        side: OrderSide,
        size: Decimal,
        timeout: Optional[float] = None
    ) -> OrderConfirmation:
        """
        Submit an order and wait for the exchange to accept it.

        Raises:
            RetryableSubmitError when the order was rejected before placement,
            SubmitError when its state is unknown
        """
        ...
