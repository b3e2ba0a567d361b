"""
Position state management.

Each market holds at most one position. Records are created flat on first
observation and replaced on every open and close; the dispatchers are the
only callers of ``open`` and ``close``.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

import structlog

from ..data.models import Side
from ..errors import AlreadyOpenError, NoPositionError
from ..utils.time import format_market_time

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PositionState:
    """Position record for one market."""
    market_id: str
    is_open: bool = False
    side: Optional[Side] = None
    entry_price: Optional[Decimal] = None
    size: Optional[Decimal] = None
    opened_at: Optional[datetime] = None

    @classmethod
    def flat(cls, market_id: str) -> "PositionState":
        return cls(market_id=market_id)

    @property
    def label(self) -> str:
        """flat, long or short"""
        return self.side.value if self.is_open and self.side else "flat"

    def unrealized_return(self, price: Decimal) -> Decimal:
        """
        Return on the entry price at ``price``; positive is a gain for the held side.

        A position entered at 0 has an unbounded return once the price moves
        off 0, so any non-zero price crosses the take-profit or stop-loss.

        Raises:
            NoPositionError: if the position is not open
        """
        if not self.is_open or self.entry_price is None:
            raise NoPositionError(
                f"No open position for {self.market_id}",
                market_id=self.market_id
            )

        price = Decimal(price)
        if self.entry_price == 0:
            move = Decimal("Infinity") if price > 0 else Decimal(0)
        else:
            move = (price - self.entry_price) / self.entry_price
        return move if self.side == Side.LONG else -move

    def unrealized_pnl(self, price: Decimal) -> Decimal:
        """Profit or loss of the whole position at ``price``."""
        if not self.is_open or self.entry_price is None or self.size is None:
            raise NoPositionError(
                f"No open position for {self.market_id}",
                market_id=self.market_id
            )

        move = Decimal(price) - self.entry_price
        if self.side == Side.SHORT:
            move = -move
        return self.size * move


class PositionStateManager:
    """Thread-safe registry of position records keyed by market id."""

    def __init__(self):
        self.logger = logger
        self._positions: dict[str, PositionState] = {}
        self._lock = threading.Lock()

    def ensure(self, market_id: str) -> PositionState:
        """Get the market's record, creating it flat on first observation."""
        with self._lock:
            if market_id not in self._positions:
                self._positions[market_id] = PositionState.flat(market_id)
                self.logger.debug("Created position record", market_id=market_id)
            return self._positions[market_id]

    def get(self, market_id: str) -> Optional[PositionState]:
        """Read-only lookup; None for markets never observed."""
        with self._lock:
            return self._positions.get(market_id)

    def open(
        self,
        market_id: str,
        side: Side,
        price: Decimal,
        size: Decimal,
        opened_at: datetime
    ) -> PositionState:
        """
        Record a newly opened position.

        Raises:
            AlreadyOpenError: if the market already holds an open position
        """
        with self._lock:
            current = self._positions.get(market_id)
            if current is not None and current.is_open:
                raise AlreadyOpenError(
                    f"Position already open for {market_id}",
                    market_id=market_id,
                    context={"side": current.side.value if current.side else None}
                )

            state = PositionState(
                market_id=market_id,
                is_open=True,
                side=side,
                entry_price=Decimal(price),
                size=Decimal(size),
                opened_at=opened_at
            )
            self._positions[market_id] = state

        self.logger.info(
            "Opened position",
            market_id=market_id,
            side=side.value,
            entry_price=str(state.entry_price),
            size=str(state.size),
            opened_at=format_market_time(opened_at)
        )
        return state

    def close(self, market_id: str) -> PositionState:
        """
        Flatten the market's position.

        Returns:
            The open record that was closed

        Raises:
            NoPositionError: if no position is open for the market
        """
        with self._lock:
            current = self._positions.get(market_id)
            if current is None or not current.is_open:
                raise NoPositionError(
                    f"No open position to close for {market_id}",
                    market_id=market_id
                )
            self._positions[market_id] = PositionState.flat(market_id)

        self.logger.info(
            "Closed position",
            market_id=market_id,
            side=current.side.value if current.side else None,
            entry_price=str(current.entry_price)
        )
        return current

    def open_positions(self) -> list[PositionState]:
        """All currently open positions."""
        with self._lock:
            return [p for p in self._positions.values() if p.is_open]

    def get_stats(self) -> dict[str, int]:
        with self._lock:
            open_count = sum(1 for p in self._positions.values() if p.is_open)
            return {
                "markets_tracked": len(self._positions),
                "open_positions": open_count,
            }
