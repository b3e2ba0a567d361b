"""Base class for trade dispatchers."""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ..data.models import Side
from ..errors import AlreadyOpenError, NoPositionError, SubmitError
from ..logging.config import get_dispatch_logger, log_position_transition
from ..ports import OrderConfirmation, OrderSide
from ..state.positions import PositionState, PositionStateManager
from ..strategy.models import Enter, Exit, Hold, TradeAction
from ..utils.time import Clock, SystemClock, format_market_time
from .journal import TradeJournal


class DispatchStatus(Enum):
    """Trade dispatch status."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class DispatchResult:
    """Result of dispatching one trade action."""
    status: DispatchStatus
    market_id: str
    action: TradeAction
    message: Optional[str] = None
    confirmation: Optional[OrderConfirmation] = None
    position: Optional[PositionState] = None
    realized_pnl: Optional[Decimal] = None
    attempt_count: int = 1
    dispatch_time_ms: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.status == DispatchStatus.SUCCESS


def order_side_for(action: TradeAction, position_side: Optional[Side] = None) -> OrderSide:
    """
    Exchange order side for an action.

    Entering long buys and entering short sells; exiting takes the opposite
    order side of the held position.
    """
    if isinstance(action, Enter):
        return OrderSide.BUY if action.side == Side.LONG else OrderSide.SELL
    if isinstance(action, Exit):
        if position_side is None:
            raise ValueError("Exit requires the side of the open position")
        return OrderSide.SELL if position_side == Side.LONG else OrderSide.BUY
    raise ValueError(f"No order side for {type(action).__name__}")


class BaseDispatcher(ABC):
    """
    Base class for trade dispatchers.

    Subclasses only decide how an order is placed. Position mutation is shared
    so simulated and live runs change position state identically, and only
    after the order is confirmed.
    """

    mode = "base"

    def __init__(
        self,
        positions: PositionStateManager,
        journal: Optional[TradeJournal] = None,
        clock: Optional[Clock] = None
    ):
        self.positions = positions
        self.journal = journal
        self.clock = clock or SystemClock()
        self.logger = get_dispatch_logger(f"trade.dispatch.{self.mode}", self.mode)
        self._stats_lock = threading.Lock()
        self.reset_stats()

    @abstractmethod
    def _place_order(
        self,
        market_id: str,
        side: OrderSide,
        size: Decimal,
        price: Decimal
    ) -> OrderConfirmation:
        """
        Place an order and return its confirmation.

        Raises:
            SubmitError, TimeoutError or OSError if the order was not confirmed
        """
        pass

    def execute(self, action: TradeAction, market_id: str, at: Optional[datetime] = None) -> DispatchResult:
        """
        Execute a trade action for a market.

        Args:
            action: Enter, Exit or Hold
            market_id: Market the action applies to
            at: Time of the action, defaults to the clock's now

        Returns:
            DispatchResult; FAILED when the order was not confirmed, in which
            case position state is unchanged

        Raises:
            AlreadyOpenError: Enter while a position is open
            NoPositionError: Exit while flat
        """
        if isinstance(action, Hold):
            with self._stats_lock:
                self._skipped_count += 1
            return DispatchResult(
                status=DispatchStatus.SKIPPED,
                market_id=market_id,
                action=action,
                message=action.reason or None
            )

        at = at or self.clock.now()

        if isinstance(action, Enter):
            return self._execute_enter(action, market_id, at)
        if isinstance(action, Exit):
            return self._execute_exit(action, market_id, at)

        raise TypeError(f"Unknown trade action: {action!r}")

    def _execute_enter(self, action: Enter, market_id: str, at: datetime) -> DispatchResult:
        current = self.positions.get(market_id)
        if current is not None and current.is_open:
            raise AlreadyOpenError(
                f"Enter requested for {market_id} while a position is open",
                market_id=market_id
            )

        side = order_side_for(action)
        start_time = time.monotonic()
        try:
            confirmation = self._place_order(market_id, side, action.size, action.price)
        except (SubmitError, TimeoutError, OSError) as e:
            return self._failed(action, market_id, e)

        dispatch_time = int((time.monotonic() - start_time) * 1000)
        position = self.positions.open(market_id, action.side, action.price, action.size, at)

        log_position_transition(
            self.logger,
            market_id=market_id,
            from_state="flat",
            to_state=action.side.value,
            trigger="enter",
            context={"price": str(action.price), "size": str(action.size), "order_id": confirmation.order_id}
        )

        with self._stats_lock:
            self._dispatched_count += 1
            self._entries += 1

        self._journal({
            "ts": format_market_time(at),
            "mode": self.mode,
            "market_id": market_id,
            "action": "enter",
            "side": action.side.value,
            "order_side": side.value,
            "price": str(action.price),
            "size": str(action.size),
            "order_id": confirmation.order_id,
        })

        return DispatchResult(
            status=DispatchStatus.SUCCESS,
            market_id=market_id,
            action=action,
            message=f"Opened {action.side.value} at {action.price}",
            confirmation=confirmation,
            position=position,
            dispatch_time_ms=dispatch_time
        )

    def _execute_exit(self, action: Exit, market_id: str, at: datetime) -> DispatchResult:
        current = self.positions.get(market_id)
        if current is None or not current.is_open:
            raise NoPositionError(
                f"Exit requested for {market_id} with no open position",
                market_id=market_id
            )

        side = order_side_for(action, current.side)
        start_time = time.monotonic()
        try:
            confirmation = self._place_order(market_id, side, current.size, action.price)
        except (SubmitError, TimeoutError, OSError) as e:
            return self._failed(action, market_id, e)

        dispatch_time = int((time.monotonic() - start_time) * 1000)
        closed = self.positions.close(market_id)
        pnl = closed.unrealized_pnl(action.price)

        log_position_transition(
            self.logger,
            market_id=market_id,
            from_state=closed.label,
            to_state="flat",
            trigger=action.reason.value,
            context={
                "entry_price": str(closed.entry_price),
                "exit_price": str(action.price),
                "realized_pnl": str(pnl),
                "order_id": confirmation.order_id
            }
        )

        with self._stats_lock:
            self._dispatched_count += 1
            self._exits += 1
            self._realized_pnl += pnl
            if pnl > 0:
                self._wins += 1
            elif pnl < 0:
                self._losses += 1
            else:
                self._breakevens += 1

        self._journal({
            "ts": format_market_time(at),
            "mode": self.mode,
            "market_id": market_id,
            "action": "exit",
            "reason": action.reason.value,
            "side": closed.side.value if closed.side else None,
            "order_side": side.value,
            "entry_price": str(closed.entry_price),
            "price": str(action.price),
            "size": str(closed.size),
            "realized_pnl": str(pnl),
            "order_id": confirmation.order_id,
        })

        return DispatchResult(
            status=DispatchStatus.SUCCESS,
            market_id=market_id,
            action=action,
            message=f"Closed {closed.label} at {action.price} ({action.reason.value})",
            confirmation=confirmation,
            position=self.positions.get(market_id),
            realized_pnl=pnl,
            dispatch_time_ms=dispatch_time
        )

    def _failed(self, action: TradeAction, market_id: str, error: Exception) -> DispatchResult:
        with self._stats_lock:
            self._failed_count += 1

        self.logger.warning(
            "Order not confirmed, position unchanged",
            market_id=market_id,
            action=action.name,
            error=str(error),
            error_type=type(error).__name__
        )

        return DispatchResult(
            status=DispatchStatus.FAILED,
            market_id=market_id,
            action=action,
            message=f"Order failed: {error}",
            attempt_count=getattr(error, "retry_count", 0) + 1,
            error=error
        )

    def _journal(self, entry: dict[str, Any]) -> None:
        if self.journal is not None:
            self.journal.record(entry)

    def get_stats(self) -> dict[str, Any]:
        """Get dispatch and trade statistics."""
        with self._stats_lock:
            closed = self._wins + self._losses
            return {
                "mode": self.mode,
                "dispatched_count": self._dispatched_count,
                "failed_count": self._failed_count,
                "skipped_count": self._skipped_count,
                "entries": self._entries,
                "exits": self._exits,
                "wins": self._wins,
                "losses": self._losses,
                "breakevens": self._breakevens,
                "win_rate": self._wins / closed if closed > 0 else 0.0,
                "realized_pnl": str(self._realized_pnl),
            }

    def reset_stats(self) -> None:
        """Reset dispatch statistics."""
        with self._stats_lock:
            self._dispatched_count = 0
            self._failed_count = 0
            self._skipped_count = 0
            self._entries = 0
            self._exits = 0
            self._wins = 0
            self._losses = 0
            self._breakevens = 0
            self._realized_pnl = Decimal("0")
