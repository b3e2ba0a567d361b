"""
Per-cycle market processing.

Each tick fetches one snapshot per market, appends it to the market's price
window, evaluates the strategy and dispatches the resulting action. Markets
are independent: a failure in one is logged and skipped without affecting
the others or later cycles.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import structlog

from .config.defaults import StrategyConfig
from .data.models import PriceWindow
from .data.validators import SnapshotValidator
from .dispatch.base import BaseDispatcher, DispatchResult
from .errors import DataQualityError, FetchError, PositionStateError
from .indicators.models import IndicatorValue
from .ports import MarketDataSource
from .strategy import Decision, Exit, evaluate
from .utils.time import Clock, SystemClock

logger = structlog.get_logger(__name__)


@dataclass
class MarketSlot:
    """Mutable per-market runtime state, guarded by its own lock."""
    market_id: str
    window: PriceWindow
    entry_armed: bool = True
    last_indicator: Optional[IndicatorValue] = None
    last_decision: Optional[Decision] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


@dataclass(frozen=True)
class CycleOutcome:
    """What happened to one market in one tick."""
    market_id: str
    decision: Optional[Decision] = None
    result: Optional[DispatchResult] = None
    skipped_reason: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def skipped(self) -> bool:
        return self.decision is None


class MarketMonitor:
    """Runs the fetch, evaluate and dispatch cycle for every market."""

    def __init__(
        self,
        config: StrategyConfig,
        markets: list[str],
        data_source: MarketDataSource,
        dispatcher: BaseDispatcher,
        validator: Optional[SnapshotValidator] = None,
        fetch_timeout_seconds: float = 10.0,
        max_workers: int = 4,
        clock: Optional[Clock] = None
    ):
        self.config = config
        self.data_source = data_source
        self.dispatcher = dispatcher
        self.positions = dispatcher.positions
        self.validator = validator or SnapshotValidator()
        self.fetch_timeout_seconds = fetch_timeout_seconds
        self.max_workers = max_workers
        self.clock = clock or SystemClock()
        self.logger = logger

        self.slots: dict[str, MarketSlot] = {}
        for market_id in markets:
            self.add_market(market_id)

        self._executor: Optional[ThreadPoolExecutor] = None
        self._stats_lock = threading.Lock()
        self._cycles = 0
        self._fetch_failures = 0
        self._data_errors = 0
        self._internal_errors = 0

    @property
    def market_ids(self) -> list[str]:
        return list(self.slots.keys())

    def add_market(self, market_id: str) -> MarketSlot:
        """Register a market, creating its window and flat position record."""
        if market_id not in self.slots:
            self.slots[market_id] = MarketSlot(
                market_id=market_id,
                window=PriceWindow(self.config.lookback)
            )
            self.positions.ensure(market_id)
            self.logger.info(
                "Monitoring market",
                market_id=market_id,
                lookback=self.config.lookback
            )
        return self.slots[market_id]

    def tick(self, now: Optional[datetime] = None) -> list[CycleOutcome]:
        """
        Run one cycle over all markets and wait for every market to finish.

        Args:
            now: Reference time for staleness checks and position open times

        Returns:
            One CycleOutcome per market, in registration order
        """
        now = now or self.clock.now()
        slots = list(self.slots.values())

        if self.max_workers > 1 and len(slots) > 1:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="market"
                )
            outcomes = list(self._executor.map(lambda slot: self._process_market(slot, now), slots))
        else:
            outcomes = [self._process_market(slot, now) for slot in slots]

        with self._stats_lock:
            self._cycles += 1

        return outcomes

    def _process_market(self, slot: MarketSlot, now: datetime) -> CycleOutcome:
        market_id = slot.market_id

        try:
            return self._run_market_cycle(slot, now)

        except Exception as e:
            with self._stats_lock:
                self._internal_errors += 1
            self.logger.error(
                "Unexpected error processing market",
                market_id=market_id,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True
            )
            return CycleOutcome(market_id=market_id, skipped_reason="internal error", error=e)

    def _run_market_cycle(self, slot: MarketSlot, now: datetime) -> CycleOutcome:
        market_id = slot.market_id

        try:
            point = self.data_source.fetch_snapshot(market_id, timeout=self.fetch_timeout_seconds)
        except (FetchError, TimeoutError, OSError) as e:
            with self._stats_lock:
                self._fetch_failures += 1
            self.logger.warning(
                "Price fetch failed, skipping market this cycle",
                market_id=market_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return CycleOutcome(market_id=market_id, skipped_reason="fetch failed", error=e)

        with slot.lock:
            try:
                self.validator.validate(point, market_id, now=now)
                slot.window.append(point)
            except DataQualityError as e:
                with self._stats_lock:
                    self._data_errors += 1
                self.logger.warning(
                    "Rejected price snapshot, skipping market this cycle",
                    market_id=market_id,
                    error=str(e),
                    error_type=type(e).__name__,
                    context=getattr(e, 'context', {})
                )
                return CycleOutcome(market_id=market_id, skipped_reason="invalid snapshot", error=e)

            position = self.positions.ensure(market_id)
            decision = evaluate(slot.window, self.config, position, slot.entry_armed)

            slot.entry_armed = decision.entry_armed
            slot.last_decision = decision
            if decision.indicator is not None:
                slot.last_indicator = decision.indicator

            try:
                result = self.dispatcher.execute(decision.action, market_id, at=now)
            except PositionStateError as e:
                with self._stats_lock:
                    self._internal_errors += 1
                self.logger.error(
                    "Position state invariant violated",
                    market_id=market_id,
                    action=decision.action.name,
                    error=str(e),
                    error_type=type(e).__name__
                )
                return CycleOutcome(market_id=market_id, decision=decision, error=e)

            # A confirmed exit disarms entry until the signal leaves its zone
            if result.succeeded and isinstance(decision.action, Exit):
                slot.entry_armed = False

            return CycleOutcome(market_id=market_id, decision=decision, result=result)

    def get_stats(self) -> dict[str, Any]:
        with self._stats_lock:
            return {
                "markets": len(self.slots),
                "cycles": self._cycles,
                "fetch_failures": self._fetch_failures,
                "data_errors": self._data_errors,
                "internal_errors": self._internal_errors,
                "open_positions": len(self.positions.open_positions()),
            }

    def close(self) -> None:
        """Shut down the worker pool, waiting for in-flight work."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
