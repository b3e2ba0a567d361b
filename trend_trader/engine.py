"""
Trading engine coordinator.

Wires the strategy, position manager, dispatcher and market monitor together
and drives the monitor on a fixed polling interval until asked to stop.
"""

import signal
import threading
from pathlib import Path
from typing import Any, Optional

import structlog

from .config.defaults import (
    DispatcherKind,
    JournalParams,
    LiveParams,
    MonitorParams,
    StrategyConfig,
)
from .config.validation import ConfigValidator
from .data.validators import SnapshotValidator
from .dispatch.base import BaseDispatcher
from .dispatch.journal import TradeJournal
from .dispatch.live import LiveDispatcher
from .dispatch.simulation import SimulationDispatcher
from .errors import ConfigurationError
from .monitor import MarketMonitor
from .ports import MarketDataSource, OrderSubmitter
from .state.positions import PositionStateManager
from .utils.time import Clock, SystemClock, Ticker

logger = structlog.get_logger(__name__)


class TradingEngine:
    """
    Main coordinator for the trending index trader.

    Pipeline per tick:
    Price Snapshot → Window → Indicator → Strategy → Dispatcher → Position
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.logger = logger
        self.clock = clock or SystemClock()

        self.config: Optional[StrategyConfig] = None
        self.positions: Optional[PositionStateManager] = None
        self.dispatcher: Optional[BaseDispatcher] = None
        self.monitor: Optional[MarketMonitor] = None
        self.ticker: Optional[Ticker] = None

        self._stop_event = threading.Event()
        self._running = False

    @property
    def is_configured(self) -> bool:
        return self.monitor is not None

    @property
    def is_running(self) -> bool:
        return self._running

    def configure(
        self,
        strategy_config: StrategyConfig,
        markets: list[str],
        interval_ms: int,
        dispatcher_kind: DispatcherKind,
        data_source: MarketDataSource,
        order_submitter: Optional[OrderSubmitter] = None,
        monitor_params: Optional[MonitorParams] = None,
        live_params: Optional[LiveParams] = None,
        journal_params: Optional[JournalParams] = None
    ) -> None:
        """
        One-time setup of the engine.

        Raises:
            ConfigurationError: if already configured, if any parameter is
                invalid, or if live mode is requested without a submitter
        """
        if self.is_configured:
            raise ConfigurationError("Engine is already configured")

        monitor_params = monitor_params or MonitorParams()
        live_params = live_params or LiveParams()
        journal_params = journal_params or JournalParams()

        try:
            dispatcher_kind = DispatcherKind(dispatcher_kind)
        except ValueError:
            raise ConfigurationError(
                f"Unknown dispatcher kind: {dispatcher_kind!r}",
                errors=[f"dispatcher: must be one of {[k.value for k in DispatcherKind]}"]
            )

        errors = ConfigValidator.validate_strategy_config(strategy_config)
        errors.extend(ConfigValidator.validate_markets(markets))
        errors.extend(ConfigValidator.validate_monitor_params({
            "check_interval_ms": interval_ms,
            "fetch_timeout_seconds": monitor_params.fetch_timeout_seconds,
            "max_workers": monitor_params.max_workers,
            "max_price_age_seconds": monitor_params.max_price_age_seconds,
        }))
        if dispatcher_kind == DispatcherKind.LIVE:
            errors.extend(ConfigValidator.validate_live_params({
                "submit_timeout_seconds": live_params.submit_timeout_seconds,
                "max_retries": live_params.max_retries,
                "retry_delay_seconds": live_params.retry_delay_seconds,
            }))

        if errors:
            error_messages = [f"{e.field}: {e.message} (got {e.value!r})" for e in errors]
            self.logger.error("Invalid engine configuration", errors=error_messages)
            raise ConfigurationError("Invalid engine configuration", errors=error_messages)

        if dispatcher_kind == DispatcherKind.LIVE and order_submitter is None:
            raise ConfigurationError("Live dispatch requires an order submitter")

        journal = None
        if journal_params.path:
            journal = TradeJournal(
                Path(journal_params.path),
                max_file_size_mb=journal_params.max_file_size_mb,
                rotation_enabled=journal_params.rotation_enabled
            )

        positions = PositionStateManager()
        if dispatcher_kind == DispatcherKind.LIVE:
            dispatcher: BaseDispatcher = LiveDispatcher(
                positions,
                order_submitter,
                submit_timeout_seconds=live_params.submit_timeout_seconds,
                max_retries=live_params.max_retries,
                retry_delay_seconds=live_params.retry_delay_seconds,
                journal=journal,
                clock=self.clock
            )
        else:
            dispatcher = SimulationDispatcher(positions, journal=journal, clock=self.clock)

        validator = SnapshotValidator(
            max_age_seconds=monitor_params.max_price_age_seconds,
            min_price=monitor_params.min_price,
            max_price=monitor_params.max_price
        )

        self.config = strategy_config
        self.positions = positions
        self.dispatcher = dispatcher
        self.monitor = MarketMonitor(
            strategy_config,
            markets,
            data_source,
            dispatcher,
            validator=validator,
            fetch_timeout_seconds=monitor_params.fetch_timeout_seconds,
            max_workers=monitor_params.max_workers,
            clock=self.clock
        )
        self.ticker = Ticker(interval_ms, clock=self.clock)

        self.logger.info(
            "Engine configured",
            strategy=strategy_config.kind.value,
            trend_threshold=strategy_config.trend_threshold,
            profit_threshold=str(strategy_config.profit_threshold),
            stop_loss_threshold=str(strategy_config.stop_loss_threshold),
            lookback=strategy_config.lookback,
            markets=markets,
            interval_ms=interval_ms,
            mode=dispatcher.mode
        )

    def run(self, max_ticks: Optional[int] = None) -> None:
        """
        Run the polling loop until ``request_stop`` is called.

        Args:
            max_ticks: Stop after this many ticks (None runs until stopped)

        Raises:
            ConfigurationError: if the engine has not been configured
        """
        if not self.is_configured:
            raise ConfigurationError("Engine must be configured before running")

        self._running = True
        ticks = 0
        self.logger.info("Engine started", mode=self.dispatcher.mode)

        try:
            while not self._stop_event.is_set():
                if max_ticks is not None and ticks >= max_ticks:
                    break

                self.ticker.wait_next()
                if self._stop_event.is_set():
                    break

                self.monitor.tick()
                ticks += 1
        finally:
            self.monitor.close()
            self._running = False
            self.logger.info(
                "Engine stopped",
                ticks=ticks,
                skipped_ticks=self.ticker.skipped,
                **self.dispatcher.get_stats()
            )

    def request_stop(self) -> None:
        """Ask the loop to stop after the in-flight tick completes."""
        if not self._stop_event.is_set():
            self.logger.info("Stop requested")
        self._stop_event.set()

    def install_signal_handlers(self) -> None:
        """Stop gracefully on SIGINT and SIGTERM."""
        def _handle(signum, frame):
            self.logger.info("Received signal", signal=signal.Signals(signum).name)
            self.request_stop()

        signal.signal(signal.SIGINT, _handle)
        signal.signal(signal.SIGTERM, _handle)

    def get_runtime_stats(self) -> dict[str, Any]:
        """Get runtime statistics for monitoring."""
        if not self.is_configured:
            return {"configured": False}

        return {
            "configured": True,
            "running": self._running,
            "ticks": self.ticker.ticks,
            "skipped_ticks": self.ticker.skipped,
            "monitor": self.monitor.get_stats(),
            "dispatch": self.dispatcher.get_stats(),
            "positions": self.positions.get_stats(),
        }
