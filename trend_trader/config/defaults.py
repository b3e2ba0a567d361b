"""Default configuration parameters for the trending index trader."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class StrategyKind(str, Enum):
    """Trending index used for entry and exit signals."""
    RSI = "rsi"
    MACD = "macd"
    MOMENTUM = "momentum"


class DispatcherKind(str, Enum):
    """Where trade actions are routed."""
    SIMULATION = "simulation"
    LIVE = "live"


@dataclass(frozen=True)
class StrategyConfig:
    """Strategy parameters, fixed for the lifetime of the process."""
    kind: StrategyKind = StrategyKind.RSI
    trend_threshold: float = 70.0                    # RSI overbought level; mirrored for oversold
    profit_threshold: Decimal = Decimal("0.10")      # Take-profit as a fraction of entry price
    stop_loss_threshold: Decimal = Decimal("0.05")   # Stop-loss as a fraction of entry price
    lookback: int = 15                               # Price window capacity
    position_size: Decimal = Decimal("10")           # Contracts per entry

    # Indicator periods; None means "use the whole window" (lookback - 1)
    rsi_period: Optional[int] = None
    macd_fast_period: int = 12
    macd_slow_period: int = 26
    macd_signal_period: int = 9
    momentum_period: Optional[int] = None
    momentum_percent: bool = True

    @property
    def effective_rsi_period(self) -> int:
        return self.rsi_period if self.rsi_period is not None else self.lookback - 1

    @property
    def effective_momentum_period(self) -> int:
        return self.momentum_period if self.momentum_period is not None else self.lookback - 1

    @property
    def required_points(self) -> int:
        """Minimum window length before the configured indicator can be computed."""
        if self.kind == StrategyKind.RSI:
            return self.effective_rsi_period + 1
        if self.kind == StrategyKind.MACD:
            return self.macd_slow_period + self.macd_signal_period
        return self.effective_momentum_period + 1


@dataclass(frozen=True)
class MonitorParams:
    """Polling loop parameters."""
    check_interval_ms: int = 5000
    fetch_timeout_seconds: float = 10.0
    max_workers: int = 4
    max_price_age_seconds: Optional[float] = 60.0
    min_price: Decimal = Decimal("0")
    max_price: Decimal = Decimal("1")


@dataclass(frozen=True)
class LiveParams:
    """Live order submission parameters."""
    submit_timeout_seconds: float = 10.0
    max_retries: int = 2
    retry_delay_seconds: float = 1.0


@dataclass(frozen=True)
class SourceParams:
    """Price source parameters."""
    clob_url: str = "https://clob.polymarket.com"
    side: str = "BUY"                                # Quote side: BUY (bid) or SELL (ask)
    api_key: Optional[str] = None
    tokens: dict[str, str] = field(default_factory=dict)   # market id -> CLOB token id


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_caller: bool = False


@dataclass(frozen=True)
class JournalParams:
    """Trade journal parameters."""
    path: Optional[str] = None
    max_file_size_mb: Optional[int] = None
    rotation_enabled: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete configuration."""
    strategy: StrategyConfig
    markets: list[str] = field(default_factory=list)
    dispatcher: DispatcherKind = DispatcherKind.SIMULATION
    monitor: MonitorParams = field(default_factory=MonitorParams)
    live: LiveParams = field(default_factory=LiveParams)
    source: SourceParams = field(default_factory=SourceParams)
    logging: LoggingParams = field(default_factory=LoggingParams)
    journal: JournalParams = field(default_factory=JournalParams)


def default_strategy_config(kind: StrategyKind = StrategyKind.RSI) -> StrategyConfig:
    """Get the default strategy parameters for an indicator kind."""
    if kind == StrategyKind.MACD:
        return StrategyConfig(
            kind=StrategyKind.MACD,
            trend_threshold=0.0,
            lookback=40,
        )
    if kind == StrategyKind.MOMENTUM:
        return StrategyConfig(
            kind=StrategyKind.MOMENTUM,
            trend_threshold=0.02,
            lookback=11,
        )
    return StrategyConfig()


def get_default_config(kind: StrategyKind = StrategyKind.RSI) -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(strategy=default_strategy_config(kind))
