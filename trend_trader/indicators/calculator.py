"""Selects and runs the indicator configured for the strategy"""

from collections.abc import Sequence
from typing import Callable

from ..config.defaults import StrategyConfig, StrategyKind
from .macd import calculate_macd
from .models import IndicatorValue
from .momentum import calculate_momentum
from .rsi import calculate_rsi


def _rsi(config: StrategyConfig, prices: Sequence[float]) -> IndicatorValue:
    return calculate_rsi(prices, period=config.effective_rsi_period)


def _macd(config: StrategyConfig, prices: Sequence[float]) -> IndicatorValue:
    return calculate_macd(
        prices,
        fast=config.macd_fast_period,
        slow=config.macd_slow_period,
        signal=config.macd_signal_period
    )


def _momentum(config: StrategyConfig, prices: Sequence[float]) -> IndicatorValue:
    return calculate_momentum(
        prices,
        period=config.effective_momentum_period,
        percent=config.momentum_percent
    )


_CALCULATORS: dict[StrategyKind, Callable[[StrategyConfig, Sequence[float]], IndicatorValue]] = {
    StrategyKind.RSI: _rsi,
    StrategyKind.MACD: _macd,
    StrategyKind.MOMENTUM: _momentum,
}


def compute_indicator(config: StrategyConfig, prices: Sequence[float]) -> IndicatorValue:
    """
    Compute the indicator selected by ``config.kind`` over ``prices``.

    Raises:
        InsufficientDataError: if the window is too short for the indicator
    """
    return _CALCULATORS[config.kind](config, prices)
