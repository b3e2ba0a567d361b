"""MACD (Moving Average Convergence Divergence) calculation"""

from collections.abc import Sequence

from ..errors import InsufficientDataError
from .models import MACDValue


def calculate_ema_series(values: Sequence[float], period: int) -> list[float]:
    """
    Calculate an exponential moving average series

    The EMA is seeded with the simple mean of the first ``period`` values and
    then smoothed with alpha = 2 / (period + 1).

    Args:
        values: Values in chronological order
        period: EMA period

    Returns:
        EMA values, one per input from index period - 1 onwards
        (len(values) - period + 1 entries)

    Raises:
        InsufficientDataError: if fewer than ``period`` values are given
    """
    if period <= 0:
        raise ValueError(f"EMA period must be positive, got {period}")

    if len(values) < period:
        raise InsufficientDataError(
            f"EMA({period}) needs {period} values, got {len(values)}",
            required_count=period,
            available_count=len(values)
        )

    alpha = 2.0 / (period + 1)
    ema = sum(values[:period]) / period
    series = [ema]

    for value in values[period:]:
        ema = alpha * value + (1 - alpha) * ema
        series.append(ema)

    return series


def calculate_macd(
    prices: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9
) -> MACDValue:
    """
    Calculate MACD, its signal line and histogram

    MACD line = EMA(fast) - EMA(slow), signal line = EMA(signal) of the MACD
    line, histogram = MACD line - signal line.

    Args:
        prices: Prices in chronological order
        fast: Fast EMA period (default 12)
        slow: Slow EMA period (default 26)
        signal: Signal EMA period (default 9)

    Returns:
        MACDValue for the latest price

    Raises:
        ValueError: if fast >= slow
        InsufficientDataError: if fewer than slow + signal prices are given
    """
    if fast >= slow:
        raise ValueError(f"MACD fast period ({fast}) must be less than slow period ({slow})")

    required = slow + signal
    if len(prices) < required:
        raise InsufficientDataError(
            f"MACD({fast},{slow},{signal}) needs {required} prices, got {len(prices)}",
            required_count=required,
            available_count=len(prices)
        )

    fast_series = calculate_ema_series(prices, fast)
    slow_series = calculate_ema_series(prices, slow)

    # Align the fast series to the slow one: both end on the latest price
    offset = slow - fast
    macd_series = [fast_series[j + offset] - slow_series[j] for j in range(len(slow_series))]

    signal_series = calculate_ema_series(macd_series, signal)

    macd_line = macd_series[-1]
    signal_line = signal_series[-1]

    return MACDValue(
        macd_line=macd_line,
        signal_line=signal_line,
        histogram=macd_line - signal_line
    )
