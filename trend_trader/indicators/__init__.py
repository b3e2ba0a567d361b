"""Trending index calculations over a market's price window"""

from .calculator import compute_indicator
from .macd import calculate_ema_series, calculate_macd
from .models import IndicatorKind, IndicatorValue, MACDValue, MomentumValue, RSIValue
from .momentum import calculate_momentum
from .rsi import calculate_rsi

__all__ = [
    "compute_indicator",
    "calculate_rsi",
    "calculate_macd",
    "calculate_ema_series",
    "calculate_momentum",
    "IndicatorKind",
    "IndicatorValue",
    "RSIValue",
    "MACDValue",
    "MomentumValue",
]
