"""RSI (Relative Strength Index) calculation"""

from collections.abc import Sequence

from ..errors import InsufficientDataError
from .models import RSIValue


def calculate_rsi(prices: Sequence[float], period: int = 14) -> RSIValue:
    """
    Calculate RSI using Wilder smoothing

    The first average gain/loss is the simple mean over the first ``period``
    price changes; every later change is folded in with
    avg = (avg * (period - 1) + change) / period.

    Args:
        prices: Prices in chronological order
        period: RSI period (default 14)

    Returns:
        RSIValue within [0, 100]. Flat prices give the neutral 50.

    Raises:
        InsufficientDataError: if fewer than period + 1 prices are given
    """
    if period <= 0:
        raise ValueError(f"RSI period must be positive, got {period}")

    if len(prices) < period + 1:
        raise InsufficientDataError(
            f"RSI({period}) needs {period + 1} prices, got {len(prices)}",
            required_count=period + 1,
            available_count=len(prices)
        )

    changes = [prices[i] - prices[i - 1] for i in range(1, len(prices))]

    seed = changes[:period]
    avg_gain = sum(c for c in seed if c > 0) / period
    avg_loss = sum(-c for c in seed if c < 0) / period

    for change in changes[period:]:
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_gain == 0 and avg_loss == 0:
        return RSIValue(50.0)
    if avg_loss == 0:
        return RSIValue(100.0)
    if avg_gain == 0:
        return RSIValue(0.0)

    rs = avg_gain / avg_loss
    rsi = 100.0 - 100.0 / (1.0 + rs)

    return RSIValue(min(max(rsi, 0.0), 100.0))
