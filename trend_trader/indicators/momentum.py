"""Momentum (rate of change) calculation"""

from collections.abc import Sequence

from ..errors import InsufficientDataError, MalformedDataError
from .models import MomentumValue


def calculate_momentum(prices: Sequence[float], period: int = 10, percent: bool = True) -> MomentumValue:
    """
    Calculate momentum of the latest price against the price ``period`` steps back

    Args:
        prices: Prices in chronological order
        period: Lookback distance (default 10)
        percent: Return a fractional change (p[t] / p[t-period] - 1) instead of
            the absolute difference (p[t] - p[t-period])

    Returns:
        MomentumValue for the latest price

    Raises:
        InsufficientDataError: if fewer than period + 1 prices are given
        MalformedDataError: if the reference price is zero in percent form
    """
    if period <= 0:
        raise ValueError(f"Momentum period must be positive, got {period}")

    if len(prices) < period + 1:
        raise InsufficientDataError(
            f"Momentum({period}) needs {period + 1} prices, got {len(prices)}",
            required_count=period + 1,
            available_count=len(prices)
        )

    current = prices[-1]
    reference = prices[-1 - period]

    if not percent:
        return MomentumValue(current - reference, percent=False)

    if reference == 0:
        raise MalformedDataError(
            "Momentum reference price is zero",
            raw_data=str(reference),
            context={"period": period}
        )

    return MomentumValue(current / reference - 1.0, percent=True)
