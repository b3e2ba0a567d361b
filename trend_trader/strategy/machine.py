"""
Threshold-based entry/exit rules.

A market is either flat or holds one position. While flat, the configured
indicator entering a trend zone signals an entry on that side; while in a
position, stop-loss, take-profit and signal reversal are checked in that
order. After an exit the entry stays disarmed until the indicator has left
the entry zone, so a stopped-out position is not reopened on the same signal.
"""

from decimal import Decimal
from typing import Callable, NamedTuple, Optional

from ..config.defaults import StrategyConfig, StrategyKind
from ..data.models import PriceWindow, Side
from ..errors import DataQualityError
from ..indicators import IndicatorValue, compute_indicator
from ..logging.config import get_decision_logger, log_trade_decision
from ..state.positions import PositionState
from .models import Decision, Enter, Exit, ExitReason, Hold


class ZoneRules(NamedTuple):
    """Zone predicates over (indicator primary value, trend threshold)"""
    long_entry: Callable[[float, float], bool]
    short_entry: Callable[[float, float], bool]
    long_exit: Callable[[float, float], bool]
    short_exit: Callable[[float, float], bool]


# RSI is bounded in [0, 100]: T marks overbought and 100 - T oversold.
_RSI_RULES = ZoneRules(
    long_entry=lambda v, t: v < 100 - t,
    short_entry=lambda v, t: v > t,
    long_exit=lambda v, t: v > 100 - t,
    short_exit=lambda v, t: v < t,
)

# Unbounded indicators are symmetric around zero.
_SIGNED_RULES = ZoneRules(
    long_entry=lambda v, t: v > t,
    short_entry=lambda v, t: v < -t,
    long_exit=lambda v, t: v < -t,
    short_exit=lambda v, t: v > t,
)

ZONE_RULES: dict[StrategyKind, ZoneRules] = {
    StrategyKind.RSI: _RSI_RULES,
    StrategyKind.MACD: _SIGNED_RULES,
    StrategyKind.MOMENTUM: _SIGNED_RULES,
}


def entry_side(config: StrategyConfig, indicator: IndicatorValue) -> Optional[Side]:
    """Side whose entry zone the indicator is in, or None outside both zones."""
    rules = ZONE_RULES[config.kind]
    value = indicator.primary
    if rules.long_entry(value, config.trend_threshold):
        return Side.LONG
    if rules.short_entry(value, config.trend_threshold):
        return Side.SHORT
    return None


def signals_exit(config: StrategyConfig, side: Side, indicator: IndicatorValue) -> bool:
    """True when the indicator has crossed back against a position on ``side``."""
    rules = ZONE_RULES[config.kind]
    check = rules.long_exit if side == Side.LONG else rules.short_exit
    return check(indicator.primary, config.trend_threshold)


def _try_indicator(window: PriceWindow, config: StrategyConfig) -> Optional[IndicatorValue]:
    try:
        return compute_indicator(config, window.prices())
    except DataQualityError as e:
        get_decision_logger(__name__).debug(
            "Indicator unavailable",
            market_id=window.latest.market_id if window.latest else None,
            error=str(e),
            error_type=type(e).__name__,
            window_len=len(window)
        )
        return None


def evaluate(
    window: PriceWindow,
    config: StrategyConfig,
    position: Optional[PositionState] = None,
    entry_armed: bool = True
) -> Decision:
    """
    Decide the trade action for one market in this cycle.

    Args:
        window: The market's price window, latest point last
        config: Strategy parameters
        position: Current position record; None or flat means no position
        entry_armed: Whether a new entry may be taken while flat

    Returns:
        Decision with the action, the indicator (when computed), the
        evaluation price and the entry-armed flag for the next cycle
    """
    latest = window.latest
    if latest is None:
        return Decision(action=Hold("no price data"), entry_armed=entry_armed)

    price = Decimal(latest.price)

    if position is not None and position.is_open:
        decision = _evaluate_in_position(window, config, position, price, entry_armed)
    else:
        decision = _evaluate_flat(window, config, price, entry_armed)

    action = decision.action
    log_trade_decision(
        get_decision_logger(__name__),
        market_id=latest.market_id,
        action=action.name,
        price=price,
        indicator=decision.indicator.to_dict() if decision.indicator else None,
        reason=_describe(action)
    )

    return decision


def _evaluate_in_position(
    window: PriceWindow,
    config: StrategyConfig,
    position: PositionState,
    price: Decimal,
    entry_armed: bool
) -> Decision:
    unrealized = position.unrealized_return(price)

    # Stop-loss first so it wins when both thresholds are crossed
    if -unrealized >= config.stop_loss_threshold:
        return Decision(Exit(ExitReason.STOP_LOSS, price), None, price, entry_armed)

    if unrealized >= config.profit_threshold:
        return Decision(Exit(ExitReason.TAKE_PROFIT, price), None, price, entry_armed)

    indicator = _try_indicator(window, config)
    if indicator is None:
        return Decision(Hold("indicator unavailable"), None, price, entry_armed)

    if signals_exit(config, position.side, indicator):
        return Decision(Exit(ExitReason.SIGNAL_REVERSAL, price), indicator, price, entry_armed)

    return Decision(Hold("holding position"), indicator, price, entry_armed)


def _evaluate_flat(
    window: PriceWindow,
    config: StrategyConfig,
    price: Decimal,
    entry_armed: bool
) -> Decision:
    indicator = _try_indicator(window, config)
    if indicator is None:
        return Decision(Hold("indicator unavailable"), None, price, entry_armed)

    side = entry_side(config, indicator)
    if side is None:
        # Leaving the entry zones re-arms entry
        return Decision(Hold("no trend"), indicator, price, True)

    if not entry_armed:
        return Decision(Hold("entry disarmed"), indicator, price, False)

    # Returns are measured against the entry price
    if price <= 0:
        return Decision(Hold("no entry at zero price"), indicator, price, True)

    return Decision(Enter(side, config.position_size, price), indicator, price, True)


def _describe(action) -> Optional[str]:
    if isinstance(action, Exit):
        return action.reason.value
    if isinstance(action, Enter):
        return action.side.value
    return action.reason or None
