"""Trade action and decision models"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from ..data.models import Side
from ..indicators.models import IndicatorValue


class ExitReason(str, Enum):
    """Why a position was closed"""
    TAKE_PROFIT = "take_profit"
    STOP_LOSS = "stop_loss"
    SIGNAL_REVERSAL = "signal_reversal"


@dataclass(frozen=True)
class Enter:
    """Open a position on ``side``"""
    side: Side
    size: Decimal
    price: Decimal

    name = "enter"


@dataclass(frozen=True)
class Exit:
    """Close the open position"""
    reason: ExitReason
    price: Decimal

    name = "exit"


@dataclass(frozen=True)
class Hold:
    """Do nothing this cycle"""
    reason: str = ""

    name = "hold"


TradeAction = Union[Enter, Exit, Hold]


@dataclass(frozen=True)
class Decision:
    """Outcome of one strategy evaluation"""
    action: TradeAction
    indicator: Optional[IndicatorValue] = None
    price: Optional[Decimal] = None
    entry_armed: bool = True
