"""Data models for indicator values"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union


class IndicatorKind(str, Enum):
    """Indicator families"""
    RSI = "rsi"
    MACD = "macd"
    MOMENTUM = "momentum"


@dataclass(frozen=True)
class RSIValue:
    """Relative Strength Index, always within [0, 100]"""
    value: float

    @property
    def kind(self) -> IndicatorKind:
        return IndicatorKind.RSI

    @property
    def primary(self) -> float:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, **asdict(self)}


@dataclass(frozen=True)
class MACDValue:
    """MACD line, its signal line and the histogram between them"""
    macd_line: float
    signal_line: float
    histogram: float

    @property
    def kind(self) -> IndicatorKind:
        return IndicatorKind.MACD

    @property
    def primary(self) -> float:
        # Zone rules compare against the histogram
        return self.histogram

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, **asdict(self)}


@dataclass(frozen=True)
class MomentumValue:
    """Price change over the momentum period, absolute or as a fraction"""
    value: float
    percent: bool = True

    @property
    def kind(self) -> IndicatorKind:
        return IndicatorKind.MOMENTUM

    @property
    def primary(self) -> float:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, **asdict(self)}


IndicatorValue = Union[RSIValue, MACDValue, MomentumValue]
