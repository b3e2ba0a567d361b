"""Tests for indicator selection by strategy kind."""

import pytest

from trend_trader.config.defaults import StrategyConfig, StrategyKind, default_strategy_config
from trend_trader.errors import InsufficientDataError
from trend_trader.indicators import MACDValue, MomentumValue, RSIValue, compute_indicator


class TestComputeIndicator:
    """Test suite for compute_indicator."""

    def test_rsi_uses_whole_window_by_default(self) -> None:
        config = StrategyConfig(kind=StrategyKind.RSI, lookback=15)
        result = compute_indicator(config, [0.1 + 0.01 * i for i in range(15)])

        assert isinstance(result, RSIValue)
        assert result.value == 100.0

        with pytest.raises(InsufficientDataError):
            compute_indicator(config, [0.5] * 14)

    def test_rsi_explicit_period(self) -> None:
        config = StrategyConfig(kind=StrategyKind.RSI, lookback=15, rsi_period=3)
        result = compute_indicator(config, [0.5, 0.5, 0.4, 0.3])
        assert result.value == 0.0

    def test_macd(self) -> None:
        config = default_strategy_config(StrategyKind.MACD)
        result = compute_indicator(config, [0.5] * config.lookback)
        assert isinstance(result, MACDValue)

    def test_momentum(self) -> None:
        config = default_strategy_config(StrategyKind.MOMENTUM)
        prices = [0.50] * 10 + [0.55]
        result = compute_indicator(config, prices)

        assert isinstance(result, MomentumValue)
        assert result.value == pytest.approx(0.10)

    def test_required_points_match_indicator(self) -> None:
        for kind in StrategyKind:
            config = default_strategy_config(kind)
            prices = [0.5] * config.required_points
            compute_indicator(config, prices)

            with pytest.raises(InsufficientDataError):
                compute_indicator(config, prices[1:])
