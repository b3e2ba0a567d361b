"""Unit tests for configuration management."""

from decimal import Decimal
from pathlib import Path

import pytest

from trend_trader.config.defaults import (
    DispatcherKind,
    StrategyConfig,
    StrategyKind,
    default_strategy_config,
    get_default_config,
)
from trend_trader.config.loader import ConfigLoader, load_config
from trend_trader.config.validation import ConfigValidator
from trend_trader.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_rsi_defaults(self) -> None:
        config = get_default_config()
        assert config.strategy.kind == StrategyKind.RSI
        assert config.strategy.trend_threshold == 70.0
        assert config.strategy.profit_threshold == Decimal("0.10")
        assert config.strategy.stop_loss_threshold == Decimal("0.05")
        assert config.strategy.lookback == 15
        assert config.dispatcher == DispatcherKind.SIMULATION
        assert config.monitor.check_interval_ms == 5000

    def test_kind_defaults(self) -> None:
        macd = default_strategy_config(StrategyKind.MACD)
        momentum = default_strategy_config(StrategyKind.MOMENTUM)

        assert (macd.trend_threshold, macd.lookback) == (0.0, 40)
        assert (momentum.trend_threshold, momentum.lookback) == (0.02, 11)

    def test_required_points(self) -> None:
        assert StrategyConfig(lookback=15).required_points == 15
        assert StrategyConfig(lookback=15, rsi_period=5).required_points == 6
        assert default_strategy_config(StrategyKind.MACD).required_points == 35
        assert default_strategy_config(StrategyKind.MOMENTUM).required_points == 11

    def test_defaults_are_valid(self) -> None:
        for kind in StrategyKind:
            assert ConfigValidator.validate_strategy_config(default_strategy_config(kind)) == []


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_lookback_too_short_for_macd(self) -> None:
        config = StrategyConfig(kind=StrategyKind.MACD, trend_threshold=0.0, lookback=20)
        errors = ConfigValidator.validate_strategy_config(config)

        assert [e.field for e in errors] == ["lookback"]

    def test_rsi_threshold_range(self) -> None:
        for threshold in (50.0, 30.0, 101.0):
            errors = ConfigValidator.validate_strategy_config(StrategyConfig(trend_threshold=threshold))
            assert [e.field for e in errors] == ["trend_threshold"]

    def test_negative_thresholds(self) -> None:
        config = StrategyConfig(profit_threshold=Decimal("-0.1"), stop_loss_threshold=Decimal("-1"))
        fields = {e.field for e in ConfigValidator.validate_strategy_config(config)}
        assert fields == {"profit_threshold", "stop_loss_threshold"}

    def test_zero_thresholds_rejected(self) -> None:
        config = StrategyConfig(profit_threshold=Decimal("0"), stop_loss_threshold=Decimal("0"))
        fields = {e.field for e in ConfigValidator.validate_strategy_config(config)}
        assert fields == {"profit_threshold", "stop_loss_threshold"}

    def test_small_thresholds_allowed(self) -> None:
        config = StrategyConfig(profit_threshold=Decimal("0.001"), stop_loss_threshold=Decimal("0.001"))
        assert ConfigValidator.validate_strategy_config(config) == []

    def test_position_size_must_be_positive(self) -> None:
        errors = ConfigValidator.validate_strategy_config(StrategyConfig(position_size=Decimal("0")))
        assert [e.field for e in errors] == ["position_size"]

    def test_macd_fast_must_be_less_than_slow(self) -> None:
        config = StrategyConfig(
            kind=StrategyKind.MACD, trend_threshold=0.0, lookback=60,
            macd_fast_period=26, macd_slow_period=12
        )
        errors = ConfigValidator.validate_strategy_config(config)
        assert "macd_fast_period" in [e.field for e in errors]

    def test_monitor_params(self) -> None:
        errors = ConfigValidator.validate_monitor_params({
            "check_interval_ms": 0,
            "fetch_timeout_seconds": -1,
            "max_workers": 0,
        })
        assert {e.field for e in errors} == {"check_interval_ms", "fetch_timeout_seconds", "max_workers"}

    def test_markets(self) -> None:
        assert ConfigValidator.validate_markets(["a", "b"]) == []
        assert ConfigValidator.validate_markets([])
        assert ConfigValidator.validate_markets(["a", "a"])
        assert ConfigValidator.validate_markets(["a", ""])

    def test_dispatcher(self) -> None:
        assert ConfigValidator.validate_dispatcher("live") == []
        assert ConfigValidator.validate_dispatcher("paper")

    def test_unhashable_market_ids(self) -> None:
        errors = ConfigValidator.validate_markets(["a", {"b": 1}])
        assert [e.message for e in errors] == ["Market ids must be non-empty strings"]

    def test_logging_params(self) -> None:
        assert ConfigValidator.validate_logging_params({"level": "debug", "format_json": True}) == []

        errors = ConfigValidator.validate_logging_params({"level": "LOUD", "include_caller": "yes"})
        assert {e.field for e in errors} == {"level", "include_caller"}


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_default_path(self) -> None:
        loader = ConfigLoader.create()
        assert loader.config_path.name == "trader.yaml"

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        config = load_config(tmp_path / "absent.yaml", {"markets": ["m"]})

        assert config.strategy == default_strategy_config(StrategyKind.RSI)
        assert config.markets == ["m"]

    def test_file_overrides_defaults(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text(
            "strategy:\n"
            "  kind: momentum\n"
            "  profit_threshold: 0.2\n"
            "markets:\n"
            "  btc-up: '123'\n"
            "monitor:\n"
            "  check_interval_ms: 1000\n"
        )

        config = load_config(path)

        assert config.strategy.kind == StrategyKind.MOMENTUM
        assert config.strategy.lookback == 11
        assert config.strategy.trend_threshold == 0.02
        assert config.strategy.profit_threshold == Decimal("0.2")
        assert config.markets == ["btc-up"]
        assert config.source.tokens == {"btc-up": "123"}
        assert config.monitor.check_interval_ms == 1000
        assert config.monitor.max_workers == 4

    def test_overrides_beat_file(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text("strategy:\n  kind: rsi\n  lookback: 20\nmarkets: [a]\n")

        config = load_config(path, {"strategy": {"lookback": 14, "kind": "rsi"}})

        assert config.strategy.lookback == 14

    def test_override_kind_selects_kind_defaults(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text("markets: [a]\n")

        config = load_config(path, {"strategy": {"kind": "macd"}})

        assert config.strategy.kind == StrategyKind.MACD
        assert config.strategy.lookback == 40

    def test_override_kind_drops_file_kind_tuning(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text(
            "strategy:\n"
            "  kind: rsi\n"
            "  trend_threshold: 75\n"
            "  lookback: 15\n"
            "  profit_threshold: 0.2\n"
            "  position_size: 5\n"
            "markets: [a]\n"
        )

        config = load_config(path, {"strategy": {"kind": "macd"}})

        assert config.strategy.kind == StrategyKind.MACD
        assert config.strategy.trend_threshold == 0.0
        assert config.strategy.lookback == 40
        assert config.strategy.profit_threshold == Decimal("0.2")
        assert config.strategy.position_size == Decimal("5")

    def test_same_kind_override_keeps_file_tuning(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text("strategy:\n  lookback: 20\nmarkets: [a]\n")

        config = load_config(path, {"strategy": {"kind": "rsi"}})

        assert config.strategy.lookback == 20

    def test_unknown_key_rejected(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text("strategy:\n  window: 5\nmarkets: [a]\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert any("window" in e for e in exc_info.value.errors)

    def test_invalid_values_rejected(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text("markets: [a]\nmonitor:\n  check_interval_ms: 0\n")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_strategy_rejected(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "absent.yaml", {"markets": ["a"], "strategy": {"lookback": 5, "rsi_period": 10}})

    def test_unknown_kind(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "absent.yaml", {"strategy": {"kind": "bollinger"}})

    def test_malformed_yaml(self, tmp_path) -> None:
        path = tmp_path / "trader.yaml"
        path.write_text("strategy: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_shipped_example_config_loads(self) -> None:
        example = Path(__file__).parent.parent.parent / "config" / "trader.yaml"
        config = load_config(example)

        assert config.strategy.kind == StrategyKind.RSI
        assert config.markets
