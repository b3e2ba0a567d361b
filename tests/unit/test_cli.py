"""Unit tests for the command-line entry point."""

import argparse
import sys
import types
from dataclasses import replace
from unittest.mock import patch

import pytest

from trend_trader.cli import build_engine, build_overrides, build_parser, load_submitter, main, parse_market
from trend_trader.config.defaults import StrategyKind, default_strategy_config
from trend_trader.config.loader import ConfigLoader, load_config
from trend_trader.dispatch import LiveDispatcher, SimulationDispatcher
from trend_trader.errors import ConfigurationError

from helpers.fakes import RecordingSubmitter


class TestArguments:
    """Test suite for argument parsing."""

    def test_parse_market(self) -> None:
        assert parse_market("btc-up=123") == ("btc-up", "123")

        with pytest.raises(argparse.ArgumentTypeError):
            parse_market("btc-up")

    def test_overrides(self) -> None:
        args = build_parser().parse_args([
            "--strategy", "momentum",
            "--threshold", "0.05",
            "--profit-threshold", "0.2",
            "--lookback", "12",
            "--market", "a=1",
            "--market", "b=2",
            "--check-interval-ms", "1000",
            "--live",
            "--json-logs",
        ])

        overrides = build_overrides(args)

        assert overrides["strategy"] == {
            "kind": "momentum",
            "trend_threshold": 0.05,
            "profit_threshold": "0.2",
            "lookback": 12,
        }
        assert overrides["markets"] == {"a": "1", "b": "2"}
        assert overrides["monitor"] == {"check_interval_ms": 1000}
        assert overrides["dispatcher"] == "live"
        assert overrides["logging"] == {"format_json": True}

    def test_no_flags_no_overrides(self) -> None:
        assert build_overrides(build_parser().parse_args([])) == {}

    @pytest.mark.parametrize("kind", ["macd", "momentum"])
    def test_strategy_flag_with_shipped_config(self, kind) -> None:
        args = build_parser().parse_args(["--strategy", kind])

        config = ConfigLoader.create().load(build_overrides(args))

        assert config.strategy == replace(
            default_strategy_config(StrategyKind(kind)),
            profit_threshold=config.strategy.profit_threshold,
            stop_loss_threshold=config.strategy.stop_loss_threshold,
            position_size=config.strategy.position_size
        )


class TestSubmitterLoading:
    """Test suite for loading a live order submitter."""

    def test_load_factory(self) -> None:
        module = types.ModuleType("fake_submitters")
        module.make = RecordingSubmitter
        with patch.dict(sys.modules, {"fake_submitters": module}):
            submitter = load_submitter("fake_submitters:make")

        assert isinstance(submitter, RecordingSubmitter)

    @pytest.mark.parametrize("target", ["no_colon", "missing_module_xyz:make", "json:missing_attr"])
    def test_bad_targets(self, target) -> None:
        with pytest.raises(ConfigurationError):
            load_submitter(target)


class TestBuildEngine:
    """Test suite for engine construction from config."""

    def test_simulation_engine(self, tmp_path) -> None:
        config = load_config(tmp_path / "absent.yaml", {"markets": {"a": "1"}})
        engine = build_engine(config)

        assert isinstance(engine.dispatcher, SimulationDispatcher)
        assert engine.monitor.data_source.token_ids == {"a": "1"}

    def test_market_without_token(self, tmp_path) -> None:
        config = load_config(tmp_path / "absent.yaml", {"markets": ["a"]})

        with pytest.raises(ConfigurationError):
            build_engine(config)

    def test_live_requires_submitter(self, tmp_path) -> None:
        config = load_config(tmp_path / "absent.yaml", {"markets": {"a": "1"}, "dispatcher": "live"})

        with pytest.raises(ConfigurationError):
            build_engine(config)

    def test_live_engine(self, tmp_path) -> None:
        module = types.ModuleType("fake_submitters")
        module.make = RecordingSubmitter
        config = load_config(tmp_path / "absent.yaml", {"markets": {"a": "1"}, "dispatcher": "live"})

        with patch.dict(sys.modules, {"fake_submitters": module}):
            engine = build_engine(config, "fake_submitters:make")

        assert isinstance(engine.dispatcher, LiveDispatcher)


class TestMain:
    def test_config_error_exit_code(self, tmp_path, capsys) -> None:
        code = main(["--config", str(tmp_path / "absent.yaml")])

        assert code == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_runs_engine(self, tmp_path) -> None:
        with patch("trend_trader.cli.configure_logging"), \
             patch("trend_trader.engine.TradingEngine.install_signal_handlers"), \
             patch("trend_trader.engine.TradingEngine.run") as mock_run:
            code = main(["--config", str(tmp_path / "absent.yaml"), "--market", "a=1"])

        assert code == 0
        mock_run.assert_called_once_with()
