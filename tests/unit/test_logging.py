"""Tests for structured logging helpers."""

import io
import json
from unittest.mock import Mock

import pytest
import structlog

from trend_trader.logging.config import (
    configure_logging,
    get_decision_logger,
    get_dispatch_logger,
    log_position_transition,
    log_trade_decision,
)


class TestLoggingHelpers:
    """Test suite for the standard log events."""

    def test_trade_decision_levels(self) -> None:
        logger = Mock()
        bound = logger.bind.return_value

        log_trade_decision(logger, "m", "hold", "0.5")
        bound.debug.assert_called_once_with("Trade decision")

        log_trade_decision(logger, "m", "enter", "0.5", indicator={"kind": "rsi", "value": 20.0})
        bound.bind.assert_called_once_with(indicator={"kind": "rsi", "value": 20.0})
        bound.bind.return_value.info.assert_called_once_with("Trade decision")

    def test_trade_decision_fields(self) -> None:
        logger = Mock()

        log_trade_decision(logger, "m", "exit", 0.45, reason="stop_loss")

        logger.bind.assert_called_once_with(market_id="m", action="exit", price="0.45", reason="stop_loss")

    def test_position_transition(self) -> None:
        logger = Mock()

        log_position_transition(logger, "m", "flat", "long", "enter", context={"price": "0.4"})

        logger.bind.assert_called_once_with(market_id="m", from_state="flat", to_state="long", trigger="enter")
        logger.bind.return_value.bind.assert_called_once_with(context={"price": "0.4"})


class TestLoggerConfiguration:
    """Test suite for logger setup."""

    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_json_renderer(self) -> None:
        configure_logging(level="INFO", format_json=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_and_caller(self) -> None:
        configure_logging(level="DEBUG", format_json=False, include_caller=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert any(isinstance(p, structlog.processors.CallsiteParameterAdder) for p in processors)

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            configure_logging(level="LOUD")

    def test_json_lines_to_stream(self) -> None:
        stream = io.StringIO()
        configure_logging(level="INFO", format_json=True, stream=stream)

        structlog.get_logger("trend_trader.test").info("Engine started", mode="simulation")

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "Engine started"
        assert record["mode"] == "simulation"
        assert record["level"] == "info"

    def test_dispatch_logger_binding(self) -> None:
        structlog.reset_defaults()

        with structlog.testing.capture_logs() as logs:
            get_dispatch_logger("trade.dispatch.live", "live").info("Order placed", market_id="m")

        assert logs[0]["event"] == "Order placed"
        assert logs[0]["mode"] == "live"
        assert logs[0]["subsystem"] == "dispatch"
        assert logs[0]["market_id"] == "m"

    def test_decision_logger_binding(self) -> None:
        structlog.reset_defaults()

        with structlog.testing.capture_logs() as logs:
            get_decision_logger("strategy").info("Trade decision", action="enter")

        assert logs[0]["subsystem"] == "strategy"
        assert logs[0]["audit_trail"] is True
