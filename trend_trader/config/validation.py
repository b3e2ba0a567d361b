"""Configuration validation utilities."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .defaults import DispatcherKind, StrategyConfig, StrategyKind

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float, Decimal))


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_strategy_config(config: StrategyConfig) -> list[ValidationError]:
        """Validate strategy parameters."""
        errors = []

        if not isinstance(config.kind, StrategyKind):
            errors.append(ValidationError(
                field="kind",
                message=f"Must be one of {[k.value for k in StrategyKind]}",
                value=config.kind
            ))
            return errors

        # Validate lookback
        if not _is_positive_int(config.lookback) or config.lookback < 2:
            errors.append(ValidationError(
                field="lookback",
                message="Must be an integer of at least 2",
                value=config.lookback
            ))
            return errors

        # Validate trend_threshold
        threshold = config.trend_threshold
        if not _is_number(threshold):
            errors.append(ValidationError(
                field="trend_threshold",
                message="Must be a number",
                value=threshold
            ))
        elif config.kind == StrategyKind.RSI and not 50 < threshold <= 100:
            errors.append(ValidationError(
                field="trend_threshold",
                message="RSI threshold must be in (50, 100]",
                value=threshold
            ))
        elif config.kind != StrategyKind.RSI and threshold < 0:
            errors.append(ValidationError(
                field="trend_threshold",
                message="Must be a non-negative number",
                value=threshold
            ))

        # Validate profit and stop-loss thresholds
        for name in ("profit_threshold", "stop_loss_threshold"):
            value = getattr(config, name)
            # A zero threshold exits on the first cycle after entry
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive number",
                    value=value
                ))

        # Validate position_size
        if not _is_number(config.position_size) or config.position_size <= 0:
            errors.append(ValidationError(
                field="position_size",
                message="Must be a positive number",
                value=config.position_size
            ))

        # Validate indicator periods
        for name in ("rsi_period", "momentum_period"):
            value = getattr(config, name)
            if value is not None and not _is_positive_int(value):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=value
                ))

        for name in ("macd_fast_period", "macd_slow_period", "macd_signal_period"):
            value = getattr(config, name)
            if not _is_positive_int(value):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=value
                ))

        if errors:
            return errors

        if config.kind == StrategyKind.MACD and config.macd_fast_period >= config.macd_slow_period:
            errors.append(ValidationError(
                field="macd_fast_period",
                message="Must be less than macd_slow_period",
                value=config.macd_fast_period
            ))

        # The window must be able to hold enough points for the indicator
        if config.lookback < config.required_points:
            errors.append(ValidationError(
                field="lookback",
                message=(
                    f"{config.kind.value} needs at least {config.required_points} "
                    f"points in the window"
                ),
                value=config.lookback
            ))

        return errors

    @staticmethod
    def validate_monitor_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate monitor parameters."""
        errors = []

        if "check_interval_ms" in params:
            value = params["check_interval_ms"]
            if not _is_positive_int(value):
                errors.append(ValidationError(
                    field="check_interval_ms",
                    message="Must be a positive integer",
                    value=value
                ))

        if "fetch_timeout_seconds" in params:
            value = params["fetch_timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="fetch_timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "max_workers" in params:
            value = params["max_workers"]
            if not _is_positive_int(value):
                errors.append(ValidationError(
                    field="max_workers",
                    message="Must be a positive integer",
                    value=value
                ))

        if params.get("max_price_age_seconds") is not None:
            value = params["max_price_age_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="max_price_age_seconds",
                    message="Must be a positive number or null",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_live_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate live submission parameters."""
        errors = []

        if "submit_timeout_seconds" in params:
            value = params["submit_timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="submit_timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "max_retries" in params:
            value = params["max_retries"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="max_retries",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "retry_delay_seconds" in params:
            value = params["retry_delay_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="retry_delay_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_source_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate price source parameters."""
        errors = []

        if "side" in params and params["side"] not in ("BUY", "SELL"):
            errors.append(ValidationError(
                field="side",
                message="Must be BUY or SELL",
                value=params["side"]
            ))

        if "clob_url" in params:
            value = params["clob_url"]
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                errors.append(ValidationError(
                    field="clob_url",
                    message="Must be an http(s) URL",
                    value=value
                ))

        if "tokens" in params and not isinstance(params["tokens"], dict):
            errors.append(ValidationError(
                field="tokens",
                message="Must be a mapping of market id to token id",
                value=params["tokens"]
            ))

        return errors

    @staticmethod
    def validate_markets(markets: Any) -> list[ValidationError]:
        """Validate the configured market list."""
        if not isinstance(markets, (list, tuple)) or not markets:
            return [ValidationError(
                field="markets",
                message="Must be a non-empty list of market ids",
                value=markets
            )]

        errors = []
        for market in markets:
            if not isinstance(market, str) or not market.strip():
                errors.append(ValidationError(
                    field="markets",
                    message="Market ids must be non-empty strings",
                    value=market
                ))

        if not errors and len(set(markets)) != len(markets):
            errors.append(ValidationError(
                field="markets",
                message="Market ids must be unique",
                value=markets
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging output parameters."""
        errors = []

        level = params.get("level", "INFO")
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            errors.append(ValidationError(
                field="level",
                message=f"Must be one of {list(LOG_LEVELS)}",
                value=level
            ))

        for flag in ("format_json", "include_caller"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=flag,
                    message="Must be true or false",
                    value=params[flag]
                ))

        return errors

    @staticmethod
    def validate_dispatcher(kind: Any) -> list[ValidationError]:
        """Validate the dispatcher kind."""
        try:
            DispatcherKind(kind)
        except ValueError:
            return [ValidationError(
                field="dispatcher",
                message=f"Must be one of {[k.value for k in DispatcherKind]}",
                value=kind
            )]
        return []

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate a raw (merged) configuration dictionary."""
        errors = []

        if "monitor" in config:
            errors.extend(ConfigValidator.validate_monitor_params(config["monitor"]))

        if "live" in config:
            errors.extend(ConfigValidator.validate_live_params(config["live"]))

        if "source" in config:
            errors.extend(ConfigValidator.validate_source_params(config["source"]))

        if "markets" in config:
            errors.extend(ConfigValidator.validate_markets(config["markets"]))

        if "dispatcher" in config:
            errors.extend(ConfigValidator.validate_dispatcher(config["dispatcher"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
