"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    DefaultConfig,
    DispatcherKind,
    JournalParams,
    LiveParams,
    LoggingParams,
    MonitorParams,
    SourceParams,
    StrategyConfig,
    StrategyKind,
    get_default_config,
)
from .validation import ConfigValidator

_DECIMAL_FIELDS = {
    "profit_threshold",
    "stop_loss_threshold",
    "position_size",
    "min_price",
    "max_price",
}

# Strategy keys tuned for one indicator kind; the rest apply to every kind
_KIND_SPECIFIC_FIELDS = {
    "trend_threshold",
    "lookback",
    "rsi_period",
    "macd_fast_period",
    "macd_slow_period",
    "macd_signal_period",
    "momentum_period",
    "momentum_percent",
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_path: Path

    @classmethod
    def create(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "trader.yaml"

        return cls(config_path=Path(config_path))

    def load_file_config(self) -> dict[str, Any]:
        """Load the YAML configuration file, or an empty mapping if it is absent."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path) as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_path}: {e}",
                context={"config_path": str(self.config_path)}
            ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Top level of {self.config_path} must be a mapping",
                context={"config_path": str(self.config_path)}
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides, e.g. command-line flags (highest priority)
        2. YAML configuration file
        3. Defaults for the selected indicator kind (lowest priority)

        When the overrides switch the indicator kind, the file's kind-specific
        strategy keys (threshold, lookback, periods) are dropped so the new
        kind starts from its own defaults.
        """
        overrides = overrides or {}
        file_config = self._normalize_markets(self.load_file_config())
        overrides = self._normalize_markets(overrides)

        # The indicator kind picks which defaults form the base tier
        kind_value = (
            overrides.get("strategy", {}).get("kind")
            or file_config.get("strategy", {}).get("kind")
            or StrategyKind.RSI.value
        )
        try:
            kind = StrategyKind(kind_value)
        except ValueError:
            raise ConfigurationError(
                f"Unknown strategy kind: {kind_value!r}",
                errors=[f"strategy.kind must be one of {[k.value for k in StrategyKind]}"]
            )

        file_strategy = file_config.get("strategy")
        if isinstance(file_strategy, dict) and file_strategy.get("kind", StrategyKind.RSI.value) != kind.value:
            file_config = dict(file_config)
            file_config["strategy"] = {
                key: value for key, value in file_strategy.items()
                if key not in _KIND_SPECIFIC_FIELDS
            }

        config = self._dataclass_to_dict(get_default_config(kind))
        config = self._deep_merge(config, file_config)
        config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Build and validate the typed configuration.

        Raises:
            ConfigurationError: if any parameter is unknown or invalid
        """
        merged = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            raise ConfigurationError(
                "Invalid configuration",
                errors=[f"{e.field}: {e.message} (got {e.value!r})" for e in errors]
            )

        config = DefaultConfig(
            strategy=self._build(StrategyConfig, merged.get("strategy", {}), "strategy"),
            markets=list(merged.get("markets") or []),
            dispatcher=DispatcherKind(merged.get("dispatcher", DispatcherKind.SIMULATION)),
            monitor=self._build(MonitorParams, merged.get("monitor", {}), "monitor"),
            live=self._build(LiveParams, merged.get("live", {}), "live"),
            source=self._build(SourceParams, merged.get("source", {}), "source"),
            logging=self._build(LoggingParams, merged.get("logging", {}), "logging"),
            journal=self._build(JournalParams, merged.get("journal", {}), "journal"),
        )

        strategy_errors = ConfigValidator.validate_strategy_config(config.strategy)
        if strategy_errors:
            raise ConfigurationError(
                "Invalid strategy configuration",
                errors=[f"strategy.{e.field}: {e.message} (got {e.value!r})" for e in strategy_errors]
            )

        return config

    def _build(self, cls: type, values: dict[str, Any], section: str) -> Any:
        """Instantiate a parameter dataclass, rejecting unknown keys."""
        if not isinstance(values, dict):
            raise ConfigurationError(
                f"Section '{section}' must be a mapping",
                errors=[f"{section}: got {type(values).__name__}"]
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown keys in section '{section}': {', '.join(unknown)}",
                errors=[f"{section}.{key}: unknown parameter" for key in unknown]
            )

        kwargs = {}
        for key, value in values.items():
            if key in _DECIMAL_FIELDS and value is not None:
                value = self._to_decimal(value, f"{section}.{key}")
            elif key == "kind":
                value = StrategyKind(value)
            kwargs[key] = value

        return cls(**kwargs)

    @staticmethod
    def _to_decimal(value: Any, name: str) -> Decimal:
        # Convert through str so YAML floats keep their written digits
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ConfigurationError(
                f"{name} is not a number: {value!r}",
                errors=[f"{name}: not a number"]
            )

    @staticmethod
    def _normalize_markets(config: dict[str, Any]) -> dict[str, Any]:
        """Accept ``markets`` as a list of ids or a mapping of id to token id."""
        markets = config.get("markets")
        if not isinstance(markets, dict):
            return config

        result = dict(config)
        result["markets"] = list(markets.keys())
        source = dict(result.get("source") or {})
        source["tokens"] = {**source.get("tokens", {}), **markets}
        result["source"] = source
        return result

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, (list, dict)):
                    result[field_name] = value.copy()
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None
) -> DefaultConfig:
    """Load the configuration from ``config_path`` with optional overrides."""
    return ConfigLoader.create(config_path).load(overrides)
