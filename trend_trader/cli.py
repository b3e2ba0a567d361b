"""Command-line entry point for running the trader."""

import argparse
import importlib
import sys
from pathlib import Path
from typing import Any, Optional

import structlog

from .config.defaults import DefaultConfig, DispatcherKind, StrategyKind
from .config.loader import ConfigLoader
from .engine import TradingEngine
from .errors import ConfigurationError
from .logging.config import configure_logging
from .ports import OrderSubmitter
from .sources.clob import ClobPriceSource

logger = structlog.get_logger(__name__)


def parse_market(value: str) -> tuple[str, str]:
    """Parse ``MARKET=TOKEN_ID``."""
    market_id, sep, token_id = value.partition("=")
    if not sep or not market_id.strip() or not token_id.strip():
        raise argparse.ArgumentTypeError(f"expected MARKET=TOKEN_ID, got {value!r}")
    return market_id.strip(), token_id.strip()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="trend-trader",
        description="Trade short-lived prediction markets on RSI, MACD or momentum trends."
    )
    ap.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/trader.yaml).")
    ap.add_argument("--strategy", choices=[k.value for k in StrategyKind], help="Trending index to trade on.")
    ap.add_argument("--threshold", type=float, help="Trend threshold for the selected index.")
    ap.add_argument("--profit-threshold", type=str, help="Take-profit as a fraction of entry price.")
    ap.add_argument("--stop-loss-threshold", type=str, help="Stop-loss as a fraction of entry price.")
    ap.add_argument("--lookback", type=int, help="Price window length.")
    ap.add_argument("--position-size", type=str, help="Contracts per entry.")
    ap.add_argument(
        "--market", type=parse_market, action="append", default=[], metavar="MARKET=TOKEN_ID",
        help="Market to trade and its CLOB token id; repeatable."
    )
    ap.add_argument("--check-interval-ms", type=int, help="Polling interval in milliseconds.")
    ap.add_argument("--clob-url", type=str, help="CLOB REST base URL.")
    ap.add_argument("--live", action="store_true", help="Submit real orders instead of simulating.")
    ap.add_argument(
        "--submitter", type=str, metavar="MODULE:FACTORY",
        help="Factory returning an OrderSubmitter; required with --live."
    )
    ap.add_argument("--journal", type=Path, help="Append executed trades to this JSONL file.")
    ap.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING or ERROR.")
    ap.add_argument("--json-logs", action="store_true", help="Emit JSON log lines.")
    return ap


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate command-line flags into the highest-precedence config tier."""
    strategy: dict[str, Any] = {}
    if args.strategy:
        strategy["kind"] = args.strategy
    if args.threshold is not None:
        strategy["trend_threshold"] = args.threshold
    if args.profit_threshold is not None:
        strategy["profit_threshold"] = args.profit_threshold
    if args.stop_loss_threshold is not None:
        strategy["stop_loss_threshold"] = args.stop_loss_threshold
    if args.lookback is not None:
        strategy["lookback"] = args.lookback
    if args.position_size is not None:
        strategy["position_size"] = args.position_size

    overrides: dict[str, Any] = {}
    if strategy:
        overrides["strategy"] = strategy
    if args.market:
        overrides["markets"] = dict(args.market)
    if args.check_interval_ms is not None:
        overrides["monitor"] = {"check_interval_ms": args.check_interval_ms}
    if args.clob_url:
        overrides["source"] = {"clob_url": args.clob_url}
    if args.live:
        overrides["dispatcher"] = DispatcherKind.LIVE.value
    if args.journal:
        overrides["journal"] = {"path": str(args.journal)}

    logging_overrides: dict[str, Any] = {}
    if args.log_level:
        logging_overrides["level"] = args.log_level
    if args.json_logs:
        logging_overrides["format_json"] = True
    if logging_overrides:
        overrides["logging"] = logging_overrides

    return overrides


def load_submitter(target: str) -> OrderSubmitter:
    """Import ``module:factory`` and call the factory to build a submitter."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Submitter must be MODULE:FACTORY, got {target!r}")

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load submitter factory {target!r}: {e}") from e

    return factory()


def build_engine(config: DefaultConfig, submitter_target: Optional[str] = None) -> TradingEngine:
    """Build a configured engine from a loaded configuration."""
    missing = [m for m in config.markets if m not in config.source.tokens]
    if missing:
        raise ConfigurationError(
            "Markets without a CLOB token id",
            errors=[f"markets: no token id for {m}" for m in missing]
        )

    submitter = None
    if config.dispatcher == DispatcherKind.LIVE:
        if not submitter_target:
            raise ConfigurationError("Live mode requires --submitter MODULE:FACTORY")
        submitter = load_submitter(submitter_target)

    source = ClobPriceSource(
        config.source.clob_url,
        config.source.tokens,
        side=config.source.side,
        api_key=config.source.api_key,
        default_timeout=config.monitor.fetch_timeout_seconds
    )

    engine = TradingEngine()
    engine.configure(
        config.strategy,
        config.markets,
        config.monitor.check_interval_ms,
        config.dispatcher,
        source,
        order_submitter=submitter,
        monitor_params=config.monitor,
        live_params=config.live,
        journal_params=config.journal
    )
    return engine


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader.create(args.config).load(build_overrides(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return 2

    configure_logging(
        level=config.logging.level,
        format_json=config.logging.format_json,
        include_caller=config.logging.include_caller
    )

    try:
        engine = build_engine(config, args.submitter)
    except ConfigurationError as e:
        logger.error("Cannot start engine", error=str(e), errors=e.errors)
        return 2

    engine.install_signal_handlers()
    engine.run()

    logger.info("Final statistics", **engine.get_runtime_stats())
    return 0


if __name__ == "__main__":
    sys.exit(main())
