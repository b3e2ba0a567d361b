"""
Centralized logging configuration for the trend trader.

All components log through structlog so that decisions, dispatches and
per-market failures share one structured format. Simulation and live runs
emit the same events; only the bound ``mode`` differs.
"""
import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from structlog.types import FilteringBoundLogger

from ..config.validation import LOG_LEVELS


def _base_processors(include_timestamp: bool, include_caller: bool) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ))
    return processors


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    stream: Optional[TextIO] = None,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Events flow through the standard library root handler so third-party
    libraries end up in the same stream.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: One JSON object per line instead of console output
        include_timestamp: Add an ISO-8601 UTC timestamp
        include_caller: Add module name and line number
        stream: Output stream (defaults to stdout)
        extra_processors: Processors to run before rendering

    Raises:
        ValueError: if the level name is unknown
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")

    logging.basicConfig(
        level=getattr(logging, level_name),
        stream=stream or sys.stdout,
        format="%(message)s",
        force=True
    )

    processors = _base_processors(include_timestamp, include_caller)
    processors.extend(extra_processors or [])
    processors.append(
        structlog.processors.JSONRenderer() if format_json
        else structlog.dev.ConsoleRenderer(colors=stream is None and sys.stdout.isatty())
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Get a structlog logger by name (typically ``__name__``)."""
    return structlog.get_logger(name)


def get_decision_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for strategy decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for strategy decisions
    """
    return get_logger(name).bind(
        subsystem="strategy",
        audit_trail=True
    )


def get_dispatch_logger(name: str, mode: str) -> FilteringBoundLogger:
    """
    Get a logger bound for trade dispatching.

    Args:
        name: Logger name (typically __name__)
        mode: Dispatcher mode, "simulation" or "live"

    Returns:
        Configured structlog logger for dispatch events
    """
    return get_logger(name).bind(
        subsystem="dispatch",
        mode=mode,
        audit_trail=True
    )


def log_trade_decision(
    logger: FilteringBoundLogger,
    market_id: str,
    action: str,
    price: Any,
    indicator: Optional[dict[str, Any]] = None,
    reason: Optional[str] = None
) -> None:
    """
    Log a strategy decision with standardized format.

    Args:
        logger: Structlog logger instance
        market_id: Market the decision applies to
        action: Action name (enter, exit, hold)
        price: Price the decision was made at
        indicator: Indicator snapshot used for the decision
        reason: Exit reason or hold explanation
    """
    bound_logger = logger.bind(
        market_id=market_id,
        action=action,
        price=str(price) if price is not None else None,
        reason=reason,
    )

    if indicator:
        bound_logger = bound_logger.bind(indicator=indicator)

    if action == "hold":
        bound_logger.debug("Trade decision")
    else:
        bound_logger.info("Trade decision")


def log_position_transition(
    logger: FilteringBoundLogger,
    market_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a position state transition with standardized format.

    Args:
        logger: Structlog logger instance
        market_id: Market whose position changed
        from_state: Previous state (flat, long, short)
        to_state: New state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        market_id=market_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Position transition")
