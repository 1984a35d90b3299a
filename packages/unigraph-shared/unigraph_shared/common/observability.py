"""
Structured Logging with structlog

Provides structured, contextual logging for analysis runs.
"""

import logging
import sys
import time
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars

from unigraph_shared.common.exceptions import InvalidConfigurationError

LOG_FORMATS = ("json", "console")


def setup_logging(
    level: str = "INFO",
    format: str = "console",  # "json" or "console"
    include_timestamp: bool = True,
) -> None:
    """
    Setup structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ("json" for production, "console" for development)
        include_timestamp: Include timestamp in logs

    Raises:
        InvalidConfigurationError: Unknown format
    """
    if format not in LOG_FORMATS:
        raise InvalidConfigurationError(
            f"Unknown log format: {format}",
            {"format": format, "allowed": list(LOG_FORMATS)},
        )

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Configure stdlib logging to play nice with structlog
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )

    shared_processors = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if include_timestamp:
        shared_processors.append(structlog.processors.TimeStamper(fmt="iso"))

    shared_processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
    )

    if format == "json":
        output_processors = [
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=shared_processors + output_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__ from calling module)

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("project_discovered", project_id="core", symbols=120)
        ```
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Add contextual data to all subsequent log messages in current context.

    Uses contextvars, so it is safe across asyncio tasks.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context(*keys: str) -> None:
    """Clear specific keys from logging context, or all of it when no keys are given."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()


class BatchLogger:
    """
    Batch logging for hot loops.

    Many per-item events collapse into one summary event carrying the
    count, duration and a handful of samples.

    Example:
        with BatchLogger(logger, "symbol_discovery") as batch:
            for symbol in symbols:
                batch.record(symbol=symbol.display_name)
        # one "symbol_discovery_complete" event
    """

    def __init__(self, logger, operation: str, sample_size: int = 3):
        self.logger = logger
        self.operation = operation
        self.sample_size = sample_size
        self.count = 0
        self.records: list[dict[str, Any]] = []
        self.start_time: float | None = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - (self.start_time or time.perf_counter())

        log_data: dict[str, Any] = {
            "count": self.count,
            "duration_ms": round(duration * 1000, 2),
        }
        if self.records:
            log_data["samples"] = self.records[: self.sample_size]

        self.logger.info(f"{self.operation}_complete", **log_data)

    def record(self, **kwargs: Any) -> None:
        """Record one item; only the first few are kept as samples."""
        self.count += 1
        if len(self.records) < self.sample_size:
            self.records.append(kwargs)
