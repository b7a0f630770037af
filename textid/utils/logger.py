"""Structured logging utilities for textid.

textid never configures logging on import. Its loggers are structlog proxies
wrapped around stdlib loggers in the ``textid`` namespace, so they follow
whatever the host program set up: its structlog processors and its
``logging.getLogger("textid")`` level and handlers. Standalone callers opt in
to a stderr setup with :func:`configure_logging`.
"""

import logging
import sys
import time
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from textid.constants import SLOW_OPERATION_MS

VALID_LOG_LEVELS: frozenset[str] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)

LOGGER_NAMESPACE = "textid"
_HANDLER_NAME = "textid-stderr"


def add_timestamp(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add epoch timestamp to log entries."""
    event_dict["timestamp"] = time.time()
    return event_dict


def configure_logging(
    log_level: str = "WARNING",
    json_output: bool = False
) -> None:
    """Configure structured logging for a program that uses textid standalone.

    This replaces the global structlog configuration and installs a stderr
    handler on the ``textid`` stdlib logger. Libraries embedding textid should
    leave it uncalled and configure logging themselves.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON format. If False, use console format.

    Raises:
        ValueError: If log_level is not a known level name.
    """
    level_name = log_level.upper()
    if level_name not in VALID_LOG_LEVELS:
        raise ValueError(f"Unknown log level: {log_level!r}")

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_timestamp,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.extend([
            structlog.dev.ConsoleRenderer(colors=False),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name)
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    library_logger = logging.getLogger(LOGGER_NAMESPACE)
    for stale in [h for h in library_logger.handlers if h.get_name() == _HANDLER_NAME]:
        library_logger.removeHandler(stale)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    library_logger.addHandler(handler)
    library_logger.setLevel(getattr(logging, level_name))
    library_logger.propagate = False


def get_logger(name: str = LOGGER_NAMESPACE) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to the stdlib logger ``name``.

    Processors and the level filter are read from the global structlog
    configuration on each use, so later host configuration applies.

    Args:
        name: Logger name (typically module name)

    Returns:
        Lazy structlog proxy around ``logging.getLogger(name)``
    """
    return structlog.wrap_logger(logging.getLogger(name))


class PerformanceLogger:
    """Context manager for tracking operation performance."""

    def __init__(
        self,
        operation: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        warn_ms: float = SLOW_OPERATION_MS,
        **fields: Any,
    ):
        """Initialize performance logger.

        Args:
            operation: Name of the operation being timed
            logger: Logger instance to use (creates new if None)
            warn_ms: Durations above this are logged at WARNING
            **fields: Extra key/value pairs added to the completion line
        """
        self.operation = operation
        self.logger = logger or get_logger()
        self.warn_ms = warn_ms
        self.fields = fields
        self.start_time: float = 0
        self.end_time: float = 0

    def __enter__(self) -> "PerformanceLogger":
        """Start timing."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Stop timing and log performance."""
        self.end_time = time.perf_counter()
        duration_ms = (self.end_time - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed",
                operation=self.operation,
                duration_ms=duration_ms,
                error=str(exc_val),
                **self.fields,
            )
        else:
            log_method = self.logger.warning if duration_ms > self.warn_ms else self.logger.debug
            log_method(
                f"{self.operation} completed",
                operation=self.operation,
                duration_ms=duration_ms,
                **self.fields,
            )

    @property
    def duration_ms(self) -> float:
        """Get duration in milliseconds."""
        if self.end_time == 0:
            return (time.perf_counter() - self.start_time) * 1000
        return (self.end_time - self.start_time) * 1000

