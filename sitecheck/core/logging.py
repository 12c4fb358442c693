"""Structured logging for sitecheck.

This module provides structured logging with:
- Run ID generation and propagation across a verification run
- JSON output for CI, pretty output for terminals
- Common fields (version, hostname) on every event
- Integration with Python's standard logging

Example usage:
    from sitecheck.core.logging import configure_logging, get_logger, run_context

    configure_logging()
    logger = get_logger(__name__)

    with run_context():
        logger.info("suite_started", suite="lighthouse_audit")
"""

import logging
import socket
import sys
import uuid
from contextvars import ContextVar
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from sitecheck import __version__

# Context variable holding the ID of the current verification run
_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)


def generate_run_id() -> str:
    """Generate a unique run ID.

    Returns:
        A unique string identifier (UUID4 format).
    """
    return str(uuid.uuid4())


def get_run_id() -> str | None:
    """Get the current run ID from context."""
    return _run_id.get()


class run_context:
    """Context manager that scopes log events to a single verification run.

    Example:
        with run_context() as run_id:
            logger.info("processing")  # Includes run_id
    """

    def __init__(self, run_id: str | None = None) -> None:
        self.run_id = run_id or generate_run_id()
        self._token: Any = None

    def __enter__(self) -> str:
        self._token = _run_id.set(self.run_id)
        return self.run_id

    def __exit__(self, *args: Any) -> None:
        _run_id.reset(self._token)

    async def __aenter__(self) -> str:
        return self.__enter__()

    async def __aexit__(self, *args: Any) -> None:
        self.__exit__(*args)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_run_id(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the run ID to log events if available."""
    run_id = get_run_id()
    if run_id is not None:
        event_dict["run_id"] = run_id
    return event_dict


@lru_cache(maxsize=1)
def _get_hostname() -> str:
    """Get the hostname (cached)."""
    try:
        return socket.gethostname()
    except OSError:
        return "unknown"


def add_common_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add common fields like version and hostname."""
    event_dict.setdefault("sitecheck_version", __version__)
    event_dict.setdefault("hostname", _get_hostname())
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_run_id,
        add_common_fields,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]


# =============================================================================
# Logging Configuration
# =============================================================================


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON output format. If None, auto-detects:
                     True if stderr is not a TTY (CI), False otherwise
        log_file: Optional file path for log output
    """
    if json_output is None:
        json_output = not sys.stderr.isatty()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=shared_processors,
        )
    else:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=shared_processors,
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Reports go to stdout, so logs stay on stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A structured logger instance.
    """
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Reset logging configuration to defaults.

    Used by tests to ensure clean state between cases.
    """
    _run_id.set(None)
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
