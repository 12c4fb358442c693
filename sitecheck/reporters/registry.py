"""Reporter lookup by output format name."""

from typing import Any

from sitecheck.core.exceptions import ConfigurationError

from .base import Reporter
from .console import ConsoleReporter
from .html_reporter import HTMLReporter
from .json_reporter import JSONReporter

REPORTERS: dict[str, type[Reporter]] = {
    "console": ConsoleReporter,
    "json": JSONReporter,
    "html": HTMLReporter,
}


def create_reporter(
    reporter_type: str, config: dict[str, Any] | None = None
) -> Reporter:
    """Create a reporter for an output format.

    Args:
        reporter_type: One of the REPORTERS keys.
        config: Keyword arguments for the reporter class.

    Returns:
        Configured reporter instance.

    Raises:
        ConfigurationError: If the format is unknown.
    """
    try:
        reporter_class = REPORTERS[reporter_type]
    except KeyError:
        raise ConfigurationError(f"Unknown output format: {reporter_type}") from None
    return reporter_class(**(config or {}))
