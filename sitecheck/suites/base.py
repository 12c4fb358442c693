"""Base class for verification suites."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

import structlog

from sitecheck.core.exceptions import ToolUnavailableError
from sitecheck.core.logging import get_logger
from sitecheck.runner.models import NotRun
from sitecheck.runner.tools import ToolRunner
from sitecheck.suites.network import is_reachable

LOCAL_SERVER_HINT = "Please run: npm run serve"


def filesystem_timestamp(moment: datetime | None = None) -> str:
    """ISO-8601 timestamp with ':' and '.' replaced so it is safe in filenames."""
    moment = moment or datetime.now()
    return moment.isoformat().replace(":", "-").replace(".", "-")


class Suite(ABC):
    """A single independently runnable verification.

    Subclasses implement :meth:`run`, returning True/False for pass/fail or
    :class:`NotRun` when the suite decided not to execute. Exceptions are
    allowed to escape; the orchestrator records them as failures.
    """

    description: str = ""
    details: str | None = None

    def __init__(
        self,
        tools: ToolRunner | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._logger = logger or get_logger(self.__module__)
        self.tools = tools or ToolRunner(logger=self._logger)

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the suite name used in reports."""

    @abstractmethod
    async def run(self) -> bool | NotRun:
        """Execute the suite."""

    async def check_ready(self) -> NotRun | None:
        """Return NotRun if a precondition outside the suite is missing."""
        return None

    def _ensure_output_dir(self, output_dir: Path) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir


class LocalServerSuite(Suite):
    """Suite that needs the local development server to be running."""

    url: str

    async def check_ready(self) -> NotRun | None:
        if await is_reachable(self.url):
            return None
        self._logger.warning(
            "local_server_unreachable", url=self.url, hint=LOCAL_SERVER_HINT
        )
        return NotRun("Local server not accessible")

    async def ensure_server(self) -> None:
        """Raise ToolUnavailableError if the local server is down."""
        self._logger.info("checking_local_server", url=self.url)
        if not await is_reachable(self.url):
            raise ToolUnavailableError(
                f"Local server not accessible at {self.url}. {LOCAL_SERVER_HINT}",
                tool="local-server",
            )
        self._logger.info("local_server_accessible", url=self.url)
