"""Single entry point for invoking external command-line tools.

Every suite runs its subprocesses through :class:`ToolRunner`, so timeout
handling and error reporting are defined once. ``run`` never raises for a
missing executable, a non-zero exit or a timeout: the outcome is carried in
the returned :class:`ToolRunResult`.
"""

import asyncio
import json
import os
import shutil
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field

from sitecheck.core.exceptions import ToolExecutionError, ToolUnavailableError
from sitecheck.core.logging import get_logger

# Exit code reported for timed-out processes, as coreutils `timeout` does
TIMEOUT_RETURNCODE = 124
# Exit code reported when the executable could not be started
NOT_FOUND_RETURNCODE = 127

DEFAULT_TIMEOUT_S = 300.0


class ToolRunResult(BaseModel):
    """Result of one external tool invocation."""

    tool: str = Field(..., description="Executable name")
    cmd: list[str] = Field(default_factory=list)
    cwd: str | None = None
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    timed_out: bool = False
    error: str | None = Field(
        None, description="Why the tool could not run or did not succeed"
    )
    missing: bool = Field(
        default=False, description="Executable was not found on PATH"
    )

    @property
    def ok(self) -> bool:
        """True when the tool ran to completion with exit code 0."""
        return self.error is None and self.returncode == 0

    def parsed_json(self) -> Any:
        """Parse stdout as JSON, or return None if it is not JSON."""
        text = self.stdout.strip()
        if not (text.startswith("{") or text.startswith("[")):
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return None

    def raise_for_status(self) -> None:
        """Raise the matching exception when the run did not succeed.

        Raises:
            ToolUnavailableError: If the executable was not found.
            ToolExecutionError: If the tool timed out or exited non-zero.
        """
        if self.ok:
            return
        if self.missing:
            raise ToolUnavailableError(
                self.error or f"{self.tool} is not installed", tool=self.tool
            )
        raise ToolExecutionError(
            self.error or f"{self.tool} exited with code {self.returncode}",
            tool=self.tool,
            returncode=self.returncode,
            stderr=self.stderr,
        )


def is_available(executable: str) -> bool:
    """Check whether an executable is on PATH."""
    return shutil.which(executable) is not None


class ToolRunner:
    """Runs external commands with a timeout and captured output."""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_S,
        env: dict[str, str] | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            timeout_seconds: Default per-process time limit.
            env: Extra environment variables for every process.
            logger: Logger for tool events (defaults to the module logger).
        """
        self.timeout_seconds = timeout_seconds
        self.env = {**os.environ, **(env or {})}
        self._logger = logger or get_logger(__name__)

    async def run(
        self,
        cmd: Sequence[str],
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> ToolRunResult:
        """Run a command and capture its result.

        Args:
            cmd: Executable and arguments.
            cwd: Working directory.
            timeout: Override of the default timeout in seconds.

        Returns:
            ToolRunResult describing the outcome.
        """
        cmd = list(cmd)
        tool = cmd[0]
        cwd_str = str(cwd) if cwd is not None else None
        limit = timeout if timeout is not None else self.timeout_seconds
        started = time.perf_counter()

        self._logger.debug("tool_started", tool=tool, cmd=cmd, cwd=cwd_str)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd_str,
                env=self.env,
            )
        except FileNotFoundError:
            self._logger.warning("tool_not_found", tool=tool)
            return ToolRunResult(
                tool=tool,
                cmd=cmd,
                cwd=cwd_str,
                returncode=NOT_FOUND_RETURNCODE,
                error=f"{tool} is not installed or not on PATH",
                missing=True,
            )
        except OSError as e:
            self._logger.warning("tool_start_failed", tool=tool, error=str(e))
            return ToolRunResult(
                tool=tool,
                cmd=cmd,
                cwd=cwd_str,
                error=f"Failed to execute {tool}: {e}",
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=limit
            )
        except TimeoutError:
            process.kill()
            await process.wait()
            duration = time.perf_counter() - started
            self._logger.warning("tool_timed_out", tool=tool, timeout_seconds=limit)
            return ToolRunResult(
                tool=tool,
                cmd=cmd,
                cwd=cwd_str,
                returncode=TIMEOUT_RETURNCODE,
                duration_seconds=duration,
                timed_out=True,
                error=f"{tool} timed out after {limit}s",
            )

        duration = time.perf_counter() - started
        returncode = process.returncode
        stderr_text = stderr.decode("utf-8", "replace") if stderr else ""
        error = None
        if returncode != 0:
            last_line = stderr_text.strip().splitlines()[-1:] or [""]
            error = f"{tool} exited with code {returncode}"
            if last_line[0]:
                error = f"{error}: {last_line[0]}"

        self._logger.debug(
            "tool_finished",
            tool=tool,
            returncode=returncode,
            duration_seconds=round(duration, 3),
        )

        return ToolRunResult(
            tool=tool,
            cmd=cmd,
            cwd=cwd_str,
            returncode=returncode,
            stdout=stdout.decode("utf-8", "replace") if stdout else "",
            stderr=stderr_text,
            duration_seconds=duration,
            error=error,
        )
