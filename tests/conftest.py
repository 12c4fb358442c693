"""Shared pytest fixtures for sitecheck tests."""

from collections.abc import Iterator, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from sitecheck.core.logging import reset_logging
from sitecheck.core.settings import SiteCheckSettings
from sitecheck.runner.models import (
    SuiteCounts,
    SuiteResult,
    SuiteStatus,
    Summary,
)
from sitecheck.runner.tools import ToolRunResult


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_logging() -> Iterator[None]:
    """Reset structlog and stdlib logging around each test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def settings(tmp_path: Path) -> SiteCheckSettings:
    """Settings with every output and input path under tmp_path."""
    return SiteCheckSettings(
        _skip_file_loading=True,
        lighthouse={"output_dir": tmp_path / "lighthouse-reports"},
        browser={"output_dir": tmp_path / "browser-test-reports"},
        deployment={
            "output_dir": tmp_path / "deployment-test-reports",
            "workflow_path": tmp_path / ".github" / "workflows" / "deploy.yml",
            "cname_path": tmp_path / "CNAME",
        },
        integration={"output_dir": tmp_path / "integration-test-reports"},
        build={"root": tmp_path},
    )


@pytest.fixture
def mixed_summary() -> Summary:
    """One passed suite and one failed with error 'timeout'."""
    return Summary(
        results=[
            SuiteResult(
                name="a",
                status=SuiteStatus.PASSED,
                description="First suite",
                details="All good",
            ),
            SuiteResult(
                name="b",
                status=SuiteStatus.FAILED,
                description="Second suite",
                error="timeout",
            ),
        ],
        counts=SuiteCounts(passed=1, failed=1, skipped=0),
        overall_score=50,
    )


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2024, 1, 15, 10, 30, 45, 123000)


class FakeToolRunner:
    """ToolRunner stand-in returning canned results per command prefix.

    ``responses`` maps a tuple of leading arguments to a ToolRunResult (or a
    callable receiving the command). Unmatched commands succeed with empty
    output. Every command is recorded in ``calls``.
    """

    def __init__(self, responses: dict[tuple[str, ...], Any] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[list[str]] = []

    async def run(
        self,
        cmd: Sequence[str],
        cwd: Any = None,
        timeout: float | None = None,
    ) -> ToolRunResult:
        cmd = list(cmd)
        self.calls.append(cmd)
        best: tuple[str, ...] | None = None
        for prefix in self.responses:
            if tuple(cmd[: len(prefix)]) == prefix and (
                best is None or len(prefix) > len(best)
            ):
                best = prefix
        if best is None:
            return ToolRunResult(tool=cmd[0], cmd=cmd, returncode=0)
        response = self.responses[best]
        return response(cmd) if callable(response) else response


def _failed_run(tool: str, error: str = "boom", returncode: int = 1) -> ToolRunResult:
    return ToolRunResult(tool=tool, returncode=returncode, error=error)


def _missing_run(tool: str) -> ToolRunResult:
    return ToolRunResult(
        tool=tool,
        returncode=127,
        error=f"{tool} is not installed or not on PATH",
        missing=True,
    )


@pytest.fixture
def make_tools() -> type[FakeToolRunner]:
    """Factory for FakeToolRunner with canned responses."""
    return FakeToolRunner


@pytest.fixture
def failed_run():
    """Build a ToolRunResult for a tool that exited non-zero."""
    return _failed_run


@pytest.fixture
def missing_run():
    """Build a ToolRunResult for a tool that is not installed."""
    return _missing_run


@pytest.fixture
def fake_tools() -> FakeToolRunner:
    """FakeToolRunner where every command succeeds."""
    return FakeToolRunner()
