"""Tests for SuiteRunner."""

import pytest
from structlog.testing import capture_logs

from sitecheck.core.exceptions import ConnectivityError, ToolUnavailableError
from sitecheck.runner.models import NotRun, SuiteStatus
from sitecheck.runner.orchestrator import SuiteRunner
from sitecheck.suites.base import Suite


class StubSuite(Suite):
    """Suite returning or raising a fixed outcome."""

    description = "Stub suite"
    details = "stub details"

    def __init__(self, name: str, outcome, ready: NotRun | None = None) -> None:
        super().__init__()
        self._name = name
        self._outcome = outcome
        self._ready = ready
        self.ran = False

    @property
    def name(self) -> str:
        return self._name

    async def check_ready(self) -> NotRun | None:
        return self._ready

    async def run(self) -> bool | NotRun:
        self.ran = True
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        return self._outcome


class TestSuiteRunner:
    """Tests for SuiteRunner.run()."""

    @pytest.mark.anyio
    async def test_runs_all_suites_in_order(self) -> None:
        suites = [StubSuite("one", True), StubSuite("two", False)]
        summary = await SuiteRunner().run(suites)

        assert [r.name for r in summary.results] == ["one", "two"]
        assert summary.results[0].status == SuiteStatus.PASSED
        assert summary.results[0].details == "stub details"
        assert summary.results[1].status == SuiteStatus.FAILED
        assert summary.results[1].description == "Stub suite"

    @pytest.mark.anyio
    async def test_raising_suite_does_not_stop_run(self) -> None:
        """Three suites, the second raising, yield three entries."""
        suites = [
            StubSuite("first", True),
            StubSuite("second", RuntimeError("timeout")),
            StubSuite("third", False),
        ]
        summary = await SuiteRunner().run(suites)

        assert len(summary.results) == 3
        statuses = [r.status for r in summary.results]
        assert statuses == [
            SuiteStatus.PASSED,
            SuiteStatus.FAILED,
            SuiteStatus.FAILED,
        ]
        assert summary.results[1].error == "timeout"
        assert summary.results[2].error is None
        assert all(s.ran for s in suites)

    @pytest.mark.anyio
    async def test_not_run_recorded_as_skipped(self) -> None:
        summary = await SuiteRunner().run([StubSuite("s", NotRun("not today"))])
        assert summary.results[0].status == SuiteStatus.SKIPPED
        assert summary.results[0].error == "not today"
        assert summary.success

    @pytest.mark.anyio
    async def test_unready_suite_is_skipped_without_running(self) -> None:
        suite = StubSuite("local", True, ready=NotRun("Local server not accessible"))
        summary = await SuiteRunner().run([suite])

        assert not suite.ran
        assert summary.results[0].status == SuiteStatus.SKIPPED
        assert summary.results[0].error == "Local server not accessible"

    @pytest.mark.anyio
    async def test_preconditions_ignored_when_disabled(self) -> None:
        suite = StubSuite(
            "local",
            ToolUnavailableError("Local server not accessible", tool="local-server"),
            ready=NotRun("down"),
        )
        summary = await SuiteRunner(honor_preconditions=False).run([suite])

        assert suite.ran
        assert summary.results[0].status == SuiteStatus.FAILED
        assert not summary.success

    @pytest.mark.anyio
    async def test_logs_hints_of_failed_suite(self) -> None:
        error = ConnectivityError(
            "Request timeout after 10s", hints=["Check DNS", "Wait"]
        )
        with capture_logs() as logs:
            await SuiteRunner().run([StubSuite("deploy", error)])

        raised = [e for e in logs if e["event"] == "suite_raised"]
        assert raised[0]["hints"] == ["Check DNS", "Wait"]
        assert raised[0]["error_type"] == "ConnectivityError"
        assert any(e["event"] == "run_completed" for e in logs)

    @pytest.mark.anyio
    async def test_empty_run(self) -> None:
        summary = await SuiteRunner().run([])
        assert summary.counts.total == 0
        assert summary.overall_score == 0
