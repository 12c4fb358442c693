"""Tests for the console reporter."""

from io import StringIO

import pytest

from sitecheck.reporters.base import ReportMeta
from sitecheck.reporters.console import ConsoleReporter
from sitecheck.runner.models import SuiteCounts, SuiteResult, SuiteStatus, Summary


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    @pytest.fixture
    def output(self) -> StringIO:
        """Create a StringIO for capturing output."""
        return StringIO()

    @pytest.fixture
    def reporter(self, output: StringIO) -> ConsoleReporter:
        """Create a console reporter with captured output."""
        return ConsoleReporter(output=output, use_colors=False)

    def test_name(self, reporter: ConsoleReporter) -> None:
        assert reporter.name == "console"

    def test_lists_results(
        self, reporter: ConsoleReporter, output: StringIO, mixed_summary: Summary
    ) -> None:
        reporter.report(mixed_summary, ReportMeta(title="Integration"))
        text = output.getvalue()

        assert "Integration" in text
        assert "* a" in text
        assert "x b" in text
        assert "Error: timeout" in text
        assert "Summary: 1 passed, 1 failed (50%)" in text
        assert "Some suites failed." in text

    def test_skipped_reason(self, reporter: ConsoleReporter, output: StringIO) -> None:
        summary = Summary(
            results=[
                SuiteResult(
                    name="browser_tests",
                    status=SuiteStatus.SKIPPED,
                    error="Local server not accessible",
                )
            ],
            counts=SuiteCounts(skipped=1),
        )
        reporter.report(summary)
        text = output.getvalue()

        assert "- browser_tests" in text
        assert "Reason: Local server not accessible" in text
        assert "0 passed, 1 skipped (0%)" in text
        assert "All executed suites passed." in text

    def test_empty(self, reporter: ConsoleReporter, output: StringIO) -> None:
        reporter.report(Summary())
        assert "No suites were run." in output.getvalue()

    def test_colors(self, output: StringIO, mixed_summary: Summary) -> None:
        ConsoleReporter(output=output, use_colors=True).report(mixed_summary)
        assert "\033[32m" in output.getvalue()
        assert "\033[31m" in output.getvalue()

    def test_no_colors(
        self, reporter: ConsoleReporter, output: StringIO, mixed_summary: Summary
    ) -> None:
        reporter.report(mixed_summary)
        assert "\033[" not in output.getvalue()

    def test_verbose_shows_description(
        self, output: StringIO, mixed_summary: Summary
    ) -> None:
        ConsoleReporter(output=output, use_colors=False, verbose=True).report(
            mixed_summary
        )
        assert "First suite" in output.getvalue()
