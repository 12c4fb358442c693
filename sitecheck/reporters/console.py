"""Console reporter for terminal output."""

import sys
from io import StringIO
from typing import TextIO

from sitecheck.runner.models import SuiteResult, SuiteStatus, Summary

from .base import ReportMeta, Reporter


class ConsoleReporter(Reporter):
    """Reporter that outputs results to the terminal.

    Provides human-readable output with optional color support and
    verbosity levels.
    """

    def __init__(
        self,
        output: TextIO | None = None,
        use_colors: bool = True,
        verbose: bool = False,
    ) -> None:
        """Initialize the console reporter.

        Args:
            output: Output stream (defaults to sys.stdout).
            use_colors: Whether to use ANSI color codes.
            verbose: Whether to show suite details for passing suites.
        """
        self._output = output or sys.stdout
        self._use_colors = use_colors and self._supports_color()
        self._verbose = verbose

    @property
    def name(self) -> str:
        """Return the reporter name."""
        return "console"

    def _supports_color(self) -> bool:
        """Check if the output stream supports ANSI colors."""
        if isinstance(self._output, StringIO):
            return True
        if not hasattr(self._output, "isatty"):
            return False
        return self._output.isatty()

    def _color(self, text: str, color_code: str) -> str:
        if not self._use_colors:
            return text
        return f"\033[{color_code}m{text}\033[0m"

    def _green(self, text: str) -> str:
        return self._color(text, "32")

    def _red(self, text: str) -> str:
        return self._color(text, "31")

    def _yellow(self, text: str) -> str:
        return self._color(text, "33")

    def _bold(self, text: str) -> str:
        return self._color(text, "1")

    def _dim(self, text: str) -> str:
        return self._color(text, "2")

    def _write(self, text: str = "") -> None:
        self._output.write(text + "\n")

    def report(self, summary: Summary, meta: ReportMeta | None = None) -> None:
        """Generate and output the console report."""
        meta = meta or ReportMeta()
        self._write(self._bold(meta.title))
        self._write("=" * 50)
        self._write()
        if summary.results:
            for result in summary.results:
                self._write_result(result)
        else:
            self._write(self._dim("  No suites were run."))
        self._write()
        self._write_summary(summary)

    def _write_result(self, result: SuiteResult) -> None:
        if result.status is SuiteStatus.PASSED:
            indicator = self._green("*")
        elif result.status is SuiteStatus.FAILED:
            indicator = self._red("x")
        else:
            indicator = self._yellow("-")

        self._write(f"  {indicator} {result.name:<20} {result.status.value}")

        if result.error:
            label = "Error:" if result.status is SuiteStatus.FAILED else "Reason:"
            color = self._red if result.status is SuiteStatus.FAILED else self._yellow
            self._write(f"      {color(label)} {result.error}")
        if self._verbose and result.description:
            self._write(self._dim(f"      {result.description}"))

    def _write_summary(self, summary: Summary) -> None:
        counts = summary.counts
        parts = [self._green(f"{counts.passed} passed")]
        if counts.failed:
            parts.append(self._red(f"{counts.failed} failed"))
        if counts.skipped:
            parts.append(self._yellow(f"{counts.skipped} skipped"))

        score = self._format_score(summary.overall_score)
        self._write(f"Summary: {', '.join(parts)} ({score})")
        if summary.success:
            self._write(self._green("All executed suites passed."))
        else:
            self._write(self._red("Some suites failed."))
