"""JSON reporter for machine-readable output."""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from sitecheck.runner.models import SuiteResult, Summary

from .base import ReportMeta, Reporter, write_new_file

# JSON format version for compatibility tracking
FORMAT_VERSION = "1.0"


def _result_to_dict(result: SuiteResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "status": result.status.value,
        "description": result.description,
        "error": result.error,
        "details": result.details,
    }


def render_machine(
    summary: Summary,
    *,
    title: str,
    environment: dict[str, str],
    generated_at: datetime,
    requirements: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Serialize a Summary into a JSON-compatible document.

    The output depends only on the arguments; two renders of the same
    Summary differ at most in ``generated_at``.

    Args:
        summary: Run summary.
        title: Name of the test run.
        environment: Platform identifiers.
        generated_at: Report timestamp.
        requirements: Requirement id to description.

    Returns:
        Dictionary ready for ``json.dumps``.
    """
    counts = summary.counts
    return {
        "version": FORMAT_VERSION,
        "generated_at": generated_at.isoformat(),
        "title": title,
        "environment": dict(environment),
        "summary": {
            "total": counts.total,
            "passed": counts.passed,
            "failed": counts.failed,
            "skipped": counts.skipped,
            "overall_score": summary.overall_score,
            "success": summary.success,
        },
        "results": [_result_to_dict(r) for r in summary.results],
        "requirements": dict(requirements or {}),
    }


class JSONReporter(Reporter):
    """Reporter that outputs results in JSON format.

    Produces a stable, documented JSON format suitable for CI/CD
    integration and automated processing.
    """

    FORMAT_VERSION = FORMAT_VERSION

    def __init__(
        self,
        output_file: Path | str | None = None,
        output: TextIO | None = None,
        indent: int | None = 2,
    ) -> None:
        """Initialize the JSON reporter.

        Args:
            output_file: Path to write JSON file (takes precedence over output).
                An existing file is kept and a `-N` suffixed name is used.
            output: Output stream (defaults to sys.stdout if no file specified).
            indent: JSON indentation level (None for compact output).
        """
        self._output_file = Path(output_file) if output_file else None
        self._output = output
        self._indent = indent
        self.written_path: Path | None = None

    @property
    def name(self) -> str:
        """Return the reporter name."""
        return "json"

    def render(self, summary: Summary, meta: ReportMeta | None = None) -> str:
        """Render the JSON document as a string."""
        meta = meta or ReportMeta()
        data = render_machine(
            summary,
            title=meta.title,
            environment=meta.environment,
            generated_at=meta.generated_at,
            requirements=meta.requirements,
        )
        return json.dumps(data, indent=self._indent, ensure_ascii=False)

    def report(self, summary: Summary, meta: ReportMeta | None = None) -> None:
        """Generate and output the JSON report."""
        json_str = self.render(summary, meta)

        if self._output_file:
            self.written_path = write_new_file(self._output_file, json_str + "\n")
        else:
            output = self._output or sys.stdout
            output.write(json_str + "\n")
