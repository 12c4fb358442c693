"""Tests for the JSON reporter."""

import json
from datetime import datetime
from io import StringIO
from pathlib import Path

import pytest

from sitecheck.reporters.base import ReportMeta
from sitecheck.reporters.json_reporter import (
    FORMAT_VERSION,
    JSONReporter,
    render_machine,
)
from sitecheck.runner.models import Summary

ENVIRONMENT = {"python": "3.12.1", "platform": "linux", "arch": "x86_64"}


class TestRenderMachine:
    """Tests for render_machine()."""

    def test_structure(self, mixed_summary: Summary, fixed_time: datetime) -> None:
        data = render_machine(
            mixed_summary,
            title="Integration",
            environment=ENVIRONMENT,
            generated_at=fixed_time,
            requirements={"5.1": "fast"},
        )

        assert data["version"] == FORMAT_VERSION
        assert data["generated_at"] == "2024-01-15T10:30:45.123000"
        assert data["title"] == "Integration"
        assert data["environment"] == ENVIRONMENT
        assert data["summary"] == {
            "total": 2,
            "passed": 1,
            "failed": 1,
            "skipped": 0,
            "overall_score": 50,
            "success": False,
        }
        assert data["requirements"] == {"5.1": "fast"}

    def test_results_are_lossless(
        self, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        data = render_machine(
            mixed_summary, title="t", environment={}, generated_at=fixed_time
        )
        assert data["results"] == [
            {
                "name": "a",
                "status": "PASSED",
                "description": "First suite",
                "error": None,
                "details": "All good",
            },
            {
                "name": "b",
                "status": "FAILED",
                "description": "Second suite",
                "error": "timeout",
                "details": None,
            },
        ]

    def test_identical_except_generated_at(self, mixed_summary: Summary) -> None:
        """Two renders differ only in the timestamp."""
        first = render_machine(
            mixed_summary,
            title="t",
            environment=ENVIRONMENT,
            generated_at=datetime(2024, 1, 1),
        )
        second = render_machine(
            mixed_summary,
            title="t",
            environment=ENVIRONMENT,
            generated_at=datetime(2024, 6, 1),
        )
        assert first["generated_at"] != second["generated_at"]
        first.pop("generated_at")
        second.pop("generated_at")
        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)

    def test_empty_summary(self, fixed_time: datetime) -> None:
        data = render_machine(
            Summary(), title="t", environment={}, generated_at=fixed_time
        )
        assert data["results"] == []
        assert data["summary"]["total"] == 0
        assert data["summary"]["overall_score"] == 0


class TestJSONReporter:
    """Tests for JSONReporter output targets."""

    @pytest.fixture
    def meta(self, fixed_time: datetime) -> ReportMeta:
        return ReportMeta(title="Run", generated_at=fixed_time, environment={})

    def test_name(self) -> None:
        assert JSONReporter().name == "json"

    def test_writes_to_stream(self, mixed_summary: Summary, meta: ReportMeta) -> None:
        output = StringIO()
        JSONReporter(output=output).report(mixed_summary, meta)
        data = json.loads(output.getvalue())
        assert data["summary"]["overall_score"] == 50

    def test_writes_to_file(
        self, tmp_path: Path, mixed_summary: Summary, meta: ReportMeta
    ) -> None:
        path = tmp_path / "nested" / "report.json"
        JSONReporter(output_file=path).report(mixed_summary, meta)
        assert json.loads(path.read_text(encoding="utf-8"))["title"] == "Run"

    def test_compact(self, mixed_summary: Summary, meta: ReportMeta) -> None:
        output = StringIO()
        JSONReporter(output=output, indent=None).report(mixed_summary, meta)
        assert output.getvalue().count("\n") == 1

    def test_keeps_non_ascii(
        self, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        meta = ReportMeta(title="闘魂Elixir", generated_at=fixed_time)
        rendered = JSONReporter().render(mixed_summary, meta)
        assert "闘魂Elixir" in rendered

    def test_existing_file_is_kept(
        self, tmp_path: Path, mixed_summary: Summary, meta: ReportMeta
    ) -> None:
        path = tmp_path / "report.json"
        path.write_text("previous", encoding="utf-8")

        reporter = JSONReporter(output_file=path)
        reporter.report(mixed_summary, meta)

        assert path.read_text(encoding="utf-8") == "previous"
        assert reporter.written_path == tmp_path / "report-1.json"
        assert json.loads(reporter.written_path.read_text())["title"] == "Run"
