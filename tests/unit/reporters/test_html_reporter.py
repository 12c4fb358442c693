"""Tests for the HTML reporter."""

from datetime import datetime
from io import StringIO
from pathlib import Path

from sitecheck.reporters.base import ReportMeta
from sitecheck.reporters.html_reporter import HTMLReporter, render_human
from sitecheck.runner.models import SuiteCounts, SuiteResult, SuiteStatus, Summary


class TestRenderHuman:
    """Tests for render_human()."""

    def test_contains_names_statuses_and_error(
        self, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        html = render_human(
            mixed_summary, title="Report", generated_at=fixed_time, requirements={}
        )

        assert "<!DOCTYPE html>" in html
        assert "Report" in html
        assert ">a<" in html
        assert ">b<" in html
        assert "status-passed" in html
        assert "✅" in html
        assert "status-failed" in html
        assert "❌" in html
        assert "timeout" in html
        assert "All good" in html
        assert "2024-01-15 10:30:45" in html

    def test_overall_score_and_counts(
        self, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        html = render_human(mixed_summary, title="t", generated_at=fixed_time)
        assert "50%" in html
        assert "Passed" in html
        assert "Skipped" in html

    def test_skipped_indicator(self, fixed_time: datetime) -> None:
        summary = Summary(
            results=[
                SuiteResult(
                    name="lighthouse_audit",
                    status=SuiteStatus.SKIPPED,
                    error="Local server not accessible",
                )
            ],
            counts=SuiteCounts(skipped=1),
        )
        html = render_human(summary, title="t", generated_at=fixed_time)
        assert "status-skipped" in html
        assert "⏭️" in html
        assert "Local server not accessible" in html

    def test_empty_summary_renders(self, fixed_time: datetime) -> None:
        """Zero suites still produce a valid document with no badges."""
        html = render_human(Summary(), title="Empty", generated_at=fixed_time)
        assert "</html>" in html
        assert "No suites were run." in html
        assert 'class="status status-' not in html

    def test_requirements_section(
        self, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        html = render_human(
            mixed_summary,
            title="t",
            generated_at=fixed_time,
            requirements={"2.2": "カスタムドメインHTTPS接続"},
        )
        assert "Requirements coverage" in html
        assert "カスタムドメインHTTPS接続" in html

    def test_no_requirements_section_when_empty(
        self, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        html = render_human(mixed_summary, title="t", generated_at=fixed_time)
        assert "Requirements coverage" not in html

    def test_escapes_error_text(self, fixed_time: datetime) -> None:
        summary = Summary(
            results=[
                SuiteResult(
                    name="x",
                    status=SuiteStatus.FAILED,
                    error="<script>alert(1)</script>",
                )
            ],
            counts=SuiteCounts(failed=1),
        )
        html = render_human(summary, title="t", generated_at=fixed_time)
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html


class TestHTMLReporter:
    def test_name(self) -> None:
        assert HTMLReporter().name == "html"

    def test_writes_file(
        self, tmp_path: Path, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        path = tmp_path / "out" / "report.html"
        HTMLReporter(output_file=path).report(
            mixed_summary, ReportMeta(title="File", generated_at=fixed_time)
        )
        assert "File" in path.read_text(encoding="utf-8")

    def test_writes_stream_with_environment(
        self, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        output = StringIO()
        meta = ReportMeta(
            title="t", generated_at=fixed_time, environment={"python": "3.12.1"}
        )
        HTMLReporter(output=output).report(mixed_summary, meta)
        assert "3.12.1" in output.getvalue()

    def test_existing_file_is_kept(
        self, tmp_path: Path, mixed_summary: Summary, fixed_time: datetime
    ) -> None:
        path = tmp_path / "report.html"
        path.write_text("previous", encoding="utf-8")

        reporter = HTMLReporter(output_file=path)
        reporter.report(mixed_summary, ReportMeta(generated_at=fixed_time))

        assert path.read_text(encoding="utf-8") == "previous"
        assert reporter.written_path == tmp_path / "report-1.html"
