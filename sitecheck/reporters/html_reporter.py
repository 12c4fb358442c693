"""HTML reporter for human-readable output."""

import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from jinja2 import BaseLoader, Environment

from sitecheck.runner.models import SuiteStatus, Summary

from .base import STATUS_ICONS, ReportMeta, Reporter, write_new_file

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }}</title>
    <style>
        :root {
            --color-success: #22c55e;
            --color-success-bg: #dcfce7;
            --color-error: #ef4444;
            --color-error-bg: #fee2e2;
            --color-warning: #f59e0b;
            --color-warning-bg: #fef3c7;
            --color-gray-50: #f9fafb;
            --color-gray-200: #e5e7eb;
            --color-gray-500: #6b7280;
            --color-gray-700: #374151;
            --color-gray-900: #111827;
            --border-radius: 8px;
            --shadow-sm: 0 1px 2px 0 rgb(0 0 0 / 0.05);
        }

        * {
            box-sizing: border-box;
            margin: 0;
            padding: 0;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto,
                         'Helvetica Neue', Arial, sans-serif;
            line-height: 1.6;
            color: var(--color-gray-900);
            background-color: var(--color-gray-50);
            padding: 2rem;
            max-width: 1200px;
            margin: 0 auto;
        }

        h1 {
            font-size: 1.875rem;
            font-weight: 600;
            margin-bottom: 0.25rem;
        }

        h2 {
            font-size: 1.25rem;
            font-weight: 600;
            margin: 2rem 0 1rem;
            color: var(--color-gray-700);
        }

        .timestamp {
            color: var(--color-gray-500);
            font-size: 0.875rem;
            margin-bottom: 1.5rem;
        }

        .summary-grid {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(160px, 1fr));
            gap: 1rem;
        }

        .summary-card {
            background: white;
            border-radius: var(--border-radius);
            box-shadow: var(--shadow-sm);
            padding: 1rem 1.25rem;
        }

        .summary-card .label {
            color: var(--color-gray-500);
            font-size: 0.875rem;
        }

        .summary-card .value {
            font-size: 1.75rem;
            font-weight: 700;
        }

        .summary-card.passed .value { color: var(--color-success); }
        .summary-card.failed .value { color: var(--color-error); }
        .summary-card.skipped .value { color: var(--color-warning); }

        table {
            width: 100%;
            border-collapse: collapse;
            background: white;
            border-radius: var(--border-radius);
            box-shadow: var(--shadow-sm);
            overflow: hidden;
        }

        th, td {
            text-align: left;
            padding: 0.75rem 1rem;
            border-bottom: 1px solid var(--color-gray-200);
            vertical-align: top;
        }

        th {
            background: var(--color-gray-50);
            font-size: 0.875rem;
            color: var(--color-gray-700);
        }

        .status {
            display: inline-block;
            padding: 0.125rem 0.5rem;
            border-radius: 999px;
            font-size: 0.75rem;
            font-weight: 600;
        }

        .status-passed { background: var(--color-success-bg); color: #166534; }
        .status-failed { background: var(--color-error-bg); color: #991b1b; }
        .status-skipped { background: var(--color-warning-bg); color: #92400e; }

        .error {
            color: var(--color-error);
            font-family: ui-monospace, SFMono-Regular, Menlo, monospace;
            font-size: 0.8125rem;
            margin-top: 0.25rem;
        }

        .muted {
            color: var(--color-gray-500);
            font-size: 0.875rem;
        }

        .empty {
            padding: 1rem;
            color: var(--color-gray-500);
        }
    </style>
</head>
<body>
    <h1>{{ title }}</h1>
    <div class="timestamp">Generated {{ generated_at }}</div>

    <div class="summary-grid">
        <div class="summary-card">
            <div class="label">Total</div>
            <div class="value">{{ summary.counts.total }}</div>
        </div>
        <div class="summary-card passed">
            <div class="label">Passed</div>
            <div class="value">{{ summary.counts.passed }}</div>
        </div>
        <div class="summary-card failed">
            <div class="label">Failed</div>
            <div class="value">{{ summary.counts.failed }}</div>
        </div>
        <div class="summary-card skipped">
            <div class="label">Skipped</div>
            <div class="value">{{ summary.counts.skipped }}</div>
        </div>
        <div class="summary-card">
            <div class="label">Overall score</div>
            <div class="value">{{ summary.overall_score }}%</div>
        </div>
    </div>

    <h2>Results</h2>
    {% if summary.results %}
    <table>
        <thead>
            <tr><th></th><th>Suite</th><th>Status</th><th>Description</th></tr>
        </thead>
        <tbody>
        {% for result in summary.results %}
            <tr>
                <td>{{ icon(result.status) }}</td>
                <td>{{ result.name }}</td>
                <td><span class="status status-{{ result.status.value | lower }}">{{ result.status.value }}</span></td>
                <td>
                    {{ result.description }}
                    {% if result.details %}<div class="muted">{{ result.details }}</div>{% endif %}
                    {% if result.error %}<div class="error">{{ result.error }}</div>{% endif %}
                </td>
            </tr>
        {% endfor %}
        </tbody>
    </table>
    {% else %}
    <div class="empty">No suites were run.</div>
    {% endif %}

    {% if requirements %}
    <h2>Requirements coverage</h2>
    <table>
        <thead><tr><th>Requirement</th><th>Description</th></tr></thead>
        <tbody>
        {% for req_id, text in requirements.items() %}
            <tr><td>{{ req_id }}</td><td>{{ text }}</td></tr>
        {% endfor %}
        </tbody>
    </table>
    {% endif %}

    {% if environment %}
    <h2>Environment</h2>
    <table>
        <tbody>
        {% for key, value in environment.items() %}
            <tr><th>{{ key }}</th><td>{{ value }}</td></tr>
        {% endfor %}
        </tbody>
    </table>
    {% endif %}
</body>
</html>
"""

_env = Environment(loader=BaseLoader(), autoescape=True)


def _icon(status: SuiteStatus) -> str:
    return STATUS_ICONS[status]


def render_human(
    summary: Summary,
    *,
    title: str,
    generated_at: datetime,
    requirements: dict[str, str] | None = None,
    environment: dict[str, str] | None = None,
) -> str:
    """Render a Summary as a standalone HTML document.

    Each suite row shows its name, a status badge with a per-status
    icon and colour, its description, and its error message if any.
    """
    template = _env.from_string(HTML_TEMPLATE)
    return template.render(
        title=title,
        summary=summary,
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S"),
        requirements=requirements or {},
        environment=environment or {},
        icon=_icon,
    )


class HTMLReporter(Reporter):
    """Reporter that outputs results as a single-file HTML report."""

    def __init__(
        self,
        output_file: Path | str | None = None,
        output: TextIO | None = None,
    ) -> None:
        """Initialize the HTML reporter.

        Args:
            output_file: Path to write HTML file (takes precedence over output).
                An existing file is kept and a `-N` suffixed name is used.
            output: Output stream (defaults to stdout if no file specified).
        """
        self._output_file = Path(output_file) if output_file else None
        self._output = output
        self.written_path: Path | None = None

    @property
    def name(self) -> str:
        """Return the reporter name."""
        return "html"

    def report(self, summary: Summary, meta: ReportMeta | None = None) -> None:
        """Generate and output the HTML report."""
        meta = meta or ReportMeta()
        html_content = render_human(
            summary,
            title=meta.title,
            generated_at=meta.generated_at,
            requirements=meta.requirements,
            environment=meta.environment,
        )

        if self._output_file:
            self.written_path = write_new_file(self._output_file, html_content)
        else:
            (self._output or sys.stdout).write(html_content)
