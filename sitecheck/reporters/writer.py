"""Persist reports to timestamped files without overwriting."""

import json
from pathlib import Path
from typing import Any, NamedTuple

import structlog

from sitecheck.core.logging import get_logger
from sitecheck.runner.models import Summary

from .base import ReportMeta, write_new_file
from .html_reporter import render_human
from .json_reporter import render_machine


class ReportPaths(NamedTuple):
    json_path: Path
    html_path: Path | None


class ReportWriter:
    """Writes report documents into a single output directory.

    Existing files are never overwritten.
    """

    def __init__(
        self,
        output_dir: Path | str,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self._logger = logger or get_logger(__name__)

    def _write(self, stem: str, suffix: str, content: str) -> Path:
        path = write_new_file(self.output_dir / f"{stem}{suffix}", content)
        self._logger.info("report_written", path=str(path))
        return path

    def write_json(self, data: Any, stem: str) -> Path:
        """Write ``data`` as indented JSON to ``<stem>.json``."""
        content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        return self._write(stem, ".json", content + "\n")

    def write_text(self, content: str, stem: str, suffix: str) -> Path:
        return self._write(stem, suffix, content)

    def write_summary(
        self,
        summary: Summary,
        meta: ReportMeta,
        stem: str,
        html: bool = True,
    ) -> ReportPaths:
        """Write the machine report and, optionally, the HTML report.

        Args:
            summary: Run summary.
            meta: Report metadata.
            stem: File name without extension.
            html: Also write ``<stem>.html``.

        Returns:
            Paths of the written files.

        Raises:
            ReportWriteError: If a file cannot be written.
        """
        data = render_machine(
            summary,
            title=meta.title,
            environment=meta.environment,
            generated_at=meta.generated_at,
            requirements=meta.requirements,
        )
        json_path = self.write_json(data, stem)

        html_path = None
        if html:
            html_path = self.write_text(
                render_human(
                    summary,
                    title=meta.title,
                    generated_at=meta.generated_at,
                    requirements=meta.requirements,
                    environment=meta.environment,
                ),
                stem,
                ".html",
            )
        return ReportPaths(json_path, html_path)
