"""Base reporter interface and report metadata."""

import platform
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from sitecheck import __version__
from sitecheck.core.exceptions import ReportWriteError
from sitecheck.runner.models import SuiteStatus, Summary

STATUS_ICONS = {
    SuiteStatus.PASSED: "✅",
    SuiteStatus.FAILED: "❌",
    SuiteStatus.SKIPPED: "⏭️",
}


def unique_path(directory: Path, stem: str, suffix: str) -> Path:
    """Return ``directory/stem+suffix``, adding ``-1``, ``-2``... if it exists."""
    candidate = directory / f"{stem}{suffix}"
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem}-{counter}{suffix}"
        counter += 1
    return candidate


def write_new_file(path: Path, content: str) -> Path:
    """Write ``content`` to ``path``, or to the next free ``-N`` name if taken.

    Returns:
        The path actually written.

    Raises:
        ReportWriteError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        target = unique_path(path.parent, path.stem, path.suffix)
        with open(target, "x", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ReportWriteError(
            f"Failed to write report {path.name}: {e}", path=str(path.parent)
        ) from e
    return target


def collect_environment() -> dict[str, str]:
    """Platform identifiers recorded alongside a report."""
    return {
        "python": sys.version.split()[0],
        "platform": sys.platform,
        "arch": platform.machine(),
        "sitecheck": __version__,
    }


class ReportMeta(BaseModel):
    """Everything a report shows besides the Summary itself."""

    title: str = Field(default="sitecheck report", description="Report title")
    generated_at: datetime = Field(default_factory=datetime.now)
    environment: dict[str, str] = Field(default_factory=collect_environment)
    requirements: dict[str, str] = Field(
        default_factory=dict, description="Requirement id to description"
    )


class Reporter(ABC):
    """Base class for reporters.

    Reporters format a run Summary for a particular audience.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the reporter name."""

    @abstractmethod
    def report(self, summary: Summary, meta: ReportMeta | None = None) -> None:
        """Generate and output the report.

        Args:
            summary: Run summary to output.
            meta: Title, timestamp and environment (defaults when None).
        """

    def _format_score(self, score: int) -> str:
        return f"{score}%"
