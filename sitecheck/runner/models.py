"""Data models for suite outcomes and run summaries."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SuiteStatus(str, Enum):
    """Final status of a suite."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class NotRun:
    """Outcome signalling that a suite was deliberately not executed.

    Suites return this when a precondition outside their control is missing
    (e.g. the local development server is not running).
    """

    reason: str | None = None


SuiteOutcome = bool | NotRun | BaseException


class SuiteResult(BaseModel):
    """Outcome of one suite, immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Suite name")
    status: SuiteStatus = Field(..., description="Suite status")
    description: str = Field(default="", description="What the suite verifies")
    error: str | None = Field(None, description="Error message if not passed")
    details: str | None = Field(None, description="Additional detail text")


class SuiteCounts(BaseModel):
    """Number of suites per status."""

    model_config = ConfigDict(frozen=True)

    passed: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        """Total number of suites counted."""
        return self.passed + self.failed + self.skipped


class Summary(BaseModel):
    """Aggregated view over all suite outcomes of one run."""

    model_config = ConfigDict(frozen=True)

    results: list[SuiteResult] = Field(default_factory=list)
    counts: SuiteCounts = Field(default_factory=SuiteCounts)
    overall_score: int = Field(
        default=0, ge=0, le=100, description="Percentage of suites passed"
    )

    @property
    def success(self) -> bool:
        """True when no suite failed. Skipped suites do not count."""
        return self.counts.failed == 0
