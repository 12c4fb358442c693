"""Collect suite outcomes into a run summary."""

from collections.abc import Iterable

from sitecheck.scoring.thresholds import round_half_up

from .models import (
    NotRun,
    SuiteCounts,
    SuiteOutcome,
    SuiteResult,
    SuiteStatus,
    Summary,
)


def summarize_results(results: Iterable[SuiteResult]) -> Summary:
    """Build a Summary from a sequence of suite results.

    ``overall_score`` is ``100 * passed / total`` rounded half up, or 0 when
    there are no results.

    Args:
        results: Suite results in report order.

    Returns:
        Summary with counts and overall score.
    """
    ordered = list(results)
    passed = sum(1 for r in ordered if r.status == SuiteStatus.PASSED)
    failed = sum(1 for r in ordered if r.status == SuiteStatus.FAILED)
    skipped = sum(1 for r in ordered if r.status == SuiteStatus.SKIPPED)

    total = len(ordered)
    overall_score = round_half_up(100 * passed / total) if total > 0 else 0

    return Summary(
        results=ordered,
        counts=SuiteCounts(passed=passed, failed=failed, skipped=skipped),
        overall_score=overall_score,
    )


def _error_message(error: BaseException) -> str:
    message = str(error)
    return message if message else type(error).__name__


class ResultAggregator:
    """Accumulates suite results in the order suites complete.

    Recording a name that already exists replaces the earlier result in
    place (last write wins, original position kept).
    """

    def __init__(self) -> None:
        self._results: dict[str, SuiteResult] = {}

    def __len__(self) -> int:
        return len(self._results)

    @property
    def results(self) -> list[SuiteResult]:
        """Recorded results in insertion order."""
        return list(self._results.values())

    def record(
        self,
        name: str,
        outcome: SuiteOutcome,
        description: str = "",
        details: str | None = None,
    ) -> SuiteResult:
        """Record the outcome of a suite.

        Args:
            name: Suite name.
            outcome: True/False for pass/fail, NotRun for skipped, or the
                exception the suite raised (recorded as FAILED).
            description: What the suite verifies.
            details: Extra text shown for completed suites.

        Returns:
            The recorded SuiteResult.
        """
        if isinstance(outcome, BaseException):
            result = SuiteResult(
                name=name,
                status=SuiteStatus.FAILED,
                description=description,
                error=_error_message(outcome),
            )
        elif isinstance(outcome, NotRun):
            result = SuiteResult(
                name=name,
                status=SuiteStatus.SKIPPED,
                description=description,
                error=outcome.reason,
            )
        elif isinstance(outcome, bool):
            result = SuiteResult(
                name=name,
                status=SuiteStatus.PASSED if outcome else SuiteStatus.FAILED,
                description=description,
                details=details,
            )
        else:
            raise TypeError(
                f"Unsupported outcome for suite '{name}': {type(outcome).__name__}"
            )

        self._results[name] = result
        return result

    def summarize(self) -> Summary:
        """Compute the summary for everything recorded so far."""
        return summarize_results(self._results.values())
