"""Sequential suite orchestration."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from sitecheck.core.logging import get_logger

from .aggregator import ResultAggregator
from .models import SuiteOutcome, SuiteResult, Summary

if TYPE_CHECKING:
    from sitecheck.suites.base import Suite


class SuiteRunner:
    """Runs suites one after another and records every outcome.

    A suite that raises is recorded as FAILED and the remaining suites
    still run.
    """

    def __init__(
        self,
        aggregator: ResultAggregator | None = None,
        honor_preconditions: bool = True,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            aggregator: Aggregator to record into (a new one by default).
            honor_preconditions: Ask each suite whether it is ready and
                record SKIPPED instead of running when it is not.
            logger: Logger for progress events.
        """
        self.aggregator = aggregator or ResultAggregator()
        self.honor_preconditions = honor_preconditions
        self._logger = logger or get_logger(__name__)

    async def run_suite(self, suite: "Suite") -> SuiteResult:
        """Run one suite and record its outcome."""
        self._logger.info("suite_started", suite=suite.name)

        outcome: SuiteOutcome
        try:
            not_ready = (
                await suite.check_ready() if self.honor_preconditions else None
            )
            outcome = not_ready if not_ready is not None else await suite.run()
        except Exception as e:
            self._logger.error(
                "suite_raised",
                suite=suite.name,
                error=str(e),
                error_type=type(e).__name__,
                hints=getattr(e, "hints", None) or None,
            )
            outcome = e

        result = self.aggregator.record(
            suite.name,
            outcome,
            description=suite.description,
            details=suite.details,
        )
        self._logger.info(
            "suite_completed",
            suite=suite.name,
            status=result.status.value,
            error=result.error,
        )
        return result

    async def run(self, suites: Sequence["Suite"]) -> Summary:
        """Run suites in order and return the summary."""
        self._logger.info("run_started", suites=[s.name for s in suites])
        for suite in suites:
            await self.run_suite(suite)

        summary = self.aggregator.summarize()
        self._logger.info(
            "run_completed",
            passed=summary.counts.passed,
            failed=summary.counts.failed,
            skipped=summary.counts.skipped,
            overall_score=summary.overall_score,
        )
        return summary
