"""Integration run: all suites in order, one combined report."""

from collections.abc import Sequence
from pathlib import Path

import structlog
from pydantic import BaseModel

from sitecheck.core.logging import get_logger
from sitecheck.core.settings import SiteCheckSettings
from sitecheck.reporters.base import ReportMeta
from sitecheck.reporters.writer import ReportWriter
from sitecheck.suites.base import Suite, filesystem_timestamp
from sitecheck.suites.browser import BrowserSuite
from sitecheck.suites.deployment import DeploymentSuite
from sitecheck.suites.lighthouse import LighthouseSuite

from .aggregator import ResultAggregator
from .models import Summary
from .orchestrator import SuiteRunner
from .tools import ToolRunner


class IntegrationOutcome(BaseModel):
    """Summary of an integration run and where its reports went."""

    summary: Summary
    meta: ReportMeta
    json_path: Path | None = None
    html_path: Path | None = None


class IntegrationRunner:
    """Sequences the audit, compatibility and deployment suites.

    Suites that need the local server are recorded as SKIPPED when it is
    down. Any suite that raises is recorded as FAILED and the run continues.
    """

    def __init__(
        self,
        settings: SiteCheckSettings,
        tools: ToolRunner | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
        suites: Sequence[Suite] | None = None,
    ) -> None:
        """
        Initialize the integration runner.

        Args:
            settings: Full configuration.
            tools: Runner shared by all suites.
            logger: Logger for run events.
            suites: Suites to run instead of the configured ones.
        """
        self.settings = settings
        self._logger = logger or get_logger(__name__)
        self.tools = tools or ToolRunner(logger=self._logger)
        self._suites = list(suites) if suites is not None else None

    def build_suites(self) -> list[Suite]:
        """Suites enabled by the integration settings, in run order."""
        if self._suites is not None:
            return self._suites

        cfg = self.settings.integration
        suites: list[Suite] = []
        if cfg.run_local:
            suites.append(
                LighthouseSuite(self.settings.lighthouse, self.tools, self._logger)
            )
            suites.append(BrowserSuite(self.settings.browser, self.tools, self._logger))
        if cfg.run_deployment:
            suites.append(
                DeploymentSuite(self.settings.deployment, self.tools, self._logger)
            )
        return suites

    async def install_dependencies(self) -> list[str]:
        """``npm install --save-dev`` each dependency; return those that failed.

        A failed install is logged and does not stop the run.
        """
        failed = []
        for dependency in self.settings.integration.dependencies:
            self._logger.info("dependency_installing", dependency=dependency)
            result = await self.tools.run(
                ["npm", "install", "--save-dev", dependency]
            )
            if result.ok:
                self._logger.info("dependency_installed", dependency=dependency)
            else:
                self._logger.warning(
                    "dependency_install_failed",
                    dependency=dependency,
                    error=result.error,
                )
                failed.append(dependency)
        return failed

    def report_meta(self) -> ReportMeta:
        cfg = self.settings.integration
        return ReportMeta(title=cfg.title, requirements=dict(cfg.requirements))

    async def run(self, write_reports: bool = True) -> IntegrationOutcome:
        """Run all enabled suites and write the combined report.

        Raises:
            ReportWriteError: If the report files cannot be written.
        """
        if self.settings.integration.install_dependencies:
            await self.install_dependencies()

        runner = SuiteRunner(
            aggregator=ResultAggregator(),
            honor_preconditions=True,
            logger=self._logger,
        )
        summary = await runner.run(self.build_suites())

        meta = self.report_meta()
        outcome = IntegrationOutcome(summary=summary, meta=meta)
        if write_reports:
            writer = ReportWriter(self.settings.integration.output_dir, self._logger)
            paths = writer.write_summary(
                summary,
                meta,
                f"integration-test-report-{filesystem_timestamp(meta.generated_at)}",
            )
            outcome.json_path = paths.json_path
            outcome.html_path = paths.html_path
        return outcome
