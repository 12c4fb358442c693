"""GitHub Pages deployment verification suite."""

from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path

import httpx
import structlog

from sitecheck.core.exceptions import ConnectivityError
from sitecheck.core.settings import DeploymentSettings
from sitecheck.reporters.writer import ReportWriter
from sitecheck.runner.aggregator import ResultAggregator
from sitecheck.runner.models import SuiteOutcome, SuiteStatus, Summary
from sitecheck.runner.tools import ToolRunner, is_available

from .base import Suite, filesystem_timestamp
from .network import SiteResponse, check_https
from .seo import analyze_page

CHECK_DESCRIPTIONS = {
    "github_actions": "GitHub Actions workflow configuration and execution",
    "domain_https": "Custom domain configuration and HTTPS connectivity",
    "seo_metadata": "SEO optimization and metadata validation",
}


def missing_workflow_components(content: str, required: list[str]) -> list[str]:
    """Return the required substrings absent from a workflow file."""
    return [component for component in required if component not in content]


class DeploymentSuite(Suite):
    """Verifies the workflow, the custom domain and the served page."""

    description = "GitHub Pages deployment verification"
    details = "GitHub Actions, custom domain, HTTPS, and SEO validation"

    def __init__(
        self,
        settings: DeploymentSettings,
        tools: ToolRunner | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
        client: httpx.AsyncClient | None = None,
        check_certificate: bool = True,
    ) -> None:
        """
        Initialize the suite.

        Args:
            settings: Deployment settings.
            tools: Runner for the optional ``gh`` call.
            logger: Logger for check events.
            client: HTTP client for the site requests (a fresh one per
                request when None).
            check_certificate: Also read the TLS peer certificate.
        """
        super().__init__(tools=tools, logger=logger)
        self.settings = settings
        self._client = client
        self._check_certificate = check_certificate
        self._site: SiteResponse | None = None
        self._site_error: ConnectivityError | None = None
        self.checks = ResultAggregator()
        self.report_path: Path | None = None

    @property
    def name(self) -> str:
        return "deployment_verification"

    async def _fetch_site(self) -> SiteResponse:
        """Fetch the deployed page once per run.

        A connectivity failure is kept too and raised again for each later
        check instead of waiting on the same timeout.
        """
        if self._site_error is not None:
            raise self._site_error
        if self._site is None:
            try:
                self._site = await check_https(
                    self.settings.domain,
                    timeout=self.settings.request_timeout,
                    client=self._client,
                    with_certificate=self._check_certificate,
                )
            except ConnectivityError as e:
                self._site_error = e
                raise
        return self._site

    async def check_github_actions(self) -> bool:
        """Workflow file exists and contains every required component."""
        workflow = self.settings.workflow_path
        if not workflow.exists():
            self._logger.error("workflow_missing", path=str(workflow))
            return False

        content = workflow.read_text(encoding="utf-8")
        missing = missing_workflow_components(
            content, self.settings.required_workflow_components
        )
        if missing:
            self._logger.error("workflow_components_missing", missing=missing)
            return False
        self._logger.info("workflow_valid", path=str(workflow))

        await self._log_recent_runs()
        return True

    async def _log_recent_runs(self) -> None:
        if not is_available("gh"):
            self._logger.info(
                "gh_unavailable",
                hint="Check the Actions tab in the GitHub repository",
            )
            return

        result = await self.tools.run(
            [
                "gh",
                "run",
                "list",
                "--repo",
                self.settings.github_repo,
                "--limit",
                "5",
                "--json",
                "status,conclusion,createdAt",
            ],
            timeout=30,
        )
        runs = result.parsed_json() if result.ok else None
        if not isinstance(runs, list):
            self._logger.info("gh_runs_unavailable", error=result.error)
            return
        if not runs:
            self._logger.info("gh_no_recent_runs")
        for run in runs:
            self._logger.info(
                "workflow_run",
                status=run.get("conclusion") or run.get("status"),
                created_at=run.get("createdAt"),
            )

    async def check_domain_https(self) -> bool:
        """CNAME matches the domain and the site answers 200 over HTTPS."""
        cname = self.settings.cname_path
        if not cname.exists():
            self._logger.error("cname_missing", path=str(cname))
            return False

        configured = cname.read_text(encoding="utf-8").strip()
        if configured != self.settings.domain:
            self._logger.error(
                "cname_mismatch", expected=self.settings.domain, found=configured
            )
            return False
        self._logger.info("cname_valid", domain=configured)

        site = await self._fetch_site()
        if site.status_code != 200:
            self._logger.error("https_bad_status", status_code=site.status_code)
            return False

        self._logger.info(
            "https_ok",
            status_code=site.status_code,
            server=site.headers.get("server", "Unknown"),
        )

        cert = site.certificate
        if cert is not None:
            self._logger.info(
                "certificate_info",
                subject=cert.subject_cn,
                issuer=cert.issuer_org,
                valid_from=cert.valid_from.isoformat(),
                valid_to=cert.valid_to.isoformat(),
            )
            if not cert.is_valid_at():
                self._logger.warning("certificate_outside_validity_window")

        if self.settings.content_marker in site.body:
            self._logger.info("site_content_verified")
        else:
            self._logger.warning(
                "site_content_marker_missing", marker=self.settings.content_marker
            )
        return True

    async def check_seo_metadata(self) -> bool:
        """All required meta tags are present on the served page."""
        site = await self._fetch_site()
        if site.status_code != 200:
            self._logger.error("seo_site_unavailable", status_code=site.status_code)
            return False

        report = analyze_page(site.body)
        for meta in report.meta:
            ok = meta.found or not meta.required
            log = self._logger.info if ok else self._logger.error
            log("meta_tag", tag=meta.name, found=meta.found, value=meta.value)

        if report.structured_data:
            self._logger.info("structured_data", types=report.structured_data)
        else:
            self._logger.warning("structured_data_missing")

        if report.favicon:
            self._logger.info("favicon_found", href=report.favicon)
        else:
            self._logger.warning("favicon_missing")

        return report.passed

    async def _run_check(
        self, name: str, check: Callable[[], Awaitable[bool]]
    ) -> None:
        outcome: SuiteOutcome
        try:
            outcome = await check()
        except Exception as e:
            self._logger.error(
                "deployment_check_failed",
                check=name,
                error=str(e),
                hints=e.hints if isinstance(e, ConnectivityError) else None,
            )
            outcome = e
        self.checks.record(name, outcome, description=CHECK_DESCRIPTIONS[name])

    async def run(self) -> bool:
        self._site = None
        self._site_error = None
        self.checks = ResultAggregator()

        await self._run_check("github_actions", self.check_github_actions)
        await self._run_check("domain_https", self.check_domain_https)
        await self._run_check("seo_metadata", self.check_seo_metadata)

        summary = self.checks.summarize()
        self.report_path = self._write_report(summary)
        self._logger.info(
            "deployment_completed",
            passed=summary.counts.passed,
            total=summary.counts.total,
            report=str(self.report_path),
        )
        return summary.success

    def _write_report(self, summary: Summary) -> Path:
        now = datetime.now()
        data = {
            "timestamp": now.isoformat(),
            "domain": self.settings.domain,
            "github_repo": self.settings.github_repo,
            "results": {
                r.name: r.model_dump(
                    mode="json", include={"status", "description", "error"}
                )
                for r in summary.results
            },
            "summary": {
                "total": summary.counts.total,
                "passed": summary.counts.passed,
                "failed": summary.counts.failed,
            },
        }
        writer = ReportWriter(self.settings.output_dir, logger=self._logger)
        return writer.write_json(data, f"deployment-test-{filesystem_timestamp(now)}")

    def check_status(self, name: str) -> SuiteStatus | None:
        """Status of a sub-check from the last run."""
        for result in self.checks.results:
            if result.name == name:
                return result.status
        return None
