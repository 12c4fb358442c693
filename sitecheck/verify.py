"""Check that the project layout the suites rely on is in place."""

from enum import Enum

import structlog
from pydantic import BaseModel, Field

from sitecheck.core.logging import get_logger
from sitecheck.core.settings import SiteCheckSettings
from sitecheck.suites.deployment import missing_workflow_components


class CheckLevel(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class SetupCheck(BaseModel):
    name: str
    level: CheckLevel
    message: str


class SetupReport(BaseModel):
    """Findings of a setup verification."""

    checks: list[SetupCheck] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no check reported an error. Warnings are allowed."""
        return all(c.level is not CheckLevel.ERROR for c in self.checks)

    def add(self, name: str, level: CheckLevel, message: str) -> None:
        self.checks.append(SetupCheck(name=name, level=level, message=message))


def verify_setup(
    settings: SiteCheckSettings,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> SetupReport:
    """Verify output directories, the deploy workflow and the CNAME file.

    Missing output directories are created. A missing workflow file is an
    error; missing workflow components and a missing or mismatched CNAME are
    warnings.
    """
    log = logger or get_logger(__name__)
    report = SetupReport()

    output_dirs = [
        settings.lighthouse.output_dir,
        settings.browser.output_dir,
        settings.deployment.output_dir,
        settings.integration.output_dir,
    ]
    for directory in output_dirs:
        if directory.is_dir():
            report.add(str(directory), CheckLevel.OK, "exists")
            continue
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            report.add(str(directory), CheckLevel.ERROR, f"cannot create: {e}")
        else:
            report.add(str(directory), CheckLevel.OK, "created")

    deployment = settings.deployment
    workflow = deployment.workflow_path
    if not workflow.exists():
        report.add(str(workflow), CheckLevel.ERROR, "workflow file missing")
    else:
        missing = missing_workflow_components(
            workflow.read_text(encoding="utf-8"),
            deployment.required_workflow_components,
        )
        if missing:
            report.add(
                str(workflow), CheckLevel.WARNING, f"missing: {', '.join(missing)}"
            )
        else:
            report.add(str(workflow), CheckLevel.OK, "properly configured")

    cname = deployment.cname_path
    if not cname.exists():
        report.add(
            str(cname),
            CheckLevel.WARNING,
            "missing (deployment checks will be limited)",
        )
    else:
        domain = cname.read_text(encoding="utf-8").strip()
        if domain == deployment.domain:
            report.add(str(cname), CheckLevel.OK, f"configured for {domain}")
        else:
            report.add(
                str(cname),
                CheckLevel.WARNING,
                f"configured for {domain}, expected {deployment.domain}",
            )

    for check in report.checks:
        log.debug(
            "setup_check",
            check=check.name,
            level=check.level.value,
            message=check.message,
        )
    log.info("setup_verified", ok=report.ok, checks=len(report.checks))
    return report
