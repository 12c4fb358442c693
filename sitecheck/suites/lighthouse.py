"""Lighthouse performance audit suite."""

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field

from sitecheck.core.exceptions import ToolExecutionError
from sitecheck.core.settings import LighthouseSettings
from sitecheck.runner.tools import ToolRunner
from sitecheck.scoring.thresholds import all_passed, evaluate, round_half_up

from .base import LocalServerSuite, filesystem_timestamp

CATEGORIES = ("performance", "accessibility", "best-practices", "seo")

WEB_VITALS = {
    "lcp": "largest-contentful-paint",
    "fid": "max-potential-fid",
    "cls": "cumulative-layout-shift",
}

MAX_OPPORTUNITIES = 5


class Opportunity(BaseModel):
    """A performance audit with estimated time savings."""

    id: str
    title: str
    savings_ms: float = 0.0


class LighthouseResult(BaseModel):
    """Parsed Lighthouse JSON report."""

    scores: dict[str, int] = Field(default_factory=dict)
    web_vitals: dict[str, str] = Field(default_factory=dict)
    opportunities: list[Opportunity] = Field(default_factory=list)


def parse_lighthouse_report(data: dict[str, Any]) -> LighthouseResult:
    """Extract category scores, web vitals and top opportunities.

    Category scores are Lighthouse's 0-1 floats scaled to integer
    percentages. Categories absent from the report are left out.
    """
    categories = data.get("categories") or {}
    scores: dict[str, int] = {}
    for category in CATEGORIES:
        score = (categories.get(category) or {}).get("score")
        if score is not None:
            scores[category] = round_half_up(score * 100)

    audits = data.get("audits") or {}
    web_vitals = {
        key: (audits.get(audit_id) or {}).get("displayValue") or "N/A"
        for key, audit_id in WEB_VITALS.items()
    }

    opportunities = []
    for audit_id, audit in audits.items():
        details = audit.get("details") or {}
        score = audit.get("score")
        if details.get("type") != "opportunity" or score is None or score >= 1:
            continue
        opportunities.append(
            Opportunity(
                id=audit_id,
                title=audit.get("title", audit_id),
                savings_ms=details.get("overallSavingsMs") or 0,
            )
        )
    opportunities.sort(key=lambda o: o.savings_ms, reverse=True)

    return LighthouseResult(
        scores=scores,
        web_vitals=web_vitals,
        opportunities=opportunities[:MAX_OPPORTUNITIES],
    )


class LighthouseSuite(LocalServerSuite):
    """Audits the local site with Lighthouse and checks category thresholds."""

    description = "Lighthouse performance audit"
    details = "Performance, accessibility, SEO, and best practices validation"

    def __init__(
        self,
        settings: LighthouseSettings,
        tools: ToolRunner | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        super().__init__(tools=tools, logger=logger)
        self.settings = settings
        self.url = settings.url
        self.last_result: LighthouseResult | None = None

    @property
    def name(self) -> str:
        return "lighthouse_audit"

    def build_command(self, base_path: Path) -> list[str]:
        """Command line producing ``<base_path>.report.{html,json}``."""
        return [
            "npx",
            "lighthouse",
            self.settings.url,
            "--output=html",
            "--output=json",
            f"--output-path={base_path}",
            f"--chrome-flags={self.settings.chrome_flags}",
            "--enable-error-reporting=false",
            "--quiet",
        ]

    async def run(self) -> bool:
        await self.ensure_server()

        output_dir = self._ensure_output_dir(self.settings.output_dir)
        base_path = output_dir / f"lighthouse-report-{filesystem_timestamp()}"

        self._logger.info("lighthouse_started", url=self.settings.url)
        result = await self.tools.run(
            self.build_command(base_path), timeout=self.settings.timeout_seconds
        )
        result.raise_for_status()

        json_path = Path(f"{base_path}.report.json")
        try:
            data = json.loads(json_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ToolExecutionError(
                f"Cannot read Lighthouse report {json_path}: {e}", tool="lighthouse"
            ) from e

        parsed = parse_lighthouse_report(data)
        self.last_result = parsed
        return self._evaluate(parsed, json_path)

    def _evaluate(self, parsed: LighthouseResult, json_path: Path) -> bool:
        thresholds = self.settings.thresholds
        verdicts = evaluate(parsed.scores, thresholds)

        for category, passed in verdicts.items():
            self._logger.info(
                "lighthouse_category",
                category=category,
                score=parsed.scores[category],
                threshold=thresholds.get(category),
                passed=passed,
            )
        self._logger.info("lighthouse_web_vitals", **parsed.web_vitals)
        for opportunity in parsed.opportunities:
            if opportunity.savings_ms > 0:
                self._logger.info(
                    "lighthouse_opportunity",
                    title=opportunity.title,
                    savings_ms=opportunity.savings_ms,
                )

        missing = [c for c in thresholds if c not in parsed.scores]
        if missing:
            self._logger.warning("lighthouse_categories_missing", categories=missing)

        # A category that has a threshold but no score cannot be shown to pass
        passed = all_passed(verdicts) and not missing
        self._logger.info(
            "lighthouse_completed",
            passed=passed,
            report_json=str(json_path),
            report_html=str(json_path.with_suffix(".html")),
        )
        return passed
