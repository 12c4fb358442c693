"""Verification suites run by sitecheck."""

from sitecheck.suites.base import LocalServerSuite, Suite, filesystem_timestamp
from sitecheck.suites.browser import BrowserSuite, render_playwright_spec
from sitecheck.suites.deployment import DeploymentSuite
from sitecheck.suites.lighthouse import LighthouseSuite, parse_lighthouse_report
from sitecheck.suites.network import check_https, is_reachable
from sitecheck.suites.seo import analyze_page

__all__ = [
    "BrowserSuite",
    "DeploymentSuite",
    "LighthouseSuite",
    "LocalServerSuite",
    "Suite",
    "analyze_page",
    "check_https",
    "filesystem_timestamp",
    "is_reachable",
    "parse_lighthouse_report",
    "render_playwright_spec",
]
