"""Reporters for sitecheck results."""

from sitecheck.reporters.base import (
    STATUS_ICONS,
    Reporter,
    ReportMeta,
    collect_environment,
    unique_path,
    write_new_file,
)
from sitecheck.reporters.console import ConsoleReporter
from sitecheck.reporters.html_reporter import HTMLReporter, render_human
from sitecheck.reporters.json_reporter import JSONReporter, render_machine
from sitecheck.reporters.registry import REPORTERS, create_reporter
from sitecheck.reporters.writer import ReportPaths, ReportWriter

__all__ = [
    "REPORTERS",
    "STATUS_ICONS",
    "ConsoleReporter",
    "HTMLReporter",
    "JSONReporter",
    "ReportMeta",
    "ReportPaths",
    "ReportWriter",
    "Reporter",
    "collect_environment",
    "create_reporter",
    "render_human",
    "render_machine",
    "unique_path",
    "write_new_file",
]
