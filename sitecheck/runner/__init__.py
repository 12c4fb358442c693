"""Suite execution: outcome models, aggregation and orchestration."""

from .aggregator import ResultAggregator, summarize_results
from .models import NotRun, SuiteCounts, SuiteResult, SuiteStatus, Summary
from .orchestrator import SuiteRunner
from .tools import ToolRunner, ToolRunResult, is_available

__all__ = [
    "NotRun",
    "ResultAggregator",
    "SuiteCounts",
    "SuiteResult",
    "SuiteRunner",
    "SuiteStatus",
    "Summary",
    "ToolRunResult",
    "ToolRunner",
    "is_available",
    "summarize_results",
]
