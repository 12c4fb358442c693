"""Threshold evaluation for category scores."""

from .thresholds import (
    ScoreSet,
    ThresholdConfig,
    all_passed,
    evaluate,
    failed_categories,
    round_half_up,
)

__all__ = [
    "ScoreSet",
    "ThresholdConfig",
    "all_passed",
    "evaluate",
    "failed_categories",
    "round_half_up",
]
