"""Compare category scores against minimum thresholds."""

import math
from collections.abc import Mapping

ScoreSet = Mapping[str, int]
ThresholdConfig = Mapping[str, int]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (12.5 -> 13).

    Built-in ``round`` sends halves to the even neighbour instead.
    """
    return math.floor(value + 0.5)


def evaluate(scores: ScoreSet, thresholds: ThresholdConfig) -> dict[str, bool]:
    """Evaluate each scored category against its threshold.

    A category passes when ``score >= threshold``. Categories that have a
    score but no configured threshold are unconstrained and always pass.
    Thresholds without a matching score are ignored.

    Args:
        scores: Category name to score (0-100).
        thresholds: Category name to minimum acceptable score.

    Returns:
        Category name to pass/fail verdict, in score order.
    """
    verdicts: dict[str, bool] = {}
    for category, score in scores.items():
        threshold = thresholds.get(category)
        verdicts[category] = threshold is None or score >= threshold
    return verdicts


def all_passed(verdicts: Mapping[str, bool]) -> bool:
    """Return True if every verdict passed (vacuously True when empty)."""
    return all(verdicts.values())


def failed_categories(scores: ScoreSet, thresholds: ThresholdConfig) -> list[str]:
    """Return the categories scoring below their threshold."""
    return [
        category
        for category, passed in evaluate(scores, thresholds).items()
        if not passed
    ]
