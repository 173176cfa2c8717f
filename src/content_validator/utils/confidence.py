"""
Confidence-based utility functions.

Helpers for reconciling two scores for the same criterion.
"""

import math
from typing import Iterable


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positives.

    Python's round() uses banker's rounding (round(2.5) == 2), which would
    bias combined scores downward.

    Example:
        >>> round_half_up(7.5)
        8
    """
    return int(math.floor(value + 0.5))


def agreement_confidence(score_a: float, score_b: float, max_points: float) -> float:
    """
    Confidence from the gap between two scores.

    Args:
        score_a: First provider's score
        score_b: Second provider's score
        max_points: Criterion ceiling

    Returns:
        1 - |a - b| / max_points, clamped to [0, 1]

    Example:
        >>> agreement_confidence(8, 6, 10)
        0.8
    """
    if max_points <= 0:
        return 0.0
    return clamp(1.0 - abs(score_a - score_b) / max_points, 0.0, 1.0)


def scores_agree(score_a: float, score_b: float, max_points: float, tolerance: float) -> bool:
    """True when the gap is within tolerance (a fraction of max_points)."""
    return abs(score_a - score_b) <= tolerance * max_points + 1e-9


def mean_confidence(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return clamp(sum(values) / len(values), 0.0, 1.0)
