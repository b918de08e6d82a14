"""
Quality Scoring

    score = clamp(aroma * 0.4 + color * 0.4 + (1 - moisture) * 100 * 0.2, 0, 100)

    GOOD  score >= 80
    OK    score >= 60
    BAD   otherwise

Shared by TeaBatch (live / finalized score) and the CSV sink, which
recomputes the score for every persisted row.
"""

from enum import Enum

from .tea_leaf import clamp

AROMA_WEIGHT = 0.4
COLOR_WEIGHT = 0.4
DRYNESS_WEIGHT = 0.2

GOOD_THRESHOLD = 80.0
OK_THRESHOLD = 60.0


class QualityStatus(Enum):
    GOOD = "GOOD"
    OK = "OK"
    BAD = "BAD"

    def __str__(self) -> str:
        return self.value


def compute_quality_score(moisture: float, aroma: float, color: float) -> float:
    score = (aroma * AROMA_WEIGHT
             + color * COLOR_WEIGHT
             + (1.0 - moisture) * 100.0 * DRYNESS_WEIGHT)
    return clamp(score, 0.0, 100.0)


def classify_quality(score: float) -> QualityStatus:
    if score >= GOOD_THRESHOLD:
        return QualityStatus.GOOD
    if score >= OK_THRESHOLD:
        return QualityStatus.OK
    return QualityStatus.BAD
