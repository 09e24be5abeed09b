"""
Enumerations shared by the profiling engine and the result store.

Enum *values* are the exact strings written to the ``governance`` tables.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "InferredType",
    "ValueClass",
    "DistributionType",
    "DetectionMethod",
    "Confidence",
    "Severity",
    "QualityScore",
]


# ---------------------------------------------------------------------------
# Column-level classifications
# ---------------------------------------------------------------------------

class InferredType(Enum):
    """Logical type of a column; cells themselves are always text."""

    IDENTIFIER = "identifier"
    NUMERIC = "numeric"
    DATE = "date"
    CATEGORICAL = "categorical"


class ValueClass(Enum):
    """Missingness category of a single cell, in evaluation order."""

    NA = "na"
    EMPTY = "empty"
    WHITESPACE = "whitespace"
    SENTINEL = "sentinel"
    VALID = "valid"

    def is_missing(self) -> bool:
        return self is not ValueClass.VALID


class DistributionType(Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    NONE = "none"


# ---------------------------------------------------------------------------
# Sentinel detection
# ---------------------------------------------------------------------------

class DetectionMethod(Enum):
    CONFIG_LIST = "config_list"
    FREQUENCY_ANALYSIS = "frequency_analysis"


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"


# ---------------------------------------------------------------------------
# Issues and scores
# ---------------------------------------------------------------------------

class Severity(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class QualityScore(Enum):
    """Ordinal table quality label, best first."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_REVIEW = "Needs Review"

    @property
    def rank(self) -> int:
        """0 for Excellent up to 3 for Needs Review."""
        return list(QualityScore).index(self)

    @classmethod
    def worst(cls, scores: list[QualityScore]) -> QualityScore:
        """Return the lowest label in *scores*; Needs Review if empty."""
        if not scores:
            return cls.NEEDS_REVIEW
        return max(scores, key=lambda s: s.rank)
