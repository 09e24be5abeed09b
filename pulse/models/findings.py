"""
Detected sentinels and quality issues.
"""

from __future__ import annotations

from dataclasses import dataclass

from pulse.models.enums import Confidence, DetectionMethod, Severity

__all__ = ["SentinelRecord", "Issue"]


@dataclass(frozen=True)
class SentinelRecord:
    """A placeholder value found in one column.

    ``sentinel_pct`` is relative to the column's **total** row count, not
    to the number of valid values.
    """

    variable_name: str
    sentinel_value: str
    sentinel_count: int
    sentinel_pct: float
    detection_method: DetectionMethod
    confidence: Confidence


@dataclass(frozen=True)
class Issue:
    """One rule-based data quality finding for a column."""

    variable_name: str
    table_name: str
    issue_type: str
    severity: Severity
    description: str
    value: float
    recommendation: str
