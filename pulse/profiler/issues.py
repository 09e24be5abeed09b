"""
Rule-based quality issues for one profiled column.

Rules are independent; several may fire for the same column:

* ``identifier_missing`` (critical) — identifier with missing % above the
  critical threshold.
* ``high_missingness`` (warning) — non-identifier above the high threshold.
* ``moderate_missingness`` (info) — non-identifier above the moderate
  threshold and at or below the high one.
* ``constant_value`` (info) — exactly one distinct valid value.
* ``high_cardinality`` (info) — non-identifier with more than 10 rows where
  over 90 % of the rows hold distinct values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pulse.models.enums import InferredType, Severity
from pulse.models.findings import Issue

if TYPE_CHECKING:
    from pulse.config import ProfilingConfig
    from pulse.models.profile import MissingnessResult

__all__ = ["HIGH_CARDINALITY_RATIO", "HIGH_CARDINALITY_MIN_ROWS", "generate_issues"]

HIGH_CARDINALITY_RATIO = 0.90
HIGH_CARDINALITY_MIN_ROWS = 10

_RECOMMENDATIONS = {
    "identifier_missing": "Investigate source data -- identifier fields must be complete.",
    "high_missingness": "Review data source; consider imputation or exclusion.",
    "moderate_missingness": "Monitor; may need review before use.",
    "constant_value": "Column provides no discriminating information.",
    "high_cardinality": "Verify this is expected; high cardinality may indicate free-text.",
}


def _fmt(x: float, decimal_places: int) -> str:
    """Render a percentage at *decimal_places* without trailing zeros."""
    text = f"{x:.{decimal_places}f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def generate_issues(
    variable_name: str,
    table_name: str,
    missingness: MissingnessResult,
    column_type: InferredType,
    unique_count: int,
    total_count: int,
    config: ProfilingConfig,
) -> list[Issue]:
    """Evaluate every issue rule against one column's missingness result."""
    issues: list[Issue] = []
    miss_pct = missingness.total_missing_pct
    th = config.missingness_thresholds
    is_identifier = column_type is InferredType.IDENTIFIER
    dp = config.display.decimal_places

    def _add(issue_type: str, severity: Severity, description: str, value: float) -> None:
        issues.append(Issue(
            variable_name=variable_name,
            table_name=table_name,
            issue_type=issue_type,
            severity=severity,
            description=description,
            value=value,
            recommendation=_RECOMMENDATIONS[issue_type],
        ))

    if is_identifier and miss_pct > th.critical:
        _add(
            "identifier_missing", Severity.CRITICAL,
            f"Identifier column {variable_name} has {_fmt(miss_pct, dp)}% missing values",
            miss_pct,
        )

    if not is_identifier and miss_pct > th.high:
        _add(
            "high_missingness", Severity.WARNING,
            f"{variable_name} has {_fmt(miss_pct, dp)}% missing values "
            f"(threshold: {_fmt(th.high, dp)}%)",
            miss_pct,
        )

    if not is_identifier and th.moderate < miss_pct <= th.high:
        _add(
            "moderate_missingness", Severity.INFO,
            f"{variable_name} has {_fmt(miss_pct, dp)}% missing values",
            miss_pct,
        )

    if unique_count == 1 and total_count > 0:
        _add(
            "constant_value", Severity.INFO,
            f"{variable_name} has only one unique value across {total_count} rows",
            1.0,
        )

    if (
        not is_identifier
        and total_count > HIGH_CARDINALITY_MIN_ROWS
        and unique_count > 0
        and unique_count / total_count > HIGH_CARDINALITY_RATIO
    ):
        card_pct = round(unique_count / total_count * 100, dp)
        _add(
            "high_cardinality", Severity.INFO,
            f"{variable_name} has {_fmt(card_pct, dp)}% unique values "
            f"({unique_count} of {total_count})",
            card_pct,
        )

    return issues
