"""
Table- and run-level aggregates.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pulse.models.enums import QualityScore, Severity
from pulse.models.findings import Issue, SentinelRecord
from pulse.models.profile import ColumnProfile, DistributionResult

__all__ = ["TableSummary", "TableProfileResult", "RunSummary"]


@dataclass(frozen=True)
class TableSummary:
    """Roll-up of every column profile in one table snapshot.

    The percentage fields and ``worst_variable`` are ``None`` for a table
    with no rows.
    """

    table_name: str
    row_count: int
    variable_count: int
    avg_valid_pct: float | None
    min_valid_pct: float | None
    max_missing_pct: float | None
    critical_issue_count: int
    warning_issue_count: int
    info_issue_count: int
    quality_score: QualityScore
    worst_variable: str | None
    worst_variable_missing_pct: float | None


@dataclass(frozen=True)
class TableProfileResult:
    """Everything one :func:`~pulse.profiler.table_profiler.profile_table` call produces."""

    table_name: str
    profiles: tuple[ColumnProfile, ...]
    distributions: tuple[DistributionResult, ...]
    sentinels: tuple[SentinelRecord, ...]
    issues: tuple[Issue, ...]
    summary: TableSummary

    def issues_by_severity(self, severity: Severity) -> list[Issue]:
        return [i for i in self.issues if i.severity is severity]


@dataclass
class RunSummary:
    """Totals across one pipeline run (many tables, one ingest)."""

    ingest_id: str
    schema_name: str
    tables_profiled: int = 0
    variables_profiled: int = 0
    sentinels_detected: int = 0
    critical_issues: int = 0
    warning_issues: int = 0
    info_issues: int = 0
    table_scores: dict[str, QualityScore] = field(default_factory=dict)

    @property
    def overall_score(self) -> QualityScore:
        """Worst table score; Needs Review when nothing was profiled."""
        return QualityScore.worst(list(self.table_scores.values()))

    def add(self, result: TableProfileResult) -> None:
        """Fold one table result into the running totals."""
        self.tables_profiled += 1
        self.variables_profiled += len(result.profiles)
        self.sentinels_detected += len(result.sentinels)
        self.critical_issues += result.summary.critical_issue_count
        self.warning_issues += result.summary.warning_issue_count
        self.info_issues += result.summary.info_issue_count
        self.table_scores[result.table_name] = result.summary.quality_score
