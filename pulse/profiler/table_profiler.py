"""
Table profiler — runs the per-column engine and aggregates a table summary.

Per column, in dependency order:

1. :func:`~pulse.profiler.type_inference.infer_column_type`
2. :func:`~pulse.profiler.sentinels.detect_sentinels` (needs the type)
3. :func:`~pulse.profiler.missingness.profile_missingness` (needs sentinels)
4. :func:`~pulse.profiler.distribution.profile_distribution` (type + sentinels)
5. :func:`~pulse.profiler.issues.generate_issues` (missingness + type + cardinality)

The per-column outputs are rolled into one :class:`TableSummary` scored by
:func:`~pulse.profiler.quality_score.calculate_quality_score`.

Every step is pure, so :class:`Profiler` can fan whole tables out to a
process pool without any locking.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from concurrent import futures
from typing import TYPE_CHECKING

from pulse.models.enums import QualityScore, Severity
from pulse.models.profile import ColumnProfile
from pulse.models.summary import TableProfileResult, TableSummary
from pulse.profiler.distribution import profile_distribution
from pulse.profiler.issues import generate_issues
from pulse.profiler.missingness import profile_missingness
from pulse.profiler.quality_score import calculate_quality_score
from pulse.profiler.sentinels import detect_sentinels, sentinel_values
from pulse.profiler.type_inference import infer_column_type

if TYPE_CHECKING:
    from pulse.config import ProfilingConfig
    from pulse.models.findings import Issue
    from pulse.models.table import TableSnapshot

__all__ = ["profile_table", "summarise_table", "Profiler"]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Single table
# ---------------------------------------------------------------------------

def profile_table(table: TableSnapshot, config: ProfilingConfig) -> TableProfileResult:
    """Profile every column of *table* and aggregate the table summary.

    A table with no rows short-circuits to an ``Excellent`` summary with no
    per-column records.
    """
    row_count = table.row_count
    if row_count == 0:
        logger.info("%s: 0 rows, skipping", table.name)
        return TableProfileResult(
            table_name=table.name,
            profiles=(),
            distributions=(),
            sentinels=(),
            issues=(),
            summary=TableSummary(
                table_name=table.name,
                row_count=0,
                variable_count=table.column_count,
                avg_valid_pct=None,
                min_valid_pct=None,
                max_missing_pct=None,
                critical_issue_count=0,
                warning_issue_count=0,
                info_issue_count=0,
                quality_score=QualityScore.EXCELLENT,
                worst_variable=None,
                worst_variable_missing_pct=None,
            ),
        )

    logger.info("%s: %d rows, %d columns", table.name, row_count, table.column_count)
    dp = config.display.decimal_places

    profiles, distributions, sentinels, issues = [], [], [], []
    for col_name, values in table.iter_columns():
        col_type = infer_column_type(values, col_name, config)
        found = detect_sentinels(values, col_name, col_type, config)
        sentinel_vals = sentinel_values(found)
        missingness = profile_missingness(values, sentinel_vals, decimal_places=dp)
        distribution = profile_distribution(values, col_name, col_type, sentinel_vals, config)
        col_issues = generate_issues(
            col_name, table.name, missingness, col_type,
            missingness.unique_count, missingness.total_count, config,
        )
        logger.debug(
            "%s.%s: type=%s missing=%.2f%% sentinels=%d issues=%d",
            table.name, col_name, col_type.value, missingness.total_missing_pct,
            len(found), len(col_issues),
        )

        profiles.append(ColumnProfile.from_missingness(col_name, col_type, missingness))
        distributions.append(distribution)
        sentinels.extend(found)
        issues.extend(col_issues)

    summary = summarise_table(table.name, row_count, profiles, issues, config)
    logger.info(
        "%s: score=%s, issues=%dC/%dW/%dI",
        table.name, summary.quality_score.value, summary.critical_issue_count,
        summary.warning_issue_count, summary.info_issue_count,
    )
    return TableProfileResult(
        table_name=table.name,
        profiles=tuple(profiles),
        distributions=tuple(distributions),
        sentinels=tuple(sentinels),
        issues=tuple(issues),
        summary=summary,
    )


def summarise_table(
    table_name: str,
    row_count: int,
    profiles: list[ColumnProfile],
    issues: list[Issue],
    config: ProfilingConfig,
) -> TableSummary:
    """Aggregate column profiles and issues into a scored :class:`TableSummary`.

    ``worst_variable`` is the first column (in table order) with the highest
    ``total_missing_pct``.
    """
    dp = config.display.decimal_places
    valid_pcts = [p.valid_pct for p in profiles]
    missing_pcts = [p.total_missing_pct for p in profiles]

    if profiles:
        avg_valid = round(sum(valid_pcts) / len(valid_pcts), dp)
        min_valid = round(min(valid_pcts), dp)
        max_missing = round(max(missing_pcts), dp)
        # max() returns the first maximal element, i.e. column order on ties
        worst = max(profiles, key=lambda p: p.total_missing_pct)
        worst_name, worst_pct = worst.variable_name, worst.total_missing_pct
    else:
        avg_valid = min_valid = max_missing = None
        worst_name = worst_pct = None

    critical = sum(1 for i in issues if i.severity is Severity.CRITICAL)
    warning = sum(1 for i in issues if i.severity is Severity.WARNING)
    info = sum(1 for i in issues if i.severity is Severity.INFO)

    return TableSummary(
        table_name=table_name,
        row_count=row_count,
        variable_count=len(profiles),
        avg_valid_pct=avg_valid,
        min_valid_pct=min_valid,
        max_missing_pct=max_missing,
        critical_issue_count=critical,
        warning_issue_count=warning,
        info_issue_count=info,
        quality_score=calculate_quality_score(max_missing, critical, config),
        worst_variable=worst_name,
        worst_variable_missing_pct=worst_pct,
    )


# ---------------------------------------------------------------------------
# Many tables
# ---------------------------------------------------------------------------

class Profiler:
    """Profiles a stream of table snapshots, optionally in parallel.

    Usage::

        profiler = Profiler(config)
        results = profiler.run(reader.read_tables(), max_workers=4)
    """

    def __init__(self, config: ProfilingConfig) -> None:
        self._config = config
        self._results: list[TableProfileResult] = []

    def run(
        self,
        tables: Iterable[TableSnapshot],
        *,
        max_workers: int = 1,
    ) -> list[TableProfileResult]:
        """Profile every table and return the results in input order.

        With ``max_workers > 1`` tables are profiled in a
        ``ProcessPoolExecutor``.  At most ``max_workers * 2`` tables are in
        flight so a lazy reader is not drained into memory up front.  Worker
        exceptions propagate to the caller.
        """
        results: list[TableProfileResult] = []
        if max_workers <= 1:
            for table in tables:
                results.append(profile_table(table, self._config))
        else:
            max_in_flight = max_workers * 2
            with futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
                pending: deque[futures.Future[TableProfileResult]] = deque()
                for table in tables:
                    pending.append(executor.submit(profile_table, table, self._config))
                    if len(pending) >= max_in_flight:
                        results.append(pending.popleft().result())
                while pending:
                    results.append(pending.popleft().result())

        self._results = results
        return self.results

    @property
    def results(self) -> list[TableProfileResult]:
        """Results of the most recent :meth:`run`."""
        return list(self._results)
