"""
DuckDB store — persistence for profiling results.

The engine itself never writes anything; this store receives finished
:class:`~pulse.models.summary.TableProfileResult` objects, tags every row
with the ``ingest_id`` and ``schema_name`` of the run, and writes them to
five tables in the ``governance`` schema:

* ``data_profile`` — one row per column (missingness + inferred type).
* ``data_profile_distribution`` — one row per column (statistics; top
  values as JSON text).
* ``data_profile_sentinel`` — one row per detected sentinel.
* ``data_profile_issue`` — one row per quality issue.
* ``data_profile_summary`` — one row per table.

**Single-writer constraint**: DuckDB allows only one concurrent writer.
All writes go through the calling thread, never from profiler workers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import duckdb

if TYPE_CHECKING:
    from pulse.models.summary import TableProfileResult

__all__ = ["PROFILING_TABLES", "DuckStore"]

logger = logging.getLogger(__name__)

SCHEMA = "governance"

PROFILING_TABLES = (
    "data_profile",
    "data_profile_distribution",
    "data_profile_sentinel",
    "data_profile_issue",
    "data_profile_summary",
)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_DATA_PROFILE = """
CREATE TABLE IF NOT EXISTS governance.data_profile (
    ingest_id           VARCHAR NOT NULL,
    schema_name         VARCHAR NOT NULL,
    table_name          VARCHAR NOT NULL,
    variable_name       VARCHAR NOT NULL,
    inferred_type       VARCHAR,            -- numeric, categorical, date, identifier
    total_count         INTEGER,
    valid_count         INTEGER,
    na_count            INTEGER,
    empty_count         INTEGER,
    whitespace_count    INTEGER,
    sentinel_count      INTEGER,
    na_pct              DOUBLE,
    empty_pct           DOUBLE,
    whitespace_pct      DOUBLE,
    sentinel_pct        DOUBLE,
    total_missing_count INTEGER,
    total_missing_pct   DOUBLE,
    valid_pct           DOUBLE,
    unique_count        INTEGER,
    unique_pct          DOUBLE,
    profiled_at         TIMESTAMP NOT NULL DEFAULT current_timestamp
);
"""

_CREATE_DISTRIBUTION = """
CREATE TABLE IF NOT EXISTS governance.data_profile_distribution (
    ingest_id           VARCHAR NOT NULL,
    schema_name         VARCHAR NOT NULL,
    table_name          VARCHAR NOT NULL,
    variable_name       VARCHAR NOT NULL,
    distribution_type   VARCHAR,            -- numeric, categorical, none
    stat_min            DOUBLE,
    stat_max            DOUBLE,
    stat_mean           DOUBLE,
    stat_median         DOUBLE,
    stat_sd             DOUBLE,
    stat_q25            DOUBLE,
    stat_q75            DOUBLE,
    stat_iqr            DOUBLE,
    top_values_json     VARCHAR,            -- [{value, count, pct}, ...]
    mode_value          VARCHAR,
    mode_count          INTEGER,
    mode_pct            DOUBLE
);
"""

_CREATE_SENTINEL = """
CREATE TABLE IF NOT EXISTS governance.data_profile_sentinel (
    ingest_id           VARCHAR NOT NULL,
    schema_name         VARCHAR NOT NULL,
    table_name          VARCHAR NOT NULL,
    variable_name       VARCHAR NOT NULL,
    sentinel_value      VARCHAR NOT NULL,
    sentinel_count      INTEGER,
    sentinel_pct        DOUBLE,
    detection_method    VARCHAR,            -- config_list, frequency_analysis
    confidence          VARCHAR             -- high, medium
);
"""

_CREATE_ISSUE = """
CREATE TABLE IF NOT EXISTS governance.data_profile_issue (
    ingest_id           VARCHAR NOT NULL,
    schema_name         VARCHAR NOT NULL,
    table_name          VARCHAR NOT NULL,
    variable_name       VARCHAR,
    issue_type          VARCHAR NOT NULL,
    severity            VARCHAR NOT NULL CHECK (severity IN ('critical', 'warning', 'info')),
    description         VARCHAR,
    value               DOUBLE,
    recommendation      VARCHAR
);
"""

_CREATE_SUMMARY = """
CREATE TABLE IF NOT EXISTS governance.data_profile_summary (
    ingest_id                  VARCHAR NOT NULL,
    schema_name                VARCHAR NOT NULL,
    table_name                 VARCHAR NOT NULL,
    row_count                  INTEGER,
    variable_count             INTEGER,
    avg_valid_pct              DOUBLE,
    min_valid_pct              DOUBLE,
    max_missing_pct            DOUBLE,
    critical_issue_count       INTEGER DEFAULT 0,
    warning_issue_count        INTEGER DEFAULT 0,
    info_issue_count           INTEGER DEFAULT 0,
    quality_score              VARCHAR,
    worst_variable             VARCHAR,
    worst_variable_missing_pct DOUBLE
);
"""


# ---------------------------------------------------------------------------
# DuckStore
# ---------------------------------------------------------------------------

class DuckStore:
    """Embedded DuckDB store for profiling results.

    Parameters
    ----------
    db_path : str | Path
        Path to the ``.db`` file. Use ``":memory:"`` for testing.
    """

    def __init__(self, db_path: str | Path = "pulse.db") -> None:
        self._db_path = str(db_path)
        self._con: duckdb.DuckDBPyConnection = duckdb.connect(self._db_path)

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        return self._con

    # ==================================================================
    # Schema management
    # ==================================================================

    def init_tables(self, *, recreate: bool = False) -> None:
        """Create the ``governance`` schema and the five profiling tables.

        If *recreate* is True, existing tables are dropped first.
        """
        self._con.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA};")
        if recreate:
            for table in PROFILING_TABLES:
                self._con.execute(f"DROP TABLE IF EXISTS {SCHEMA}.{table};")
            logger.info("Dropped existing profiling tables")

        for ddl in (
            _CREATE_DATA_PROFILE,
            _CREATE_DISTRIBUTION,
            _CREATE_SENTINEL,
            _CREATE_ISSUE,
            _CREATE_SUMMARY,
        ):
            self._con.execute(ddl)
        logger.info("Profiling tables ready at %s", self._db_path)

    def clear_results(self, ingest_id: str, schema_name: str) -> None:
        """Delete prior results for one ingest / schema pair."""
        with self._transaction():
            self._delete_results(ingest_id, schema_name)
        logger.info("Cleared prior profiling data for %s / %s", ingest_id, schema_name)

    # ==================================================================
    # Writes (single writer, calling thread only)
    # ==================================================================

    def write_table_result(
        self,
        ingest_id: str,
        schema_name: str,
        result: TableProfileResult,
    ) -> int:
        """Insert every record of one table result in a single transaction.

        Returns
        -------
        int
            Total number of rows written across the five tables.
        """
        with self._transaction():
            n = self._insert_result(ingest_id, schema_name, result)
        logger.info("Inserted %d rows for table %s", n, result.table_name)
        return n

    def replace_results(
        self,
        ingest_id: str,
        schema_name: str,
        results: Sequence[TableProfileResult],
    ) -> int:
        """Swap the stored results of one ingest / schema pair for *results*.

        The delete and every insert share one transaction: on failure the
        previously stored run is left exactly as it was.
        """
        with self._transaction():
            self._delete_results(ingest_id, schema_name)
            n = sum(self._insert_result(ingest_id, schema_name, r) for r in results)
        logger.info(
            "Replaced profiling data for %s / %s: %d tables, %d rows",
            ingest_id, schema_name, len(results), n,
        )
        return n

    # ==================================================================
    # Review queries
    # ==================================================================

    def fetch_summaries(self, ingest_id: str, schema_name: str) -> list[dict[str, Any]]:
        """Per-table summaries, ordered by table name."""
        return self._fetch_dicts(
            "SELECT table_name, row_count, variable_count, quality_score,"
            "       critical_issue_count, warning_issue_count, info_issue_count,"
            "       avg_valid_pct, min_valid_pct, max_missing_pct,"
            "       worst_variable, worst_variable_missing_pct"
            "  FROM governance.data_profile_summary"
            " WHERE ingest_id = ? AND schema_name = ?"
            " ORDER BY table_name",
            [ingest_id, schema_name],
        )

    def fetch_issues(
        self,
        ingest_id: str,
        schema_name: str,
        severities: Sequence[str] = ("critical", "warning"),
    ) -> list[dict[str, Any]]:
        """Issues of the given severities, most severe first."""
        if not severities:
            return []
        placeholders = ", ".join("?" for _ in severities)
        return self._fetch_dicts(
            "SELECT table_name, variable_name, issue_type, severity,"
            "       description, value, recommendation"
            "  FROM governance.data_profile_issue"
            " WHERE ingest_id = ? AND schema_name = ?"
            f"  AND severity IN ({placeholders})"
            " ORDER BY CASE severity WHEN 'critical' THEN 1 WHEN 'warning' THEN 2 ELSE 3 END,"
            "          table_name, variable_name",
            [ingest_id, schema_name, *severities],
        )

    def fetch_worst_variables(
        self, ingest_id: str, schema_name: str, limit: int = 20,
    ) -> list[dict[str, Any]]:
        """Columns with the highest total missingness."""
        return self._fetch_dicts(
            "SELECT table_name, variable_name, inferred_type, total_missing_pct,"
            "       na_pct, empty_pct, whitespace_pct, sentinel_pct, valid_pct"
            "  FROM governance.data_profile"
            " WHERE ingest_id = ? AND schema_name = ?"
            " ORDER BY total_missing_pct DESC, table_name, variable_name"
            f" LIMIT {int(limit)}",
            [ingest_id, schema_name],
        )

    def fetch_sentinels(self, ingest_id: str, schema_name: str) -> list[dict[str, Any]]:
        """Detected sentinels, most frequent first."""
        return self._fetch_dicts(
            "SELECT table_name, variable_name, sentinel_value, sentinel_count,"
            "       sentinel_pct, detection_method, confidence"
            "  FROM governance.data_profile_sentinel"
            " WHERE ingest_id = ? AND schema_name = ?"
            " ORDER BY sentinel_count DESC, table_name, variable_name",
            [ingest_id, schema_name],
        )

    def count_rows(self, table: str, ingest_id: str, schema_name: str) -> int:
        """Row count of one profiling table for an ingest / schema pair."""
        if table not in PROFILING_TABLES:
            raise ValueError(f"unknown profiling table {table!r}")
        row = self._con.execute(
            f"SELECT count(*) FROM {SCHEMA}.{table} WHERE ingest_id = ? AND schema_name = ?",
            [ingest_id, schema_name],
        ).fetchone()
        return int(row[0]) if row else 0

    # ==================================================================
    # Internals
    # ==================================================================

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        self._con.execute("BEGIN TRANSACTION;")
        try:
            yield
            self._con.execute("COMMIT;")
        except Exception:
            self._con.execute("ROLLBACK;")
            raise

    def _delete_results(self, ingest_id: str, schema_name: str) -> None:
        for table in PROFILING_TABLES:
            self._con.execute(
                f"DELETE FROM {SCHEMA}.{table} WHERE ingest_id = ? AND schema_name = ?",
                [ingest_id, schema_name],
            )

    def _insert_result(
        self,
        ingest_id: str,
        schema_name: str,
        result: TableProfileResult,
    ) -> int:
        """Insert one table result; the caller owns the transaction."""
        tag = (ingest_id, schema_name, result.table_name)

        profile_rows = [
            (*tag, p.variable_name, p.inferred_type.value,
             p.total_count, p.valid_count, p.na_count, p.empty_count,
             p.whitespace_count, p.sentinel_count,
             p.na_pct, p.empty_pct, p.whitespace_pct, p.sentinel_pct,
             p.total_missing_count, p.total_missing_pct, p.valid_pct,
             p.unique_count, p.unique_pct)
            for p in result.profiles
        ]
        dist_rows = [
            (*tag, d.variable_name, d.distribution_type.value,
             d.stat_min, d.stat_max, d.stat_mean, d.stat_median, d.stat_sd,
             d.stat_q25, d.stat_q75, d.stat_iqr,
             d.top_values_json(), d.mode_value, d.mode_count, d.mode_pct)
            for d in result.distributions
        ]
        sentinel_rows = [
            (*tag, s.variable_name, s.sentinel_value, s.sentinel_count, s.sentinel_pct,
             s.detection_method.value, s.confidence.value)
            for s in result.sentinels
        ]
        issue_rows = [
            (*tag, i.variable_name, i.issue_type, i.severity.value,
             i.description, i.value, i.recommendation)
            for i in result.issues
        ]
        s = result.summary
        summary_row = [
            *tag, s.row_count, s.variable_count, s.avg_valid_pct, s.min_valid_pct,
            s.max_missing_pct, s.critical_issue_count, s.warning_issue_count,
            s.info_issue_count, s.quality_score.value, s.worst_variable,
            s.worst_variable_missing_pct,
        ]

        if profile_rows:
            self._con.executemany(
                """INSERT INTO governance.data_profile
                   (ingest_id, schema_name, table_name, variable_name, inferred_type,
                    total_count, valid_count, na_count, empty_count,
                    whitespace_count, sentinel_count,
                    na_pct, empty_pct, whitespace_pct, sentinel_pct,
                    total_missing_count, total_missing_pct, valid_pct,
                    unique_count, unique_pct)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                profile_rows,
            )
        if dist_rows:
            self._con.executemany(
                """INSERT INTO governance.data_profile_distribution
                   (ingest_id, schema_name, table_name, variable_name, distribution_type,
                    stat_min, stat_max, stat_mean, stat_median, stat_sd,
                    stat_q25, stat_q75, stat_iqr,
                    top_values_json, mode_value, mode_count, mode_pct)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                dist_rows,
            )
        if sentinel_rows:
            self._con.executemany(
                """INSERT INTO governance.data_profile_sentinel
                   (ingest_id, schema_name, table_name, variable_name, sentinel_value,
                    sentinel_count, sentinel_pct, detection_method, confidence)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                sentinel_rows,
            )
        if issue_rows:
            self._con.executemany(
                """INSERT INTO governance.data_profile_issue
                   (ingest_id, schema_name, table_name, variable_name, issue_type,
                    severity, description, value, recommendation)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                issue_rows,
            )
        self._con.execute(
            """INSERT INTO governance.data_profile_summary
               (ingest_id, schema_name, table_name, row_count, variable_count,
                avg_valid_pct, min_valid_pct, max_missing_pct,
                critical_issue_count, warning_issue_count, info_issue_count,
                quality_score, worst_variable, worst_variable_missing_pct)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            summary_row,
        )
        return len(profile_rows) + len(dist_rows) + len(sentinel_rows) + len(issue_rows) + 1

    def _fetch_dicts(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        cursor = self._con.execute(sql, params)
        names = [d[0] for d in cursor.description]
        return [dict(zip(names, row)) for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the DuckDB connection."""
        self._con.close()
