"""
Profiler package — the data profiling engine.

Takes all-text table snapshots, infers each column's logical type, detects
sentinel values, classifies missingness, computes distributions, raises
quality issues and scores each table.

Modules
-------
type_inference
    identifier / numeric / date / categorical inference.
sentinels
    Config-list and frequency-analysis placeholder detection.
missingness
    Ordered five-way classification of every cell.
distribution
    Numeric statistics or top-N frequency tables over valid values.
issues
    Rule-based quality issues.
quality_score
    Table quality label.
table_profiler
    Per-table orchestration and the multi-table :class:`Profiler`.
source_readers
    CSV and DuckDB snapshot readers.
"""

from pulse.profiler.table_profiler import Profiler, profile_table

__all__ = ["Profiler", "profile_table"]
