"""
Pulse pipeline — profile table snapshots and persist the results.

Stages:

1. Profile every snapshot with :class:`~pulse.profiler.table_profiler.Profiler`.
2. Replace earlier results for the same ``(ingest_id, schema_name)`` pair
   with the new table results in one
   :class:`~pulse.store.duck_store.DuckStore` transaction, so a re-run
   replaces rather than duplicates and a failed write keeps the old run.

Usage::

    config = load_profiling_config("profiling.yaml")
    store = DuckStore("pulse.db")
    store.init_tables()
    summary = profile_data(CSVReader("./raw").read_tables(), store, "ingest_42", config)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING

from pulse.models.summary import RunSummary
from pulse.profiler.table_profiler import Profiler

if TYPE_CHECKING:
    from pulse.config import ProfilingConfig
    from pulse.models.table import TableSnapshot
    from pulse.store.duck_store import DuckStore

__all__ = ["profile_data"]

logger = logging.getLogger(__name__)


def profile_data(
    tables: Iterable[TableSnapshot],
    store: DuckStore,
    ingest_id: str,
    config: ProfilingConfig,
    schema_name: str = "raw",
    *,
    max_workers: int = 1,
) -> RunSummary:
    """Profile *tables* and write the results for one ingest.

    Raises
    ------
    ValueError
        If *ingest_id* is empty or no tables were supplied.
    """
    if not ingest_id or not ingest_id.strip():
        raise ValueError("ingest_id must be a non-empty string")

    logger.info("=" * 60)
    logger.info("Data profiling: ingest=%s schema=%s", ingest_id, schema_name)
    logger.info("=" * 60)
    t0 = time.time()

    results = Profiler(config).run(tables, max_workers=max_workers)
    if not results:
        raise ValueError(f"no tables supplied for schema {schema_name!r}")

    store.replace_results(ingest_id, schema_name, results)

    run = RunSummary(ingest_id=ingest_id, schema_name=schema_name)
    for result in results:
        run.add(result)

    logger.info(
        "Profiled %d tables, %d variables in %.1fs",
        run.tables_profiled, run.variables_profiled, time.time() - t0,
    )
    logger.info("Sentinels detected: %d", run.sentinels_detected)
    logger.info(
        "Issues: %d critical, %d warning, %d info",
        run.critical_issues, run.warning_issues, run.info_issues,
    )
    logger.info("Overall quality: %s", run.overall_score.value)
    return run
