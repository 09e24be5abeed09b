"""
pulse CLI — command-line interface for data profiling.

Commands
--------
- ``profile`` — profile a directory of CSV files or one schema of a DuckDB
  database and write the results to a results DuckDB.
- ``review`` — print quality scores, issues, worst variables and sentinels
  for one ingest.

Usage::

    pulse profile --csv-dir ./raw --db pulse.db --ingest-id 2024_06
    pulse profile --source-db staging.db --schema raw --ingest-id 2024_06
    pulse review --db pulse.db --ingest-id 2024_06

``--db`` and ``--config`` fall back to ``PULSE_DB_PATH`` and
``PULSE_PROFILING_CONFIG`` (a ``.env`` file in the working directory is
loaded first).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from pulse.config import load_profiling_config
from pulse.errors import ConfigurationError

console = Console()

_SCORE_STYLE = {
    "Excellent": "green",
    "Good": "cyan",
    "Fair": "yellow",
    "Needs Review": "bold red",
}


def _fmt_pct(value: Any) -> str:
    return "-" if value is None else f"{value:.2f}"


def _score(value: str | None) -> str:
    if value is None:
        return "-"
    style = _SCORE_STYLE.get(value, "white")
    return f"[{style}]{value}[/]"


# ── Shared options ───────────────────────────────────────────────────

@click.group()
@click.version_option(package_name="pulse-profiler")
@click.option("-v", "--verbose", is_flag=True, help="Enable DEBUG logging.")
def main(verbose: bool) -> None:
    """pulse — data profiling and quality review."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )


# ── profile ──────────────────────────────────────────────────────────

@main.command("profile")
@click.option("--csv-dir", type=click.Path(exists=True, file_okay=False, path_type=Path), help="Directory of CSV files to profile.")
@click.option("--source-db", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="DuckDB database to profile.")
@click.option("--schema", default="raw", show_default=True, help="Schema name (source schema for --source-db, label for --csv-dir).")
@click.option("--db", envvar="PULSE_DB_PATH", default="pulse.db", show_default=True, type=click.Path(dir_okay=False, path_type=Path), help="Results DuckDB file.")
@click.option("--ingest-id", required=True, help="Batch identifier the results are tagged with.")
@click.option("--config", "config_path", envvar="PULSE_PROFILING_CONFIG", type=click.Path(dir_okay=False, path_type=Path), help="Profiling config YAML.")
@click.option("--workers", default=1, show_default=True, type=click.IntRange(min=1), help="Profiler worker processes.")
@click.option("--recreate", is_flag=True, help="Drop and recreate the result tables first.")
def profile(
    csv_dir: Path | None,
    source_db: Path | None,
    schema: str,
    db: Path,
    ingest_id: str,
    config_path: Path | None,
    workers: int,
    recreate: bool,
) -> None:
    """Profile tables and store the results."""
    from pulse.pipeline import profile_data
    from pulse.profiler.source_readers import CSVReader, DuckDBReader
    from pulse.store.duck_store import DuckStore

    if (csv_dir is None) == (source_db is None):
        raise click.UsageError("Pass exactly one of --csv-dir or --source-db.")

    try:
        config = load_profiling_config(config_path)
    except ConfigurationError as exc:
        raise click.UsageError(f"Invalid profiling config: {exc}") from exc

    reader = CSVReader(csv_dir) if csv_dir is not None else DuckDBReader(source_db, schema=schema)
    console.print(f"[bold blue]Reading[/] {csv_dir or f'{source_db}:{schema}'} …")
    # source is read fully before the results DB is opened for writing
    tables = list(reader.read_tables())

    store = DuckStore(db)
    try:
        store.init_tables(recreate=recreate)
        console.print(f"[bold blue]Profiling[/] {len(tables)} table(s) …")
        try:
            run = profile_data(tables, store, ingest_id, config, schema, max_workers=workers)
        except ValueError as exc:
            raise click.UsageError(str(exc)) from exc
        summaries = store.fetch_summaries(ingest_id, schema)
    finally:
        store.close()

    console.print(_summary_table(summaries, title=f"Profiling summary — {ingest_id}"))
    console.print(
        f"{run.tables_profiled} table(s), {run.variables_profiled} variable(s), "
        f"{run.sentinels_detected} sentinel(s); issues "
        f"{run.critical_issues} critical / {run.warning_issues} warning / {run.info_issues} info"
    )
    console.print(f"Overall quality: {_score(run.overall_score.value)}")
    console.print(f"[bold green]✓[/] Results saved to {db}")


# ── review ───────────────────────────────────────────────────────────

@main.command("review")
@click.option("--db", envvar="PULSE_DB_PATH", default="pulse.db", show_default=True, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Results DuckDB file.")
@click.option("--ingest-id", required=True, help="Ingest to review.")
@click.option("--schema", default="raw", show_default=True)
@click.option("--limit", default=20, show_default=True, type=click.IntRange(min=1), help="Number of worst variables to list.")
def review(db: Path, ingest_id: str, schema: str, limit: int) -> None:
    """Print the profiling review for one ingest."""
    from pulse.store.duck_store import DuckStore

    store = DuckStore(db)
    try:
        summaries = store.fetch_summaries(ingest_id, schema)
        if not summaries:
            raise click.ClickException(f"No profiling results for ingest {ingest_id!r} / schema {schema!r}.")
        issues = store.fetch_issues(ingest_id, schema, severities=("critical", "warning"))
        worst = store.fetch_worst_variables(ingest_id, schema, limit=limit)
        sentinels = store.fetch_sentinels(ingest_id, schema)
    finally:
        store.close()

    console.print(_summary_table(summaries, title="Quality scores by table"))

    issue_table = Table(title="Critical and warning issues")
    issue_table.add_column("Severity")
    issue_table.add_column("Table")
    issue_table.add_column("Variable")
    issue_table.add_column("Description")
    for row in issues:
        style = "bold red" if row["severity"] == "critical" else "yellow"
        issue_table.add_row(
            f"[{style}]{row['severity']}[/]", row["table_name"],
            row["variable_name"] or "-", row["description"] or "",
        )
    console.print(issue_table)

    worst_table = Table(title="Worst variables by missingness")
    worst_table.add_column("Table")
    worst_table.add_column("Variable")
    worst_table.add_column("Type")
    worst_table.add_column("Missing %", justify="right")
    worst_table.add_column("Sentinel %", justify="right")
    for row in worst:
        worst_table.add_row(
            row["table_name"], row["variable_name"], row["inferred_type"] or "-",
            _fmt_pct(row["total_missing_pct"]), _fmt_pct(row["sentinel_pct"]),
        )
    console.print(worst_table)

    sentinel_table = Table(title="Detected sentinels")
    sentinel_table.add_column("Table")
    sentinel_table.add_column("Variable")
    sentinel_table.add_column("Value")
    sentinel_table.add_column("Count", justify="right")
    sentinel_table.add_column("Method")
    sentinel_table.add_column("Confidence")
    for row in sentinels:
        sentinel_table.add_row(
            row["table_name"], row["variable_name"], row["sentinel_value"],
            str(row["sentinel_count"]), row["detection_method"], row["confidence"],
        )
    console.print(sentinel_table)


def _summary_table(summaries: list[dict[str, Any]], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    table.add_column("Vars", justify="right")
    table.add_column("Score")
    table.add_column("C/W/I", justify="right")
    table.add_column("Max missing %", justify="right")
    table.add_column("Worst variable")
    for row in summaries:
        table.add_row(
            row["table_name"],
            str(row["row_count"]),
            str(row["variable_count"]),
            _score(row["quality_score"]),
            f"{row['critical_issue_count']}/{row['warning_issue_count']}/{row['info_issue_count']}",
            _fmt_pct(row["max_missing_pct"]),
            row["worst_variable"] or "-",
        )
    return table


if __name__ == "__main__":
    main()
