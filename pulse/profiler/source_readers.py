"""
Pluggable table-snapshot readers.

Each reader yields :class:`~pulse.models.table.TableSnapshot` objects whose
cells are raw text (or ``None`` for an explicit SQL NULL).  No reader
performs type coercion: logical types are inferred later by the profiler.

* :class:`CSVReader` — every ``*.csv`` file in a directory, read with polars
  and schema inference disabled.
* :class:`DuckDBReader` — every base table in one schema of a DuckDB file,
  each column cast to ``VARCHAR``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Protocol

import duckdb
import polars as pl

from pulse.models.table import TableSnapshot

__all__ = ["SourceReader", "CSVReader", "DuckDBReader"]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reader protocol
# ---------------------------------------------------------------------------

class SourceReader(Protocol):
    """Protocol all source readers must satisfy."""

    def read_tables(self) -> Iterator[TableSnapshot]:
        """Yield one all-text snapshot per table."""
        ...


# ---------------------------------------------------------------------------
# CSV reader
# ---------------------------------------------------------------------------

class CSVReader:
    """Read every CSV file in a directory as an all-text table.

    An unquoted blank field becomes ``None`` (na); a quoted ``""`` stays an
    empty string.

    Parameters
    ----------
    directory : str | Path
        Directory containing ``.csv`` files; the file stem is the table name.
    separator : str
        CSV delimiter.
    encoding : str
        ``"utf8"`` or ``"utf8-lossy"`` (polars encodings).
    """

    def __init__(
        self,
        directory: str | Path,
        separator: str = ",",
        encoding: str = "utf8",
    ) -> None:
        self.directory = Path(directory)
        self.separator = separator
        self.encoding = encoding

    def read_tables(self) -> Iterator[TableSnapshot]:
        csv_files = sorted(self.directory.glob("*.csv"))
        if not csv_files:
            logger.warning("No CSV files found in %s", self.directory)
            return

        for csv_path in csv_files:
            logger.info("Reading CSV: %s", csv_path)
            try:
                df = pl.read_csv(
                    csv_path,
                    separator=self.separator,
                    encoding=self.encoding,
                    infer_schema_length=0,  # every column as text
                )
            except (pl.exceptions.PolarsError, OSError):
                logger.exception("Failed to read %s", csv_path)
                continue
            yield TableSnapshot.from_polars(csv_path.stem, df)


# ---------------------------------------------------------------------------
# DuckDB reader
# ---------------------------------------------------------------------------

def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class DuckDBReader:
    """Read the tables of one schema from a DuckDB database.

    Parameters
    ----------
    db_path : str | Path
        DuckDB database file, opened read-only.
    schema : str
        Schema whose base tables are read.
    tables : Sequence[str], optional
        Restrict to these table names (default: every base table, sorted).
    """

    def __init__(
        self,
        db_path: str | Path,
        schema: str = "raw",
        tables: Sequence[str] | None = None,
    ) -> None:
        self.db_path = str(db_path)
        self.schema = schema
        self.tables = list(tables) if tables is not None else None

    def read_tables(self) -> Iterator[TableSnapshot]:
        con = duckdb.connect(self.db_path, read_only=True)
        try:
            for table_name in self._table_names(con):
                logger.info("Reading table: %s.%s", self.schema, table_name)
                yield self._read_table(con, table_name)
        finally:
            con.close()

    def _table_names(self, con: duckdb.DuckDBPyConnection) -> list[str]:
        rows = con.execute(
            "SELECT table_name FROM information_schema.tables"
            " WHERE table_schema = ? AND table_type = 'BASE TABLE'"
            " ORDER BY table_name",
            [self.schema],
        ).fetchall()
        names = [r[0] for r in rows]
        if self.tables is None:
            return names
        missing = sorted(set(self.tables) - set(names))
        if missing:
            logger.warning("Tables not found in schema %s: %s", self.schema, missing)
        return [t for t in self.tables if t in names]

    def _read_table(self, con: duckdb.DuckDBPyConnection, table_name: str) -> TableSnapshot:
        columns = [
            r[0]
            for r in con.execute(
                "SELECT column_name FROM information_schema.columns"
                " WHERE table_schema = ? AND table_name = ?"
                " ORDER BY ordinal_position",
                [self.schema, table_name],
            ).fetchall()
        ]
        if not columns:
            return TableSnapshot(name=table_name)
        select = ", ".join(f"CAST({_quote(c)} AS VARCHAR)" for c in columns)
        rows = con.execute(
            f"SELECT {select} FROM {_quote(self.schema)}.{_quote(table_name)}"
        ).fetchall()
        return TableSnapshot(
            name=table_name,
            columns={c: [row[i] for row in rows] for i, c in enumerate(columns)},
        )
