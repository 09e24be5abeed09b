"""
TableSnapshot — the all-text input to the profiling engine.

Every cell is either a raw ``str`` or ``None`` (the explicit missing marker).
Logical types are *inferred* later and attached as separate metadata; the
snapshot itself never carries typed values.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

import polars as pl

__all__ = ["Cell", "ColumnValues", "TableSnapshot"]

Cell = Optional[str]
ColumnValues = Sequence[Cell]


def _as_cell(value: Any) -> Cell:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class TableSnapshot:
    """All rows and columns of one table at one point in the pipeline.

    Parameters
    ----------
    name : str
        Table name used to tag issues and summaries.
    columns : Mapping[str, ColumnValues]
        Column name → cell values, in column order.  All columns must have
        the same length.
    """

    name: str
    columns: Mapping[str, tuple[Cell, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {col: tuple(_as_cell(v) for v in vals) for col, vals in self.columns.items()}
        lengths = {len(v) for v in frozen.values()}
        if len(lengths) > 1:
            raise ValueError(
                f"table {self.name!r}: columns have unequal lengths {sorted(lengths)}"
            )
        object.__setattr__(self, "columns", frozen)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_polars(cls, name: str, df: pl.DataFrame) -> TableSnapshot:
        """Cast every column of *df* to text; nulls become ``None``."""
        return cls(
            name=name,
            columns={col: df[col].cast(pl.Utf8).to_list() for col in df.columns},
        )

    @classmethod
    def from_rows(
        cls,
        name: str,
        rows: Iterable[Mapping[str, Any]],
        column_names: Sequence[str] | None = None,
    ) -> TableSnapshot:
        """Build a snapshot from row dicts.

        Column order is *column_names* if given, else first-seen key order.
        Keys missing from a row are treated as ``None``.
        """
        rows = list(rows)
        if column_names is None:
            column_names = list(dict.fromkeys(k for row in rows for k in row))
        return cls(
            name=name,
            columns={col: [row.get(col) for row in rows] for col in column_names},
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def column_names(self) -> list[str]:
        return list(self.columns)

    @property
    def row_count(self) -> int:
        for values in self.columns.values():
            return len(values)
        return 0

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def iter_columns(self) -> Iterator[tuple[str, tuple[Cell, ...]]]:
        yield from self.columns.items()
