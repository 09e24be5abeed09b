"""
Missingness classification.

Every cell falls into exactly one of five categories, decided by an ordered
rule list (first match wins)::

    na          cell is None (explicit missing marker)
    empty       cell is ""
    whitespace  cell is non-empty but all whitespace
    sentinel    trimmed cell matches a detected sentinel, case-insensitively
    valid       anything else

:func:`valid_values` is the single definition of the *valid* partition and
is reused by :mod:`pulse.profiler.distribution`.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from pulse.errors import InvariantViolation
from pulse.models.enums import ValueClass
from pulse.models.profile import MissingnessResult
from pulse.utils.parsing import percentage

if TYPE_CHECKING:
    from pulse.models.table import Cell, ColumnValues

__all__ = [
    "sentinel_keys",
    "classify_value",
    "classify_values",
    "valid_values",
    "profile_missingness",
]


_RULES: tuple[tuple[ValueClass, Callable[[str | None, frozenset[str]], bool]], ...] = (
    (ValueClass.NA, lambda v, _: v is None),
    (ValueClass.EMPTY, lambda v, _: v == ""),
    (ValueClass.WHITESPACE, lambda v, _: v.strip() == ""),
    (ValueClass.SENTINEL, lambda v, keys: v.strip().upper() in keys),
)


def sentinel_keys(sentinel_values: Iterable[str]) -> frozenset[str]:
    """Normalise sentinel strings for case-insensitive matching."""
    return frozenset(s.strip().upper() for s in sentinel_values)


def classify_value(value: Cell, keys: frozenset[str]) -> ValueClass:
    """Return the missingness category of a single cell.

    *keys* must come from :func:`sentinel_keys`.
    """
    for value_class, matches in _RULES:
        if matches(value, keys):
            return value_class
    return ValueClass.VALID


def classify_values(values: ColumnValues, sentinel_values: Iterable[str] = ()) -> list[ValueClass]:
    keys = sentinel_keys(sentinel_values)
    return [classify_value(v, keys) for v in values]


def valid_values(values: ColumnValues, sentinel_values: Iterable[str] = ()) -> list[str]:
    """The raw (untrimmed) cells classified as ``valid``, in column order."""
    keys = sentinel_keys(sentinel_values)
    return [v for v in values if classify_value(v, keys) is ValueClass.VALID]


def profile_missingness(
    values: ColumnValues,
    sentinel_values: Iterable[str] = (),
    *,
    decimal_places: int = 2,
) -> MissingnessResult:
    """Count each missingness category and the distinct valid values.

    Raises
    ------
    InvariantViolation
        If the category counts do not add up to the number of cells, or
        the distinct count exceeds the valid count.  Both indicate a bug.
    """
    classes = classify_values(values, sentinel_values)
    total = len(values)
    counts = Counter(classes)

    na = counts[ValueClass.NA]
    empty = counts[ValueClass.EMPTY]
    whitespace = counts[ValueClass.WHITESPACE]
    sentinel = counts[ValueClass.SENTINEL]
    valid = counts[ValueClass.VALID]

    if na + empty + whitespace + sentinel + valid != total:
        raise InvariantViolation(
            f"missingness categories sum to {na + empty + whitespace + sentinel + valid}, "
            f"expected {total}"
        )

    unique = len({v for v, c in zip(values, classes) if c is ValueClass.VALID})
    if unique > valid:
        raise InvariantViolation(f"unique_count {unique} exceeds valid_count {valid}")

    missing = na + empty + whitespace + sentinel
    dp = decimal_places
    return MissingnessResult(
        total_count=total,
        valid_count=valid,
        na_count=na,
        empty_count=empty,
        whitespace_count=whitespace,
        sentinel_count=sentinel,
        na_pct=percentage(na, total, dp),
        empty_pct=percentage(empty, total, dp),
        whitespace_pct=percentage(whitespace, total, dp),
        sentinel_pct=percentage(sentinel, total, dp),
        total_missing_count=missing,
        total_missing_pct=percentage(missing, total, dp),
        valid_pct=percentage(valid, total, dp),
        unique_count=unique,
        unique_pct=percentage(unique, valid, dp),
    )
