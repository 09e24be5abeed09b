"""
Per-column profiling records: missingness and distribution.

All records are frozen: they are produced once per profiling invocation
and never mutated afterwards.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from pulse.models.enums import DistributionType, InferredType

__all__ = [
    "MissingnessResult",
    "ColumnProfile",
    "TopValue",
    "DistributionResult",
]


# ---------------------------------------------------------------------------
# Missingness
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MissingnessResult:
    """Counts and percentages of the five missingness categories.

    ``na + empty + whitespace + sentinel + valid == total`` always holds.
    Percentages use ``total_count`` as denominator, except ``unique_pct``
    which is relative to ``valid_count``.
    """

    total_count: int
    valid_count: int
    na_count: int
    empty_count: int
    whitespace_count: int
    sentinel_count: int
    na_pct: float
    empty_pct: float
    whitespace_pct: float
    sentinel_pct: float
    total_missing_count: int
    total_missing_pct: float
    valid_pct: float
    unique_count: int
    unique_pct: float


@dataclass(frozen=True)
class ColumnProfile:
    """Missingness profile of one column plus its inferred type."""

    variable_name: str
    inferred_type: InferredType
    total_count: int
    valid_count: int
    na_count: int
    empty_count: int
    whitespace_count: int
    sentinel_count: int
    na_pct: float
    empty_pct: float
    whitespace_pct: float
    sentinel_pct: float
    total_missing_count: int
    total_missing_pct: float
    valid_pct: float
    unique_count: int
    unique_pct: float

    @classmethod
    def from_missingness(
        cls,
        variable_name: str,
        inferred_type: InferredType,
        result: MissingnessResult,
    ) -> ColumnProfile:
        return cls(
            variable_name=variable_name,
            inferred_type=inferred_type,
            total_count=result.total_count,
            valid_count=result.valid_count,
            na_count=result.na_count,
            empty_count=result.empty_count,
            whitespace_count=result.whitespace_count,
            sentinel_count=result.sentinel_count,
            na_pct=result.na_pct,
            empty_pct=result.empty_pct,
            whitespace_pct=result.whitespace_pct,
            sentinel_pct=result.sentinel_pct,
            total_missing_count=result.total_missing_count,
            total_missing_pct=result.total_missing_pct,
            valid_pct=result.valid_pct,
            unique_count=result.unique_count,
            unique_pct=result.unique_pct,
        )


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TopValue:
    """One entry of a frequency table; ``pct`` is relative to the valid count."""

    value: str
    count: int
    pct: float


@dataclass(frozen=True)
class DistributionResult:
    """Summary statistics over the valid partition of one column.

    Numeric and categorical fields are mutually exclusive: fields that do
    not apply to ``distribution_type`` are ``None``.  The mode is set for
    both numeric and categorical distributions.
    """

    variable_name: str
    distribution_type: DistributionType

    # ── Numeric ───────────────────────────────────────────────────────
    stat_min: float | None = None
    stat_max: float | None = None
    stat_mean: float | None = None
    stat_median: float | None = None
    stat_sd: float | None = None
    """Sample standard deviation; ``None`` with fewer than two numbers."""
    stat_q25: float | None = None
    stat_q75: float | None = None
    stat_iqr: float | None = None

    # ── Categorical ──────────────────────────────────────────────────
    top_values: tuple[TopValue, ...] | None = None

    # ── Both ─────────────────────────────────────────────────────────
    mode_value: str | None = None
    mode_count: int | None = None
    mode_pct: float | None = None

    @classmethod
    def empty(cls, variable_name: str) -> DistributionResult:
        """The explicit "no distribution" result for an empty valid partition."""
        return cls(variable_name=variable_name, distribution_type=DistributionType.NONE)

    @property
    def has_distribution(self) -> bool:
        return self.distribution_type is not DistributionType.NONE

    def top_values_json(self) -> str | None:
        """Serialise :attr:`top_values` as a JSON array of ``{value, count, pct}``.

        Only the result store should need this; inside the engine the
        structured tuple is used.
        """
        if self.top_values is None:
            return None
        return json.dumps(
            [{"value": t.value, "count": t.count, "pct": t.pct} for t in self.top_values]
        )
