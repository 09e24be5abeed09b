"""
Distribution statistics over the valid partition of a column.

* Numeric columns: min, max, mean, median, sample SD, quartiles and IQR
  computed with numpy over the cells that parse as finite numbers, plus the
  mode of the raw strings.
* Everything else: a descending frequency table truncated to the top N,
  whose first entry is the mode.

Frequency tables are ordered by count descending, ties broken by ascending
text, so the mode is deterministic.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from pulse.models.enums import DistributionType, InferredType
from pulse.models.profile import DistributionResult, TopValue
from pulse.profiler.missingness import valid_values
from pulse.utils.parsing import parse_number, percentage

if TYPE_CHECKING:
    from pulse.config import ProfilingConfig
    from pulse.models.table import ColumnValues

__all__ = ["frequency_table", "compute_numeric_stats", "profile_distribution"]

logger = logging.getLogger(__name__)


def frequency_table(values: Iterable[str]) -> list[tuple[str, int]]:
    """``(value, count)`` pairs, most frequent first, ties by ascending value."""
    return sorted(Counter(values).items(), key=lambda kv: (-kv[1], kv[0]))


def compute_numeric_stats(numbers: list[float], decimal_places: int) -> dict[str, float | None]:
    """Return the rounded numeric statistics for a non-empty list of floats.

    Percentiles use linear interpolation between order statistics.
    """
    arr = np.asarray(numbers, dtype=float)
    q25, q75 = np.percentile(arr, [25, 75])
    sd = float(np.std(arr, ddof=1)) if arr.size > 1 else None

    def _r(x: float | None) -> float | None:
        return None if x is None else round(float(x), decimal_places)

    return {
        "stat_min": _r(np.min(arr)),
        "stat_max": _r(np.max(arr)),
        "stat_mean": _r(np.mean(arr)),
        "stat_median": _r(np.median(arr)),
        "stat_sd": _r(sd),
        "stat_q25": _r(q25),
        "stat_q75": _r(q75),
        "stat_iqr": _r(q75 - q25),
    }


def profile_distribution(
    values: ColumnValues,
    column_name: str,
    column_type: InferredType,
    sentinel_values: Iterable[str],
    config: ProfilingConfig,
) -> DistributionResult:
    """Compute the type-appropriate distribution of one column.

    Returns :meth:`DistributionResult.empty` when no valid value remains
    (or, for numeric columns, none of them parses).
    """
    dp = config.display.decimal_places
    valid = valid_values(values, sentinel_values)
    if not valid:
        return DistributionResult.empty(column_name)

    freq = frequency_table(valid)
    mode_value, mode_count = freq[0]
    mode_pct = percentage(mode_count, len(valid), dp)

    if column_type is InferredType.NUMERIC:
        numbers = [n for n in (parse_number(v) for v in valid) if n is not None]
        if not numbers:
            logger.debug("%s: no parsable numbers among %d valid values", column_name, len(valid))
            return DistributionResult.empty(column_name)
        return DistributionResult(
            variable_name=column_name,
            distribution_type=DistributionType.NUMERIC,
            mode_value=mode_value,
            mode_count=mode_count,
            mode_pct=mode_pct,
            **compute_numeric_stats(numbers, dp),
        )

    top = tuple(
        TopValue(value=v, count=c, pct=percentage(c, len(valid), dp))
        for v, c in freq[: config.display.top_n_categories]
    )
    return DistributionResult(
        variable_name=column_name,
        distribution_type=DistributionType.CATEGORICAL,
        top_values=top,
        mode_value=mode_value,
        mode_count=mode_count,
        mode_pct=mode_pct,
    )
