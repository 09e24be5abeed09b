"""
Logical type inference for all-text columns.

Rules are evaluated in priority order, first match wins:

1. ``identifier`` — the column *name* is a configured identifier column
   (case-insensitive) or matches a configured identifier regex.
2. ``numeric`` — more than ``numeric_threshold`` of the non-missing values
   parse as finite numbers.
3. ``date`` — more than ``date_threshold`` of a fixed-seed sample parse
   under any single configured date format.
4. ``categorical`` — everything else, including all-missing columns.
"""

from __future__ import annotations

import logging
import random
import re
from typing import TYPE_CHECKING

from pulse.models.enums import InferredType
from pulse.utils.parsing import parse_date, parse_number

if TYPE_CHECKING:
    from pulse.config import ProfilingConfig, TypeInferenceConfig
    from pulse.models.table import ColumnValues

__all__ = ["infer_column_type", "is_identifier_name"]

logger = logging.getLogger(__name__)


def is_identifier_name(column_name: str, config: ProfilingConfig) -> bool:
    """``True`` if *column_name* is a configured identifier by name or pattern."""
    col_lower = column_name.lower()
    if col_lower in {c.lower() for c in config.identifier_columns}:
        return True
    return any(
        re.search(pattern, col_lower, flags=re.IGNORECASE)
        for pattern in config.identifier_patterns
    )


def infer_column_type(
    values: ColumnValues,
    column_name: str,
    config: ProfilingConfig,
) -> InferredType:
    """Classify one column as identifier, numeric, date or categorical."""
    if is_identifier_name(column_name, config):
        return InferredType.IDENTIFIER

    present = [v for v in values if v is not None and v.strip() != ""]
    if not present:
        return InferredType.CATEGORICAL

    ti = config.type_inference
    parsed = sum(1 for v in present if parse_number(v) is not None)
    if parsed / len(present) > ti.numeric_threshold:
        return InferredType.NUMERIC

    if _looks_like_dates(present, ti):
        return InferredType.DATE

    return InferredType.CATEGORICAL


def _looks_like_dates(present: list[str], ti: TypeInferenceConfig) -> bool:
    if len(present) > ti.date_sample_size:
        sample = random.Random(ti.sample_seed).sample(present, ti.date_sample_size)
    else:
        sample = present

    for fmt in ti.date_formats:
        ok = sum(1 for v in sample if parse_date(v, fmt) is not None)
        if ok / len(sample) > ti.date_threshold:
            logger.debug("Date format %s matched %d/%d sampled values", fmt, ok, len(sample))
            return True
    return False
