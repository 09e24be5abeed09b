"""
Sentinel (placeholder) value detection.

Two independent heuristics:

* **Config list** (confidence ``high``) — exact matches against the
  configured numeric sentinels (numeric columns only), then
  case-insensitive matches against the configured string sentinels (all
  columns).
* **Frequency analysis** (confidence ``medium``, numeric columns only) —
  low-cardinality columns are scanned for frequent repeat-digit values
  such as ``99``, ``999`` or ``-77`` that the config list did not already
  claim.

Every ``sentinel_pct`` is relative to the column's total row count.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import TYPE_CHECKING

from pulse.models.enums import Confidence, DetectionMethod, InferredType
from pulse.models.findings import SentinelRecord
from pulse.utils.parsing import format_number, percentage

if TYPE_CHECKING:
    from pulse.config import ProfilingConfig
    from pulse.models.table import ColumnValues

__all__ = ["REPEAT_DIGIT_PATTERN", "detect_sentinels", "sentinel_values"]

logger = logging.getLogger(__name__)

REPEAT_DIGIT_PATTERN = re.compile(r"^-?(\d)\1+$")
"""Two or more copies of one digit, optionally negative."""


def detect_sentinels(
    values: ColumnValues,
    column_name: str,
    column_type: InferredType,
    config: ProfilingConfig,
) -> list[SentinelRecord]:
    """Return the sentinel records found in one column, config matches first."""
    total_count = len(values)
    valid = [t for t in (v.strip() for v in values if v is not None) if t != ""]
    if not valid:
        return []

    cfg = config.sentinel_detection
    dp = config.display.decimal_places
    records: list[SentinelRecord] = []
    # upper-cased values already reported
    claimed: set[str] = set()

    def _emit(value: str, count: int, method: DetectionMethod, confidence: Confidence) -> None:
        records.append(SentinelRecord(
            variable_name=column_name,
            sentinel_value=value,
            sentinel_count=count,
            sentinel_pct=percentage(count, total_count, dp),
            detection_method=method,
            confidence=confidence,
        ))

    # ── Config list: numeric sentinels (exact text match) ─────────────
    if column_type is InferredType.NUMERIC:
        counts = Counter(valid)
        for sentinel in cfg.numeric_sentinels:
            text = format_number(sentinel)
            count = counts.get(text, 0)
            if count > 0 and text.upper() not in claimed:
                _emit(text, count, DetectionMethod.CONFIG_LIST, Confidence.HIGH)
                claimed.add(text.upper())

    # ── Config list: string sentinels (case-insensitive) ──────────────
    upper_counts = Counter(v.upper() for v in valid)
    for sentinel in cfg.string_sentinels:
        key = sentinel.upper()
        count = upper_counts.get(key, 0)
        if count > 0 and key not in claimed:
            _emit(sentinel, count, DetectionMethod.CONFIG_LIST, Confidence.HIGH)
            claimed.add(key)

    # ── Frequency analysis: repeat-digit values ───────────────────────
    if column_type is InferredType.NUMERIC:
        freq = Counter(valid)
        if len(freq) <= cfg.max_unique_for_detection:
            for value in sorted(freq):
                count = freq[value]
                pct = count / total_count * 100
                if (
                    pct >= cfg.min_frequency_pct
                    and REPEAT_DIGIT_PATTERN.match(value)
                    and value.upper() not in claimed
                ):
                    _emit(value, count, DetectionMethod.FREQUENCY_ANALYSIS, Confidence.MEDIUM)
        else:
            logger.debug(
                "%s: %d distinct values, skipping frequency analysis",
                column_name, len(freq),
            )

    if records:
        logger.debug("%s: %d sentinel(s) detected", column_name, len(records))
    return records


def sentinel_values(records: list[SentinelRecord]) -> list[str]:
    """The sentinel strings to feed into missingness and distribution profiling."""
    return [r.sentinel_value for r in records]
