"""
Table quality score: worst-case missingness + critical-issue count → label.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pulse.models.enums import QualityScore

if TYPE_CHECKING:
    from pulse.config import ProfilingConfig

__all__ = ["calculate_quality_score"]


def calculate_quality_score(
    max_missing_pct: float | None,
    critical_count: int | None,
    config: ProfilingConfig,
) -> QualityScore:
    """Return the first label whose missingness *and* critical bounds both hold.

    Bands are checked best-first (Excellent, Good, Fair); a table failing
    all three is ``Needs Review``.  An unknown ``max_missing_pct`` counts
    as 100 and an unknown ``critical_count`` as 999, so missing inputs can
    never produce a flattering score.
    """
    if max_missing_pct is None or math.isnan(max_missing_pct):
        max_missing_pct = 100.0
    if critical_count is None:
        critical_count = 999

    th = config.quality_score_thresholds
    bands = (
        (QualityScore.EXCELLENT, th.excellent),
        (QualityScore.GOOD, th.good),
        (QualityScore.FAIR, th.fair),
    )
    for score, band in bands:
        if max_missing_pct <= band.max_missing_pct and critical_count <= band.max_critical_issues:
            return score
    return QualityScore.NEEDS_REVIEW
