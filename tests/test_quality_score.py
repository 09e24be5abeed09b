"""Tests for pulse.profiler.quality_score."""

import pytest

from pulse.config import ProfilingConfig
from pulse.models.enums import QualityScore
from pulse.profiler.quality_score import calculate_quality_score


class TestQualityScore:
    @pytest.mark.parametrize("missing, critical, expected", [
        (3, 0, QualityScore.EXCELLENT),
        (5, 0, QualityScore.EXCELLENT),
        (7, 1, QualityScore.GOOD),
        (0, 1, QualityScore.GOOD),
        (15, 3, QualityScore.FAIR),
        (25, 0, QualityScore.NEEDS_REVIEW),
        (0, 6, QualityScore.NEEDS_REVIEW),
    ])
    def test_bands(self, config, missing, critical, expected):
        assert calculate_quality_score(missing, critical, config) is expected

    def test_unknown_inputs_need_review(self, config):
        assert calculate_quality_score(None, 0, config) is QualityScore.NEEDS_REVIEW
        assert calculate_quality_score(float("nan"), 0, config) is QualityScore.NEEDS_REVIEW
        assert calculate_quality_score(0, None, config) is QualityScore.NEEDS_REVIEW

    def test_custom_thresholds(self):
        cfg = ProfilingConfig.from_mapping({
            "quality_score_thresholds": {"excellent": {"max_missing_pct": 50, "max_critical_issues": 1}},
        })
        assert calculate_quality_score(40, 1, cfg) is QualityScore.EXCELLENT


class TestScoreOrdering:
    def test_rank(self):
        assert [s.rank for s in QualityScore] == [0, 1, 2, 3]

    def test_worst(self):
        assert QualityScore.worst([QualityScore.GOOD, QualityScore.FAIR, QualityScore.EXCELLENT]) is QualityScore.FAIR
        assert QualityScore.worst([]) is QualityScore.NEEDS_REVIEW
