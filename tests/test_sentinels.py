"""Tests for pulse.profiler.sentinels."""

from pulse.config import ProfilingConfig
from pulse.models.enums import Confidence, DetectionMethod, InferredType
from pulse.profiler.sentinels import REPEAT_DIGIT_PATTERN, detect_sentinels, sentinel_values

AGES = ["21", "23", "25", "27", "29", "30", "31", "32", "34", "35",
        "36", "37", "38", "39", "40", "41", "42"]


# ── config list ──────────────────────────────────────────────────────

class TestConfigList:
    def test_numeric_sentinel(self, config):
        values = AGES + ["999", "999", "999"]
        records = detect_sentinels(values, "age", InferredType.NUMERIC, config)
        assert len(records) == 1
        rec = records[0]
        assert rec.sentinel_value == "999"
        assert rec.sentinel_count == 3
        assert rec.sentinel_pct == 15.0
        assert rec.detection_method is DetectionMethod.CONFIG_LIST
        assert rec.confidence is Confidence.HIGH

    def test_numeric_sentinels_ignored_in_categorical_column(self, config):
        records = detect_sentinels(["999", "abc", "def"], "code", InferredType.CATEGORICAL, config)
        assert records == []

    def test_string_sentinel_case_insensitive(self, config):
        values = ["Unknown", "unknown", "A", "B"]
        records = detect_sentinels(values, "race", InferredType.CATEGORICAL, config)
        assert len(records) == 1
        assert records[0].sentinel_value == "UNKNOWN"
        assert records[0].sentinel_count == 2
        assert records[0].sentinel_pct == 50.0

    def test_pct_uses_total_rows(self, config):
        values = ["NA", None, None, "x"]
        records = detect_sentinels(values, "c", InferredType.CATEGORICAL, config)
        assert records[0].sentinel_pct == 25.0

    def test_surrounding_whitespace_is_trimmed(self, config):
        values = AGES + [" 999 "]
        records = detect_sentinels(values, "age", InferredType.NUMERIC, config)
        assert [r.sentinel_value for r in records] == ["999"]

    def test_custom_numeric_sentinel(self):
        cfg = ProfilingConfig.from_mapping({"sentinel_detection": {"numeric_sentinels": [-8]}})
        values = ["-8", "-8", "3", "4", "5", "6", "7", "9", "10", "12"]
        records = detect_sentinels(values, "n", InferredType.NUMERIC, cfg)
        assert [(r.sentinel_value, r.detection_method) for r in records] == [
            ("-8", DetectionMethod.CONFIG_LIST),
        ]


# ── frequency analysis ───────────────────────────────────────────────

class TestFrequencyAnalysis:
    def test_repeat_digit_pattern(self):
        assert REPEAT_DIGIT_PATTERN.match("99")
        assert REPEAT_DIGIT_PATTERN.match("-777")
        assert not REPEAT_DIGIT_PATTERN.match("9")
        assert not REPEAT_DIGIT_PATTERN.match("98")
        assert not REPEAT_DIGIT_PATTERN.match("99.0")

    def test_detects_unlisted_repeat_digit(self, config):
        values = ["-77", "-77", "10", "12", "13", "14", "15", "16", "17", "18"]
        records = detect_sentinels(values, "n", InferredType.NUMERIC, config)
        assert len(records) == 1
        assert records[0].sentinel_value == "-77"
        assert records[0].detection_method is DetectionMethod.FREQUENCY_ANALYSIS
        assert records[0].confidence is Confidence.MEDIUM

    def test_config_match_not_reported_twice(self, config):
        values = ["99", "99", "1", "2", "3", "4", "5", "6", "7", "8"]
        records = detect_sentinels(values, "n", InferredType.NUMERIC, config)
        assert [(r.sentinel_value, r.detection_method) for r in records] == [
            ("99", DetectionMethod.CONFIG_LIST),
        ]

    def test_skipped_for_high_cardinality(self):
        cfg = ProfilingConfig.from_mapping({"sentinel_detection": {"max_unique_for_detection": 3}})
        values = ["-77", "-77", "10", "12", "13", "14"]
        assert detect_sentinels(values, "n", InferredType.NUMERIC, cfg) == []

    def test_below_min_frequency(self):
        cfg = ProfilingConfig.from_mapping({"sentinel_detection": {"min_frequency_pct": 50}})
        values = ["-77", "10", "12", "13"]
        assert detect_sentinels(values, "n", InferredType.NUMERIC, cfg) == []

    def test_not_run_on_categorical(self, config):
        values = ["-77", "-77", "a", "b"]
        assert detect_sentinels(values, "c", InferredType.CATEGORICAL, config) == []


# ── edge cases ───────────────────────────────────────────────────────

class TestEdgeCases:
    def test_all_missing(self, config):
        assert detect_sentinels([None, "", "  "], "c", InferredType.CATEGORICAL, config) == []

    def test_sentinel_values(self, config):
        values = AGES + ["999", "UNK"]
        records = detect_sentinels(values, "age", InferredType.NUMERIC, config)
        assert sentinel_values(records) == ["999", "UNK"]
