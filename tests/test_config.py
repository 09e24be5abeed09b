"""Tests for pulse.config."""

import dataclasses

import pytest

from pulse.config import ProfilingConfig, ScoreBand, load_profiling_config
from pulse.errors import ConfigurationError


# ── defaults ─────────────────────────────────────────────────────────

class TestDefaults:
    def test_sentinel_defaults(self, config):
        sd = config.sentinel_detection
        assert sd.numeric_sentinels == (999, 9999, -999, -9999, -1, 99, 88, 77)
        assert "NOT RECORDED" in sd.string_sentinels
        assert sd.min_frequency_pct == 1.0
        assert sd.max_unique_for_detection == 50

    def test_threshold_defaults(self, config):
        th = config.missingness_thresholds
        assert (th.critical, th.high, th.moderate) == (0.0, 20.0, 10.0)
        q = config.quality_score_thresholds
        assert q.excellent == ScoreBand(5.0, 0)
        assert q.good == ScoreBand(10.0, 2)
        assert q.fair == ScoreBand(20.0, 5)

    def test_identifier_defaults(self, config):
        assert "mrn" in config.identifier_columns
        assert "_id$" in config.identifier_patterns

    def test_display_defaults(self, config):
        assert config.display.decimal_places == 2
        assert config.display.top_n_categories == 15

    def test_immutable(self, config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.identifier_columns = ()  # type: ignore[misc]


# ── from_mapping ─────────────────────────────────────────────────────

class TestFromMapping:
    def test_none_and_empty_give_defaults(self):
        assert ProfilingConfig.from_mapping(None) == ProfilingConfig()
        assert ProfilingConfig.from_mapping({}) == ProfilingConfig()

    def test_partial_override_keeps_other_defaults(self):
        cfg = ProfilingConfig.from_mapping({
            "missingness_thresholds": {"high": 30},
            "quality_score_thresholds": {"good": {"max_missing_pct": 12}},
        })
        assert cfg.missingness_thresholds.high == 30
        assert cfg.missingness_thresholds.moderate == 10.0
        assert cfg.quality_score_thresholds.good == ScoreBand(12, 2)
        assert cfg.quality_score_thresholds.excellent == ScoreBand(5.0, 0)

    def test_lists_replace_defaults(self):
        cfg = ProfilingConfig.from_mapping({
            "sentinel_detection": {"numeric_sentinels": [-8], "string_sentinels": ["N.A."]},
            "identifier_columns": ["patient_key"],
        })
        assert cfg.sentinel_detection.numeric_sentinels == (-8,)
        assert cfg.sentinel_detection.string_sentinels == ("N.A.",)
        assert cfg.identifier_columns == ("patient_key",)

    def test_unknown_keys_ignored(self):
        assert ProfilingConfig.from_mapping({"colour": "blue"}) == ProfilingConfig()

    @pytest.mark.parametrize("raw", [
        {"missingness_thresholds": {"high": "twenty"}},
        {"missingness_thresholds": [20]},
        {"sentinel_detection": {"numeric_sentinels": "999"}},
        {"sentinel_detection": {"numeric_sentinels": [999, "x"]}},
        {"identifier_patterns": ["(unclosed"]},
        {"display": {"decimal_places": -1}},
        {"display": {"top_n_categories": 0}},
        {"type_inference": {"numeric_threshold": 1.5}},
    ])
    def test_invalid_values_raise(self, raw):
        with pytest.raises(ConfigurationError):
            ProfilingConfig.from_mapping(raw)

    def test_non_mapping_raises(self):
        with pytest.raises(ConfigurationError):
            ProfilingConfig.from_mapping(["not", "a", "mapping"])  # type: ignore[arg-type]


# ── load_profiling_config ────────────────────────────────────────────

class TestLoadProfilingConfig:
    def test_no_path(self):
        assert load_profiling_config() == ProfilingConfig()

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_profiling_config(tmp_path / "nope.yaml") == ProfilingConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "profiling.yaml"
        path.write_text(
            "sentinel_detection:\n"
            "  string_sentinels: ['NA', 'DECLINED']\n"
            "display:\n"
            "  decimal_places: 1\n"
        )
        cfg = load_profiling_config(path)
        assert cfg.sentinel_detection.string_sentinels == ("NA", "DECLINED")
        assert cfg.display.decimal_places == 1

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_profiling_config(path) == ProfilingConfig()

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("display: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_profiling_config(path)

    def test_scalar_yaml_raises(self, tmp_path):
        path = tmp_path / "scalar.yaml"
        path.write_text("just a string\n")
        with pytest.raises(ConfigurationError):
            load_profiling_config(path)
