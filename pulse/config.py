"""
Central configuration for the Pulse profiling engine.

All thresholds, sentinel lists and display settings live here.  A
configuration is resolved **once** at entry — user-supplied values merged
over the defaults below — and then passed explicitly to every profiling
function.  No function consults a hidden global default mid-computation.

YAML layout (every key optional)::

    sentinel_detection:
      numeric_sentinels: [999, 9999, -999, -9999, -1, 99, 88, 77]
      string_sentinels: ["NA", "N/A", "NULL", "UNKNOWN", "UNK", "MISSING", "NOT RECORDED"]
      min_frequency_pct: 1.0
      max_unique_for_detection: 50
    missingness_thresholds: {critical: 0, high: 20, moderate: 10}
    quality_score_thresholds:
      excellent: {max_missing_pct: 5, max_critical_issues: 0}
      good: {max_missing_pct: 10, max_critical_issues: 2}
      fair: {max_missing_pct: 20, max_critical_issues: 5}
    identifier_columns: [mrn, account_number]
    identifier_patterns: ["_id$", "_no$"]
    display: {decimal_places: 2, top_n_categories: 15}
    type_inference: {numeric_threshold: 0.9, date_threshold: 0.8}
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pulse.errors import ConfigurationError

__all__ = [
    "SentinelDetectionConfig",
    "MissingnessThresholds",
    "ScoreBand",
    "QualityScoreThresholds",
    "DisplayConfig",
    "TypeInferenceConfig",
    "ProfilingConfig",
    "load_profiling_config",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SentinelDetectionConfig:
    """Placeholder-value detection settings."""

    numeric_sentinels: tuple[float, ...] = (999, 9999, -999, -9999, -1, 99, 88, 77)
    """Checked by exact text match, numeric columns only."""

    string_sentinels: tuple[str, ...] = (
        "NA", "N/A", "NULL", "UNKNOWN", "UNK", "MISSING", "NOT RECORDED",
    )
    """Checked case-insensitively in every column."""

    min_frequency_pct: float = 1.0
    """Minimum share of the row count for a frequency-analysis sentinel."""

    max_unique_for_detection: int = 50
    """Frequency analysis is skipped for columns with more distinct values."""


@dataclass(frozen=True)
class MissingnessThresholds:
    """Missingness percentages that trigger issues."""

    critical: float = 0.0
    high: float = 20.0
    moderate: float = 10.0


@dataclass(frozen=True)
class ScoreBand:
    """Upper bounds (inclusive) a table must satisfy to earn a quality label."""

    max_missing_pct: float
    max_critical_issues: float


@dataclass(frozen=True)
class QualityScoreThresholds:
    excellent: ScoreBand = field(default_factory=lambda: ScoreBand(5.0, 0))
    good: ScoreBand = field(default_factory=lambda: ScoreBand(10.0, 2))
    fair: ScoreBand = field(default_factory=lambda: ScoreBand(20.0, 5))


@dataclass(frozen=True)
class DisplayConfig:
    decimal_places: int = 2
    """Rounding precision for every percentage and statistic."""

    top_n_categories: int = 15
    """Length of the top-values list for non-numeric columns."""


@dataclass(frozen=True)
class TypeInferenceConfig:
    """Parse-rate thresholds for logical type inference."""

    numeric_threshold: float = 0.90
    date_threshold: float = 0.80
    date_sample_size: int = 100
    date_formats: tuple[str, ...] = (
        "%Y-%m-%d", "%m/%d/%Y", "%m-%d-%Y", "%Y/%m/%d", "%d-%b-%Y", "%Y%m%d",
    )
    sample_seed: int = 42
    """Seed for the date sample so repeated runs agree."""


# ---------------------------------------------------------------------------
# ProfilingConfig
# ---------------------------------------------------------------------------

_DEFAULT_IDENTIFIER_COLUMNS = (
    "ACCOUNTNO", "MEDRECNO", "TRAUMANO", "account_number", "mrn", "trauma_no", "cisir_id",
)
_DEFAULT_IDENTIFIER_PATTERNS = (
    "_id$", "_no$", "^id_", "^accountno", "^medrecno", "^traumano",
)


@dataclass(frozen=True)
class ProfilingConfig:
    """Fully resolved, immutable configuration for one profiling run.

    Build from a plain mapping (e.g. parsed YAML) with
    :meth:`from_mapping`; keys that are absent fall back to the defaults.
    """

    sentinel_detection: SentinelDetectionConfig = field(default_factory=SentinelDetectionConfig)
    missingness_thresholds: MissingnessThresholds = field(default_factory=MissingnessThresholds)
    quality_score_thresholds: QualityScoreThresholds = field(default_factory=QualityScoreThresholds)
    identifier_columns: tuple[str, ...] = _DEFAULT_IDENTIFIER_COLUMNS
    identifier_patterns: tuple[str, ...] = _DEFAULT_IDENTIFIER_PATTERNS
    display: DisplayConfig = field(default_factory=DisplayConfig)
    type_inference: TypeInferenceConfig = field(default_factory=TypeInferenceConfig)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> ProfilingConfig:
        """Merge *raw* over the defaults, validating every supplied value.

        Raises
        ------
        ConfigurationError
            If a section is not a mapping or a value has the wrong shape.
        """
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"configuration must be a mapping, got {type(raw).__name__}"
            )

        known = {
            "sentinel_detection", "missingness_thresholds", "quality_score_thresholds",
            "identifier_columns", "identifier_patterns", "display", "type_inference",
        }
        for key in raw:
            if key not in known:
                logger.warning("Ignoring unknown configuration key %r", key)

        defaults = cls()
        return cls(
            sentinel_detection=_resolve_sentinels(
                _section(raw, "sentinel_detection"), defaults.sentinel_detection,
            ),
            missingness_thresholds=_resolve_missingness(
                _section(raw, "missingness_thresholds"), defaults.missingness_thresholds,
            ),
            quality_score_thresholds=_resolve_quality(
                _section(raw, "quality_score_thresholds"), defaults.quality_score_thresholds,
            ),
            identifier_columns=_str_list(
                raw, "identifier_columns", defaults.identifier_columns,
            ),
            identifier_patterns=_patterns(
                raw, "identifier_patterns", defaults.identifier_patterns,
            ),
            display=_resolve_display(_section(raw, "display"), defaults.display),
            type_inference=_resolve_type_inference(
                _section(raw, "type_inference"), defaults.type_inference,
            ),
        )


def load_profiling_config(config_path: str | Path | None = None) -> ProfilingConfig:
    """Load a YAML profiling config, falling back to defaults if absent.

    A missing file is not an error (the defaults are used); a file that
    exists but cannot be parsed, or parses to something other than a
    mapping, raises :class:`ConfigurationError`.
    """
    if config_path is None:
        logger.info("No profiling config given, using defaults")
        return ProfilingConfig()

    path = Path(config_path)
    if not path.exists():
        logger.warning("Config file %s not found, using defaults", path)
        return ProfilingConfig()

    logger.info("Loading profiling config from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot read config file {path}: {e}") from e

    return ProfilingConfig.from_mapping(raw or {})


# ---------------------------------------------------------------------------
# Section resolvers
# ---------------------------------------------------------------------------

def _resolve_sentinels(
    raw: Mapping[str, Any], default: SentinelDetectionConfig,
) -> SentinelDetectionConfig:
    return SentinelDetectionConfig(
        numeric_sentinels=_number_list(
            raw, "numeric_sentinels", default.numeric_sentinels, "sentinel_detection",
        ),
        string_sentinels=_str_list(
            raw, "string_sentinels", default.string_sentinels, "sentinel_detection",
        ),
        min_frequency_pct=_number(
            raw, "min_frequency_pct", default.min_frequency_pct, "sentinel_detection",
        ),
        max_unique_for_detection=_integer(
            raw, "max_unique_for_detection", default.max_unique_for_detection,
            "sentinel_detection",
        ),
    )


def _resolve_missingness(
    raw: Mapping[str, Any], default: MissingnessThresholds,
) -> MissingnessThresholds:
    where = "missingness_thresholds"
    return MissingnessThresholds(
        critical=_number(raw, "critical", default.critical, where),
        high=_number(raw, "high", default.high, where),
        moderate=_number(raw, "moderate", default.moderate, where),
    )


def _resolve_quality(
    raw: Mapping[str, Any], default: QualityScoreThresholds,
) -> QualityScoreThresholds:
    bands = {}
    for name in ("excellent", "good", "fair"):
        where = f"quality_score_thresholds.{name}"
        band_raw = _section(raw, name, where)
        band_default: ScoreBand = getattr(default, name)
        bands[name] = ScoreBand(
            max_missing_pct=_number(
                band_raw, "max_missing_pct", band_default.max_missing_pct, where,
            ),
            max_critical_issues=_number(
                band_raw, "max_critical_issues", band_default.max_critical_issues, where,
            ),
        )
    return QualityScoreThresholds(**bands)


def _resolve_display(raw: Mapping[str, Any], default: DisplayConfig) -> DisplayConfig:
    decimal_places = _integer(raw, "decimal_places", default.decimal_places, "display")
    top_n = _integer(raw, "top_n_categories", default.top_n_categories, "display")
    if top_n < 1:
        raise ConfigurationError("display.top_n_categories must be at least 1")
    return DisplayConfig(decimal_places=decimal_places, top_n_categories=top_n)


def _resolve_type_inference(
    raw: Mapping[str, Any], default: TypeInferenceConfig,
) -> TypeInferenceConfig:
    where = "type_inference"
    resolved = TypeInferenceConfig(
        numeric_threshold=_number(raw, "numeric_threshold", default.numeric_threshold, where),
        date_threshold=_number(raw, "date_threshold", default.date_threshold, where),
        date_sample_size=_integer(raw, "date_sample_size", default.date_sample_size, where),
        date_formats=_str_list(raw, "date_formats", default.date_formats, where),
        sample_seed=_integer(raw, "sample_seed", default.sample_seed, where),
    )
    for name in ("numeric_threshold", "date_threshold"):
        if not 0.0 <= getattr(resolved, name) <= 1.0:
            raise ConfigurationError(f"{where}.{name} must be between 0 and 1")
    if resolved.date_sample_size < 1:
        raise ConfigurationError(f"{where}.date_sample_size must be at least 1")
    return resolved


# ---------------------------------------------------------------------------
# Value coercion helpers
# ---------------------------------------------------------------------------

def _qualified(where: str | None, key: str) -> str:
    return f"{where}.{key}" if where else key


def _section(raw: Mapping[str, Any], key: str, where: str | None = None) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"{_qualified(where, key)} must be a mapping, got {type(value).__name__}"
        )
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(raw: Mapping[str, Any], key: str, default: float, where: str | None = None) -> float:
    value = raw.get(key)
    if value is None:
        return default
    if not _is_number(value):
        raise ConfigurationError(
            f"{_qualified(where, key)} must be a number, got {value!r}"
        )
    return value


def _integer(raw: Mapping[str, Any], key: str, default: int, where: str | None = None) -> int:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(
            f"{_qualified(where, key)} must be a non-negative integer, got {value!r}"
        )
    return value


def _list(raw: Mapping[str, Any], key: str, where: str | None) -> list[Any] | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            f"{_qualified(where, key)} must be a list, got {type(value).__name__}"
        )
    return list(value)


def _number_list(
    raw: Mapping[str, Any], key: str, default: tuple[float, ...], where: str | None = None,
) -> tuple[float, ...]:
    values = _list(raw, key, where)
    if values is None:
        return default
    bad = [v for v in values if not _is_number(v)]
    if bad:
        raise ConfigurationError(
            f"{_qualified(where, key)} must contain only numbers, got {bad!r}"
        )
    return tuple(values)


def _str_list(
    raw: Mapping[str, Any], key: str, default: tuple[str, ...], where: str | None = None,
) -> tuple[str, ...]:
    values = _list(raw, key, where)
    if values is None:
        return default
    bad = [v for v in values if not isinstance(v, str)]
    if bad:
        raise ConfigurationError(
            f"{_qualified(where, key)} must contain only strings, got {bad!r}"
        )
    return tuple(values)


def _patterns(
    raw: Mapping[str, Any], key: str, default: tuple[str, ...],
) -> tuple[str, ...]:
    patterns = _str_list(raw, key, default)
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"{key}: invalid regex {pattern!r}: {e}") from e
    return patterns
