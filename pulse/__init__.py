"""
Pulse — data profiling engine for raw clinical tables.

Profiles all-text table snapshots: infers column types, detects sentinel
placeholders, classifies missingness, computes distributions, raises
quality issues and scores every table.

Quick start::

    from pulse import load_profiling_config, profile_table
    from pulse.models import TableSnapshot

    config = load_profiling_config()
    result = profile_table(TableSnapshot.from_rows("visits", rows), config)
    print(result.summary.quality_score)
"""

from pulse.config import ProfilingConfig, load_profiling_config
from pulse.errors import ConfigurationError, InvariantViolation, PulseError
from pulse.pipeline import profile_data
from pulse.profiler import Profiler, profile_table

__all__ = [
    "ProfilingConfig",
    "load_profiling_config",
    "PulseError",
    "ConfigurationError",
    "InvariantViolation",
    "Profiler",
    "profile_table",
    "profile_data",
]
__version__ = "0.1.0"
