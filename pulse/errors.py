"""
Exceptions raised by the profiling engine.

Messy data is never an error: unparsable cells, empty columns and missing
configuration keys all have defined outcomes.  Only two failure kinds exist.
"""

from __future__ import annotations

__all__ = ["PulseError", "ConfigurationError", "InvariantViolation"]


class PulseError(Exception):
    """Base class for all errors raised by :mod:`pulse`."""


class ConfigurationError(PulseError):
    """Supplied configuration is structurally invalid.

    Raised once, when the configuration is resolved, e.g. a threshold that
    is not a number or an identifier pattern that is not a valid regex.
    """


class InvariantViolation(PulseError):
    """An internal consistency check failed.

    This always indicates a bug in the engine (for instance the five
    missingness categories not summing to the row count).  It must never be
    caught and ignored.
    """
