"""Core data-model classes used throughout Pulse."""

from pulse.models.enums import (
    Confidence,
    DetectionMethod,
    DistributionType,
    InferredType,
    QualityScore,
    Severity,
    ValueClass,
)
from pulse.models.findings import Issue, SentinelRecord
from pulse.models.profile import ColumnProfile, DistributionResult, MissingnessResult, TopValue
from pulse.models.summary import RunSummary, TableProfileResult, TableSummary
from pulse.models.table import Cell, ColumnValues, TableSnapshot

__all__ = [
    "Cell",
    "ColumnValues",
    "TableSnapshot",
    "InferredType",
    "ValueClass",
    "DistributionType",
    "DetectionMethod",
    "Confidence",
    "Severity",
    "QualityScore",
    "MissingnessResult",
    "ColumnProfile",
    "TopValue",
    "DistributionResult",
    "SentinelRecord",
    "Issue",
    "TableSummary",
    "TableProfileResult",
    "RunSummary",
]
