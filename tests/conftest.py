"""Shared fixtures for the Pulse test suite."""

import pytest

from pulse.config import ProfilingConfig
from pulse.models.table import TableSnapshot


@pytest.fixture
def config():
    return ProfilingConfig()


@pytest.fixture
def clinic_table():
    """Ten-row visit table with one missing identifier and a 999 sentinel."""
    return TableSnapshot(
        name="visits",
        columns={
            "mrn": ["1001", "1002", "1003", "1004", None, "1006", "1007", "1008", "1009", "1010"],
            "age": ["34", "51", "999", "28", "62", "45", "39", "71", "56", "23"],
            "sex": ["M", "F", "F", "M", "F", "M", "F", "F", "M", "F"],
            "admit_date": [
                "2024-01-02", "2024-01-05", "2024-01-09", "2024-02-11", "2024-02-14",
                "2024-03-01", "2024-03-07", "2024-03-19", "2024-04-02", "2024-04-30",
            ],
        },
    )
