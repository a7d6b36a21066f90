# tests/conftest.py

import pytest

from Hookline.metrics import reset_counters
from Hookline.rules.location import ZoneTable


@pytest.fixture(autouse=True)
def _reset_metrics():
    reset_counters()
    yield
    reset_counters()


@pytest.fixture
def two_zone_table() -> ZoneTable:
    return ZoneTable.from_data(
        {
            "hitLocationRoll": "1d10",
            "hitRegions": [
                {"location": "fore", "range": [1, 5], "columns": 3},
                {"location": "aft", "range": [6, 10], "columns": 4},
            ],
        }
    )


@pytest.fixture
def placeholder_table() -> ZoneTable:
    return ZoneTable.from_data(
        {"hitRegions": [{"location": "body", "range": [1], "columns": 5}]}
    )
