"""
Shared pytest fixtures for the 311 chart tests.

Provides small CSV files on disk in the two shapes the app loads, plus the
loaded / aggregated frames built from them.
"""
import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fetch_311_data import load_detailed, load_reasons


REASONS_TEXT = """reason,Count
Street Cleaning,  1200
 Noise Disturbance ,200
Pothole,50
Snow,10
"""

DETAILED_TEXT = """reason,neighborhood,month,month_name,count
Pothole,Dorchester,1,Jan,5
Pothole, Roxbury ,1,Jan,7
Noise Disturbance,Dorchester,3,Mar,4
Noise Disturbance,Unknown,3,Mar,6
Pothole,,2,Feb,3
Snow,Dorchester,12,Dec,10
"""


@pytest.fixture
def reasons_csv(tmp_path):
    path = tmp_path / "boston_311_2025_by_reason.csv"
    path.write_text(REASONS_TEXT, encoding="utf-8")
    return str(path)


@pytest.fixture
def detailed_csv(tmp_path):
    path = tmp_path / "boston_311_detailed.csv"
    path.write_text(DETAILED_TEXT, encoding="utf-8")
    return str(path)


@pytest.fixture
def reasons(reasons_csv):
    return load_reasons(reasons_csv)


@pytest.fixture
def detailed(detailed_csv):
    return load_detailed(detailed_csv)


@pytest.fixture
def january_records():
    """Two January rows (5 and 7): the monthly worked example."""
    return pd.DataFrame({
        "reason": ["Pothole", "Pothole"],
        "neighborhood": ["Dorchester", "Roxbury"],
        "month": [1, 1],
        "month_name": ["Jan", "Jan"],
        "count": [5, 7],
    })
