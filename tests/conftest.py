"""Shared fixtures: small CSV resources written into tmp_path."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from models import CompanyRecord, PerformanceEntry, PricePoint  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT / "data"


def write_csv(path, text):
    path.write_text(text.lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def companies_csv(tmp_path):
    return write_csv(tmp_path / "sp.csv", """
Company,Symbol,Weight,Price
Nvidia Corp,NVDA,7.58%,173.72
Apple Inc.,AAPL,5.88%,202.38
"Berkshire Hathaway Inc, Class B",BRK.B,1.64%,470.35
No Symbol Corp,,0.50%,10.00
Broken Weight Inc,BWI,n/a,5.00
""")


@pytest.fixture
def performance_csv(tmp_path):
    return write_csv(tmp_path / "sp_performance.csv", """
Symbol,Company,YTD Return
NVDA,Nvidia Corp,29.37
AAPL,Apple Inc.,-19.18
BWI,Broken Weight Inc,
""")


@pytest.fixture
def index_csv(tmp_path):
    return write_csv(tmp_path / "index_data.csv", """
Date,SP500
2000-01-01,1425.59
2001-01-01,"1,335.63"
not a date,999
2002-01-01,
""")


@pytest.fixture
def history_csv(tmp_path):
    return write_csv(tmp_path / "history.csv", """
Year,Performance
2011,20
2009,10
oops,5
2010,-5
""")


@pytest.fixture
def yearly_points():
    return [
        PricePoint(datetime(2000, 1, 1), 100.0),
        PricePoint(datetime(2001, 1, 1), 200.0),
        PricePoint(datetime(2002, 1, 1), 300.0),
    ]


@pytest.fixture
def sample_companies():
    return [
        CompanyRecord("Apple Inc.", "AAPL", 0.0588, "202.38", -19.18),
        CompanyRecord("Nvidia Corp", "NVDA", 0.0758, "173.72", 29.37),
        CompanyRecord("Berkshire Hathaway", "BRK.B", 0.0164, "470.35", None),
        CompanyRecord("Intel Corp", "INTC", 0.0016, "19.80", -1.25),
    ]


@pytest.fixture
def performance_entries():
    return [
        PerformanceEntry(2009, 10.0),
        PerformanceEntry(2010, -5.0),
        PerformanceEntry(2011, 20.0),
    ]
