import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from shooting_report.data_collection import SCHEMA_COLUMNS

HEADER = ",".join(SCHEMA_COLUMNS)


def incident_line(key, date, boro="BROOKLYN", murder="false", precinct="75",
                  perp_sex="", x="1000000", y="180000"):
    """One raw CSV line in schema order."""
    return ",".join([
        str(key), date, "21:30:00", boro, precinct,
        "0", "", murder,
        "", perp_sex, "",
        "25-44", "M", "BLACK",
        x, y,
    ])


@pytest.fixture
def line():
    return incident_line


@pytest.fixture
def write_csv(tmp_path):
    def _write(lines, header=HEADER, name="shootings.csv"):
        path = tmp_path / name
        path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return path
    return _write


def _make_cleaned(rows):
    """
    Cleaned-table stand-in from (date, boro, murder) tuples, date as YYYY-MM-DD.
    """
    dates = pd.to_datetime([r[0] for r in rows])
    return pd.DataFrame({
        "INCIDENT_KEY": [str(i) for i in range(len(rows))],
        "OCCUR_DATE": dates,
        "BORO": [r[1] for r in rows],
        "STATISTICAL_MURDER_FLAG": pd.array([r[2] for r in rows], dtype="boolean"),
        "year": dates.year.astype(int),
    })


@pytest.fixture
def make_cleaned():
    return _make_cleaned


@pytest.fixture
def three_row_table():
    return _make_cleaned([
        ("2020-01-05", "A", False),
        ("2020-01-05", "A", False),
        ("2020-01-12", "B", True),
    ])
