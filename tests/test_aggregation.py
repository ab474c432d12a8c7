import pytest

from shooting_report.aggregation import (
    WEEKDAY_ORDER,
    boro_summary,
    boro_year_pivot,
    boro_year_summary,
    summarise,
    weekday_summary,
    yearly_summary,
)


def test_three_row_example(three_row_table):
    weekday = weekday_summary(three_row_table)
    assert weekday.to_dict("records") == [
        {"weekday": "Sunday", "total_shootings": 3, "pct": pytest.approx(100.0)},
    ]

    boro = boro_summary(three_row_table)
    assert boro["BORO"].tolist() == ["A", "B"]
    assert boro["total_shootings"].tolist() == [2, 1]
    assert boro["pct"].tolist() == pytest.approx([200 / 3, 100 / 3])

    yearly = yearly_summary(three_row_table)
    assert yearly.to_dict("records") == [{"year": 2020, "total_shootings": 3}]


def test_weekday_totals_and_shares(make_cleaned):
    # 2024-01-01 is a Monday
    rows = [(f"2024-01-{d:02d}", "A", False) for d in range(1, 15)]
    rows += [("2024-01-06", "A", False)] * 3
    df = make_cleaned(rows)

    weekday = weekday_summary(df)
    assert weekday["total_shootings"].sum() == len(df)
    assert weekday["pct"].sum() == pytest.approx(100.0)
    assert weekday.iloc[0]["weekday"] == "Saturday"
    assert weekday.iloc[0]["total_shootings"] == 5
    # remaining days are tied at 2 and fall back to Monday-first order
    assert weekday["weekday"].tolist()[1:] == [d for d in WEEKDAY_ORDER if d != "Saturday"]


def test_weekday_labels_match_calendar_names(make_cleaned):
    df = make_cleaned([("2024-01-01", "A", False), ("2024-01-07", "A", False)])
    assert set(weekday_summary(df)["weekday"]) == {"Monday", "Sunday"}


def test_yearly_in_natural_order(make_cleaned):
    df = make_cleaned([
        ("2021-03-01", "A", False),
        ("2019-03-01", "A", False),
        ("2021-05-01", "B", False),
    ])
    yearly = yearly_summary(df)
    assert yearly["year"].tolist() == [2019, 2021]
    assert yearly["total_shootings"].tolist() == [1, 2]


def test_boro_year_long_and_pivot(make_cleaned):
    df = make_cleaned([
        ("2019-06-01", "BRONX", False),
        ("2020-06-01", "QUEENS", False),
        ("2020-07-01", "QUEENS", True),
    ])

    long = boro_year_summary(df)
    assert long.to_dict("records") == [
        {"BORO": "BRONX", "year": 2019, "total_shootings": 1},
        {"BORO": "QUEENS", "year": 2020, "total_shootings": 2},
    ]

    wide = boro_year_pivot(df)
    assert list(wide.columns) == ["year", "BRONX", "QUEENS", "max"]
    assert wide.to_dict("records") == [
        {"year": 2019, "BRONX": 1, "QUEENS": 0, "max": 1},
        {"year": 2020, "BRONX": 0, "QUEENS": 2, "max": 2},
    ]
    assert not wide.isna().any().any()
    assert (wide["max"] == wide[["BRONX", "QUEENS"]].max(axis=1)).all()


def test_boro_ties_are_deterministic(make_cleaned):
    df = make_cleaned([
        ("2020-01-01", "QUEENS", False),
        ("2020-01-01", "BRONX", False),
        ("2020-01-02", "MANHATTAN", False),
        ("2020-01-02", "MANHATTAN", False),
    ])
    assert boro_summary(df)["BORO"].tolist() == ["MANHATTAN", "BRONX", "QUEENS"]


def test_summarise_returns_every_table(three_row_table):
    tables = summarise(three_row_table)
    assert set(tables) == {"weekday", "yearly", "boro_year", "boro_year_pivot", "boro"}
