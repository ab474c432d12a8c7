import logging
import warnings

import numpy as np
import pandas as pd
import pytest

from shooting_report.errors import DegenerateModelError
from shooting_report.modeling import (
    add_predictions,
    fit_murder_model,
    year_model_table,
)


def test_year_model_table_left_join_keeps_murder_free_years(make_cleaned):
    df = make_cleaned([
        ("2018-05-01", "A", True),
        ("2018-05-02", "A", False),
        ("2019-05-01", "B", False),
        ("2020-05-01", "A", True),
        ("2020-05-02", "B", True),
        ("2020-05-03", "B", False),
    ])
    table = year_model_table(df)

    assert table.to_dict("records") == [
        {"year": 2018, "shootings": 2, "murders": 1},
        {"year": 2019, "shootings": 1, "murders": 0},
        {"year": 2020, "shootings": 3, "murders": 2},
    ]
    assert (table["shootings"] >= table["murders"]).all()


def test_year_model_table_without_any_murders(make_cleaned):
    df = make_cleaned([("2018-05-01", "A", False), ("2019-05-01", "A", False)])
    assert year_model_table(df)["murders"].tolist() == [0, 0]


@pytest.fixture
def linear_table():
    # murders = 1 + 0.2 * shootings, exactly
    return pd.DataFrame({
        "year": [2018, 2019, 2020, 2021],
        "shootings": [10, 20, 30, 40],
        "murders": [3, 5, 7, 9],
    })


def test_fit_recovers_exact_line(linear_table):
    model = fit_murder_model(linear_table)

    assert model.slope == pytest.approx(0.2)
    assert model.intercept == pytest.approx(1.0)
    assert model.r_squared == pytest.approx(1.0)
    assert model.n_obs == 4
    np.testing.assert_allclose(model.predict([50]), [11.0])


def test_fit_reports_standard_errors():
    table = pd.DataFrame({
        "year": [2016, 2017, 2018, 2019, 2020],
        "shootings": [1000, 970, 950, 960, 1900],
        "murders": [220, 180, 200, 190, 420],
    })
    model = fit_murder_model(table)

    assert model.slope > 0
    assert model.slope_se > 0
    assert model.intercept_se > 0
    assert 0 < model.r_squared < 1
    assert set(model.as_dict()) == {
        "intercept", "slope", "intercept_se", "slope_se", "r_squared", "n_obs", "df_resid",
    }
    assert model.as_dict()["df_resid"] == 3
    assert "shootings" in model.summary()


def test_fit_is_deterministic(linear_table):
    first = fit_murder_model(linear_table)
    second = fit_murder_model(linear_table)
    assert first.as_dict() == second.as_dict()


def test_single_year_is_degenerate(linear_table):
    with pytest.raises(DegenerateModelError):
        fit_murder_model(linear_table.head(1))


def test_constant_shootings_is_degenerate():
    table = pd.DataFrame({"year": [2019, 2020, 2021],
                          "shootings": [50, 50, 50],
                          "murders": [10, 12, 9]})
    with pytest.raises(DegenerateModelError, match="zero variance"):
        fit_murder_model(table)


def test_add_predictions_returns_copy(linear_table):
    model = fit_murder_model(linear_table)
    out = add_predictions(linear_table, model)

    assert "pred" not in linear_table.columns
    np.testing.assert_allclose(out["pred"], linear_table["murders"])


def test_year_model_table_counts_only_true_flags(make_cleaned):
    df = make_cleaned([
        ("2018-05-01", "A", True),
        ("2018-05-02", "A", False),
        ("2019-05-01", "B", False),
    ])
    df["STATISTICAL_MURDER_FLAG"] = ["true", "false", "false"]
    assert year_model_table(df)["murders"].tolist() == [0, 0]


def test_two_years_fit_exactly_without_standard_errors(linear_table, caplog):
    with warnings.catch_warnings():
        warnings.simplefilter("error", RuntimeWarning)
        with caplog.at_level(logging.WARNING, logger="shooting_report.modeling"):
            model = fit_murder_model(linear_table.head(2))
        text = model.summary()

    assert model.n_obs == 2
    assert model.df_resid == 0
    assert model.slope == pytest.approx(0.2)
    assert np.isnan(model.slope_se)
    assert np.isnan(model.intercept_se)
    assert "no residual degrees of freedom" in caplog.text
    assert "shootings" in text
