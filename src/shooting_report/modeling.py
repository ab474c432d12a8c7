"""
modeling.py
Yearly murders vs shootings: table construction and an OLS fit.

    murders ≈ intercept + slope × shootings

One observation per calendar year. The fit refuses degenerate inputs instead
of handing back meaningless coefficients.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from .data_cleaning import YEAR_COL
from .data_collection import MURDER_FLAG
from .errors import DegenerateModelError

log = logging.getLogger(__name__)

SHOOTINGS = "shootings"
MURDERS   = "murders"
PRED      = "pred"
FORMULA   = f"{MURDERS} ~ {SHOOTINGS}"


@dataclass(frozen=True)
class FittedModel:
    intercept: float
    slope: float
    intercept_se: float
    slope_se: float
    r_squared: float
    n_obs: int
    df_resid: int
    results: Any   # statsmodels RegressionResultsWrapper

    def predict(self, shootings) -> np.ndarray:
        return self.intercept + self.slope * np.asarray(shootings, dtype=float)

    def summary(self) -> str:
        with warnings.catch_warnings():
            if self.df_resid == 0:
                # statsmodels divides by df_resid for every inference column
                warnings.simplefilter("ignore", RuntimeWarning)
            return str(self.results.summary())

    def as_dict(self) -> dict[str, float]:
        return {
            "intercept": self.intercept,
            "slope": self.slope,
            "intercept_se": self.intercept_se,
            "slope_se": self.slope_se,
            "r_squared": self.r_squared,
            "n_obs": self.n_obs,
            "df_resid": self.df_resid,
        }


# ── Year-model table ──────────────────────────────────────────────────────────

def year_model_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-year shooting and murder counts, left-joined on year.
    A year with no murders keeps its row with murders = 0.
    """
    shootings = df.groupby(YEAR_COL).size().rename(SHOOTINGS)
    murders = (
        df[df[MURDER_FLAG].eq(True).fillna(False).astype(bool)]
        .groupby(YEAR_COL)
        .size()
        .rename(MURDERS)
    )
    table = (
        shootings.to_frame()
        .join(murders, how="left")
        .fillna({MURDERS: 0})
        .astype({SHOOTINGS: int, MURDERS: int})
        .reset_index()
    )
    log.info(f"Year-model table: {len(table)} years, "
             f"{table[SHOOTINGS].sum():,} shootings, {table[MURDERS].sum():,} murders")
    return table


# ── Fit ───────────────────────────────────────────────────────────────────────

def _check_fit_input(table: pd.DataFrame) -> None:
    years = table[YEAR_COL].nunique() if YEAR_COL in table.columns else len(table)
    if years < 2:
        raise DegenerateModelError(
            f"Need at least 2 yearly observations to fit {FORMULA!r}, got {years}"
        )
    if table[SHOOTINGS].nunique() < 2:
        raise DegenerateModelError(
            f"{SHOOTINGS!r} has zero variance across {years} years; slope is undefined"
        )


def fit_murder_model(table: pd.DataFrame) -> FittedModel:
    """
    Ordinary least squares of yearly murders on yearly shootings.

    Raises DegenerateModelError for fewer than two years or a constant
    shooting count. Exactly two years give a line through both points with
    no residual degrees of freedom: the fit is kept, standard errors are NaN
    and a warning is logged.
    """
    _check_fit_input(table)

    data = table[[SHOOTINGS, MURDERS]].astype(float)
    results = smf.ols(FORMULA, data=data).fit()
    df_resid = int(results.df_resid)

    if df_resid > 0:
        intercept_se = float(results.bse["Intercept"])
        slope_se = float(results.bse[SHOOTINGS])
    else:
        intercept_se = slope_se = float("nan")
        log.warning(f"OLS {FORMULA}: {int(results.nobs)} years leave no residual "
                    f"degrees of freedom; the line is exact and standard errors are undefined")

    model = FittedModel(
        intercept=float(results.params["Intercept"]),
        slope=float(results.params[SHOOTINGS]),
        intercept_se=intercept_se,
        slope_se=slope_se,
        r_squared=float(results.rsquared),
        n_obs=int(results.nobs),
        df_resid=df_resid,
        results=results,
    )
    log.info(f"OLS {FORMULA}: intercept={model.intercept:.3f}, "
             f"slope={model.slope:.4f}, R²={model.r_squared:.3f}, n={model.n_obs}")
    return model


def add_predictions(table: pd.DataFrame, model: FittedModel) -> pd.DataFrame:
    out = table.copy()
    out[PRED] = model.predict(out[SHOOTINGS])
    return out
