"""
aggregation.py
Grouped summaries of the cleaned shooting incident table.

Every summary is a plain row tally (one incident row = 1) and each function
returns a fresh DataFrame with a RangeIndex.
"""

import logging

import pandas as pd

from .data_cleaning import DATE_COL, YEAR_COL

log = logging.getLogger(__name__)

REGION_COL = "BORO"
COUNT_COL  = "total_shootings"
PCT_COL    = "pct"
MAX_COL    = "max"

# Monday-first, same labels as Series.dt.day_name(). Spelled out rather than
# taken from calendar.day_name, which follows the process locale.
WEEKDAY_ORDER = ["Monday", "Tuesday", "Wednesday", "Thursday",
                 "Friday", "Saturday", "Sunday"]


def _add_share(counts: pd.DataFrame) -> pd.DataFrame:
    total = counts[COUNT_COL].sum()
    counts[PCT_COL] = counts[COUNT_COL] / total * 100 if total else 0.0
    return counts


# ── By weekday ────────────────────────────────────────────────────────────────

def weekday_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Incidents per weekday with each day's share of the total, busiest first.
    Equal counts keep Monday→Sunday order.
    """
    weekday = df[DATE_COL].dt.day_name().rename("weekday")
    counts = df.groupby(weekday).size().reset_index(name=COUNT_COL)
    counts = _add_share(counts)

    counts["_rank"] = counts["weekday"].map(WEEKDAY_ORDER.index)
    return (
        counts.sort_values([COUNT_COL, "_rank"], ascending=[False, True], kind="stable")
        .drop(columns="_rank")
        .reset_index(drop=True)
    )


# ── By year ───────────────────────────────────────────────────────────────────

def yearly_summary(df: pd.DataFrame) -> pd.DataFrame:
    return df.groupby(YEAR_COL).size().reset_index(name=COUNT_COL)


# ── By borough and year ───────────────────────────────────────────────────────

def boro_year_summary(df: pd.DataFrame) -> pd.DataFrame:
    return df.groupby([REGION_COL, YEAR_COL]).size().reset_index(name=COUNT_COL)


def boro_year_pivot(df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per year, one column per borough, plus the row maximum.
    A borough with no incidents in a year shows 0, never NaN.
    """
    wide = (
        df.groupby([YEAR_COL, REGION_COL])
        .size()
        .unstack(fill_value=0)
        .astype(int)
    )
    wide.columns.name = None
    boros = list(wide.columns)
    wide[MAX_COL] = wide[boros].max(axis=1)
    return wide.reset_index()


# ── By borough ────────────────────────────────────────────────────────────────

def boro_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Incidents per borough over the whole period with percentage share."""
    counts = df.groupby(REGION_COL).size().reset_index(name=COUNT_COL)
    counts = _add_share(counts)
    return (
        counts.sort_values([COUNT_COL, REGION_COL], ascending=[False, True], kind="stable")
        .reset_index(drop=True)
    )


def summarise(df: pd.DataFrame) -> dict[str, pd.DataFrame]:
    """All grouped summaries keyed by name."""
    summaries = {
        "weekday": weekday_summary(df),
        "yearly": yearly_summary(df),
        "boro_year": boro_year_summary(df),
        "boro_year_pivot": boro_year_pivot(df),
        "boro": boro_summary(df),
    }
    for name, table in summaries.items():
        log.info(f"Summary {name!r}: {len(table):,} rows")
    return summaries
