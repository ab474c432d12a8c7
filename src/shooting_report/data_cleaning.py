"""
data_cleaning.py
Cleaning step for the NYPD shooting incident table.

Design principles:
- Every transformation is logged with the number of rows it touched
- No row filtering: cleaning only re-types, derives and projects columns
- Functions take a DataFrame and return a new one, no global state
- The missing-value audit is an invariant, not a log line
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from .data_collection import MURDER_FLAG
from .errors import ColumnTypeError, MalformedDateError, MissingValueInvariantViolation

log = logging.getLogger(__name__)


# ── Constants ─────────────────────────────────────────────────────────────────

DATE_COL    = "OCCUR_DATE"
DATE_FORMAT = "%m/%d/%Y"
YEAR_COL    = "year"

# Sparse in the raw data and unused by any summary or the model
PRUNED_COLUMNS = [
    "JURISDICTION_CODE",
    "LOCATION_DESC",
    "PERP_SEX",
    "PERP_AGE_GROUP",
    "PERP_RACE",
]


# ── Audit Trail ───────────────────────────────────────────────────────────────

class AuditTrail:
    """
    Step-by-step record of what cleaning did to the incident table.

    Rows are never removed here, so each step notes how many rows it touched
    and how many columns it left. Missing-value snapshots ride along so the
    saved JSON shows the before/after picture in one place.
    """

    def __init__(self, df: pd.DataFrame):
        self.n_rows = len(df)
        self.steps: list[dict] = []
        self.missing: dict[str, dict[str, int]] = {}

    def log_step(self, step: str, df: pd.DataFrame, rows_touched: int, note: str = ""):
        share = rows_touched / self.n_rows * 100 if self.n_rows else 0.0
        self.steps.append({
            "step": step,
            "rows_touched": int(rows_touched),
            "share_pct": round(share, 2),
            "columns": int(df.shape[1]),
            "note": note,
        })
        log.info(f"[{step}] {rows_touched:,} rows touched ({share:.1f}%), "
                 f"{df.shape[1]} columns kept {note}".rstrip())

    def note_missing(self, label: str, counts: pd.Series):
        self.missing[label] = {str(c): int(n) for c, n in counts.items()}

    def to_dict(self) -> dict:
        return {"rows": self.n_rows, "steps": self.steps, "missing_values": self.missing}

    def save(self, path: str):
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        log.info(f"Cleaning audit saved → {path}")

    def summary(self):
        print("\n" + "=" * 70)
        print(f"CLEANING AUDIT ({self.n_rows:,} incidents)")
        print("=" * 70)
        print(f"{'Step':<20} {'Rows':>10} {'%':>7} {'Cols':>5}  Note")
        print("-" * 70)
        for s in self.steps:
            print(f"{s['step']:<20} {s['rows_touched']:>10,} {s['share_pct']:>6.1f}% "
                  f"{s['columns']:>5}  {s['note']}")
        print("=" * 70)


@dataclass(frozen=True)
class CleanResult:
    frame: pd.DataFrame
    missing_before: pd.Series
    missing_after: pd.Series
    audit: AuditTrail


# ── Missing-value audit ───────────────────────────────────────────────────────

def missing_value_counts(df: pd.DataFrame) -> pd.Series:
    """Per-column count of missing values, in column order."""
    return df.isna().sum().astype(int)


def assert_no_missing(df: pd.DataFrame) -> None:
    counts = missing_value_counts(df)
    offending = counts[counts > 0]
    if not offending.empty:
        raise MissingValueInvariantViolation({c: int(n) for c, n in offending.items()})


# ── Step 1: Murder Flag Type ──────────────────────────────────────────────────

def check_murder_flag(df: pd.DataFrame, audit: AuditTrail) -> pd.DataFrame:
    """
    The murder tally keys on True, so a flag still held as text ("false")
    would count every row. Only a real boolean column gets past here.
    """
    dtype = df[MURDER_FLAG].dtype
    if not pd.api.types.is_bool_dtype(dtype):
        raise ColumnTypeError(MURDER_FLAG, "boolean", dtype)
    audit.log_step("Flag type check", df, 0, f"({MURDER_FLAG} is {dtype})")
    return df


# ── Step 2: Parse Dates ───────────────────────────────────────────────────────

def parse_dates(df: pd.DataFrame, audit: AuditTrail) -> pd.DataFrame:
    if pd.api.types.is_datetime64_any_dtype(df[DATE_COL]):
        audit.log_step("Date parse", df, 0, f"({DATE_COL} already a date)")
        return df

    raw = df[DATE_COL]
    parsed = pd.to_datetime(raw, format=DATE_FORMAT, errors="coerce")

    # A missing date can't yield a year either, so it counts as malformed
    bad = parsed.isna()
    if bad.any():
        raise MalformedDateError(DATE_COL, list(raw[bad].items()), DATE_FORMAT)

    df = df.copy()
    df[DATE_COL] = parsed
    audit.log_step("Date parse", df, len(df), f"({DATE_COL} text → date, {DATE_FORMAT})")
    return df


# ── Step 3: Derive Year ───────────────────────────────────────────────────────

def derive_year(df: pd.DataFrame, audit: AuditTrail) -> pd.DataFrame:
    df = df.copy()
    df[YEAR_COL] = df[DATE_COL].dt.year.astype(int)
    span = f"({df[YEAR_COL].min()}–{df[YEAR_COL].max()})" if len(df) else ""
    audit.log_step("Year derived", df, len(df), span)
    return df


# ── Step 4: Drop Unused Columns ───────────────────────────────────────────────

def drop_unused_columns(df: pd.DataFrame, audit: AuditTrail) -> pd.DataFrame:
    """
    Projection only. The perpetrator fields are mostly unknown and the
    jurisdiction/location fields are never summarised.
    """
    cols_to_drop = [c for c in PRUNED_COLUMNS if c in df.columns]
    df = df.drop(columns=cols_to_drop)
    audit.log_step("Columns dropped", df, 0, f"({cols_to_drop})")
    return df


# ── Pipeline ──────────────────────────────────────────────────────────────────

def clean_incidents(df: pd.DataFrame, audit_path: str | None = None) -> CleanResult:
    """
    Clean a loaded incident table.

    Parameters
    ----------
    df         : typed frame from data_collection.load_incidents
    audit_path : optional path for the JSON audit log

    Returns
    -------
    CleanResult with the cleaned frame and the missing-value counts taken
    before and after cleaning.

    Raises ColumnTypeError if the murder flag isn't boolean, MalformedDateError
    on any bad OCCUR_DATE and MissingValueInvariantViolation if a retained
    column still has gaps.
    """
    audit = AuditTrail(df)
    missing_before = missing_value_counts(df)
    audit.note_missing("before", missing_before)
    log.info(f"Missing values before cleaning: {int(missing_before.sum()):,}")

    out = check_murder_flag(df, audit)
    out = parse_dates(out, audit)
    out = derive_year(out, audit)
    out = drop_unused_columns(out, audit)

    missing_after = missing_value_counts(out)
    audit.note_missing("after", missing_after)
    assert_no_missing(out)
    audit.log_step("Missing audit", out, 0, "(retained columns complete)")

    if audit_path:
        audit.save(audit_path)

    log.info(f"Final shape: {out.shape[0]:,} rows × {out.shape[1]} columns")
    return CleanResult(frame=out, missing_before=missing_before,
                       missing_after=missing_after, audit=audit)
