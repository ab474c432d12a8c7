"""
data_collection.py
Loader for the NYPD Shooting Incident Data (Historic) CSV.

Reads the raw file into a DataFrame with the 16-column schema, coercing each
column to its type. Problems are collected as IngestionAnomaly records instead
of aborting the load, and no row ever disappears without an anomaly saying so.
"""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from .errors import IngestionAnomaly

log = logging.getLogger(__name__)


# ── Schema ────────────────────────────────────────────────────────────────────

SCHEMA_COLUMNS = [
    "INCIDENT_KEY", "OCCUR_DATE", "OCCUR_TIME", "BORO", "PRECINCT",
    "JURISDICTION_CODE", "LOCATION_DESC", "STATISTICAL_MURDER_FLAG",
    "PERP_AGE_GROUP", "PERP_SEX", "PERP_RACE",
    "VIC_AGE_GROUP", "VIC_SEX", "VIC_RACE",
    "X_COORD_CD", "Y_COORD_CD",
]

INTEGER_COLUMNS = ["PRECINCT", "JURISDICTION_CODE"]
FLOAT_COLUMNS   = ["X_COORD_CD", "Y_COORD_CD"]
MURDER_FLAG     = "STATISTICAL_MURDER_FLAG"

# NYC Open Data exports the flag as lowercase true/false; older extracts used Y/N
BOOL_MAP = {"true": True, "false": False, "y": True, "n": False}


@dataclass(frozen=True)
class LoadResult:
    frame: pd.DataFrame
    anomalies: list[IngestionAnomaly] = field(default_factory=list)


# ── Type coercion ─────────────────────────────────────────────────────────────

def _record_mismatches(raw: pd.Series, coerced: pd.Series, expected: str,
                       anomalies: list[IngestionAnomaly]) -> None:
    bad = raw.notna() & coerced.isna()
    for idx, value in raw[bad].items():
        anomalies.append(IngestionAnomaly(
            reason="type_mismatch", row=int(idx), column=raw.name,
            value=value, detail=f"(expected {expected}, coerced to NA)",
        ))


def _coerce_integer(raw: pd.Series, anomalies: list[IngestionAnomaly]) -> pd.Series:
    numbers = pd.to_numeric(raw.astype(object), errors="coerce")
    # "75.5" parses as a number but isn't a valid precinct
    numbers = numbers.where(numbers.isna() | (numbers % 1 == 0))
    _record_mismatches(raw, numbers, "integer", anomalies)
    return numbers.astype("Int64")


def _coerce_float(raw: pd.Series, anomalies: list[IngestionAnomaly]) -> pd.Series:
    numbers = pd.to_numeric(raw.astype(object), errors="coerce").astype(float)
    _record_mismatches(raw, numbers, "number", anomalies)
    return numbers


def _coerce_bool(raw: pd.Series, anomalies: list[IngestionAnomaly]) -> pd.Series:
    flags = raw.str.strip().str.lower().map(BOOL_MAP)
    _record_mismatches(raw, flags, "true/false", anomalies)
    return flags.astype("boolean")


def coerce_types(df: pd.DataFrame, anomalies: list[IngestionAnomaly]) -> pd.DataFrame:
    """Convert the all-string frame read from disk into typed columns."""
    df = df.copy()
    for col in SCHEMA_COLUMNS:
        if col in INTEGER_COLUMNS:
            df[col] = _coerce_integer(df[col], anomalies)
        elif col in FLOAT_COLUMNS:
            df[col] = _coerce_float(df[col], anomalies)
        elif col == MURDER_FLAG:
            df[col] = _coerce_bool(df[col], anomalies)
        else:
            df[col] = df[col].str.strip()
    return df


# ── Load ──────────────────────────────────────────────────────────────────────

def _field_counts(path: Path) -> tuple[list[str], list[int]]:
    """
    Header fields and the field count of every data row, in file order.
    Blank lines are skipped, as read_csv skips them.
    """
    with open(path, newline="", encoding="utf-8") as f:
        rows = (r for r in csv.reader(f) if r)
        header = next(rows, [])
        counts = [len(r) for r in rows]
    return header, counts


def load_incidents(filepath: str) -> LoadResult:
    """
    The frame's index is the 0-based data row in the file (header and blank
    lines not counted), so anomaly rows and frame labels line up even after
    malformed rows are dropped.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {filepath}")

    header, counts = _field_counts(path)
    missing_cols = set(SCHEMA_COLUMNS) - set(header)
    if missing_cols:
        raise ValueError(f"Dataset is missing expected columns: {sorted(missing_cols)}")

    log.info(f"Loading: {filepath}")
    # Wide enough for the longest row: nothing is truncated or shifted into
    # an index, and short rows come back padded with NA.
    width = max([len(header), *counts])
    df = pd.read_csv(
        path,
        header=None,
        skiprows=1,
        names=list(range(width)),
        dtype=str,
        encoding="utf-8",
    )
    log.info(f"Loaded {len(df):,} rows × {len(header)} columns")

    anomalies: list[IngestionAnomaly] = []
    n_fields = pd.Series(counts, index=df.index)
    malformed = n_fields != len(header)
    for row, n in n_fields[malformed].items():
        anomalies.append(IngestionAnomaly(
            reason="malformed_row", row=int(row), column=None,
            value=df.loc[row].iloc[:n].tolist(),
            detail=f"({n} fields, expected {len(header)}; row dropped)",
        ))

    df = df.loc[~malformed].iloc[:, :len(header)]
    df.columns = header

    extra = [c for c in df.columns if c not in SCHEMA_COLUMNS]
    if extra:
        log.info(f"Ignoring {len(extra)} column(s) outside the schema: {extra}")
    df = df[SCHEMA_COLUMNS]

    df = coerce_types(df, anomalies)

    if anomalies:
        log.warning(f"{len(anomalies):,} ingestion anomalies recorded")
        for a in anomalies[:10]:
            log.warning(f"  {a}")
    repeated = df["INCIDENT_KEY"].duplicated().sum()
    if repeated:
        # one key per incident, one row per victim: repeats are expected
        log.info(f"{repeated:,} rows share an INCIDENT_KEY with an earlier row")

    return LoadResult(frame=df, anomalies=anomalies)
