"""
report.py
End-to-end shooting report: load → clean → aggregate → model → plot.

Run from the command line:

    python -m shooting_report.report data/raw/NYPD_Shooting_Incident_Data__Historic_.csv

A run either produces every summary and the fitted model, or stops with a
named ShootingReportError. There is no partial report.
"""

import argparse
import logging
import sys
from dataclasses import dataclass

import pandas as pd

from .aggregation import summarise
from .data_cleaning import AuditTrail, clean_incidents
from .data_collection import load_incidents
from .errors import IngestionAnomaly, ShootingReportError
from .modeling import FittedModel, add_predictions, fit_murder_model, year_model_table

# ── Logging Setup ─────────────────────────────────────────────────────────────
log = logging.getLogger(__name__)

LOG_FORMAT  = "%(asctime)s | %(levelname)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# ── Paths ─────────────────────────────────────────────────────────────────────
DEFAULT_INPUT = "data/raw/NYPD_Shooting_Incident_Data__Historic_.csv"
DEFAULT_FIGS  = "data/processed/figures"
DEFAULT_AUDIT = "data/cleaning_audit.json"


@dataclass(frozen=True)
class ShootingReport:
    anomalies: list[IngestionAnomaly]
    missing_before: pd.Series
    missing_after: pd.Series
    audit: AuditTrail
    cleaned: pd.DataFrame
    weekday: pd.DataFrame
    yearly: pd.DataFrame
    boro_year: pd.DataFrame
    boro_year_pivot: pd.DataFrame
    boro: pd.DataFrame
    year_model: pd.DataFrame
    model: FittedModel


def build_report(raw: pd.DataFrame, anomalies: list[IngestionAnomaly] | None = None,
                 audit_path: str | None = None) -> ShootingReport:
    """Everything after loading: useful when the frame comes from elsewhere."""
    cleaned = clean_incidents(raw, audit_path=audit_path)
    summaries = summarise(cleaned.frame)

    table = year_model_table(cleaned.frame)
    model = fit_murder_model(table)

    return ShootingReport(
        anomalies=list(anomalies or []),
        missing_before=cleaned.missing_before,
        missing_after=cleaned.missing_after,
        audit=cleaned.audit,
        cleaned=cleaned.frame,
        weekday=summaries["weekday"],
        yearly=summaries["yearly"],
        boro_year=summaries["boro_year"],
        boro_year_pivot=summaries["boro_year_pivot"],
        boro=summaries["boro"],
        year_model=add_predictions(table, model),
        model=model,
    )


def run_report(input_path: str, audit_path: str | None = DEFAULT_AUDIT) -> ShootingReport:
    log.info("=" * 60)
    log.info("NYPD SHOOTING INCIDENTS: REPORT START")
    log.info("=" * 60)

    loaded = load_incidents(input_path)
    report = build_report(loaded.frame, loaded.anomalies, audit_path=audit_path)

    log.info(f"Report complete: {len(report.cleaned):,} incidents, "
             f"{len(report.yearly)} years, {len(report.anomalies):,} ingestion anomalies")
    return report


def print_diagnostics(report: ShootingReport) -> None:
    print("\n" + "=" * 60)
    print("MISSING VALUES (before → after cleaning)")
    print("=" * 60)
    missing = pd.DataFrame({"before": report.missing_before, "after": report.missing_after}).astype("Int64")
    print(missing.to_string())

    print(f"\nIngestion anomalies: {len(report.anomalies):,}")
    for a in report.anomalies[:10]:
        print(f"  {a}")

    report.audit.summary()

    print("\n" + "=" * 60)
    print("MODEL: murders ~ shootings (one row per year)")
    print("=" * 60)
    print(report.year_model.round({"pred": 1}).to_string(index=False))
    print()
    print(report.model.summary())


# ── Entry Point ───────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="NYPD shooting incident report")
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT, help="raw incident CSV")
    parser.add_argument("--figures", default=DEFAULT_FIGS, help="directory for PNG figures")
    parser.add_argument("--audit", default=DEFAULT_AUDIT, help="path for the cleaning audit JSON")
    parser.add_argument("--no-plots", action="store_true", help="skip figure rendering")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    try:
        report = run_report(args.input, audit_path=args.audit)
    except (ShootingReportError, FileNotFoundError, ValueError) as e:
        log.error(f"Report aborted: {type(e).__name__}: {e}")
        return 1

    print_diagnostics(report)
    if not args.no_plots:
        from .eda import run_eda
        run_eda(report, args.figures)
    return 0


if __name__ == "__main__":
    sys.exit(main())
