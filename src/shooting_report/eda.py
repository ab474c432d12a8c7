"""
eda.py
Figures and console summaries for the shooting report.

Each plot answers one question about the summaries built in aggregation.py
and the yearly model from modeling.py. Figures are labeled, sourced and saved
with descriptive names.
"""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd
import seaborn as sns

from .aggregation import COUNT_COL, MAX_COL, PCT_COL, REGION_COL
from .data_cleaning import YEAR_COL
from .modeling import MURDERS, PRED, SHOOTINGS

log = logging.getLogger(__name__)

# ── Style ─────────────────────────────────────────────────────────────────────
PALETTE  = "tab10"
ACCENT   = "#D62728"   # red: highlights the top bar and the fitted line
NEUTRAL  = "#4C72B0"   # blue: standard bars
BG_GRAY  = "#F7F7F7"
FIG_DIR  = Path("data/processed/figures")
SOURCE   = "Source: NYPD Shooting Incident Data (Historic) / data.cityofnewyork.us"

STYLE = {
    "figure.facecolor": BG_GRAY,
    "axes.facecolor":   BG_GRAY,
    "axes.spines.top":  False,
    "axes.spines.right": False,
    "axes.labelsize":   11,
    "axes.titlesize":   13,
    "axes.titleweight": "bold",
    "xtick.labelsize":  9,
    "ytick.labelsize":  9,
    "font.family":      "sans-serif",
}


# ── Helpers ───────────────────────────────────────────────────────────────────

def _save(fig: plt.Figure, name: str, fig_dir: Path) -> Path:
    fig_dir.mkdir(parents=True, exist_ok=True)
    path = fig_dir / f"{name}.png"
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"  ✓ Saved → {path}")
    return path


def _source_note(ax, note=SOURCE):
    ax.annotate(note, xy=(0, -0.12), xycoords="axes fraction",
                fontsize=7, color="gray")


def fmt_thousands(ax, axis="y"):
    fmt = mticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    if axis == "y":
        ax.yaxis.set_major_formatter(fmt)
    else:
        ax.xaxis.set_major_formatter(fmt)


def _banner(title: str):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


# ── Plot 1: Weekday ───────────────────────────────────────────────────────────

def plot_weekday(weekday: pd.DataFrame, fig_dir: Path = FIG_DIR) -> Path:
    """Q: Which days of the week see the most shootings?"""
    _banner("PLOT 1 | SHOOTINGS BY WEEKDAY")

    fig, ax = plt.subplots(figsize=(10, 5))
    colors = [ACCENT if i == 0 else NEUTRAL for i in range(len(weekday))]
    ax.bar(weekday["weekday"], weekday[COUNT_COL], color=colors)
    for i, (n, pct) in enumerate(zip(weekday[COUNT_COL], weekday[PCT_COL])):
        ax.text(i, n, f"{pct:.1f}%", ha="center", va="bottom", fontsize=8)
    ax.set_title("Shootings by Day of Week\n(busiest first)")
    ax.set_ylabel("Number of Shootings")
    fmt_thousands(ax)
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "01_weekday", fig_dir)
    print(weekday.round({PCT_COL: 1}).to_string(index=False))
    return path


# ── Plot 2: Yearly trend ──────────────────────────────────────────────────────

def plot_yearly(yearly: pd.DataFrame, fig_dir: Path = FIG_DIR) -> Path:
    """Q: Are shootings rising or falling year over year?"""
    _banner("PLOT 2 | SHOOTINGS BY YEAR")

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar(yearly[YEAR_COL], yearly[COUNT_COL], color=NEUTRAL, alpha=0.6, label="Yearly count")
    ax.plot(yearly[YEAR_COL], yearly[COUNT_COL], marker="o", color=ACCENT, linewidth=2, label="Trend")
    ax.set_xticks(yearly[YEAR_COL])
    ax.tick_params(axis="x", rotation=45)
    ax.set_title("Shootings per Year")
    ax.set_ylabel("Number of Shootings")
    fmt_thousands(ax)
    ax.legend(fontsize=8)
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "02_yearly", fig_dir)
    peak = yearly.loc[yearly[COUNT_COL].idxmax()]
    print(f"  Peak year: {int(peak[YEAR_COL])} ({int(peak[COUNT_COL]):,} shootings)")
    return path


# ── Plot 3: Borough × year ────────────────────────────────────────────────────

def plot_boro_year(boro_year: pd.DataFrame, pivot: pd.DataFrame, fig_dir: Path = FIG_DIR) -> Path:
    """Q: Do the boroughs follow the same yearly pattern?"""
    _banner("PLOT 3 | SHOOTINGS BY BOROUGH AND YEAR")

    fig, ax = plt.subplots(figsize=(12, 6))
    sns.lineplot(data=boro_year, x=YEAR_COL, y=COUNT_COL, hue=REGION_COL,
                 marker="o", palette=PALETTE, ax=ax)
    ax.plot(pivot[YEAR_COL], pivot[MAX_COL], color="gray", linestyle="--",
            linewidth=1, label="Busiest borough")
    ax.set_title("Shootings per Year by Borough")
    ax.set_ylabel("Number of Shootings")
    ax.legend(title="Borough", bbox_to_anchor=(1.01, 1), loc="upper left", fontsize=8)
    fmt_thousands(ax)
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "03_boro_year", fig_dir)
    print(pivot.to_string(index=False))
    return path


# ── Plot 4: Borough totals ────────────────────────────────────────────────────

def plot_boro(boro: pd.DataFrame, fig_dir: Path = FIG_DIR) -> Path:
    """Q: Which boroughs carry most of the shootings over the whole period?"""
    _banner("PLOT 4 | SHOOTINGS BY BOROUGH")

    fig, ax = plt.subplots(figsize=(10, 5))
    colors = [ACCENT if i == 0 else NEUTRAL for i in range(len(boro))]
    ax.barh(boro[REGION_COL][::-1], boro[COUNT_COL][::-1], color=colors[::-1])
    for i, (n, pct) in enumerate(zip(boro[COUNT_COL][::-1], boro[PCT_COL][::-1])):
        ax.text(n, i, f" {n:,} ({pct:.0f}%)", va="center", fontsize=8)
    ax.set_title("Total Shootings by Borough")
    ax.set_xlabel("Number of Shootings")
    fmt_thousands(ax, axis="x")
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "04_boro", fig_dir)
    top = boro.iloc[0]
    print(f"  Highest-shooting borough: {top[REGION_COL]} "
          f"({int(top[COUNT_COL]):,}, {top[PCT_COL]:.1f}%)")
    return path


# ── Plot 5: Model ─────────────────────────────────────────────────────────────

def plot_model(table: pd.DataFrame, fig_dir: Path = FIG_DIR) -> Path:
    """
    Q: How closely do yearly murders track yearly shootings?
    `table` must already carry the fitted `pred` column.
    """
    _banner("PLOT 5 | MURDERS VS SHOOTINGS (OLS)")

    fig, ax = plt.subplots(figsize=(9, 6))
    ax.scatter(table[SHOOTINGS], table[MURDERS], color=NEUTRAL, label="Observed year")
    line = table.sort_values(SHOOTINGS)
    ax.plot(line[SHOOTINGS], line[PRED], color=ACCENT, linewidth=2, label="OLS fit")
    for _, row in table.iterrows():
        ax.annotate(str(int(row[YEAR_COL])), (row[SHOOTINGS], row[MURDERS]),
                    fontsize=7, xytext=(3, 3), textcoords="offset points")
    ax.set_title("Yearly Murders vs Yearly Shootings")
    ax.set_xlabel("Shootings per Year")
    ax.set_ylabel("Murders per Year")
    fmt_thousands(ax)
    fmt_thousands(ax, axis="x")
    ax.legend(fontsize=8)
    _source_note(ax)

    plt.tight_layout()
    return _save(fig, "05_model", fig_dir)


# ── Orchestrator ──────────────────────────────────────────────────────────────

def run_eda(report, fig_dir: Path = FIG_DIR) -> list[Path]:
    """
    Render every figure for a finished ShootingReport.
    Returns the saved paths in plot order.
    """
    fig_dir = Path(fig_dir)
    with plt.rc_context(STYLE):
        paths = [
            plot_weekday(report.weekday, fig_dir),
            plot_yearly(report.yearly, fig_dir),
            plot_boro_year(report.boro_year, report.boro_year_pivot, fig_dir),
            plot_boro(report.boro, fig_dir),
            plot_model(report.year_model, fig_dir),
        ]

    print("\n" + "=" * 60)
    print(f"✓ PLOTS COMPLETE: {len(paths)} figures saved to {fig_dir}/")
    print("=" * 60)
    log.info(f"{len(paths)} figures written to {fig_dir}")
    return paths
