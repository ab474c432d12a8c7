"""
errors.py
Named failure reasons for the shooting report pipeline.

Ingestion anomalies are collected, never raised. Everything else aborts the
run at the step where it occurs.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class IngestionAnomaly:
    """One row-level problem seen while loading the raw CSV."""
    reason: str            # "malformed_row" | "type_mismatch"
    row: int               # 0-based data row in the file, header and blank lines not counted
    column: str | None
    value: Any
    detail: str = ""

    def __str__(self):
        where = f"row {self.row}"
        col = f", column {self.column}" if self.column else ""
        return f"{self.reason} at {where}{col}: {self.value!r} {self.detail}".rstrip()


class ShootingReportError(Exception):
    """Base class for every fatal pipeline failure."""


class MalformedDateError(ShootingReportError, ValueError):
    """OCCUR_DATE values that don't match the expected MM/DD/YYYY format."""

    def __init__(self, column: str, bad_values: list[tuple[int, Any]], fmt: str):
        self.column = column
        self.bad_values = bad_values
        self.fmt = fmt
        preview = ", ".join(f"row {i}: {v!r}" for i, v in bad_values[:5])
        more = f" (+{len(bad_values) - 5} more)" if len(bad_values) > 5 else ""
        super().__init__(
            f"{len(bad_values):,} value(s) in {column!r} do not match {fmt!r}: {preview}{more}"
        )


class MissingValueInvariantViolation(ShootingReportError):
    """Retained columns still hold missing values after cleaning."""

    def __init__(self, counts: dict[str, int]):
        self.counts = counts
        detail = ", ".join(f"{c}={n:,}" for c, n in counts.items())
        super().__init__(
            f"Missing values remain after cleaning ({detail}); "
            f"check the ingestion anomalies for coerced values, or the pruned-column list"
        )


class DegenerateModelError(ShootingReportError):
    """Not enough yearly observations (or no spread in them) to fit a line."""


class ColumnTypeError(ShootingReportError, TypeError):
    """A column the summaries rely on doesn't hold the expected type."""

    def __init__(self, column: str, expected: str, actual):
        self.column = column
        self.expected = expected
        self.actual = str(actual)
        super().__init__(
            f"{column!r} must be {expected}, got dtype {self.actual}; "
            f"load the frame with data_collection.load_incidents or coerce it first"
        )
