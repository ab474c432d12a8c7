"""
shooting_report
Descriptive analysis of the NYPD Shooting Incident Data (Historic) dataset.

Load → clean → aggregate → model → plot, each step a plain function over
pandas DataFrames. `report.run_report()` reproduces everything end-to-end.
"""

__version__ = "1.0.0"
