from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from monetize_ai.analysis import results_to_frame
from monetize_ai.types import MonthlyResult

EXPORT_HEADER = ["Month", "Revenue ($)", "Total Users", "Expenses ($)", "Profit ($)"]
EXPORT_FILE_NAME = "monetizeai_simulation.csv"


def to_delimited_text(results: Iterable[MonthlyResult]) -> str:
    """Render monthly results as spreadsheet-friendly CSV text.

    One header row followed by one row per month. Profit is recomputed as
    revenue - expenses for every row. Rows are joined with ``\\n`` and there is
    no trailing newline.
    """
    frame = results_to_frame(results)
    text = frame.to_csv(index=False, header=EXPORT_HEADER, lineterminator="\n")
    return text.rstrip("\n")


def read_delimited_text(text: str) -> pd.DataFrame:
    """Parse text produced by `to_delimited_text` back into integer columns."""
    frame = pd.read_csv(io.StringIO(text), dtype="int64")
    missing = [c for c in EXPORT_HEADER if c not in frame.columns]
    if missing:
        raise ValueError(f"Not a simulation export, missing columns: {missing}")
    return frame[EXPORT_HEADER]
