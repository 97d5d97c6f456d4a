"""I/O utilities for persisting prepared axis series and metadata."""
from __future__ import annotations

import os
from typing import Dict, List

import pandas as pd

from .result import ResultIndex


def write_axis_csv(result: ResultIndex, path: str) -> None:
    """Persist the axis series to a CSV file, one row per axis point."""

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    result.to_frame().to_csv(path, date_format="%Y-%m-%d")


def write_metadata(rows: List[Dict[str, object]], path: str) -> None:
    """Persist metadata rows to a CSV file."""

    if not rows:
        return
    df = pd.DataFrame(rows)
    df.to_csv(path, index=False)


def ensure_outdir(out_dir: str) -> Dict[str, str]:
    """Create the output directory if it does not exist."""

    os.makedirs(out_dir, exist_ok=True)
    return {
        "root": out_dir,
        "axis": os.path.join(out_dir, "axis.csv"),
        "metadata": os.path.join(out_dir, "metadata.csv"),
    }
