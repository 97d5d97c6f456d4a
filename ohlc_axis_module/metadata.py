"""Metadata helpers summarising one axis preparation run."""
from __future__ import annotations

import json
from typing import Dict, Union

import numpy as np

from .config import PRICE_COLUMNS, AxisConfig
from .result import ResultIndex


def build_metadata_row(
    source: str,
    result: ResultIndex,
    cfg: AxisConfig,
) -> Dict[str, object]:
    """Construct the metadata dictionary for a prepared axis.

    Args:
        source: Where the rows came from (usually a CSV path)
        result: The prepared axis series
        cfg: Configuration the series was built with

    Returns:
        Metadata dictionary with counts, range, label width and per-column
        price statistics serialised as JSON
    """

    ohlc_stats: Dict[str, Union[Dict[str, float], str]] = {}
    if result.bars:
        values = np.array([bar.as_tuple() for bar in result.bars.values()], dtype=float)
        for position, col in enumerate(PRICE_COLUMNS):
            series = values[:, position]
            ohlc_stats[col] = {
                "min": float(series.min()),
                "max": float(series.max()),
                "mean": float(series.mean()),
                "std": float(series.std(ddof=0)),
            }

    first_key = result.dates[0] if result.dates else ""
    last_key = result.dates[-1] if result.dates else ""
    ohlc_stats["start_iso"] = first_key
    ohlc_stats["end_iso"] = last_key

    return {
        "source": source,
        "granularity": cfg.granularity.value,
        "start_date": first_key,
        "end_date": last_key,
        "n_points": len(result),
        "n_placeholders": sum(1 for point in result.points if not point.has_data),
        "n_bars": len(result.bars),
        "n_volumes": len(result.volumes),
        "label_max": result.label_max,
        "dropped_rows": result.dropped_rows,
        "incomplete_bars": result.incomplete_bars,
        "changes_only": cfg.changes_only,
        "legacy_two_field_volume": cfg.legacy_two_field_volume,
        "average_monthly_volume": cfg.average_monthly_volume,
        "ohlc_stats_json": json.dumps(ohlc_stats, sort_keys=True),
    }
