"""Helpers for turning raw daily price rows into labelled, chart-ready axes."""
from .bucketing import Bucketizer, bucketize, create_strategy
from .config import (
    PRICE_COLUMNS,
    REQUIRED_COLUMNS,
    AxisConfig,
    Granularity,
    build_axis_config,
)
from .data import PriceBar, collect_samples, load_csv_rows, rows_from_frame
from .dates import CalendarDate, InvalidDate, canonical_key, parse_date
from .labels import LabelBuilder
from .metadata import build_metadata_row
from .result import AxisPoint, ResultIndex

__all__ = [
    "PRICE_COLUMNS",
    "REQUIRED_COLUMNS",
    "AxisConfig",
    "Granularity",
    "build_axis_config",
    "Bucketizer",
    "bucketize",
    "create_strategy",
    "PriceBar",
    "collect_samples",
    "load_csv_rows",
    "rows_from_frame",
    "CalendarDate",
    "InvalidDate",
    "canonical_key",
    "parse_date",
    "LabelBuilder",
    "build_metadata_row",
    "AxisPoint",
    "ResultIndex",
]
