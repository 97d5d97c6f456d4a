"""Row ingestion and validation helpers for OHLC axis preparation."""
from __future__ import annotations

import logging
import math
import numbers
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .config import PRICE_COLUMNS, REQUIRED_COLUMNS
from .dates import CalendarDate, InvalidDate, parse_date

LOGGER = logging.getLogger(__name__)

NUMBER_RE = re.compile(r"^\s*[-+]?[0-9.]+(?:[Ee][-+]?[0-9.]+)?\s*$")

Row = Sequence[Any]


@dataclass(frozen=True)
class PriceBar:
    """Open, high, low and close for one date; always complete."""

    open: float
    high: float
    low: float
    close: float

    @classmethod
    def from_values(cls, values: Sequence[Any]) -> Optional["PriceBar"]:
        """Build a bar from four raw values, or ``None`` if any is absent."""

        parsed = [to_number(value) for value in values]
        if len(parsed) != 4 or any(number is None for number in parsed):
            return None
        return cls(*parsed)

    def as_tuple(self) -> tuple:
        return (self.open, self.high, self.low, self.close)


def to_number(value: Any) -> Optional[float]:
    """Convert a raw field to ``float``; blanks, NaN and non-numeric text become ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
        return None if math.isnan(number) else number
    text = str(value).strip()
    if not text or not NUMBER_RE.match(text):
        return None
    try:
        return float(text)
    except ValueError:
        return None


def is_header_row(row: Row) -> bool:
    """A header row is one whose first data field is not numeric.

    Rows too short to have a data field are not headers; ``collect_samples``
    drops and counts them.
    """

    if len(row) < 2:
        return False
    value = row[1]
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return False
    return not (isinstance(value, str) and NUMBER_RE.match(value))


def strip_header(rows: Sequence[Row]) -> List[Row]:
    """Return the rows without a leading header row, if one is present."""

    rows = list(rows)
    if rows and is_header_row(rows[0]):
        LOGGER.debug("Discarding header row %r", rows[0])
        return rows[1:]
    return rows


@dataclass
class DaySamples:
    """Per-date lookups produced by the pre-pass over raw rows."""

    bars: Dict[str, PriceBar] = field(default_factory=dict)
    volumes: Dict[str, float] = field(default_factory=dict)
    first: Optional[CalendarDate] = None
    last: Optional[CalendarDate] = None
    dropped_rows: int = 0
    incomplete_bars: int = 0

    @property
    def empty(self) -> bool:
        return self.first is None

    def has_data(self, key: str) -> bool:
        return key in self.bars or key in self.volumes

    def bar(self, key: str) -> Optional[PriceBar]:
        return self.bars.get(key)

    def volume(self, key: str) -> Optional[float]:
        return self.volumes.get(key)

    def _extend_range(self, date: CalendarDate) -> None:
        if self.first is None or date < self.first:
            self.first = date
        if self.last is None or date > self.last:
            self.last = date


def collect_samples(
    rows: Iterable[Row], legacy_two_field_volume: bool = True
) -> DaySamples:
    """Decode dates and build the bar and volume lookups keyed by canonical date.

    Rows are (date, open, high, low, close[, volume]) or, in the legacy form,
    (date, volume). Rows whose date cannot be decoded are dropped and counted.
    A bar is kept only when all four prices are present; a date is known once
    it has a bar or a volume. Header rows must already have been removed.
    """
    samples = DaySamples()

    for row in rows:
        if len(row) < 2:
            samples.dropped_rows += 1
            LOGGER.debug("Dropping row with too few fields: %r", row)
            continue
        try:
            date = parse_date(row[0])
        except InvalidDate as exc:
            samples.dropped_rows += 1
            LOGGER.debug("Dropping row: %s", exc)
            continue

        if len(row) == 2 and legacy_two_field_volume:
            prices: List[Any] = []
            volume = to_number(row[1])
        else:
            prices = list(row[1:5])
            volume = to_number(row[5]) if len(row) > 5 else None

        bar = PriceBar.from_values(prices) if len(prices) == 4 else None
        if bar is None and any(to_number(value) is not None for value in prices):
            samples.incomplete_bars += 1
            LOGGER.debug("Incomplete prices for %s treated as absent: %r", date.key, prices)

        if bar is not None:
            samples.bars[date.key] = bar
        if volume is not None:
            samples.volumes[date.key] = volume
        if bar is not None or volume is not None:
            samples._extend_range(date)

    if samples.dropped_rows:
        LOGGER.warning("Dropped %d row(s) without a usable date.", samples.dropped_rows)
    return samples


def load_csv_rows(path: str) -> List[List[Any]]:
    """Read raw rows from a CSV file; blank cells become ``None``."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"CSV file not found: {path}")
    df = pd.read_csv(
        path,
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    rows: List[List[Any]] = []
    for values in df.itertuples(index=False, name=None):
        rows.append(
            [value if isinstance(value, str) and value.strip() else None for value in values]
        )
    LOGGER.debug("Read %d raw row(s) from %s", len(rows), path)
    return rows


def rows_from_frame(df: pd.DataFrame) -> List[List[Any]]:
    """Convert an OHLC(V) DataFrame into raw rows.

    Dates come from a ``Date`` column when present, otherwise from a
    ``DatetimeIndex``. ``Volume`` is optional.
    """

    missing_cols = [col for col in PRICE_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Dataframe missing required columns: {missing_cols}")

    if "Date" in df.columns:
        dates = list(df["Date"])
    elif isinstance(df.index, pd.DatetimeIndex):
        dates = list(df.index)
    else:
        raise TypeError("Expected a 'Date' column or a DatetimeIndex.")

    columns = [col for col in REQUIRED_COLUMNS if col in df.columns]
    values = df[columns].astype(float).to_numpy()
    return [[date, *row.tolist()] for date, row in zip(dates, values)]
