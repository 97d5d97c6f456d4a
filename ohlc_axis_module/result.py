"""Assembly of the ordered, labelled axis series consumed by chart renderers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import PRICE_COLUMNS
from .data import PriceBar
from .dates import CalendarDate, parse_date


@dataclass(frozen=True)
class AxisPoint:
    """One kept position on the axis; placeholders carry no bar or volume."""

    date: CalendarDate
    label: str
    index: int
    has_data: bool
    bar: Optional[PriceBar] = None
    volume: Optional[float] = None

    @property
    def key(self) -> str:
        return self.date.key


@dataclass(frozen=True)
class ResultIndex:
    """Ordered axis points plus the lookups a chart renderer needs.

    ``dates`` and ``labels`` are aligned with ``points``. ``index`` maps every
    kept date key to its position, ``bars`` and ``volumes`` only hold the keys
    that carry a value. ``label_max`` is the length of the longest label.
    """

    points: Tuple[AxisPoint, ...] = ()
    dates: Tuple[str, ...] = ()
    index: Dict[str, int] = field(default_factory=dict)
    bars: Dict[str, PriceBar] = field(default_factory=dict)
    volumes: Dict[str, float] = field(default_factory=dict)
    labels: Tuple[str, ...] = ()
    label_max: int = 0
    dropped_rows: int = 0
    incomplete_bars: int = 0

    @classmethod
    def from_points(
        cls,
        points: Sequence[AxisPoint],
        dropped_rows: int = 0,
        incomplete_bars: int = 0,
    ) -> "ResultIndex":
        points = tuple(points)
        labels = tuple(point.label for point in points)
        return cls(
            points=points,
            dates=tuple(point.key for point in points),
            index={point.key: position for position, point in enumerate(points)},
            bars={point.key: point.bar for point in points if point.bar is not None},
            volumes={
                point.key: point.volume for point in points if point.volume is not None
            },
            labels=labels,
            label_max=max((len(label) for label in labels), default=0),
            dropped_rows=dropped_rows,
            incomplete_bars=incomplete_bars,
        )

    @classmethod
    def empty(cls, dropped_rows: int = 0, incomplete_bars: int = 0) -> "ResultIndex":
        return cls(dropped_rows=dropped_rows, incomplete_bars=incomplete_bars)

    def __len__(self) -> int:
        return len(self.points)

    def point(self, key: str) -> AxisPoint:
        return self.points[self.index[key]]

    @property
    def closes(self) -> List[Optional[float]]:
        """Closing price per axis point, ``None`` where there is no bar."""
        return [point.bar.close if point.bar is not None else None for point in self.points]

    @property
    def volume_series(self) -> List[Optional[float]]:
        return [point.volume for point in self.points]

    def known_date(self, requested: Any) -> Optional[str]:
        """Return the first key with data on or after ``requested``, if any."""

        target = parse_date(requested).key
        for point in self.points:
            if point.has_data and point.key >= target:
                return point.key
        return None

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a DataFrame indexed by date."""

        index = pd.DatetimeIndex(pd.to_datetime(list(self.dates)), name="Date")
        prices = np.full((len(self.points), len(PRICE_COLUMNS)), np.nan)
        for position, point in enumerate(self.points):
            if point.bar is not None:
                prices[position] = point.bar.as_tuple()

        df = pd.DataFrame(prices, index=index, columns=PRICE_COLUMNS)
        df.insert(0, "Label", list(self.labels))
        df["Volume"] = [
            np.nan if point.volume is None else point.volume for point in self.points
        ]
        df["HasData"] = [point.has_data for point in self.points]
        return df
