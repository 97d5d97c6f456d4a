"""Compact axis labels built from weekday, day, month and year fields."""
from __future__ import annotations

from typing import NamedTuple, Optional, Tuple

from .config import AxisConfig
from .dates import CalendarDate


class LabelFields(NamedTuple):
    """Field values of the last emitted label, used for change detection."""

    weekday: int
    day: int
    month: int
    year: int

    @classmethod
    def from_date(cls, date: CalendarDate) -> "LabelFields":
        return cls(date.day_of_week, date.day, date.month, date.year)


class LabelBuilder:
    """Derive labels for axis points, eliding unchanged fields when configured."""

    def __init__(self, config: AxisConfig):
        self.visibility = config.label_visibility()
        self.changes_only = config.changes_only
        self.weekday_names = config.weekday_names
        self.month_names = config.month_names

    def build(
        self, date: CalendarDate, previous: Optional[LabelFields] = None
    ) -> Tuple[str, LabelFields]:
        """Return the label for ``date`` and the fields to pass to the next call."""

        current = LabelFields.from_date(date)
        texts = (
            self.weekday_names[current.weekday],
            str(current.day),
            self.month_names[current.month],
            str(current.year),
        )

        parts = []
        for position, (visible, text) in enumerate(zip(self.visibility, texts)):
            if not visible:
                continue
            if self.changes_only and previous is not None and previous[position] == current[position]:
                continue
            parts.append(text)

        label = " ".join(parts).rstrip()
        return label, current
