"""Configuration objects and shared constants for OHLC axis preparation."""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Final, List, Optional, Sequence, Tuple

PRICE_COLUMNS: Final[List[str]] = ["Open", "High", "Low", "Close"]
REQUIRED_COLUMNS: Final[List[str]] = PRICE_COLUMNS + ["Volume"]

# Index 0 is a filler so that Monday == 1 and January == 1.
DEFAULT_WEEKDAY_NAMES: Final[Tuple[str, ...]] = (
    "-", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun",
)
DEFAULT_MONTH_NAMES: Final[Tuple[str, ...]] = (
    "-", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class Granularity(str, Enum):
    """Axis density policy deciding which calendar days become axis points."""

    EVERY_KNOWN_DATE = "days"
    ALL_CALENDAR_DAYS = "alldays"
    WEEKDAYS = "weekdays"
    WEEKS = "weeks"
    MONTHS = "months"

    @classmethod
    def parse(cls, value: Any) -> "Granularity":
        """Accept an enum member, its value, or the legacy ``data`` alias."""

        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text == "data":
            return cls.EVERY_KNOWN_DATE
        try:
            return cls(text)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown granularity {value!r}; expected one of: {choices}"
            ) from None


# (weekday, day, month, year)
LABEL_VISIBILITY: Final[Dict[Granularity, Tuple[bool, bool, bool, bool]]] = {
    Granularity.EVERY_KNOWN_DATE: (True, True, True, False),
    Granularity.ALL_CALENDAR_DAYS: (True, True, True, False),
    Granularity.WEEKDAYS: (True, True, True, False),
    Granularity.WEEKS: (False, True, True, False),
    Granularity.MONTHS: (False, False, True, True),
}


@dataclass(frozen=True)
class AxisConfig:
    """Container for bucketing and labelling configuration.

    ``show_*`` fields left as ``None`` fall back to the granularity defaults in
    :data:`LABEL_VISIBILITY`. ``legacy_two_field_volume`` reads the second
    field of a two-field row as volume; ``average_monthly_volume`` enables
    volume averaging for monthly buckets, which the legacy layout omits.
    """

    granularity: Granularity = Granularity.EVERY_KNOWN_DATE
    changes_only: bool = True
    show_weekday: Optional[bool] = None
    show_day: Optional[bool] = None
    show_month: Optional[bool] = None
    show_year: Optional[bool] = None
    weekday_names: Tuple[str, ...] = DEFAULT_WEEKDAY_NAMES
    month_names: Tuple[str, ...] = DEFAULT_MONTH_NAMES
    legacy_two_field_volume: bool = True
    average_monthly_volume: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "granularity", Granularity.parse(self.granularity))
        object.__setattr__(
            self, "weekday_names", _validate_names(self.weekday_names, 8, "weekday_names")
        )
        object.__setattr__(
            self, "month_names", _validate_names(self.month_names, 13, "month_names")
        )

    def label_visibility(self) -> Tuple[bool, bool, bool, bool]:
        """Return the effective (weekday, day, month, year) visibility flags."""

        defaults = LABEL_VISIBILITY[self.granularity]
        overrides = (self.show_weekday, self.show_day, self.show_month, self.show_year)
        return tuple(
            default if override is None else bool(override)
            for default, override in zip(defaults, overrides)
        )


def _validate_names(names: Sequence[str], expected: int, option: str) -> Tuple[str, ...]:
    if isinstance(names, str):
        raise ValueError(f"{option} must be a sequence of strings, not a single string.")
    names = tuple(str(name) for name in names)
    if len(names) != expected:
        raise ValueError(
            f"{option} must contain {expected} entries (index 0 unused), got {len(names)}."
        )
    return names


DEFAULT_CONFIG: Final[Dict[str, Any]] = {
    f.name: f.default for f in fields(AxisConfig)
}


def build_axis_config(config: Optional[Dict[str, Any]] = None) -> AxisConfig:
    """Merge ``config`` over :data:`DEFAULT_CONFIG` and build an :class:`AxisConfig`.

    Raises:
        ValueError: If an unknown option is supplied or a value is invalid.
    """
    config = config or {}
    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown axis options: {unknown}")
    full_config = {**DEFAULT_CONFIG, **config}
    return AxisConfig(**full_config)
