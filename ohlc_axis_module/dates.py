"""Date decoding helpers turning heterogeneous raw date fields into calendar dates."""
from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import Any, Generator, Optional

import pandas as pd
from dateutil import parser as date_parser

ISO_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})(?:$|[T\s])")
# A leading four-digit year, or a compact YYYYMMDD string.
YEAR_FIRST_RE = re.compile(r"^\s*\d{4}(?:\D|\d{4}\s*$)")

# Two distinct fill-in defaults; a decode is complete only if both agree.
_DEFAULT_A = dt.datetime(1904, 1, 1)
_DEFAULT_B = dt.datetime(1905, 2, 2)


class InvalidDate(ValueError):
    """Raised when no decoder can turn a raw field into a calendar date."""


@dataclass(frozen=True, order=True)
class CalendarDate:
    """A (year, month, day) triple with weekday and canonical key helpers."""

    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, value: dt.date) -> "CalendarDate":
        return cls(value.year, value.month, value.day)

    def to_date(self) -> dt.date:
        return dt.date(self.year, self.month, self.day)

    @property
    def day_of_week(self) -> int:
        """ISO day of week, 1=Monday .. 7=Sunday."""
        return self.to_date().isoweekday()

    @property
    def is_weekday(self) -> bool:
        return self.day_of_week <= 5

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.key


def _decode_iso(raw: str) -> Optional[CalendarDate]:
    match = ISO_DATE_RE.match(raw)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        dt.date(year, month, day)
    except ValueError:
        return None
    return CalendarDate(year, month, day)


def _decode_dateutil(raw: str, dayfirst: bool) -> Optional[CalendarDate]:
    """Decode with dateutil, rejecting strings that leave any field to defaults.

    Input that starts with a four-digit year is always read year, month, day,
    whatever ``dayfirst`` says.
    """

    yearfirst = bool(YEAR_FIRST_RE.match(raw))
    if yearfirst:
        dayfirst = False
    try:
        first = date_parser.parse(
            raw, dayfirst=dayfirst, yearfirst=yearfirst, default=_DEFAULT_A
        )
        second = date_parser.parse(
            raw, dayfirst=dayfirst, yearfirst=yearfirst, default=_DEFAULT_B
        )
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return CalendarDate.from_date(first)


def decode_date_eu(raw: str) -> Optional[CalendarDate]:
    """Day/month/year decoding, e.g. ``01/08/2002`` or ``1 Aug 2002``."""
    return _decode_dateutil(raw, dayfirst=True)


def decode_date_us(raw: str) -> Optional[CalendarDate]:
    """Month/day/year decoding, e.g. ``08/01/2002`` or ``Mar-01-99``."""
    return _decode_dateutil(raw, dayfirst=False)


def parse_date(raw: Any) -> CalendarDate:
    """Parse one raw date field into a :class:`CalendarDate`.

    Strings are tried against the ISO, European and US decoders in that order.
    ``datetime.date`` values (including ``datetime`` and ``pandas.Timestamp``)
    convert directly.

    Raises:
        InvalidDate: If the value is missing or every decoder fails.
    """
    if raw is None or (isinstance(raw, float) and raw != raw):
        raise InvalidDate("Missing date value.")
    if raw is pd.NaT:
        raise InvalidDate("Missing date value.")
    if isinstance(raw, dt.date):
        return CalendarDate.from_date(raw)

    text = str(raw).strip()
    if not text:
        raise InvalidDate("Empty date string.")

    for decoder in (_decode_iso, decode_date_eu, decode_date_us):
        decoded = decoder(text)
        if decoded is not None:
            return decoded
    raise InvalidDate(f"Unrecognised date: {raw!r}")


def canonical_key(raw: Any) -> str:
    """Return the zero-padded ``YYYY-MM-DD`` key for any parseable date."""

    return parse_date(raw).key


def iter_calendar_days(
    first: CalendarDate, last: CalendarDate
) -> Generator[CalendarDate, None, None]:
    """Yield every calendar day from ``first`` to ``last`` inclusive."""

    if last < first:
        return
    for stamp in pd.date_range(first.to_date(), last.to_date(), freq="D"):
        yield CalendarDate(stamp.year, stamp.month, stamp.day)
