"""Granularity strategies and the day-by-day bucketing walk.

Every calendar day between the first and last known date is visited once.
Each granularity is a strategy deciding which days are kept and how kept days
are grouped into buckets; a flushed bucket becomes one axis point. Daily
granularities use one-day buckets, weekly and monthly ones aggregate the
weekdays of a bucket into a mean bar.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

import numpy as np

from .config import AxisConfig, Granularity, build_axis_config
from .data import DaySamples, PriceBar, collect_samples, strip_header
from .dates import CalendarDate, iter_calendar_days
from .labels import LabelBuilder, LabelFields
from .result import AxisPoint, ResultIndex

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BucketOutcome:
    """A flushed bucket: the date it is keyed under and its (aggregated) values."""

    date: CalendarDate
    has_data: bool
    bar: Optional[PriceBar] = None
    volume: Optional[float] = None


class GranularityStrategy(Protocol):
    """Protocol for the per-granularity inclusion and aggregation rules."""

    def keeps_day(self, day: CalendarDate, samples: DaySamples) -> bool:
        """Whether ``day`` takes part in the walk at all."""
        ...

    def start_bucket(self, day: CalendarDate) -> bool:
        """Whether ``day`` opens a new bucket, closing the current one."""
        ...

    def add_day(self, day: CalendarDate, samples: DaySamples) -> None:
        """Add a kept day to the current bucket."""
        ...

    def flush_bucket(self) -> Optional[BucketOutcome]:
        """Close the current bucket, returning its axis point if it has one."""
        ...


class DailyStrategy:
    """One-day buckets; days without data become placeholders."""

    def __init__(self, config: AxisConfig):
        self.config = config
        self._pending: Optional[BucketOutcome] = None

    def keeps_day(self, day: CalendarDate, samples: DaySamples) -> bool:
        return True

    def start_bucket(self, day: CalendarDate) -> bool:
        return True

    def add_day(self, day: CalendarDate, samples: DaySamples) -> None:
        self._pending = BucketOutcome(
            date=day,
            has_data=samples.has_data(day.key),
            bar=samples.bar(day.key),
            volume=samples.volume(day.key),
        )

    def flush_bucket(self) -> Optional[BucketOutcome]:
        outcome, self._pending = self._pending, None
        return outcome


class EveryKnownDateStrategy(DailyStrategy):
    """Keep only the days present in the data."""

    def keeps_day(self, day: CalendarDate, samples: DaySamples) -> bool:
        return samples.has_data(day.key)


class AllCalendarDaysStrategy(DailyStrategy):
    """Keep every calendar day."""


class WeekdaysStrategy(DailyStrategy):
    """Keep Monday to Friday; weekends are dropped entirely."""

    def keeps_day(self, day: CalendarDate, samples: DaySamples) -> bool:
        return day.is_weekday


class BucketAccumulator:
    """Running sums for one week or month bucket."""

    def __init__(self) -> None:
        self.price_sum = np.zeros(4)
        self.price_count = 0
        self.volume_sum = 0.0
        self.volume_count = 0
        self.last_known: Optional[CalendarDate] = None
        self.last_seen: Optional[CalendarDate] = None

    def add(
        self, day: CalendarDate, bar: Optional[PriceBar], volume: Optional[float]
    ) -> None:
        self.last_seen = day
        if bar is not None:
            self.price_sum += np.asarray(bar.as_tuple(), dtype=float)
            self.price_count += 1
        if volume is not None:
            self.volume_sum += volume
            self.volume_count += 1
        if bar is not None or volume is not None:
            self.last_known = day

    def mean_bar(self) -> Optional[PriceBar]:
        if not self.price_count:
            return None
        return PriceBar(*(float(value) for value in self.price_sum / self.price_count))

    def mean_volume(self) -> Optional[float]:
        if not self.volume_count:
            return None
        return self.volume_sum / self.volume_count


class PeriodStrategy:
    """Aggregate weekdays into buckets closed when the period position drops.

    Subclasses supply the position of a day within its period; a bucket ends
    when a weekday's position is lower than the previous weekday's. Weekend
    days never enter a bucket.
    """

    average_volume = True

    def __init__(self, config: AxisConfig):
        self.config = config
        self._bucket: Optional[BucketAccumulator] = None
        self._last_position = 0

    def position(self, day: CalendarDate) -> int:
        raise NotImplementedError

    def keeps_day(self, day: CalendarDate, samples: DaySamples) -> bool:
        return day.is_weekday

    def start_bucket(self, day: CalendarDate) -> bool:
        position = self.position(day)
        boundary = self._bucket is None or position < self._last_position
        self._last_position = position
        return boundary

    def add_day(self, day: CalendarDate, samples: DaySamples) -> None:
        if self._bucket is None:
            self._bucket = BucketAccumulator()
        self._bucket.add(day, samples.bar(day.key), samples.volume(day.key))

    def flush_bucket(self) -> Optional[BucketOutcome]:
        bucket, self._bucket = self._bucket, None
        if bucket is None or bucket.last_seen is None:
            return None
        if bucket.last_known is None:
            return BucketOutcome(date=bucket.last_seen, has_data=False)
        return BucketOutcome(
            date=bucket.last_known,
            has_data=True,
            bar=bucket.mean_bar(),
            volume=bucket.mean_volume() if self.average_volume else None,
        )


class WeeksStrategy(PeriodStrategy):
    """One axis point per week, keyed at the week's last known weekday."""

    def position(self, day: CalendarDate) -> int:
        return day.day_of_week


class MonthsStrategy(PeriodStrategy):
    """One axis point per month; volume is only averaged when enabled."""

    def __init__(self, config: AxisConfig):
        super().__init__(config)
        self.average_volume = config.average_monthly_volume

    def position(self, day: CalendarDate) -> int:
        return day.day


STRATEGIES = {
    Granularity.EVERY_KNOWN_DATE: EveryKnownDateStrategy,
    Granularity.ALL_CALENDAR_DAYS: AllCalendarDaysStrategy,
    Granularity.WEEKDAYS: WeekdaysStrategy,
    Granularity.WEEKS: WeeksStrategy,
    Granularity.MONTHS: MonthsStrategy,
}


def create_strategy(config: AxisConfig) -> GranularityStrategy:
    """Factory returning a fresh strategy for the configured granularity."""

    return STRATEGIES[config.granularity](config)


class Bucketizer:
    """Turn raw rows into a labelled :class:`ResultIndex` in one pass."""

    def __init__(self, config: Optional[AxisConfig] = None):
        self.config = config or AxisConfig()

    def run(self, rows: Sequence[Sequence[Any]]) -> ResultIndex:
        samples = collect_samples(
            strip_header(rows),
            legacy_two_field_volume=self.config.legacy_two_field_volume,
        )
        if samples.empty:
            LOGGER.info("No usable rows; returning an empty axis.")
            return ResultIndex.empty(samples.dropped_rows, samples.incomplete_bars)

        strategy = create_strategy(self.config)
        labeller = LabelBuilder(self.config)
        points: List[AxisPoint] = []
        previous: Optional[LabelFields] = None

        def emit(outcome: Optional[BucketOutcome]) -> None:
            nonlocal previous
            if outcome is None:
                return
            label = ""
            if outcome.has_data:
                label, previous = labeller.build(outcome.date, previous)
            points.append(
                AxisPoint(
                    date=outcome.date,
                    label=label,
                    index=len(points),
                    has_data=outcome.has_data,
                    bar=outcome.bar,
                    volume=outcome.volume,
                )
            )

        for day in iter_calendar_days(samples.first, samples.last):
            if not strategy.keeps_day(day, samples):
                continue
            if strategy.start_bucket(day):
                emit(strategy.flush_bucket())
            strategy.add_day(day, samples)
        emit(strategy.flush_bucket())

        LOGGER.debug(
            "Built %d axis point(s) from %s to %s by %s",
            len(points),
            samples.first,
            samples.last,
            self.config.granularity.value,
        )
        return ResultIndex.from_points(
            points,
            dropped_rows=samples.dropped_rows,
            incomplete_bars=samples.incomplete_bars,
        )


def bucketize(
    rows: Sequence[Sequence[Any]],
    config: Optional[AxisConfig] = None,
    **options: Any,
) -> ResultIndex:
    """Bucket and label ``rows``.

    Either pass a ready :class:`AxisConfig` or keyword options that are merged
    over the defaults, e.g. ``bucketize(rows, granularity="weeks")``.
    """
    if config is not None and options:
        raise ValueError("Pass either an AxisConfig or keyword options, not both.")
    if config is None:
        config = build_axis_config(options)
    return Bucketizer(config).run(rows)
