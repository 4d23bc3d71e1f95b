from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
import logging
import math
from typing import Iterator, Mapping

from chartgen.formatting import MAX_EPOCH_MS, epoch_ms, is_same_utc_day, utc_datetime
from chartgen.schema import TimeAxisOptions

LOGGER = logging.getLogger(__name__)

UNIT_MS: Mapping[str, int] = {
    "millisecond": 1,
    "second": 1_000,
    "minute": 60_000,
    "hour": 3_600_000,
    "day": 86_400_000,
    "week": 604_800_000,
    "month": 2_629_746_000,  # average
    "year": 31_556_952_000,  # average
}

# Search order matters: equal scores keep the first candidate found.
TIME_STEPS: tuple[tuple[str, tuple[int, ...]], ...] = (
    ("year", (1, 2, 5, 10)),
    ("month", (1, 3, 6)),
    ("week", (1, 2, 4)),
    ("day", (1, 2, 3, 7)),
    ("hour", (1, 3, 6, 12)),
    ("minute", (1, 5, 15, 30)),
    ("second", (1, 5, 15, 30)),
    ("millisecond", (1, 5, 10, 50, 100, 250, 500)),
)

DEFAULT_PLOT_WIDTH = 720
PX_PER_TICK = 90
MIN_AUTO_TICKS = 3
MAX_AUTO_TICKS = 60
MAX_TICK_CANDIDATES = 10_000
SAME_DAY_FORMAT = "%H:%M:%S"
MULTI_DAY_FORMAT = "%b %d"


@dataclass(frozen=True)
class TimeInterval:
    unit: str
    step: int


@dataclass(frozen=True)
class TimeTickSet:
    ticks: tuple[int, ...]
    unit: str
    step: int

    def __iter__(self) -> Iterator[int]:
        return iter(self.ticks)

    def __len__(self) -> int:
        return len(self.ticks)


def desired_tick_count(axis: TimeAxisOptions, plot_width: float | None = None) -> int:
    if axis.tick_count is not None:
        return axis.tick_count
    width = plot_width if plot_width is not None and math.isfinite(plot_width) else DEFAULT_PLOT_WIDTH
    auto = math.floor(width / PX_PER_TICK + 0.5)
    return max(MIN_AUTO_TICKS, min(MAX_AUTO_TICKS, auto))


def choose_time_interval(start: int, stop: int, desired_count: int) -> TimeInterval:
    span = abs(stop - start)
    best = TimeInterval(unit="day", step=1)
    best_score = math.inf
    for unit, steps in TIME_STEPS:
        base = UNIT_MS[unit]
        for step in steps:
            score = abs(span / (base * step) - desired_count)
            if score < best_score:
                best_score = score
                best = TimeInterval(unit=unit, step=step)
    return best


def floor_time(ms: int, unit: str, step: int) -> int:
    """Align an instant down to the (unit, step) grid.

    Years and months snap to UTC calendar starts; every other unit uses
    fixed-length buckets of ``step * UNIT_MS[unit]`` counted from the epoch.
    """

    if unit == "year":
        moment = utc_datetime(ms)
        year = max(1, (moment.year // step) * step)
        return epoch_ms(moment.replace(year=year, month=1, day=1, hour=0, minute=0, second=0, microsecond=0))
    if unit == "month":
        moment = utc_datetime(ms)
        month = ((moment.month - 1) // step) * step + 1
        return epoch_ms(moment.replace(month=month, day=1, hour=0, minute=0, second=0, microsecond=0))
    bucket = step * UNIT_MS[unit]
    return (ms // bucket) * bucket


def add_time(ms: int, unit: str, step: int) -> int:
    if unit == "year":
        return _add_months(ms, 12 * step)
    if unit == "month":
        return _add_months(ms, step)
    return ms + step * UNIT_MS[unit]


def time_ticks(start: int, stop: int, axis: TimeAxisOptions, plot_width: float | None = None) -> TimeTickSet:
    count = desired_tick_count(axis, plot_width)
    if axis.unit == "auto":
        interval = choose_time_interval(start, stop, count)
    else:
        interval = TimeInterval(unit=axis.unit, step=1)
    LOGGER.debug("time ticks: span=%sms desired=%s unit=%s step=%s", stop - start, count, interval.unit, interval.step)

    ticks: list[int] = []
    current = floor_time(start, interval.unit, interval.step)
    generated = 0
    limit = min(stop + 1, MAX_EPOCH_MS)
    while current <= limit:
        if current >= start - 1:
            ticks.append(current)
        current = add_time(current, interval.unit, interval.step)
        generated += 1
        if generated >= MAX_TICK_CANDIDATES and current <= limit:
            LOGGER.warning(
                "time tick generation truncated after %s candidates (unit=%s, span=%sms)",
                generated,
                interval.unit,
                stop - start,
            )
            break
    if not ticks:
        ticks.append(start)
    return TimeTickSet(ticks=tuple(ticks), unit=interval.unit, step=interval.step)


def _add_months(ms: int, months: int) -> int:
    moment = utc_datetime(ms)
    index = moment.year * 12 + (moment.month - 1) + months
    year, month_index = divmod(index, 12)
    if year > dt.MAXYEAR:
        return MAX_EPOCH_MS + 1
    day = min(moment.day, _days_in_month(year, month_index + 1))
    return epoch_ms(moment.replace(year=year, month=month_index + 1, day=day))


def _days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def default_tick_format(start: int, stop: int) -> str:
    return SAME_DAY_FORMAT if is_same_utc_day(start, stop) else MULTI_DAY_FORMAT
