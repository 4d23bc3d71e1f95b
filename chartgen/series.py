from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import datetime as dt
from decimal import Decimal
import logging
import math
import re
from typing import Any, Union

import numpy as np

from chartgen.errors import EmptyInputError, InvalidDateError, NoValidPointsError
from chartgen.formatting import epoch_ms, is_representable_ms
from chartgen.schema import AreaSeries, LineSeries

LOGGER = logging.getLogger(__name__)

DEFAULT_COLORS: tuple[str, ...] = (
    "#2563eb",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#14b8a6",
    "#e11d48",
    "#0ea5e9",
)

RawSeries = Union[LineSeries, AreaSeries]

_YEAR_MONTH = re.compile(r"^(\d{4}|[+-]\d{6})(?:-(\d{2}))?$")
_EXPANDED_YEAR_PREFIX = re.compile(r"^([+-]\d{6})(?=-)")
_PREFIXED_INT = re.compile(r"^0[xX][0-9a-fA-F]+$|^0[oO][0-7]+$|^0[bB][01]+$")


@dataclass(frozen=True)
class NormalizedSeries:
    source: RawSeries
    index: int
    color: str
    t: np.ndarray
    v: np.ndarray

    @property
    def id(self) -> str:
        return self.source.id

    @property
    def label(self) -> str:
        return self.source.name if self.source.name is not None else self.source.id

    def __len__(self) -> int:
        return int(self.t.size)


def default_color(index: int) -> str:
    return DEFAULT_COLORS[index % len(DEFAULT_COLORS)]


def parse_date(value: Any) -> int:
    """Resolve a point's time field to integer epoch milliseconds (UTC).

    Instants outside the years 1 to 9999 are rejected, since every calendar
    operation downstream works on ``datetime`` values.
    """

    ms = _resolve_time(value)
    if not is_representable_ms(ms):
        raise InvalidDateError(value)
    return ms


def _resolve_time(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidDateError(value)
    if isinstance(value, dt.datetime):
        return epoch_ms(value)
    if isinstance(value, dt.date):
        return epoch_ms(dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc))
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            raise InvalidDateError(value)
        return int(value.astype("datetime64[ms]").astype(np.int64))
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
        if not math.isfinite(number):
            raise InvalidDateError(value)
        return int(value) if isinstance(value, (int, np.integer)) else int(number)
    if isinstance(value, str):
        return _parse_iso(value)
    raise InvalidDateError(value)


def normalize_series(series: Sequence[RawSeries] | None) -> list[NormalizedSeries]:
    if series is None or isinstance(series, (str, bytes)) or not isinstance(series, Sequence) or len(series) == 0:
        raise EmptyInputError("A non-empty series array is required.")

    out: list[NormalizedSeries] = []
    for idx, raw in enumerate(series):
        times = np.asarray([parse_date(point.t) for point in raw.data], dtype=np.int64)
        values = np.asarray([_coerce_value(point.v) for point in raw.data], dtype=np.float64)
        mask = np.isfinite(values)
        times = times[mask]
        values = values[mask]
        if times.size == 0:
            LOGGER.debug("dropping series %r: no finite points", raw.id)
            continue
        order = np.argsort(times, kind="stable")
        out.append(
            NormalizedSeries(
                source=raw,
                index=idx,
                color=raw.color if raw.color is not None else default_color(idx),
                t=times[order],
                v=values[order],
            )
        )

    if not out:
        raise NoValidPointsError("No valid data points found in series.")
    return out


def _parse_iso(text: str) -> int:
    raw = text.strip()
    partial = _YEAR_MONTH.match(raw)
    if partial is not None:
        return _year_month_ms(text, _expanded_year(text, partial.group(1)), partial.group(2))
    if not raw or raw.lstrip("+-").isdigit():
        raise InvalidDateError(text)
    expanded = _EXPANDED_YEAR_PREFIX.match(raw)
    if expanded is not None:
        raw = f"{_expanded_year(text, expanded.group(1)):04d}{raw[expanded.end():]}"
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = dt.datetime.fromisoformat(raw)
    except ValueError as exc:
        raise InvalidDateError(text) from exc
    return epoch_ms(parsed)


def _expanded_year(text: str, token: str) -> int:
    year = int(token)
    if not dt.MINYEAR <= year <= dt.MAXYEAR:
        raise InvalidDateError(text)
    return year


def _year_month_ms(text: str, year: int, month: str | None) -> int:
    month_number = int(month) if month is not None else 1
    if not 1 <= month_number <= 12:
        raise InvalidDateError(text)
    return epoch_ms(dt.datetime(year, month_number, 1, tzinfo=dt.timezone.utc))


def _coerce_value(raw: Any) -> float:
    """Numeric value of a point, NaN when it has none.

    ``None`` and blank strings count as 0. Strings accept decimal and
    exponent notation plus unsigned ``0x``/``0o``/``0b`` integers;
    digit-group underscores are not numbers.
    """

    if raw is None:
        return 0.0
    if isinstance(raw, Decimal):
        return float(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return 0.0
        if "_" in text:
            return math.nan
        if _PREFIXED_INT.match(text):
            return float(int(text, 0))
        raw = text
    try:
        return float(raw)
    except (TypeError, ValueError):
        return math.nan
