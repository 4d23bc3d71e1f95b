from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence, TypeVar

import numpy as np

from chartgen.schema import NumericAxisOptions

DEFAULT_NUMERIC_TICK_COUNT = 6

# Nice-number thresholds. Do not retune: tick output must stay reproducible.
E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)

ScaleInput = TypeVar("ScaleInput", float, np.ndarray)


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    @property
    def slope(self) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return (r1 - r0) / ((d1 - d0) or 1)

    def __call__(self, value: ScaleInput) -> ScaleInput:
        return self.range[0] + (value - self.domain[0]) * self.slope


def create_linear_scale(domain: Sequence[float], range_: Sequence[float]) -> LinearScale:
    d0, d1 = domain
    r0, r1 = range_
    return LinearScale(domain=(float(d0), float(d1)), range=(float(r0), float(r1)))


def create_time_scale(domain: Sequence[float], range_: Sequence[float]) -> LinearScale:
    return create_linear_scale(domain, range_)


def tick_step(start: float, stop: float, count: int) -> float:
    raw_step = abs(stop - start) / max(1, count)
    power = math.floor(math.log10(raw_step))
    error = raw_step / 10**power
    if error >= E10:
        nice = 10
    elif error >= E5:
        nice = 5
    elif error >= E2:
        nice = 2
    else:
        nice = 1
    return (nice * 10**power) * _sign(stop - start)


def nice_linear_domain(domain: Sequence[float], count: int) -> tuple[float, float]:
    start, stop = domain
    if start == stop:
        delta = abs(start or 1)
        return (start - delta, stop + delta)
    step = tick_step(start, stop, count)
    return (math.floor(start / step) * step, math.ceil(stop / step) * step)


def linear_ticks(domain: Sequence[float], count: int) -> list[float]:
    start, stop = domain
    if start == stop:
        return [start]
    step = abs(tick_step(start, stop, count))
    first = math.ceil(min(start, stop) / step)
    last = math.floor(max(start, stop) / step)
    return [i * step for i in range(first, last + 1)]


def compute_y_domain(values: Sequence[float] | np.ndarray, axis: NumericAxisOptions | None = None) -> tuple[float, float]:
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return (0.0, 1.0)
    override = axis.domain if axis is not None and axis.domain is not None else (None, None)
    low = override[0] if override[0] is not None else float(np.min(arr))
    high = override[1] if override[1] is not None else float(np.max(arr))
    if low == high:
        delta = abs(low or 1)
        return (low - delta, high + delta)
    nice = axis.nice if axis is not None and axis.nice is not None else True
    if not nice:
        return (low, high)
    count = axis.tick_count if axis is not None and axis.tick_count is not None else DEFAULT_NUMERIC_TICK_COUNT
    return nice_linear_domain((low, high), count)


def _sign(value: float) -> int:
    if value < 0:
        return -1
    return 1
