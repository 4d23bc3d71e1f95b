from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from chartgen.series import NormalizedSeries


@dataclass(frozen=True)
class LayerPoint:
    t: int
    y0: float
    y1: float
    value: float


@dataclass(frozen=True)
class StackedLayer:
    series: NormalizedSeries
    t: np.ndarray
    y0: np.ndarray
    y1: np.ndarray
    values: np.ndarray

    def points(self) -> list[LayerPoint]:
        return [
            LayerPoint(t=int(t), y0=float(y0), y1=float(y1), value=float(v))
            for t, y0, y1, v in zip(self.t.tolist(), self.y0.tolist(), self.y1.tolist(), self.values.tolist())
        ]


@dataclass(frozen=True)
class StackedLayers:
    layers: tuple[StackedLayer, ...]
    times: np.ndarray
    totals: np.ndarray

    @property
    def max_total(self) -> float:
        return float(np.max(self.totals)) if self.totals.size else 0.0


def union_times(series: Sequence[NormalizedSeries]) -> np.ndarray:
    if not series:
        return np.asarray([], dtype=np.int64)
    return np.unique(np.concatenate([s.t for s in series]))


def build_layers(series: Sequence[NormalizedSeries]) -> StackedLayers:
    """Stack series bottom-up in input order over the union of their timestamps.

    A series without a sample at some union timestamp contributes 0 there.
    The first series forms the base band (``y0 == 0`` everywhere).
    """

    times = union_times(series)
    totals = np.zeros(times.size, dtype=np.float64)
    layers: list[StackedLayer] = []
    for s in series:
        values = np.zeros(times.size, dtype=np.float64)
        # Duplicate timestamps: the last sample in sorted order wins.
        own_times, last_idx = np.unique(s.t[::-1], return_index=True)
        values[np.searchsorted(times, own_times)] = s.v[::-1][last_idx]
        base = totals.copy()
        totals = base + values
        layers.append(StackedLayer(series=s, t=times, y0=base, y1=totals, values=values))
    return StackedLayers(layers=tuple(layers), times=times, totals=totals)
