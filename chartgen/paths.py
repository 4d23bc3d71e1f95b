from __future__ import annotations

from typing import Sequence

import numpy as np

from chartgen.formatting import format_svg_number

Coords = Sequence[float] | np.ndarray


def line_path(xs: Coords, ys: Coords) -> str:
    x_list = np.asarray(xs, dtype=np.float64).tolist()
    y_list = np.asarray(ys, dtype=np.float64).tolist()
    if not x_list:
        return ""
    return " ".join(_commands(x_list, y_list, first="M"))


def area_path(xs: Coords, y0s: Coords, y1s: Coords) -> str:
    """Closed band between ``y0`` and ``y1``.

    The top edge runs forward in time, the bottom edge back, then ``Z``.
    """

    x_list = np.asarray(xs, dtype=np.float64).tolist()
    if not x_list:
        return ""
    upper = _commands(x_list, np.asarray(y1s, dtype=np.float64).tolist(), first="M")
    lower = _commands(x_list[::-1], np.asarray(y0s, dtype=np.float64).tolist()[::-1], first="L")
    return f"{' '.join(upper)} {' '.join(lower)} Z"


def _commands(xs: list[float], ys: list[float], *, first: str) -> list[str]:
    return [
        f"{first if i == 0 else 'L'}{format_svg_number(x)},{format_svg_number(y)}"
        for i, (x, y) in enumerate(zip(xs, ys))
    ]
