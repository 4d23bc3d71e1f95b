from __future__ import annotations

from typing import Any, Mapping

from chartgen.charts import render_line_chart, render_stacked_area_chart
from chartgen.errors import UnsupportedChartTypeError
from chartgen.schema import (
    ChartRequest,
    ChartResponse,
    LineChartRequest,
    StackedAreaChartRequest,
    line_request_from_dict,
    stacked_area_request_from_dict,
)
from chartgen.theme import DEFAULT_THEME, ChartTheme

CHART_TYPES: tuple[str, ...] = ("line", "stacked-area")


def render(
    chart_type: str,
    request: ChartRequest | Mapping[str, Any],
    *,
    theme: ChartTheme = DEFAULT_THEME,
) -> ChartResponse:
    """Render one chart request to SVG.

    ``request`` may be a request dataclass or a JSON-shaped mapping using the
    wire keys (``tickCount``, ``fontSize``, ...). Input problems surface as
    ``ChartInputError`` subclasses; nothing is retried or partially rendered.
    """

    if chart_type == "line":
        return render_line_chart(_as_line_request(request), theme=theme)
    if chart_type == "stacked-area":
        return render_stacked_area_chart(_as_area_request(request), theme=theme)
    raise UnsupportedChartTypeError(chart_type)


def _as_line_request(request: ChartRequest | Mapping[str, Any]) -> LineChartRequest:
    if isinstance(request, LineChartRequest):
        return request
    if not isinstance(request, Mapping):
        raise TypeError(f"Expected LineChartRequest or mapping, got {type(request)!r}")
    return line_request_from_dict(request)


def _as_area_request(request: ChartRequest | Mapping[str, Any]) -> StackedAreaChartRequest:
    if isinstance(request, StackedAreaChartRequest):
        return request
    if not isinstance(request, Mapping):
        raise TypeError(f"Expected StackedAreaChartRequest or mapping, got {type(request)!r}")
    return stacked_area_request_from_dict(request)
