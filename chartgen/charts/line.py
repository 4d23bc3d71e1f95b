from __future__ import annotations

import logging

import numpy as np

from chartgen.errors import EmptyInputError, MissingAxisConfigError
from chartgen.formatting import escape_xml, format_date_utc, format_number, format_svg_number
from chartgen.layout import normalize_dimensions, plan_legend, reserve_top
from chartgen.paths import line_path
from chartgen.scales import DEFAULT_NUMERIC_TICK_COUNT, compute_y_domain, create_linear_scale, create_time_scale, linear_ticks
from chartgen.schema import ChartResponse, LineChartRequest
from chartgen.series import NormalizedSeries, normalize_series
from chartgen.svg import LegendEntry, TickMark, axes_group, grid_group, legend_group, svg_document
from chartgen.theme import DEFAULT_THEME, ChartTheme
from chartgen.time_ticks import default_tick_format, time_ticks

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "Line chart"
DEFAULT_DESCRIPTION = "SVG line chart"
LEGEND_SWATCH_H_PX = 6


def render_line_chart(request: LineChartRequest, *, theme: ChartTheme = DEFAULT_THEME) -> ChartResponse:
    if request is None or not request.series:
        raise EmptyInputError("A non-empty series array is required.")
    y_axis = request.y
    if y_axis is None:
        raise MissingAxisConfigError("y axis options are required for line charts")

    series = normalize_series(request.series)
    legend = plan_legend(len(series), request.legend, theme)
    layout = reserve_top(normalize_dimensions(request.dimensions), legend.reserved)

    all_times = np.concatenate([s.t for s in series])
    all_values = np.concatenate([s.v for s in series])
    x_min = int(np.min(all_times))
    x_max = int(np.max(all_times))
    y_domain = compute_y_domain(all_values, y_axis)

    x_scale = create_time_scale((x_min, x_max), (layout.plot_left, layout.plot_right))
    y_scale = create_linear_scale(y_domain, (layout.plot_bottom, layout.plot_top))

    x_ticks = time_ticks(x_min, x_max, request.x, layout.plot_width)
    y_count = y_axis.tick_count if y_axis.tick_count is not None else DEFAULT_NUMERIC_TICK_COUNT
    y_ticks = linear_ticks(y_domain, y_count)
    tick_format = request.x.format if request.x.format is not None else default_tick_format(x_min, x_max)

    grid = grid_group(
        layout,
        [x_scale(t) for t in x_ticks],
        [y_scale(t) for t in y_ticks],
        request.grid,
        theme,
    )
    axes = axes_group(
        layout,
        x_axis=request.x,
        y_axis=y_axis,
        x_ticks=[TickMark(position=x_scale(t), label=format_date_utc(t, tick_format)) for t in x_ticks],
        y_ticks=[TickMark(position=y_scale(t), label=format_number(t, y_axis.format)) for t in y_ticks],
        theme=theme,
    )
    paths = "".join(_series_path(s, x_scale, y_scale, theme) for s in series)
    legend_svg = legend_group(
        [LegendEntry(label=s.label, color=s.color) for s in series],
        legend,
        swatch_height=LEGEND_SWATCH_H_PX,
        theme=theme,
    )

    svg = svg_document(
        width=layout.width,
        height=layout.height,
        title=request.title if request.title is not None else DEFAULT_TITLE,
        description=request.description if request.description is not None else DEFAULT_DESCRIPTION,
        background=layout.background if layout.background is not None else theme.background,
        parts=(grid, axes, f'<g data-series="true">{paths}</g>', legend_svg),
    )
    LOGGER.debug("rendered line chart: %s series, %sx%s", len(series), layout.width, layout.height)
    return ChartResponse(svg=svg, width=layout.width, height=layout.height)


def _series_path(s: NormalizedSeries, x_scale, y_scale, theme: ChartTheme) -> str:
    d = line_path(x_scale(s.t.astype(np.float64)), y_scale(s.v))
    stroke_width = getattr(s.source, "stroke_width", None)
    if stroke_width is None:
        stroke_width = theme.line_stroke_width
    return (
        f'<path d="{d}" fill="none" stroke="{escape_xml(s.color)}" stroke-width="{format_svg_number(stroke_width)}" '
        'stroke-linejoin="round" stroke-linecap="round"></path>'
    )
