from __future__ import annotations

import logging

import numpy as np

from chartgen.errors import EmptyInputError
from chartgen.formatting import escape_xml, format_date_utc, format_number, format_svg_number
from chartgen.layout import normalize_dimensions, plan_legend, reserve_top
from chartgen.paths import area_path, line_path
from chartgen.scales import DEFAULT_NUMERIC_TICK_COUNT, compute_y_domain, create_linear_scale, create_time_scale, linear_ticks
from chartgen.schema import ChartResponse, StackedAreaChartRequest
from chartgen.series import normalize_series
from chartgen.stacking import StackedLayer, build_layers
from chartgen.svg import LegendEntry, TickMark, axes_group, grid_group, legend_group, svg_document
from chartgen.theme import DEFAULT_THEME, ChartTheme
from chartgen.time_ticks import default_tick_format, time_ticks

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "Stacked area chart"
DEFAULT_DESCRIPTION = "SVG stacked area chart"
LEGEND_SWATCH_H_PX = 8


def render_stacked_area_chart(
    request: StackedAreaChartRequest,
    *,
    theme: ChartTheme = DEFAULT_THEME,
) -> ChartResponse:
    if request is None or not request.series:
        raise EmptyInputError("A non-empty series array is required.")

    series = normalize_series(request.series)
    legend = plan_legend(len(series), request.legend, theme)
    layout = reserve_top(normalize_dimensions(request.dimensions), legend.reserved)

    stacked = build_layers(series)
    x_min = int(stacked.times[0])
    x_max = int(stacked.times[-1])
    y_axis = request.y
    y_domain = compute_y_domain([0.0, stacked.max_total], y_axis)

    x_scale = create_time_scale((x_min, x_max), (layout.plot_left, layout.plot_right))
    y_scale = create_linear_scale(y_domain, (layout.plot_bottom, layout.plot_top))

    x_ticks = time_ticks(x_min, x_max, request.x, layout.plot_width)
    y_count = y_axis.tick_count if y_axis is not None and y_axis.tick_count is not None else DEFAULT_NUMERIC_TICK_COUNT
    y_ticks = linear_ticks(y_domain, y_count)
    tick_format = request.x.format if request.x.format is not None else default_tick_format(x_min, x_max)
    y_format = y_axis.format if y_axis is not None else None

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
        y_ticks=[TickMark(position=y_scale(t), label=format_number(t, y_format)) for t in y_ticks],
        theme=theme,
    )
    areas = "".join(_layer_paths(layer, x_scale, y_scale, theme) for layer in stacked.layers)
    entries = [
        LegendEntry(label=s.label, color=s.color, opacity=_fill_opacity(getattr(s.source, "opacity", None), theme))
        for s in series
    ]
    legend_svg = legend_group(
        entries,
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
        parts=(grid, axes, f'<g data-areas="true">{areas}</g>', legend_svg),
    )
    LOGGER.debug(
        "rendered stacked area chart: %s layers over %s timestamps, %sx%s",
        len(stacked.layers),
        stacked.times.size,
        layout.width,
        layout.height,
    )
    return ChartResponse(svg=svg, width=layout.width, height=layout.height)


def _layer_paths(layer: StackedLayer, x_scale, y_scale, theme: ChartTheme) -> str:
    xs = x_scale(layer.t.astype(np.float64))
    top = y_scale(layer.y1)
    fill = area_path(xs, y_scale(layer.y0), top)
    outline = line_path(xs, top)
    color = escape_xml(layer.series.color)
    opacity = format_svg_number(_fill_opacity(getattr(layer.series.source, "opacity", None), theme))
    # Outline goes after the fill so it is drawn on top.
    return (
        f'<path d="{fill}" fill="{color}" fill-opacity="{opacity}" stroke="none"></path>'
        f'<path d="{outline}" fill="none" stroke="{color}" stroke-width="{format_svg_number(theme.area_stroke_width)}" '
        'stroke-linejoin="round" stroke-linecap="round"></path>'
    )


def _fill_opacity(opacity: float | None, theme: ChartTheme) -> float:
    return opacity if opacity is not None else theme.area_fill_opacity
