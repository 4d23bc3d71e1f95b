from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from chartgen.formatting import escape_xml, format_svg_number as _n
from chartgen.layout import ChartLayout, LegendPlan
from chartgen.schema import AxisOptions, GridOptions
from chartgen.theme import DEFAULT_THEME, ChartTheme

SVG_NS = "http://www.w3.org/2000/svg"
TICK_LENGTH_PX = 6
AXIS_LABEL_GAP_PX = 30
Y_AXIS_LABEL_INSET_PX = 36
LEGEND_ITEM_X0_PX = 10
LEGEND_ITEM_PITCH_PX = 140
LEGEND_SWATCH_W_PX = 16
LEGEND_TEXT_X_PX = 24


@dataclass(frozen=True)
class AxisFont:
    family: str
    size: float


@dataclass(frozen=True)
class TickMark:
    position: float
    label: str


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str
    opacity: float | None = None


def resolve_axis_font(axis: AxisOptions | None, theme: ChartTheme = DEFAULT_THEME) -> AxisFont:
    family = axis.font_family if axis is not None and axis.font_family is not None else theme.font_family
    size = axis.font_size if axis is not None and axis.font_size is not None else theme.axis_font_size
    return AxisFont(family=family, size=size)


def grid_group(
    layout: ChartLayout,
    x_positions: Iterable[float],
    y_positions: Iterable[float],
    grid: GridOptions | None,
    theme: ChartTheme = DEFAULT_THEME,
) -> str:
    grid = grid if grid is not None else GridOptions()
    color = escape_xml(grid.color if grid.color is not None else theme.grid_color)
    opacity = _n(grid.opacity if grid.opacity is not None else theme.grid_opacity)
    lines: list[str] = []
    if grid.y is not False:
        for y in y_positions:
            lines.append(
                f'<line x1="{_n(layout.plot_left)}" x2="{_n(layout.plot_right)}" y1="{_n(y)}" y2="{_n(y)}" '
                f'stroke="{color}" stroke-opacity="{opacity}" stroke-width="1"></line>'
            )
    if grid.x:
        for x in x_positions:
            lines.append(
                f'<line x1="{_n(x)}" x2="{_n(x)}" y1="{_n(layout.plot_bottom)}" y2="{_n(layout.plot_top)}" '
                f'stroke="{color}" stroke-opacity="{opacity}" stroke-width="1"></line>'
            )
    if not lines:
        return ""
    return f'<g stroke="{color}" stroke-width="1" stroke-opacity="{opacity}" fill="none">{"".join(lines)}</g>'


def axes_group(
    layout: ChartLayout,
    *,
    x_axis: AxisOptions,
    y_axis: AxisOptions | None,
    x_ticks: Sequence[TickMark],
    y_ticks: Sequence[TickMark],
    theme: ChartTheme = DEFAULT_THEME,
) -> str:
    x_font = resolve_axis_font(x_axis, theme)
    y_font = resolve_axis_font(y_axis, theme)
    x_color = escape_xml(x_axis.color or theme.axis_color)
    y_color = escape_xml((y_axis.color if y_axis is not None else None) or theme.axis_color)
    x_tick_color = escape_xml(x_axis.tick_color or theme.axis_color)
    y_tick_color = escape_xml((y_axis.tick_color if y_axis is not None else None) or theme.axis_color)
    text_color = escape_xml(theme.text_color)
    stroke_width = _n(theme.axis_stroke_width)

    x_marks = "".join(
        f'<g transform="translate({_n(t.position)},{_n(layout.plot_bottom)})">'
        f'<line y2="{TICK_LENGTH_PX}" stroke="{x_tick_color}"></line>'
        f'<text fill="{text_color}" font-family="{escape_xml(x_font.family)}" font-size="{_n(x_font.size)}" '
        f'text-anchor="middle" dy="1.2em">{escape_xml(t.label)}</text></g>'
        for t in x_ticks
    )
    y_marks = "".join(
        f'<g transform="translate({_n(layout.plot_left)},{_n(t.position)})">'
        f'<line x2="-{TICK_LENGTH_PX}" stroke="{y_tick_color}"></line>'
        f'<text fill="{text_color}" font-family="{escape_xml(y_font.family)}" font-size="{_n(y_font.size)}" '
        f'text-anchor="end" dx="-0.5em" dy="0.32em">{escape_xml(t.label)}</text></g>'
        for t in y_ticks
    )

    x_label = ""
    if x_axis.label:
        x_label = (
            f'<text x="{_n(layout.plot_width / 2 + layout.plot_left)}" y="{_n(layout.plot_bottom + AXIS_LABEL_GAP_PX)}" '
            f'text-anchor="middle" font-family="{escape_xml(x_font.family)}" font-size="{_n(x_font.size + 1)}" '
            f'fill="{text_color}">{escape_xml(x_axis.label)}</text>'
        )
    y_label = ""
    if y_axis is not None and y_axis.label:
        y_label = (
            f'<text transform="translate({_n(layout.plot_left - Y_AXIS_LABEL_INSET_PX)}, '
            f'{_n(layout.plot_height / 2 + layout.plot_top)}) rotate(-90)" text-anchor="middle" '
            f'font-family="{escape_xml(y_font.family)}" font-size="{_n(y_font.size + 1)}" '
            f'fill="{text_color}">{escape_xml(y_axis.label)}</text>'
        )

    return (
        '<g data-axes="true">'
        f'<line x1="{_n(layout.plot_left)}" y1="{_n(layout.plot_bottom)}" x2="{_n(layout.plot_right)}" '
        f'y2="{_n(layout.plot_bottom)}" stroke="{x_color}" stroke-width="{stroke_width}"></line>'
        f'<line x1="{_n(layout.plot_left)}" y1="{_n(layout.plot_bottom)}" x2="{_n(layout.plot_left)}" '
        f'y2="{_n(layout.plot_top)}" stroke="{y_color}" stroke-width="{stroke_width}"></line>'
        f'<g data-x-ticks="true">{x_marks}</g>'
        f'<g data-y-ticks="true">{y_marks}</g>'
        f"{x_label}{y_label}"
        "</g>"
    )


def legend_group(
    entries: Sequence[LegendEntry],
    plan: LegendPlan,
    *,
    swatch_height: float,
    theme: ChartTheme = DEFAULT_THEME,
) -> str:
    if not plan.show:
        return ""
    family = escape_xml(plan.font_family)
    items: list[str] = []
    for idx, entry in enumerate(entries):
        opacity = f' fill-opacity="{_n(entry.opacity)}"' if entry.opacity is not None else ""
        items.append(
            f'<g transform="translate({_n(LEGEND_ITEM_X0_PX + idx * LEGEND_ITEM_PITCH_PX)},{_n(plan.font_size)})">'
            f'<rect x="0" y="{_n(-(plan.font_size - 4))}" width="{LEGEND_SWATCH_W_PX}" height="{_n(swatch_height)}" '
            f'rx="2" fill="{escape_xml(entry.color)}"{opacity}></rect>'
            f'<text x="{LEGEND_TEXT_X_PX}" y="0" font-size="{_n(plan.font_size)}" font-family="{family}" '
            f'fill="{escape_xml(theme.text_color)}">{escape_xml(entry.label)}</text>'
            "</g>"
        )
    return f'<g data-legend="true" transform="translate(0,{_n(plan.offset)})">{"".join(items)}</g>'


def svg_document(
    *,
    width: int,
    height: int,
    title: str,
    description: str,
    background: str,
    parts: Iterable[str],
) -> str:
    safe_title = escape_xml(title)
    head = (
        f'<svg xmlns="{SVG_NS}" width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        f'role="img" aria-label="{safe_title}">'
        f"<title>{safe_title}</title>"
        f"<desc>{escape_xml(description)}</desc>"
        f'<rect width="100%" height="100%" fill="{escape_xml(background)}"></rect>'
    )
    return head + "".join(part for part in parts if part) + "</svg>"
