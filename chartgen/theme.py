from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Any, Mapping

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_COLOR_TOKENS = ("text_color", "axis_color", "grid_color", "background")
_POSITIVE_TOKENS = (
    "axis_font_size",
    "legend_font_size",
    "line_stroke_width",
    "area_stroke_width",
    "axis_stroke_width",
)
_UNIT_TOKENS = ("grid_opacity", "area_fill_opacity")


@dataclass(frozen=True)
class ChartTheme:
    """Visual defaults applied wherever a request leaves a style unset."""

    font_family: str = "Inter, system-ui, sans-serif"
    axis_font_size: float = 11.0
    legend_font_size: float = 12.0
    text_color: str = "#111827"
    axis_color: str = "#111827"
    grid_color: str = "#e5e7eb"
    grid_opacity: float = 0.7
    background: str = "#ffffff"
    line_stroke_width: float = 2.0
    area_stroke_width: float = 1.5
    area_fill_opacity: float = 0.85
    axis_stroke_width: float = 1.2


DEFAULT_THEME = ChartTheme()


def validate_theme_overrides(overrides: Mapping[str, Any] | None = None) -> ChartTheme:
    raw: dict[str, Any] = asdict(DEFAULT_THEME)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ValueError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    if not isinstance(raw["font_family"], str) or not raw["font_family"].strip():
        raise ValueError("Token `font_family` must be a non-empty string")

    for key in _POSITIVE_TOKENS:
        if not _is_number(raw[key]) or float(raw[key]) <= 0:
            raise ValueError(f"Token `{key}` must be a positive number")

    for key in _UNIT_TOKENS:
        if not _is_number(raw[key]) or not 0.0 <= float(raw[key]) <= 1.0:
            raise ValueError(f"Token `{key}` must be a number in [0, 1]")

    return ChartTheme(
        font_family=str(raw["font_family"]),
        axis_font_size=float(raw["axis_font_size"]),
        legend_font_size=float(raw["legend_font_size"]),
        text_color=str(raw["text_color"]),
        axis_color=str(raw["axis_color"]),
        grid_color=str(raw["grid_color"]),
        grid_opacity=float(raw["grid_opacity"]),
        background=str(raw["background"]),
        line_stroke_width=float(raw["line_stroke_width"]),
        area_stroke_width=float(raw["area_stroke_width"]),
        area_fill_opacity=float(raw["area_fill_opacity"]),
        axis_stroke_width=float(raw["axis_stroke_width"]),
    )


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
