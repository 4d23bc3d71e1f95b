from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass, field
import math
from pathlib import Path
from typing import Any, Literal, Mapping, Union

from chartgen.errors import EmptyInputError, InvalidDimensionsError

TimeUnit = Literal["auto", "year", "month", "week", "day", "hour", "minute", "second", "millisecond"]
LegendPosition = Literal["top", "bottom"]
TimeLike = Union[int, float, str, dt.datetime, dt.date]

TIME_UNITS: tuple[str, ...] = ("auto", "year", "month", "week", "day", "hour", "minute", "second", "millisecond")
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 400


@dataclass(frozen=True)
class ChartMargins:
    top: float = 28
    right: float = 20
    bottom: float = 38
    left: float = 52


@dataclass(frozen=True)
class MarginOverrides:
    top: float | None = None
    right: float | None = None
    bottom: float | None = None
    left: float | None = None


@dataclass(frozen=True)
class ChartDimensions:
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    margin: MarginOverrides | None = None
    background: str | None = None


@dataclass(frozen=True)
class AxisOptions:
    label: str | None = None
    color: str | None = None
    tick_color: str | None = None
    tick_count: int | None = None
    font_family: str | None = None
    font_size: float | None = None


@dataclass(frozen=True)
class TimeAxisOptions(AxisOptions):
    unit: TimeUnit = "auto"
    format: str | None = None
    # Accepted on the wire; time ticks always start from the floored domain start.
    nice: bool | None = None

    def __post_init__(self) -> None:
        if self.unit not in TIME_UNITS:
            raise ValueError(f"Unsupported time unit: {self.unit}")


@dataclass(frozen=True)
class NumericAxisOptions(AxisOptions):
    domain: tuple[float | None, float | None] | None = None
    format: str | None = None
    nice: bool | None = None


@dataclass(frozen=True)
class GridOptions:
    x: bool | None = None
    y: bool | None = None
    color: str | None = None
    opacity: float | None = None


@dataclass(frozen=True)
class LegendOptions:
    show: bool | None = None
    position: LegendPosition = "top"
    font_size: float | None = None
    font_family: str | None = None

    def __post_init__(self) -> None:
        if self.position not in ("top", "bottom"):
            raise ValueError(f"Unsupported legend position: {self.position}")


@dataclass(frozen=True)
class TimeValue:
    t: TimeLike
    v: Any


@dataclass(frozen=True)
class LineSeries:
    id: str
    data: tuple[TimeValue, ...] = ()
    name: str | None = None
    color: str | None = None
    stroke_width: float | None = None


@dataclass(frozen=True)
class AreaSeries:
    id: str
    data: tuple[TimeValue, ...] = ()
    name: str | None = None
    color: str | None = None
    opacity: float | None = None


@dataclass(frozen=True)
class LineChartRequest:
    dimensions: ChartDimensions
    x: TimeAxisOptions
    y: NumericAxisOptions | None
    series: tuple[LineSeries, ...]
    title: str | None = None
    description: str | None = None
    grid: GridOptions = field(default_factory=GridOptions)
    legend: LegendOptions | None = None


@dataclass(frozen=True)
class StackedAreaChartRequest:
    dimensions: ChartDimensions
    x: TimeAxisOptions
    series: tuple[AreaSeries, ...]
    y: NumericAxisOptions | None = None
    title: str | None = None
    description: str | None = None
    grid: GridOptions = field(default_factory=GridOptions)
    legend: LegendOptions | None = None


ChartRequest = Union[LineChartRequest, StackedAreaChartRequest]


@dataclass(frozen=True)
class ChartResponse:
    svg: str
    width: int
    height: int

    def as_dict(self) -> dict[str, object]:
        return {"svg": self.svg, "width": self.width, "height": self.height}


def line_request_from_dict(payload: Mapping[str, Any]) -> LineChartRequest:
    raw_y = payload.get("y")
    return LineChartRequest(
        title=_coerce_optional_str(payload.get("title")),
        description=_coerce_optional_str(payload.get("description")),
        dimensions=dimensions_from_dict(payload.get("dimensions")),
        x=time_axis_from_dict(payload.get("x")),
        y=numeric_axis_from_dict(raw_y) if raw_y is not None else None,
        series=tuple(
            LineSeries(
                id=str(raw["id"]),
                name=_coerce_optional_str(raw.get("name")),
                color=_coerce_optional_str(raw.get("color")),
                stroke_width=_coerce_optional_float(_pick(raw, "strokeWidth", "stroke_width")),
                data=_points_from_list(raw.get("data")),
            )
            for raw in _series_list(payload)
        ),
        grid=grid_from_dict(payload.get("grid")),
        legend=legend_from_dict(payload.get("legend")),
    )


def stacked_area_request_from_dict(payload: Mapping[str, Any]) -> StackedAreaChartRequest:
    raw_y = payload.get("y")
    return StackedAreaChartRequest(
        title=_coerce_optional_str(payload.get("title")),
        description=_coerce_optional_str(payload.get("description")),
        dimensions=dimensions_from_dict(payload.get("dimensions")),
        x=time_axis_from_dict(payload.get("x")),
        y=numeric_axis_from_dict(raw_y) if raw_y is not None else None,
        series=tuple(
            AreaSeries(
                id=str(raw["id"]),
                name=_coerce_optional_str(raw.get("name")),
                color=_coerce_optional_str(raw.get("color")),
                opacity=_coerce_optional_float(raw.get("opacity")),
                data=_points_from_list(raw.get("data")),
            )
            for raw in _series_list(payload)
        ),
        grid=grid_from_dict(payload.get("grid")),
        legend=legend_from_dict(payload.get("legend")),
    )


def load_chart_request(path: str | Path, *, kind: str) -> ChartRequest:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise TypeError("Chart request payload must be a JSON object")
    if kind == "line":
        return line_request_from_dict(payload)
    return stacked_area_request_from_dict(payload)


def dimensions_from_dict(raw: Any) -> ChartDimensions:
    raw = raw if isinstance(raw, Mapping) else {}
    width = _coerce_dimension(raw.get("width"), DEFAULT_WIDTH)
    height = _coerce_dimension(raw.get("height"), DEFAULT_HEIGHT)
    margin = raw.get("margin")
    return ChartDimensions(
        width=width,
        height=height,
        margin=margin_from_dict(margin) if isinstance(margin, Mapping) else None,
        background=_coerce_optional_str(raw.get("background")),
    )


def margin_from_dict(raw: Mapping[str, Any]) -> MarginOverrides:
    return MarginOverrides(
        top=_coerce_optional_float(raw.get("top")),
        right=_coerce_optional_float(raw.get("right")),
        bottom=_coerce_optional_float(raw.get("bottom")),
        left=_coerce_optional_float(raw.get("left")),
    )


def time_axis_from_dict(raw: Any) -> TimeAxisOptions:
    raw = raw if isinstance(raw, Mapping) else {}
    return TimeAxisOptions(
        unit=str(raw.get("unit") or "auto"),  # type: ignore[arg-type]
        format=_coerce_optional_str(raw.get("format")),
        nice=_coerce_optional_bool(raw.get("nice")),
        **_axis_base_kwargs(raw),
    )


def numeric_axis_from_dict(raw: Any) -> NumericAxisOptions:
    raw = raw if isinstance(raw, Mapping) else {}
    domain = raw.get("domain")
    parsed_domain: tuple[float | None, float | None] | None = None
    if isinstance(domain, (list, tuple)) and len(domain) == 2:
        parsed_domain = (_coerce_optional_float(domain[0]), _coerce_optional_float(domain[1]))
    return NumericAxisOptions(
        domain=parsed_domain,
        format=_coerce_optional_str(raw.get("format")),
        nice=_coerce_optional_bool(raw.get("nice")),
        **_axis_base_kwargs(raw),
    )


def grid_from_dict(raw: Any) -> GridOptions:
    if not isinstance(raw, Mapping):
        return GridOptions()
    return GridOptions(
        x=_coerce_optional_bool(raw.get("x")),
        y=_coerce_optional_bool(raw.get("y")),
        color=_coerce_optional_str(raw.get("color")),
        opacity=_coerce_optional_float(raw.get("opacity")),
    )


def legend_from_dict(raw: Any) -> LegendOptions | None:
    if not isinstance(raw, Mapping):
        return None
    return LegendOptions(
        show=_coerce_optional_bool(raw.get("show")),
        position=str(raw.get("position") or "top"),  # type: ignore[arg-type]
        font_size=_coerce_optional_float(_pick(raw, "fontSize", "font_size")),
        font_family=_coerce_optional_str(_pick(raw, "fontFamily", "font_family")),
    )


def _axis_base_kwargs(raw: Mapping[str, Any]) -> dict[str, Any]:
    tick_count = _pick(raw, "tickCount", "tick_count")
    return {
        "label": _coerce_optional_str(raw.get("label")),
        "color": _coerce_optional_str(raw.get("color")),
        "tick_color": _coerce_optional_str(_pick(raw, "tickColor", "tick_color")),
        "tick_count": int(tick_count) if isinstance(tick_count, (int, float)) and not isinstance(tick_count, bool) else None,
        "font_family": _coerce_optional_str(_pick(raw, "fontFamily", "font_family")),
        "font_size": _coerce_optional_float(_pick(raw, "fontSize", "font_size")),
    }


def _series_list(payload: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    raw = payload.get("series")
    if not isinstance(raw, list):
        raise EmptyInputError("series is required and must be an array")
    out: list[Mapping[str, Any]] = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise TypeError("Each series must be a mapping")
        if item.get("id") is None:
            raise ValueError("Each series requires an id")
        out.append(item)
    return out


def _points_from_list(raw: Any) -> tuple[TimeValue, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(TimeValue(t=item.get("t"), v=item.get("v")) for item in raw if isinstance(item, Mapping))


def _coerce_dimension(raw: Any, default: int) -> float:
    if raw is None:
        return float(default)
    if isinstance(raw, bool):
        raise InvalidDimensionsError("dimensions.width and dimensions.height must be numbers")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidDimensionsError("dimensions.width and dimensions.height must be numbers") from exc
    if not math.isfinite(value):
        raise InvalidDimensionsError("dimensions.width and dimensions.height must be numbers")
    return value


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _coerce_optional_str(raw: object) -> str | None:
    if raw is None:
        return None
    return str(raw)


def _coerce_optional_float(raw: object) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _coerce_optional_bool(raw: object) -> bool | None:
    if raw is None:
        return None
    return bool(raw)
