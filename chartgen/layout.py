from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import math

from chartgen.schema import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    ChartDimensions,
    ChartMargins,
    LegendOptions,
    MarginOverrides,
)
from chartgen.theme import DEFAULT_THEME, ChartTheme

LOGGER = logging.getLogger(__name__)

DEFAULT_MARGINS = ChartMargins()
MIN_SIDE_PX = 100
MIN_PLOT_PX = 1
LEGEND_PAD_PX = 10
LEGEND_BOTTOM_EXTRA_PX = 6
LEGEND_TOP_OFFSET_PX = 8


@dataclass(frozen=True)
class ChartLayout:
    width: int
    height: int
    margin: ChartMargins
    background: str | None = None

    @property
    def plot_left(self) -> float:
        return self.margin.left

    @property
    def plot_right(self) -> float:
        return self.width - self.margin.right

    @property
    def plot_top(self) -> float:
        return self.margin.top

    @property
    def plot_bottom(self) -> float:
        return self.height - self.margin.bottom

    @property
    def plot_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def plot_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom


@dataclass(frozen=True)
class LegendPlan:
    show: bool
    position: str
    font_size: float
    font_family: str
    reserved: float
    offset: float


def merge_margins(custom: MarginOverrides | None = None) -> ChartMargins:
    if custom is None:
        return DEFAULT_MARGINS
    return ChartMargins(
        top=custom.top if custom.top is not None else DEFAULT_MARGINS.top,
        right=custom.right if custom.right is not None else DEFAULT_MARGINS.right,
        bottom=custom.bottom if custom.bottom is not None else DEFAULT_MARGINS.bottom,
        left=custom.left if custom.left is not None else DEFAULT_MARGINS.left,
    )


def normalize_dimensions(dimensions: ChartDimensions) -> ChartLayout:
    width = max(MIN_SIDE_PX, _round_half_up(dimensions.width or DEFAULT_WIDTH))
    height = max(MIN_SIDE_PX, _round_half_up(dimensions.height or DEFAULT_HEIGHT))
    return ChartLayout(
        width=width,
        height=height,
        margin=merge_margins(dimensions.margin),
        background=dimensions.background,
    )


def plan_legend(series_count: int, legend: LegendOptions | None, theme: ChartTheme = DEFAULT_THEME) -> LegendPlan:
    """Decide legend visibility and how much vertical space it claims.

    The reservation must be folded into the top margin (``reserve_top``)
    before any scale is built from the layout.
    """

    options = legend if legend is not None else LegendOptions()
    show = options.show if options.show is not None else series_count > 1
    font_size = options.font_size if options.font_size is not None else theme.legend_font_size
    font_family = options.font_family if options.font_family is not None else theme.font_family
    if not show:
        return LegendPlan(
            show=False,
            position=options.position,
            font_size=font_size,
            font_family=font_family,
            reserved=0,
            offset=0,
        )
    bottom = options.position == "bottom"
    return LegendPlan(
        show=True,
        position=options.position,
        font_size=font_size,
        font_family=font_family,
        reserved=font_size + LEGEND_PAD_PX + (LEGEND_BOTTOM_EXTRA_PX if bottom else 0),
        offset=0 if bottom else LEGEND_TOP_OFFSET_PX,
    )


def reserve_top(layout: ChartLayout, reserved: float) -> ChartLayout:
    """Fold the legend reservation into the top margin.

    Margins that leave less than ``MIN_PLOT_PX`` on either axis are shrunk
    proportionally so the plot area stays positive.
    """

    margin = replace(layout.margin, top=layout.margin.top + reserved)
    left, right = _fit_margins(margin.left, margin.right, layout.width)
    top, bottom = _fit_margins(margin.top, margin.bottom, layout.height)
    fitted = ChartMargins(top=top, right=right, bottom=bottom, left=left)
    if fitted != margin:
        LOGGER.warning(
            "margins exceed a %sx%s canvas; shrinking them to keep a %spx plot area",
            layout.width,
            layout.height,
            MIN_PLOT_PX,
        )
    return replace(layout, margin=fitted)


def _fit_margins(lead: float, trail: float, extent: int) -> tuple[float, float]:
    available = extent - MIN_PLOT_PX
    total = lead + trail
    if total <= available:
        return lead, trail
    fitted_lead = lead * available / total if total > 0 else 0.0
    return fitted_lead, available - fitted_lead


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
