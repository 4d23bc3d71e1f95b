from chartgen.api import CHART_TYPES, render
from chartgen.charts import render_line_chart, render_stacked_area_chart
from chartgen.errors import (
    ChartInputError,
    EmptyInputError,
    InvalidDateError,
    InvalidDimensionsError,
    MissingAxisConfigError,
    NoValidPointsError,
    UnsupportedChartTypeError,
)
from chartgen.schema import ChartResponse, LineChartRequest, StackedAreaChartRequest

__all__ = [
    "CHART_TYPES",
    "ChartInputError",
    "ChartResponse",
    "EmptyInputError",
    "InvalidDateError",
    "InvalidDimensionsError",
    "LineChartRequest",
    "MissingAxisConfigError",
    "NoValidPointsError",
    "StackedAreaChartRequest",
    "UnsupportedChartTypeError",
    "render",
    "render_line_chart",
    "render_stacked_area_chart",
]
