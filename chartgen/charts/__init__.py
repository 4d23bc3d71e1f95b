from chartgen.charts.line import render_line_chart
from chartgen.charts.stacked_area import render_stacked_area_chart

__all__ = ["render_line_chart", "render_stacked_area_chart"]
