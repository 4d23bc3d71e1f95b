from __future__ import annotations


class ChartInputError(ValueError):
    """Raised when a chart request cannot be rendered as given."""


class EmptyInputError(ChartInputError):
    pass


class InvalidDateError(ChartInputError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date value: {value!r}")
        self.value = value


class NoValidPointsError(ChartInputError):
    pass


class MissingAxisConfigError(ChartInputError):
    pass


class InvalidDimensionsError(ChartInputError):
    pass


class UnsupportedChartTypeError(ChartInputError):
    def __init__(self, chart_type: object) -> None:
        super().__init__(f"Unsupported chart type: {chart_type!r}")
        self.chart_type = chart_type
