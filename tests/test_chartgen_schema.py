from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest

from chartgen.errors import ChartInputError, EmptyInputError, InvalidDimensionsError
from chartgen.schema import (
    ChartResponse,
    LineChartRequest,
    MarginOverrides,
    StackedAreaChartRequest,
    TimeAxisOptions,
    line_request_from_dict,
    load_chart_request,
    stacked_area_request_from_dict,
)


def _payload() -> dict:
    return {
        "title": "Requests",
        "dimensions": {"width": 640, "height": 320, "margin": {"left": 70}},
        "x": {"unit": "day", "tickCount": 4, "fontSize": 10},
        "y": {"domain": [0, None], "format": ".1f", "nice": False, "tick_color": "#333333"},
        "series": [
            {
                "id": "api",
                "name": "API",
                "strokeWidth": 3,
                "data": [{"t": "2024-01-01T00:00:00Z", "v": 3}, {"t": 1704153600000, "v": "4.5"}],
            }
        ],
        "grid": {"x": True, "y": False},
        "legend": {"show": True, "position": "bottom", "fontSize": 14},
    }


class LineRequestTests(unittest.TestCase):
    def test_wire_keys_map_onto_dataclasses(self) -> None:
        request = line_request_from_dict(_payload())
        self.assertIsInstance(request, LineChartRequest)
        self.assertEqual(request.title, "Requests")
        self.assertEqual(request.dimensions.width, 640.0)
        self.assertEqual(request.dimensions.margin, MarginOverrides(left=70.0))
        self.assertEqual(request.x.unit, "day")
        self.assertEqual(request.x.tick_count, 4)
        self.assertEqual(request.x.font_size, 10.0)
        self.assertIsNotNone(request.y)
        self.assertEqual(request.y.domain, (0.0, None))
        self.assertEqual(request.y.format, ".1f")
        self.assertFalse(request.y.nice)
        self.assertEqual(request.y.tick_color, "#333333")
        self.assertTrue(request.grid.x)
        self.assertFalse(request.grid.y)
        self.assertEqual(request.legend.position, "bottom")
        self.assertEqual(request.legend.font_size, 14.0)

        (series,) = request.series
        self.assertEqual((series.id, series.name, series.stroke_width), ("api", "API", 3.0))
        self.assertEqual([p.v for p in series.data], [3, "4.5"])

    def test_missing_sections_fall_back_to_defaults(self) -> None:
        request = line_request_from_dict({"series": []})
        self.assertEqual((request.dimensions.width, request.dimensions.height), (800.0, 400.0))
        self.assertEqual(request.x, TimeAxisOptions())
        self.assertIsNone(request.y)
        self.assertIsNone(request.legend)
        self.assertEqual(request.series, ())

    def test_series_must_be_a_list(self) -> None:
        with self.assertRaises(EmptyInputError):
            line_request_from_dict({"series": {"id": "a"}})
        with self.assertRaises(TypeError):
            line_request_from_dict({"series": ["a"]})

    def test_series_requires_id(self) -> None:
        with self.assertRaises(ValueError):
            line_request_from_dict({"series": [{"data": []}]})

    def test_non_numeric_dimensions_are_rejected(self) -> None:
        with self.assertRaises(InvalidDimensionsError) as ctx:
            line_request_from_dict({"dimensions": {"width": "wide"}, "series": []})
        self.assertIsInstance(ctx.exception, ChartInputError)

    def test_unknown_time_unit_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            line_request_from_dict({"x": {"unit": "fortnight"}, "series": []})


class StackedAreaRequestTests(unittest.TestCase):
    def test_opacity_and_optional_y(self) -> None:
        request = stacked_area_request_from_dict(
            {"series": [{"id": "a", "opacity": 0.4, "data": [{"t": 0, "v": 1}]}]}
        )
        self.assertIsInstance(request, StackedAreaChartRequest)
        self.assertIsNone(request.y)
        self.assertEqual(request.series[0].opacity, 0.4)


class LoaderTests(unittest.TestCase):
    def test_load_chart_request_reads_json_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "line.json"
            path.write_text(json.dumps(_payload()), encoding="utf-8")
            self.assertIsInstance(load_chart_request(path, kind="line"), LineChartRequest)
            self.assertIsInstance(load_chart_request(path, kind="stacked-area"), StackedAreaChartRequest)

    def test_load_chart_request_rejects_non_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.json"
            path.write_text("[1, 2]", encoding="utf-8")
            with self.assertRaises(TypeError):
                load_chart_request(path, kind="line")


class ResponseTests(unittest.TestCase):
    def test_as_dict(self) -> None:
        self.assertEqual(
            ChartResponse(svg="<svg/>", width=10, height=20).as_dict(),
            {"svg": "<svg/>", "width": 10, "height": 20},
        )


if __name__ == "__main__":
    unittest.main()
