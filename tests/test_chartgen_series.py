from __future__ import annotations

import datetime as dt
from decimal import Decimal
import math
import unittest

import numpy as np

from chartgen.errors import EmptyInputError, InvalidDateError, NoValidPointsError
from chartgen.formatting import MAX_EPOCH_MS, epoch_ms
from chartgen.schema import AreaSeries, LineSeries, TimeValue
from chartgen.series import DEFAULT_COLORS, normalize_series, parse_date


def _series(series_id: str, *points: tuple[object, object], **kwargs: object) -> LineSeries:
    return LineSeries(id=series_id, data=tuple(TimeValue(t=t, v=v) for t, v in points), **kwargs)


class ParseDateTests(unittest.TestCase):
    def test_numeric_epoch_is_truncated_to_integer(self) -> None:
        self.assertEqual(parse_date(1_700_000_000_000), 1_700_000_000_000)
        self.assertEqual(parse_date(1.9), 1)
        self.assertEqual(parse_date(np.int64(42)), 42)

    def test_iso_strings(self) -> None:
        expected = epoch_ms(dt.datetime(2024, 1, 5, 3, 4, 5, 6000, tzinfo=dt.timezone.utc))
        self.assertEqual(parse_date("2024-01-05T03:04:05.006Z"), expected)
        self.assertEqual(parse_date("2024-01-05T04:04:05.006+01:00"), expected)
        self.assertEqual(parse_date("2024-01-05"), epoch_ms(dt.datetime(2024, 1, 5, tzinfo=dt.timezone.utc)))

    def test_year_and_year_month_strings_start_at_utc_boundaries(self) -> None:
        self.assertEqual(parse_date("2024"), epoch_ms(dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)))
        self.assertEqual(parse_date("2024-03"), epoch_ms(dt.datetime(2024, 3, 1, tzinfo=dt.timezone.utc)))
        self.assertEqual(parse_date("+002024-03"), parse_date("2024-03"))
        self.assertEqual(parse_date("+002024-03-05T00:00:00Z"), parse_date("2024-03-05"))

    def test_instants_outside_the_calendar_range_are_rejected(self) -> None:
        for bad in (3e14, -1e17, "2024-13", "0000", "-000000", "+010000"):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidDateError):
                    parse_date(bad)
        self.assertEqual(parse_date(MAX_EPOCH_MS), MAX_EPOCH_MS)

    def test_resolved_date_values(self) -> None:
        self.assertEqual(parse_date(dt.datetime(1970, 1, 1, 0, 0, 1)), 1000)
        self.assertEqual(parse_date(dt.date(1970, 1, 2)), 86_400_000)
        self.assertEqual(parse_date(np.datetime64("1970-01-01T00:00:02")), 2000)

    def test_unparsable_values_raise_invalid_date(self) -> None:
        for bad in ("not-a-date", "", "12345", math.nan, math.inf, True, None, object()):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidDateError):
                    parse_date(bad)

    def test_invalid_date_keeps_offending_value(self) -> None:
        with self.assertRaises(InvalidDateError) as ctx:
            parse_date("not-a-date")
        self.assertEqual(ctx.exception.value, "not-a-date")


class NormalizeSeriesTests(unittest.TestCase):
    def test_empty_or_missing_input_is_rejected(self) -> None:
        with self.assertRaises(EmptyInputError):
            normalize_series([])
        with self.assertRaises(EmptyInputError):
            normalize_series(None)

    def test_points_are_sorted_by_time(self) -> None:
        out = normalize_series([_series("a", (30, 3), (10, 1), (20, 2))])
        self.assertEqual(out[0].t.tolist(), [10, 20, 30])
        self.assertEqual(out[0].v.tolist(), [1.0, 2.0, 3.0])

    def test_values_coerce_like_json_numbers(self) -> None:
        out = normalize_series(
            [
                _series(
                    "a",
                    (1, "abc"),
                    (2, None),
                    (3, math.nan),
                    (4, "12"),
                    (5, Decimal("1.5")),
                    (6, math.inf),
                    (7, " "),
                    (8, "1_000"),
                    (9, "0x10"),
                )
            ]
        )
        self.assertEqual(out[0].t.tolist(), [2, 4, 5, 7, 9])
        self.assertEqual(out[0].v.tolist(), [0.0, 12.0, 1.5, 0.0, 16.0])

    def test_invalid_time_fails_even_when_value_is_dropped(self) -> None:
        with self.assertRaises(InvalidDateError):
            normalize_series([_series("a", (1, 1), ("not-a-date", "abc"))])

    def test_colors_follow_original_index(self) -> None:
        out = normalize_series(
            [
                _series("empty", (1, "abc")),
                _series("b", (1, 1)),
                _series("c", (1, 1), color="#123456"),
            ]
        )
        self.assertEqual([s.id for s in out], ["b", "c"])
        self.assertEqual(out[0].color, DEFAULT_COLORS[1])
        self.assertEqual(out[0].index, 1)
        self.assertEqual(out[1].color, "#123456")

    def test_palette_cycles(self) -> None:
        raw = [_series(f"s{i}", (1, i)) for i in range(10)]
        out = normalize_series(raw)
        self.assertEqual(out[8].color, DEFAULT_COLORS[0])
        self.assertEqual(out[9].color, DEFAULT_COLORS[1])

    def test_all_series_empty_raises(self) -> None:
        with self.assertRaises(NoValidPointsError):
            normalize_series([_series("a", (1, "abc")), _series("b")])

    def test_label_prefers_name(self) -> None:
        out = normalize_series(
            [
                AreaSeries(id="x", name="Requests", data=(TimeValue(t=1, v=1),)),
                AreaSeries(id="y", data=(TimeValue(t=1, v=1),)),
            ]
        )
        self.assertEqual([s.label for s in out], ["Requests", "y"])
        self.assertEqual(len(out[0]), 1)


if __name__ == "__main__":
    unittest.main()
