from __future__ import annotations

import datetime as dt
import unittest

from chartgen.formatting import (
    epoch_ms,
    escape_xml,
    format_date_utc,
    format_number,
    format_svg_number,
    is_same_utc_day,
)


def _ms(*args: int) -> int:
    return epoch_ms(dt.datetime(*args, tzinfo=dt.timezone.utc))


class DateFormattingTests(unittest.TestCase):
    def test_full_timestamp_with_milliseconds(self) -> None:
        ms = epoch_ms(dt.datetime(2024, 1, 5, 3, 4, 5, 6000, tzinfo=dt.timezone.utc))
        self.assertEqual(format_date_utc(ms, "%Y-%m-%d %H:%M:%S.%L"), "2024-01-05 03:04:05.006")

    def test_default_format_is_iso_date(self) -> None:
        self.assertEqual(format_date_utc(_ms(2023, 12, 31)), "2023-12-31")

    def test_names_and_padding(self) -> None:
        ms = _ms(2024, 1, 5)
        self.assertEqual(format_date_utc(ms, "%a %A %b %B %e %y"), "Fri Friday Jan January  5 24")

    def test_twelve_hour_clock_uses_twelve_for_midnight(self) -> None:
        self.assertEqual(format_date_utc(_ms(2024, 1, 5, 0), "%I"), "12")
        self.assertEqual(format_date_utc(_ms(2024, 1, 5, 12), "%I"), "12")
        self.assertEqual(format_date_utc(_ms(2024, 1, 5, 13), "%I"), "01")

    def test_day_of_year_is_one_based(self) -> None:
        self.assertEqual(format_date_utc(_ms(2024, 1, 1), "%j"), "001")
        self.assertEqual(format_date_utc(_ms(2024, 12, 31), "%j"), "366")

    def test_zone_is_always_utc_and_unknown_tokens_pass_through(self) -> None:
        self.assertEqual(format_date_utc(0, "%H:%M %Z %Q"), "00:00 UTC %Q")

    def test_negative_epoch_milliseconds(self) -> None:
        self.assertEqual(format_date_utc(-1, "%Y-%m-%d %H:%M:%S.%L"), "1969-12-31 23:59:59.999")


class NumberFormattingTests(unittest.TestCase):
    def test_magnitude_tiers(self) -> None:
        self.assertEqual(format_number(12345.678), "12,346")
        self.assertEqual(format_number(123.456), "123.5")
        self.assertEqual(format_number(12.3456), "12.35")
        self.assertEqual(format_number(1.23456), "1.235")

    def test_trailing_zeros_are_trimmed(self) -> None:
        self.assertEqual(format_number(2.0), "2")
        self.assertEqual(format_number(0.5), "0.5")
        self.assertEqual(format_number(0), "0")

    def test_grouping_and_negative_values(self) -> None:
        self.assertEqual(format_number(1234567), "1,234,567")
        self.assertEqual(format_number(-2500.4), "-2,500")

    def test_fixed_point_format(self) -> None:
        self.assertEqual(format_number(3.14159, ".2f"), "3.14")
        self.assertEqual(format_number(3.14159, "2f"), "3.14")
        self.assertEqual(format_number(1234.5, "1f"), "1234.5")
        self.assertEqual(format_number(2.5, "0f"), "3")

    def test_fixed_point_format_keeps_all_requested_digits(self) -> None:
        self.assertEqual(format_number(1234.5, "25f"), "1234.5" + "0" * 24)
        self.assertEqual(format_number(1e9, ".20f"), "1000000000." + "0" * 20)
        self.assertEqual(format_number(-0.125, "30f"), "-0.125" + "0" * 27)
        self.assertEqual(format_number(1e21, "2f"), "1e+21")

    def test_unrecognized_format_falls_back_to_tiers(self) -> None:
        self.assertEqual(format_number(12345.678, ",d"), "12,346")


class SvgTextTests(unittest.TestCase):
    def test_svg_numbers_match_browser_text(self) -> None:
        self.assertEqual(format_svg_number(52.0), "52")
        self.assertEqual(format_svg_number(-3.5), "-3.5")
        self.assertEqual(format_svg_number(0.1 + 0.2), "0.30000000000000004")
        self.assertEqual(format_svg_number(5e-05), "0.00005")
        self.assertEqual(format_svg_number(1e-7), "1e-7")
        self.assertEqual(format_svg_number(1e21), "1e+21")
        self.assertEqual(format_svg_number(-0.0), "0")

    def test_escape_xml_covers_all_special_characters(self) -> None:
        self.assertEqual(escape_xml("<a href=\"x\">&'"), "&lt;a href=&quot;x&quot;&gt;&amp;&apos;")
        self.assertEqual(escape_xml(None), "")
        self.assertEqual(escape_xml(12), "12")

    def test_same_utc_day(self) -> None:
        self.assertTrue(is_same_utc_day(_ms(2024, 3, 1, 0), _ms(2024, 3, 1, 23, 59)))
        self.assertFalse(is_same_utc_day(_ms(2024, 3, 1, 23, 59), _ms(2024, 3, 2, 0)))


if __name__ == "__main__":
    unittest.main()
