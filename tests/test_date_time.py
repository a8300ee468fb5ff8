"""
Tests for date-time productions and datetime conversion
"""

import io
import unittest
from datetime import datetime, timedelta, timezone

from src.modules.date_time import Date, DateTime, Day, TimeOfDay, Zone
from src.modules.parse_error import NotFoundError, ParseError


class TestZone(unittest.TestCase):

    def test_positive_zone(self):
        zone, rem = Zone.parse(b" +1135")
        self.assertEqual(zone.value, 1135)
        self.assertEqual(zone.minutes, 11 * 60 + 35)
        self.assertEqual(rem, b"")

    def test_negative_zone_after_fold(self):
        zone, _ = Zone.parse(b" \r\n -0700")
        self.assertEqual(zone.value, -700)
        self.assertEqual(zone.minutes, -420)
        out = io.BytesIO()
        zone.stream(out)
        self.assertEqual(out.getvalue(), b" -0700")

    def test_negative_zero_keeps_its_sign(self):
        zone, _ = Zone.parse(b" -0000")
        self.assertEqual(zone.minutes, 0)
        self.assertEqual(zone.to_bytes(), b" -0000")
        zone, _ = Zone.parse(b" +0000")
        self.assertEqual(zone.to_bytes(), b" +0000")

    def test_zone_requires_whitespace(self):
        with self.assertRaises(NotFoundError):
            Zone.parse(b"+0000")

    def test_zone_requires_four_digits(self):
        with self.assertRaises(ParseError):
            Zone.parse(b" +100")


class TestTimeOfDay(unittest.TestCase):

    def test_extra_digit_is_left_behind(self):
        tod, rem = TimeOfDay.parse(b"17:25:049")
        self.assertEqual((tod.hour, tod.minute, tod.second), (17, 25, 4))
        self.assertEqual(rem, b"9")
        out = io.BytesIO()
        self.assertEqual(tod.stream(out), 8)
        self.assertEqual(out.getvalue(), b"17:25:04")

    def test_seconds_are_optional(self):
        tod, rem = TimeOfDay.parse(b"01:019")
        self.assertIsNone(tod.second)
        self.assertEqual(rem, b"9")
        self.assertEqual(tod.to_bytes(), b"01:01")

    def test_incomplete_seconds_are_not_consumed(self):
        tod, rem = TimeOfDay.parse(b"01:02:3")
        self.assertIsNone(tod.second)
        self.assertEqual(rem, b":3")


class TestDate(unittest.TestCase):

    def test_date(self):
        date, rem = Date.parse(b" 22 Sep 2016 ")
        self.assertEqual(rem, b"")
        self.assertEqual((date.day.value, date.month.value, date.year.value), (22, 9, 2016))
        out = io.BytesIO()
        self.assertEqual(date.stream(out), 13)
        self.assertEqual(out.getvalue(), b" 22 Sep 2016 ")

    def test_single_digit_day_is_written_as_read(self):
        day, _ = Day.parse(b"1 ")
        self.assertEqual(day.value, 1)
        self.assertEqual(day.to_bytes(), b"1 ")
        day, _ = Day.parse(b"01 ")
        self.assertEqual(day.to_bytes(), b"01 ")

    def test_year_leading_zeros_are_kept(self):
        date = Date.parse_exact(b"1 Jan 02020 ")
        self.assertEqual(date.year.value, 2020)
        self.assertEqual(date.to_bytes(), b"1 Jan 02020 ")

    def test_three_digit_day_is_rejected(self):
        with self.assertRaises(NotFoundError):
            Day.parse(b"123 ")


class TestDateTime(unittest.TestCase):

    def test_normalizes_names_and_comments(self):
        dt, rem = DateTime.parse(b"suN, 01 DEC 2000 12:12:12 -1300 (or thereabouts) \r\n ")
        self.assertEqual(rem, b"")
        out = io.BytesIO()
        count = dt.stream(out)
        self.assertEqual(out.getvalue(), b"Sun, 01 Dec 2000 12:12:12 -1300 (or thereabouts) ")
        self.assertEqual(count, 49)

    def test_day_of_week_is_optional(self):
        dt, rem = DateTime.parse(b"1 Jan 2020 00:00 +0000")
        self.assertIsNone(dt.day_of_week)
        self.assertEqual(rem, b"")
        self.assertEqual(dt.to_bytes(), b"1 Jan 2020 00:00 +0000")

    def test_day_name_without_comma_is_rejected(self):
        with self.assertRaises(ParseError):
            DateTime.parse(b"Sun 01 Dec 2000 12:12:12 +0000")

    def test_to_datetime(self):
        dt = DateTime.parse_exact(b"Sun, 01 Dec 2000 12:12:12 -1300")
        self.assertEqual(
            dt.to_datetime(),
            datetime(2000, 12, 1, 12, 12, 12, tzinfo=timezone(timedelta(hours=-13)))
        )

    def test_calendar_is_only_checked_on_conversion(self):
        dt = DateTime.parse_exact(b"31 Feb 2001 00:00 +0000")
        with self.assertRaises(ValueError):
            dt.to_datetime()

    def test_from_datetime(self):
        value = datetime(2015, 1, 5, 15, 13, 5, tzinfo=timezone(timedelta(hours=13)))
        dt = DateTime.from_datetime(value)
        self.assertEqual(dt.to_bytes(), b"Mon, 05 Jan 2015 15:13:05 +1300")
        self.assertEqual(dt.to_datetime(), value)

    def test_from_naive_datetime_is_rejected(self):
        with self.assertRaises(ValueError):
            DateTime.from_datetime(datetime(2015, 1, 5))


if __name__ == "__main__":
    unittest.main()
