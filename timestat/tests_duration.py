"""
Tests for the duration formatter.
"""

from django.test import SimpleTestCase

from .duration import format_duration, split_duration
from .exceptions import InvalidArgument


class FormatDurationTestCase(SimpleTestCase):

    def test_hours_minutes_seconds(self):
        self.assertEqual(format_duration(3661), '1hours1minuts1seconds')

    def test_zero_prints_seconds(self):
        self.assertEqual(format_duration(0), '0seconds')

    def test_zero_units_are_skipped_except_seconds(self):
        self.assertEqual(format_duration(86400), '1days0seconds')
        self.assertEqual(format_duration(90061), '1days1hours1minuts1seconds')
        self.assertEqual(format_duration(3600 + 5), '1hours5seconds')
        self.assertEqual(format_duration(600), '10minuts0seconds')

    def test_rejects_negative_and_non_integer(self):
        for value in (-1, 1.5, '60', None, True):
            with self.assertRaises(InvalidArgument):
                format_duration(value)

    def test_invalid_argument_is_value_error(self):
        with self.assertRaises(ValueError):
            format_duration(-10)


class SplitDurationTestCase(SimpleTestCase):

    def test_components_reconstitute_total(self):
        for seconds in (0, 1, 59, 60, 61, 3599, 3600, 3661, 86399, 86400, 90061, 10 ** 7 + 3):
            days, hours, minutes, rest = split_duration(seconds)
            self.assertEqual(days * 86400 + hours * 3600 + minutes * 60 + rest, seconds)
            self.assertLess(hours, 24)
            self.assertLess(minutes, 60)
            self.assertLess(rest, 60)

    def test_example_breakdown(self):
        self.assertEqual(split_duration(3661), (0, 1, 1, 1))
