# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import datetime

from session_timer.services.time_format import format_elapsed, format_start_time_label, parse_elapsed


class TestFormatElapsed(unittest.TestCase):
    def test_known_values(self) -> None:
        cases = {
            0: "0:00",
            59: "0:59",
            60: "1:00",
            3599: "59:59",
            3600: "1:00:00",
            3661: "1:01:01",
            36000: "10:00:00",
        }
        for seconds, expected in cases.items():
            with self.subTest(seconds=seconds):
                self.assertEqual(format_elapsed(seconds), expected)

    def test_parse_inverts_format(self) -> None:
        for seconds in (0, 1, 59, 61, 600, 3599, 3600, 3601, 7322, 86399, 90061):
            with self.subTest(seconds=seconds):
                self.assertEqual(parse_elapsed(format_elapsed(seconds)), seconds)

    def test_negative_rejected(self) -> None:
        with self.assertRaises(ValueError):
            format_elapsed(-1)

    def test_parse_rejects_garbage(self) -> None:
        for text in ("", "1", "a:bc", "1:60", "1:2:3:4"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_elapsed(text)


class TestStartTimeLabel(unittest.TestCase):
    def test_twelve_hour_clock(self) -> None:
        self.assertEqual(format_start_time_label(datetime(2026, 3, 2, 9, 5)), "9:05 AM")
        self.assertEqual(format_start_time_label(datetime(2026, 3, 2, 0, 30)), "12:30 AM")
        self.assertEqual(format_start_time_label(datetime(2026, 3, 2, 12, 0)), "12:00 PM")
        self.assertEqual(format_start_time_label(datetime(2026, 3, 2, 18, 45)), "6:45 PM")

    def test_missing_start(self) -> None:
        self.assertEqual(format_start_time_label(None), "")


if __name__ == "__main__":
    unittest.main()
