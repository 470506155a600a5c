import unittest

from blocklayout.models import Block, LayoutOptions, Week
from blocklayout.placement import parse_days, parse_meeting, parse_time


class TestParseTime(unittest.TestCase):
    def test_morning_and_afternoon(self):
        self.assertEqual(parse_time("10:00AM"), 600)
        self.assertEqual(parse_time("1:30PM"), 810)
        self.assertEqual(parse_time("9:05am"), 545)

    def test_noon_and_midnight(self):
        self.assertEqual(parse_time("12:00PM"), 720)
        self.assertEqual(parse_time("12:30AM"), 30)

    def test_malformed(self):
        for text in ("10:00", "25:00PM", "10:75AM", "ten", ""):
            with self.assertRaises(ValueError):
                parse_time(text)


class TestParseMeeting(unittest.TestCase):
    def test_meeting(self):
        self.assertEqual(
            parse_meeting("MoWeFr 10:00AM - 10:50AM"), (["Mo", "We", "Fr"], 600, 650)
        )

    def test_bad_days(self):
        with self.assertRaises(ValueError):
            parse_days("MoSa")
        with self.assertRaises(ValueError):
            parse_days("MoW")

    def test_bad_shape(self):
        with self.assertRaises(ValueError):
            parse_meeting("MoWe 10:00AM 11:00AM")


class TestWeek(unittest.TestCase):
    def test_place_on_each_day(self):
        week = Week()
        blocks = week.place("TuTh 9:30AM - 10:45AM", "PHYS 1425")
        self.assertEqual(len(blocks), 2)
        self.assertEqual(len(week), 2)
        self.assertEqual(week.days["Tu"][0].start_min, 570)
        self.assertEqual(week.days["Th"][0].end_min, 645)
        self.assertEqual(week.days["Mo"], [])

    def test_zero_length_is_skipped(self):
        week = Week()
        with self.assertLogs("blocklayout.placement", level="WARNING"):
            self.assertEqual(week.place("Mo 10:00AM - 10:00AM", "Empty"), [])
        self.assertEqual(len(week), 0)

    def test_reversed_interval_rejected(self):
        week = Week()
        with self.assertRaises(ValueError):
            week.place("Mo 11:00AM - 10:00AM")
        with self.assertRaises(ValueError):
            week.add("Mo", Block(600, 540))
        with self.assertRaises(ValueError):
            week.add("Su", Block(540, 600))

    def test_remove_and_clear(self):
        week = Week()
        week.place("MoWe 10:00AM - 11:00AM", "A")
        week.place("Mo 10:30AM - 11:30AM", "B")
        self.assertEqual(week.remove("A"), 2)
        self.assertEqual([b.payload for b in week.days["Mo"]], ["B"])
        week.clear()
        self.assertEqual(len(week), 0)


class TestLayoutOptions(unittest.TestCase):
    def test_defaults_are_valid(self):
        options = LayoutOptions()
        self.assertIs(options.validate(), options)
        self.assertEqual(options.strategy, "exact")

    def test_invalid(self):
        for kwargs in ({"strategy": "x"}, {"graph": "x"},
                       {"time_limit_seconds": 0}, {"max_workers": 0}):
            with self.assertRaises(ValueError):
                LayoutOptions(**kwargs).validate()


if __name__ == "__main__":
    unittest.main()
