import unittest
from unittest import mock

from blocklayout import WEEKDAYS, Block, LayoutEngine, LayoutOptions, Week
from blocklayout.layout import layout_weekday

TWO_STACKS = ((530, 720), (540, 600), (540, 600), (540, 600), (630, 720), (630, 720))


def _blocks(*intervals):
    return [Block(s, e) for s, e in intervals]


class TestLayoutEngine(unittest.TestCase):
    def test_generations_increase_per_day(self):
        with LayoutEngine() as engine:
            self.assertEqual(engine.begin_pass("Mo"), 1)
            self.assertEqual(engine.begin_pass("Mo"), 2)
            self.assertEqual(engine.begin_pass("Tu"), 1)
            self.assertTrue(engine.is_current("Mo", 2))
            self.assertFalse(engine.is_current("Mo", 1))

    def test_matches_plain_layout(self):
        expected = _blocks(*TWO_STACKS)
        layout_weekday(expected)
        blocks = _blocks(*TWO_STACKS)
        with LayoutEngine() as engine:
            report = engine.layout_weekday("We", blocks)
        self.assertFalse(report.stale)
        self.assertEqual(report.generation, 1)
        self.assertEqual(report.optimized, 1)
        for a, b in zip(expected, blocks):
            self.assertAlmostEqual(a.left, b.left, places=9)
            self.assertAlmostEqual(a.width, b.width, places=9)

    def test_layout_week(self):
        week = Week()
        week.place("MoWeFr 10:00AM - 10:50AM", "CS 2150")
        week.place("MoWe 10:00AM - 11:15AM", "APMA 3100")
        week.place("Tu 9:30AM - 11:00AM", "Lab")
        with LayoutEngine(LayoutOptions(strategy="heap")) as engine:
            reports = engine.layout_week(week)
        self.assertEqual(set(reports), set(WEEKDAYS))
        self.assertEqual(reports["Mo"].num_columns, 2)
        self.assertEqual(reports["Tu"].num_columns, 1)
        self.assertEqual(reports["Th"].num_columns, 0)
        for b in week.days["Mo"]:
            self.assertAlmostEqual(b.width, 0.5)
        self.assertEqual(week.days["Fr"][0].width, 1.0)

    def test_stale_results_are_dropped(self):
        blocks = _blocks(*TWO_STACKS)
        engine = LayoutEngine()

        def newer_pass_starts(problem, options):
            # another pass on the same day begins while this one is solving
            engine.begin_pass("Mo")
            return {i: (0.0, 0.01) for i in problem.members}

        with mock.patch("blocklayout.layout._optimize", side_effect=newer_pass_starts):
            report = engine.layout_weekday("Mo", blocks)
        engine.close()

        self.assertTrue(report.stale)
        self.assertEqual(report.optimized, 0)
        # heuristic geometry is left in place
        self.assertAlmostEqual(blocks[4].left, 1 / 3)
        self.assertAlmostEqual(blocks[4].width, 1 / 3)

    def test_superseded_pass_does_not_start(self):
        engine = LayoutEngine()
        with mock.patch.object(engine, "begin_pass", return_value=1):
            engine._generations["Fr"] = 5
            report = engine.layout_weekday("Fr", _blocks((0, 10)))
        engine.close()
        self.assertTrue(report.stale)
        self.assertEqual(report.num_columns, 0)

    def test_invalid_options(self):
        with self.assertRaises(ValueError):
            LayoutEngine(LayoutOptions(max_workers=0))


if __name__ == "__main__":
    unittest.main()
