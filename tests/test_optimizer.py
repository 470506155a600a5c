import unittest
from unittest import mock

from blocklayout.layout import prepare_weekday
from blocklayout.models import Block, LayoutOptions
from blocklayout.optimizer import (
    apply_solution,
    build_problem,
    optimize_component,
    solve_component,
    solve_single,
)

TWO_STACKS = ((530, 720), (540, 600), (540, 600), (540, 600), (630, 720), (630, 720))
EPS = 1e-6


def _plan(*intervals):
    blocks = [Block(s, e) for s, e in intervals]
    return prepare_weekday(blocks, LayoutOptions())


class TestBuildProblem(unittest.TestCase):
    def test_snapshot_of_right_stack(self):
        plan = _plan(*TWO_STACKS)
        self.assertEqual(len(plan.problems), 1)
        problem = plan.problems[0]
        self.assertEqual(problem.members, (4, 5))
        self.assertEqual(problem.edges, ((4, 5),))
        self.assertAlmostEqual(problem.floor[4], 0.25)
        self.assertAlmostEqual(problem.floor[5], 0.25)
        self.assertEqual(problem.ceiling[4], 1.0)
        self.assertAlmostEqual(problem.width[4], 1 / 3)

    def test_ceiling_from_fixed_block_on_the_right(self):
        plan = _plan((540, 660), (540, 600), (540, 600), (600, 660))
        (problem,) = plan.problems
        self.assertEqual(problem.members, (3,))
        self.assertAlmostEqual(problem.floor[3], 0.0)
        self.assertAlmostEqual(problem.ceiling[3], 2 / 3)


class TestSolve(unittest.TestCase):
    def test_lp_widens_component(self):
        plan = _plan(*TWO_STACKS)
        solution = solve_component(plan.problems[0])
        self.assertIsNotNone(solution)
        (ld, wd), (le, we) = solution[4], solution[5]
        self.assertAlmostEqual(ld, 0.25, delta=EPS)
        self.assertAlmostEqual(le + we, 1.0, delta=EPS)
        self.assertAlmostEqual(wd + we, 0.75, delta=EPS)
        self.assertGreaterEqual(wd, 1 / 3 - EPS)
        self.assertGreaterEqual(we, 1 / 3 - EPS)
        self.assertLessEqual(ld + wd, le + EPS)

    def test_single_block_closed_form(self):
        plan = _plan((540, 660), (540, 600), (540, 600), (600, 660))
        (problem,) = plan.problems
        left, width = solve_single(problem)[3]
        self.assertAlmostEqual(left, 0.0)
        self.assertAlmostEqual(width, 2 / 3)

    def test_single_block_never_reaches_backend(self):
        plan = _plan((540, 660), (540, 600), (540, 600), (600, 660))
        with mock.patch("blocklayout.optimizer.solve_component") as lp:
            optimize_component(plan.problems[0])
        lp.assert_not_called()

    def test_missing_backend_returns_none(self):
        plan = _plan(*TWO_STACKS)
        with mock.patch(
            "blocklayout.optimizer.pywraplp.Solver.CreateSolver", return_value=None
        ):
            with self.assertLogs("blocklayout.optimizer", level="WARNING"):
                self.assertIsNone(solve_component(plan.problems[0]))

    def test_infeasible_returns_none(self):
        plan = _plan(*TWO_STACKS)
        problem = plan.problems[0]
        # no room left between the fixed neighbors
        squeezed = type(problem)(
            members=problem.members,
            depth=problem.depth,
            left=problem.left,
            width=problem.width,
            edges=problem.edges,
            floor={4: 0.9, 5: 0.9},
            ceiling=problem.ceiling,
        )
        with self.assertLogs("blocklayout.optimizer", level="WARNING"):
            self.assertIsNone(solve_component(squeezed))

    def test_apply_solution(self):
        blocks = [Block(0, 10), Block(5, 15)]
        apply_solution(blocks, {1: (0.5, 0.25)})
        self.assertEqual((blocks[1].left, blocks[1].width), (0.5, 0.25))
        self.assertEqual(blocks[0].left, -1.0)


if __name__ == "__main__":
    unittest.main()
