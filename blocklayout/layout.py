# blocklayout/layout.py
import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import List, Optional

from .coloring import column_count, get_strategy
from .components import partition
from .graph import get_graph_builder
from .models import Block, LayoutOptions, LayoutReport
from .optimizer import ComponentProblem, Solution, apply_solution, build_problem, optimize_component
from .paths import analyze

logger = logging.getLogger(__name__)


@dataclass
class WeekdayPlan:
    """Result of the sequential phases of a pass, ready for width optimization."""
    blocks: List[Block]
    num_columns: int = 0
    problems: List[ComponentProblem] = field(default_factory=list)


def prepare_weekday(blocks: List[Block], options: LayoutOptions) -> WeekdayPlan:
    """
    Run the sequential phases of a layout pass on one weekday.

    Leaves depth, path_depth, is_fixed and the heuristic left/width on every
    block, which is already a conflict-free layout.
    """
    for b in blocks:
        b.reset_layout()

    # 1) Conflict graph
    get_graph_builder(options.graph)(blocks)
    if not blocks:
        return WeekdayPlan(blocks)

    # 2) Columns
    depths = get_strategy(options.strategy).assign(blocks)
    for b, depth in zip(blocks, depths):
        b.depth = depth
    total = column_count(depths)

    # nothing overlaps, every block takes the full width
    if total <= 1:
        for b in blocks:
            b.path_depth = 1
            b.left = 0.0
            b.width = 1.0
            b.is_fixed = True
        return WeekdayPlan(blocks, num_columns=total)

    # 3) Path depths, fixed blocks and heuristic geometry
    analyze(blocks)

    # 4) Independent components of non-fixed blocks
    problems = []
    if options.optimize:
        problems = [build_problem(blocks, c) for c in partition(blocks)]
    return WeekdayPlan(blocks, num_columns=total, problems=problems)


def _optimize(problem: ComponentProblem, options: LayoutOptions) -> Optional[Solution]:
    return optimize_component(problem, options.solver, options.time_limit_seconds)


def solve_plan(plan: WeekdayPlan,
               options: LayoutOptions,
               executor: Optional[Executor] = None) -> List[Optional[Solution]]:
    """
    Solve every component of a plan, concurrently when an executor is given.

    Waits for all solves. A failed solve yields None for its component.
    """
    futures = None
    if executor is not None:
        futures = [executor.submit(_optimize, p, options) for p in plan.problems]

    solutions = []
    for k, problem in enumerate(plan.problems):
        try:
            if futures is not None:
                solution = futures[k].result()
            else:
                solution = _optimize(problem, options)
        except Exception:
            logger.exception(
                "Width optimization of %d blocks failed, keeping heuristic layout",
                len(problem),
            )
            solution = None
        solutions.append(solution)
    return solutions


def merge_plan(plan: WeekdayPlan,
               solutions: List[Optional[Solution]],
               report: LayoutReport) -> LayoutReport:
    for solution in solutions:
        if solution is None:
            report.fallbacks += 1
        else:
            apply_solution(plan.blocks, solution)
            report.optimized += 1
    return report


def new_report(plan: WeekdayPlan, day: Optional[str] = None,
               generation: int = 0) -> LayoutReport:
    return LayoutReport(
        day=day,
        generation=generation,
        num_columns=plan.num_columns,
        num_fixed=sum(1 for b in plan.blocks if b.is_fixed),
        components=len(plan.problems),
    )


def layout_weekday(blocks: List[Block],
                   options: Optional[LayoutOptions] = None,
                   executor: Optional[Executor] = None,
                   day: Optional[str] = None) -> LayoutReport:
    """
    Lay out one weekday in place.

    Sets depth, path_depth, left, width and is_fixed on every block. Safe to
    call again whenever blocks are added or removed.
    """
    options = (options or LayoutOptions()).validate()
    plan = prepare_weekday(blocks, options)
    report = new_report(plan, day=day)
    merge_plan(plan, solve_plan(plan, options, executor), report)
    logger.debug(
        "Laid out %s: %d blocks, %d columns, %d fixed, %d components (%d fallbacks)",
        day or "weekday", len(blocks), report.num_columns, report.num_fixed,
        report.components, report.fallbacks,
    )
    return report
