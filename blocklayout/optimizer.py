# blocklayout/optimizer.py
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ortools.linear_solver import pywraplp

from .models import Block

logger = logging.getLogger(__name__)

# heuristic widths are recomputed floats, allow for rounding in their lower bound
_SLACK = 1e-9

Solution = Dict[int, Tuple[float, float]]  # block index -> (left, width)


@dataclass(frozen=True)
class ComponentProblem:
    """
    Snapshot of one connected component of non-fixed blocks.

    Solvers only read this snapshot, so several components can be solved in
    parallel while the blocks themselves stay untouched.
    """
    members: Tuple[int, ...]
    depth: Dict[int, int]
    left: Dict[int, float]          # heuristic geometry
    width: Dict[int, float]
    edges: Tuple[Tuple[int, int], ...]  # conflicting members, lower depth first
    floor: Dict[int, float]         # right edge of the fixed neighbors to the left
    ceiling: Dict[int, float]       # left edge of the fixed neighbors to the right

    def __len__(self) -> int:
        return len(self.members)


def build_problem(blocks: List[Block], component: List[int]) -> ComponentProblem:
    inside = set(component)
    edges = []
    floor: Dict[int, float] = {}
    ceiling: Dict[int, float] = {}
    for i in component:
        b = blocks[i]
        lo, hi = 0.0, 1.0
        for j in b.neighbors:
            adj = blocks[j]
            if j in inside:
                if adj.depth > b.depth:
                    edges.append((i, j))
            # components are maximal, so every outside neighbor is fixed
            elif adj.depth < b.depth:
                lo = max(lo, adj.right)
            else:
                hi = min(hi, adj.left)
        floor[i] = lo
        ceiling[i] = hi

    return ComponentProblem(
        members=tuple(component),
        depth={i: blocks[i].depth for i in component},
        left={i: blocks[i].left for i in component},
        width={i: blocks[i].width for i in component},
        edges=tuple(edges),
        floor=floor,
        ceiling=ceiling,
    )


def _clamp(left: float, width: float) -> Tuple[float, float]:
    left = min(max(left, 0.0), 1.0)
    return left, max(min(width, 1.0 - left), 0.0)


def solve_single(problem: ComponentProblem) -> Solution:
    """A lone block spans the whole gap between its fixed neighbors."""
    (i,) = problem.members
    return {i: _clamp(problem.floor[i], problem.ceiling[i] - problem.floor[i])}


def solve_component(problem: ComponentProblem,
                    solver_id: str = "GLOP",
                    time_limit_seconds: float = 2.0) -> Optional[Solution]:
    """
    Maximize the total width of one component with a linear program.

    Returns:
        {block index: (left, width)}, or None when the backend is missing
        or no feasible solution was found. The caller keeps the heuristic
        geometry in that case.
    """
    solver = pywraplp.Solver.CreateSolver(solver_id)
    if solver is None:
        logger.warning("Linear solver %s is not available", solver_id)
        return None
    solver.SetTimeLimit(int(time_limit_seconds * 1000))

    left = {}
    width = {}
    for i in problem.members:
        left[i] = solver.NumVar(problem.floor[i], 1.0, f"left_{i}")
        width[i] = solver.NumVar(
            min(max(problem.width[i] - _SLACK, 0.0), 1.0), 1.0, f"width_{i}"
        )
        # stay inside the day column and left of fixed neighbors
        solver.Add(left[i] + width[i] <= problem.ceiling[i])

    # No overlaps: the column order decides who sits on the left
    for lo, hi in problem.edges:
        solver.Add(left[hi] >= left[lo] + width[lo])

    # any gap left of a block could become width, so the optimum has none
    solver.Maximize(sum(width.values()))
    status = solver.Solve()
    if status not in (pywraplp.Solver.OPTIMAL, pywraplp.Solver.FEASIBLE):
        logger.warning(
            "Width LP for %d blocks ended with status %d, keeping heuristic layout",
            len(problem), status,
        )
        return None

    return {
        i: _clamp(left[i].solution_value(), width[i].solution_value())
        for i in problem.members
    }


def optimize_component(problem: ComponentProblem,
                       solver_id: str = "GLOP",
                       time_limit_seconds: float = 2.0) -> Optional[Solution]:
    if len(problem) == 1:
        return solve_single(problem)
    return solve_component(problem, solver_id, time_limit_seconds)


def apply_solution(blocks: List[Block], solution: Solution):
    for i, (left, width) in solution.items():
        blocks[i].left = left
        blocks[i].width = width
