# blocklayout/engine.py
import logging
import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from .layout import merge_plan, new_report, prepare_weekday, solve_plan
from .models import Block, LayoutOptions, LayoutReport, Week

logger = logging.getLogger(__name__)


class LayoutEngine:
    """
    Runs layout passes for a whole week.

    Weekdays are laid out in parallel, and the components of one weekday are
    solved in parallel. Every pass is tagged with a per-weekday generation;
    a pass that finishes after a newer pass on the same weekday has started
    drops its solver results.
    """

    def __init__(self, options: Optional[LayoutOptions] = None):
        self.options = (options or LayoutOptions()).validate()
        self._solve_pool = ThreadPoolExecutor(
            max_workers=self.options.max_workers, thread_name_prefix="layout-lp"
        )
        self._day_pool = ThreadPoolExecutor(
            max_workers=5, thread_name_prefix="layout-day"
        )
        self._generations: Dict[str, int] = defaultdict(int)
        self._guard = threading.Lock()
        self._day_locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self._day_pool.shutdown(wait=True)
        self._solve_pool.shutdown(wait=True)

    def begin_pass(self, day: str) -> int:
        with self._guard:
            self._generations[day] += 1
            return self._generations[day]

    def is_current(self, day: str, generation: int) -> bool:
        with self._guard:
            return self._generations[day] == generation

    def _day_lock(self, day: str) -> threading.Lock:
        with self._guard:
            return self._day_locks[day]

    def layout_weekday(self, day: str, blocks: List[Block]) -> LayoutReport:
        generation = self.begin_pass(day)
        lock = self._day_lock(day)

        # graph, columns and depth analysis mutate the blocks, one pass at a time
        with lock:
            if not self.is_current(day, generation):
                logger.debug("Pass %d on %s superseded before it started", generation, day)
                return LayoutReport(day=day, generation=generation, stale=True)
            plan = prepare_weekday(blocks, self.options)
        report = new_report(plan, day=day, generation=generation)

        solutions = solve_plan(plan, self.options, self._solve_pool)

        with lock:
            if not self.is_current(day, generation):
                report.stale = True
                logger.debug(
                    "Dropping results of pass %d on %s, a newer pass has started",
                    generation, day,
                )
                return report
            merge_plan(plan, solutions, report)

        if report.fallbacks:
            logger.warning(
                "%s: %d of %d components kept the heuristic layout",
                day, report.fallbacks, report.components,
            )
        logger.debug(
            "Pass %d on %s: %d blocks, %d columns, %d fixed, %d components",
            generation, day, len(blocks), report.num_columns, report.num_fixed,
            report.components,
        )
        return report

    def layout_week(self, week: Week) -> Dict[str, LayoutReport]:
        futures = {
            day: self._day_pool.submit(self.layout_weekday, day, blocks)
            for day, blocks in week
        }
        return {day: fut.result() for day, fut in futures.items()}
