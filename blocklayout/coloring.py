# blocklayout/coloring.py
"""
Column assignment strategies.

Each strategy maps the blocks of one weekday to a list of depths (one per
block, aligned with the block sequence) such that conflicting blocks never
share a depth. The blocks themselves are never reordered, since the
conflict graph refers to them by index.
"""
import heapq
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from .models import Block

logger = logging.getLogger(__name__)


def _start_order(blocks: Sequence[Block]) -> List[int]:
    # earlier start first, shorter block first on equal starts
    return sorted(
        range(len(blocks)),
        key=lambda i: (blocks[i].start_min, blocks[i].duration, i),
    )


def column_count(depths: Sequence[int]) -> int:
    return max(depths) + 1 if len(depths) else 0


def max_overlap(blocks: Sequence[Block]) -> int:
    """Maximum number of blocks active at one instant (half-open intervals)."""
    if not blocks:
        return 0
    starts = np.sort(np.fromiter((b.start_min for b in blocks), dtype=np.int64))
    ends = np.sort(np.fromiter((b.end_min for b in blocks), dtype=np.int64))
    # active at t = started at or before t minus ended at or before t
    active = np.searchsorted(starts, starts, side="right") - np.searchsorted(
        ends, starts, side="right"
    )
    return int(active.max())


class GreedyScheduler:
    """
    Interval partitioning in O(n^2) that prefers the lowest free column.

    Among the columns whose last block ended at or before the current start,
    the one with the smallest depth is reused, which keeps the layout stable
    when blocks are added or removed.
    """

    name = "greedy"

    def assign(self, blocks: Sequence[Block]) -> List[int]:
        n = len(blocks)
        if n == 0:
            return []
        order = _start_order(blocks)
        depths = [0] * n
        occupied = [order[0]]  # last block placed in each column
        num_columns = 1
        for i in order[1:]:
            block = blocks[i]
            idx = -1
            lowest = num_columns
            for k, rep in enumerate(occupied):
                if blocks[rep].end_min <= block.start_min and depths[rep] < lowest:
                    lowest = depths[rep]
                    idx = k
            if idx == -1:
                depths[i] = num_columns
                num_columns += 1
                occupied.append(i)
            else:
                depths[i] = depths[occupied[idx]]
                occupied[idx] = i
        return depths


class HeapScheduler:
    """Classical O(n log n) interval partitioning with a min-heap of columns."""

    name = "heap"

    def assign(self, blocks: Sequence[Block]) -> List[int]:
        n = len(blocks)
        if n == 0:
            return []
        order = _start_order(blocks)
        depths = [0] * n
        first = order[0]
        # a column is (end of its last block, depth, block index)
        heap = [(blocks[first].end_min, 0, first)]
        num_columns = 1
        for i in order[1:]:
            block = blocks[i]
            end, depth, _ = heap[0]
            if end > block.start_min:
                depths[i] = num_columns
                num_columns += 1
                heapq.heappush(heap, (block.end_min, depths[i], i))
            else:
                depths[i] = depth
                heapq.heapreplace(heap, (block.end_min, depth, i))
        return depths


class SearchLimitExceeded(Exception):
    pass


class ExactColorer:
    """
    Minimum coloring of the conflict graph.

    The clique lower bound of an interval graph is its maximum overlap. A
    first-fit coloring in start order gives the upper bound; when the two
    differ, a backtracking search decides every k in between. Requires the
    ``neighbors`` relation to be built.
    """

    name = "exact"

    def __init__(self, node_limit: int = 200_000):
        self.node_limit = node_limit

    def assign(self, blocks: Sequence[Block]) -> List[int]:
        n = len(blocks)
        if n == 0:
            return []
        order = _start_order(blocks)
        lower = max_overlap(blocks)
        colors = self._first_fit(blocks, order)
        upper = column_count(colors)
        for k in range(lower, upper):
            try:
                found = self._k_color(blocks, order, k)
            except SearchLimitExceeded:
                logger.warning(
                    "Coloring search gave up at k=%d after %d nodes, keeping %d colors",
                    k, self.node_limit, upper,
                )
                break
            if found is not None:
                return found
        return colors

    @staticmethod
    def _first_fit(blocks: Sequence[Block], order: List[int]) -> List[int]:
        colors = [-1] * len(blocks)
        for v in order:
            used = {colors[u] for u in blocks[v].neighbors if colors[u] >= 0}
            c = 0
            while c in used:
                c += 1
            colors[v] = c
        return colors

    def _k_color(self, blocks: Sequence[Block], order: List[int],
                 k: int) -> Optional[List[int]]:
        """Backtracking k-coloring along ``order``; None when none exists."""
        n = len(order)
        colors = [-1] * len(blocks)
        tried = [-1] * n            # last color tried at each position
        opened = [0] * (n + 1)      # colors in use by order[:p]
        nodes = 0
        p = 0
        while 0 <= p < n:
            v = order[p]
            forbidden = {colors[u] for u in blocks[v].neighbors if colors[u] >= 0}
            # a new color is only ever the next unopened one
            limit = min(k, opened[p] + 1)
            c = tried[p] + 1
            while c < limit and c in forbidden:
                c += 1
            if c < limit:
                tried[p] = c
                colors[v] = c
                opened[p + 1] = max(opened[p], c + 1)
                p += 1
                nodes += 1
                if nodes > self.node_limit:
                    raise SearchLimitExceeded()
            else:
                tried[p] = -1
                colors[v] = -1
                p -= 1
                if p >= 0:
                    colors[order[p]] = -1
        return colors if p == n else None


STRATEGIES: Dict[str, type] = {
    "exact": ExactColorer,
    "greedy": GreedyScheduler,
    "heap": HeapScheduler,
}


def get_strategy(name: str):
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"unknown column strategy {name!r}") from None
