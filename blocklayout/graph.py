# blocklayout/graph.py
from typing import Callable, Dict, List

from .models import Block


def reset_traversal(blocks: List[Block]):
    for b in blocks:
        b.visited = False


def _reset_adjacency(blocks: List[Block]):
    for i, b in enumerate(blocks):
        b.idx = i
        b.neighbors = []


def build_conflict_graph(blocks: List[Block]) -> List[Block]:
    """
    Construct the undirected conflict graph of one weekday.

    Every unordered pair is tested, so this runs in O(n^2); a day holds tens
    of blocks. Neighbors are stored as indices into ``blocks``.
    """
    _reset_adjacency(blocks)
    n = len(blocks)
    for i in range(n):
        a = blocks[i]
        for j in range(i + 1, n):
            b = blocks[j]
            if a.start_min < b.end_min and b.start_min < a.end_min:
                a.neighbors.append(j)
                b.neighbors.append(i)
    return blocks


def build_conflict_graph_sweep(blocks: List[Block]) -> List[Block]:
    """
    Same relation as ``build_conflict_graph``, built with a sweep line.

    Blocks are visited in start order while an active set holds every block
    that has not ended yet; O(n log n + edges).
    """
    _reset_adjacency(blocks)
    order = sorted(range(len(blocks)), key=lambda i: (blocks[i].start_min, i))
    active: List[int] = []
    for i in order:
        start = blocks[i].start_min
        active = [j for j in active if blocks[j].end_min > start]
        for j in active:
            blocks[i].neighbors.append(j)
            blocks[j].neighbors.append(i)
        active.append(i)

    # match the pairwise builder's neighbor order
    for b in blocks:
        b.neighbors.sort()
    return blocks


GRAPH_BUILDERS: Dict[str, Callable[[List[Block]], List[Block]]] = {
    "pairwise": build_conflict_graph,
    "sweep": build_conflict_graph_sweep,
}


def get_graph_builder(name: str) -> Callable[[List[Block]], List[Block]]:
    try:
        return GRAPH_BUILDERS[name]
    except KeyError:
        raise ValueError(f"unknown graph builder {name!r}") from None
