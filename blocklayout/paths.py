# blocklayout/paths.py
from typing import List

from .graph import reset_traversal
from .models import Block


def _by_descending_depth(blocks: List[Block]) -> List[Block]:
    return sorted(blocks, key=lambda b: (-b.depth, b.idx))


def _descend(blocks: List[Block], start: Block, path_depth: int):
    """
    Depth-first walk from ``start`` through strictly lower depths.

    Every block reached shares the start's path depth.
    """
    start.visited = True
    start.path_depth = path_depth
    stack = [start.idx]
    while stack:
        node = blocks[stack.pop()]
        for j in node.neighbors:
            adj = blocks[j]
            if not adj.visited and adj.depth < node.depth:
                adj.visited = True
                adj.path_depth = path_depth
                stack.append(j)


def calculate_path_depth(blocks: List[Block]):
    """Start a walk at every unvisited block, from the greatest depth down."""
    for node in _by_descending_depth(blocks):
        if not node.visited:
            _descend(blocks, node, node.depth + 1)
    reset_traversal(blocks)


def _same_path(node: Block, adj: Block) -> bool:
    # the neighbor one column to the left on the same path
    return node.depth - adj.depth == 1 and node.path_depth == adj.path_depth


def _find_fixed_from(blocks: List[Block], start: Block) -> bool:
    """
    Decide ``is_fixed`` for ``start`` and every block it depends on.

    A block in column 0 is fixed; any other block is fixed when one of its
    same-path neighbors one column to the left is fixed. Dependencies always
    point to a lower depth, so each block is finished before the block that
    pushed it is revisited.
    """
    start.visited = True
    stack = [start.idx]
    while stack:
        node = blocks[stack[-1]]
        if node.depth == 0:
            node.is_fixed = True
            stack.pop()
            continue
        pending = [
            j for j in node.neighbors
            if not blocks[j].visited and _same_path(node, blocks[j])
        ]
        if pending:
            for j in pending:
                blocks[j].visited = True
            stack.extend(reversed(pending))
            continue
        node.is_fixed = any(
            _same_path(node, blocks[j]) and blocks[j].is_fixed
            for j in node.neighbors
        )
        stack.pop()
    return start.is_fixed


def find_fixed(blocks: List[Block]):
    # seeds are the local maxima: every neighbor sits in a lower column
    for node in _by_descending_depth(blocks):
        if not node.visited and all(
            blocks[j].depth < node.depth for j in node.neighbors
        ):
            _find_fixed_from(blocks, node)
    reset_traversal(blocks)


def initial_positions(blocks: List[Block]):
    for b in blocks:
        b.left = b.depth / b.path_depth
        b.width = 1.0 / b.path_depth


def analyze(blocks: List[Block]):
    """Path depths, fixed flags and the heuristic geometry, in that order."""
    reset_traversal(blocks)
    calculate_path_depth(blocks)
    find_fixed(blocks)
    initial_positions(blocks)
