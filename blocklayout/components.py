# blocklayout/components.py
from typing import List

from .graph import reset_traversal
from .models import Block


def bfs_component(blocks: List[Block], start: Block) -> List[int]:
    """Breadth-first search over non-fixed blocks, returns the component of ``start``."""
    q_idx = 0
    component = [start.idx]
    start.visited = True
    while q_idx < len(component):
        for j in blocks[component[q_idx]].neighbors:
            node = blocks[j]
            if not node.visited and not node.is_fixed:
                node.visited = True
                component.append(j)
        q_idx += 1
    return component


def partition(blocks: List[Block]) -> List[List[int]]:
    """Split the non-fixed blocks into maximal connected components."""
    reset_traversal(blocks)
    components = []
    for b in blocks:
        if not b.visited and not b.is_fixed:
            components.append(bfs_component(blocks, b))
    reset_traversal(blocks)
    return components
