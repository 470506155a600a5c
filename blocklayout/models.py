# blocklayout/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

WEEKDAYS = ("Mo", "Tu", "We", "Th", "Fr")

STRATEGIES = ("exact", "greedy", "heap")
GRAPH_BUILDERS = ("pairwise", "sweep")


@dataclass(eq=False)
class Block:
    start_min: int                  # minutes since midnight
    end_min: int                    # exclusive
    payload: Any = None
    depth: int = 0                  # display column
    path_depth: int = 0             # columns of the longest descending chain
    left: float = -1.0              # -1 means "unset"
    width: float = 0.0
    is_fixed: bool = False
    visited: bool = False
    neighbors: List[int] = field(default_factory=list)  # indices into the weekday
    idx: int = 0

    @property
    def duration(self) -> int:
        return self.end_min - self.start_min

    @property
    def right(self) -> float:
        return self.left + self.width

    def conflicts(self, other: "Block") -> bool:
        """Half-open overlap: touching endpoints do not conflict."""
        return self.start_min < other.end_min and other.start_min < self.end_min

    def reset_layout(self):
        self.depth = 0
        self.path_depth = 0
        self.left = -1.0
        self.width = 0.0
        self.is_fixed = False
        self.visited = False
        self.neighbors = []


@dataclass
class LayoutOptions:
    strategy: str = "exact"         # exact | greedy | heap
    graph: str = "pairwise"         # pairwise | sweep
    optimize: bool = True           # LP refinement of non-fixed blocks
    solver: str = "GLOP"            # OR-Tools linear solver backend
    time_limit_seconds: float = 2.0
    max_workers: int = 4

    def validate(self) -> "LayoutOptions":
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"unknown strategy {self.strategy!r}, expected one of {STRATEGIES}"
            )
        if self.graph not in GRAPH_BUILDERS:
            raise ValueError(
                f"unknown graph builder {self.graph!r}, expected one of {GRAPH_BUILDERS}"
            )
        if self.time_limit_seconds <= 0:
            raise ValueError("time_limit_seconds must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        return self


@dataclass
class LayoutReport:
    day: Optional[str] = None
    generation: int = 0
    num_columns: int = 0
    num_fixed: int = 0
    components: int = 0
    optimized: int = 0              # components whose solution was merged
    fallbacks: int = 0              # components left at the heuristic layout
    stale: bool = False


class Week:
    """The five weekday block sequences of one schedule."""

    def __init__(self):
        self.days: Dict[str, List[Block]] = {d: [] for d in WEEKDAYS}

    def add(self, day: str, block: Block) -> Block:
        if day not in self.days:
            raise ValueError(f"unknown weekday {day!r}")
        if block.start_min >= block.end_min:
            raise ValueError(
                f"malformed interval [{block.start_min}, {block.end_min})"
            )
        self.days[day].append(block)
        return block

    def place(self, meeting: str, payload: Any = None) -> List[Block]:
        """Place a meeting such as ``MoWeFr 10:00AM - 10:50AM`` on each of its days."""
        from .placement import place_meeting

        return place_meeting(self, meeting, payload)

    def remove(self, payload: Any) -> int:
        removed = 0
        for day, blocks in self.days.items():
            kept = [b for b in blocks if b.payload != payload]
            removed += len(blocks) - len(kept)
            self.days[day] = kept
        return removed

    def clear(self):
        for day in self.days:
            self.days[day] = []

    def __iter__(self) -> Iterator[Tuple[str, List[Block]]]:
        return iter(self.days.items())

    def __len__(self) -> int:
        return sum(len(blocks) for blocks in self.days.values())
