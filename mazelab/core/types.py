# mazelab/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field, replace
from math import inf
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

Coord = Tuple[int, int]  # (col, row)


@dataclass
class Cell:
    x: int
    y: int
    is_wall: bool = False
    is_start: bool = False
    is_end: bool = False
    # visualization only
    is_path: bool = False
    is_visited: bool = False
    is_exploring: bool = False
    # A* family
    g_cost: int = 0
    h_cost: int = 0
    f_cost: int = 0
    # Dijkstra / bidirectional
    distance: float = inf
    parent: Optional[Coord] = None   # coordinate, never a Cell

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    def reset_search_state(self) -> None:
        self.is_path = False
        self.is_visited = False
        self.is_exploring = False
        self.g_cost = 0
        self.h_cost = 0
        self.f_cost = 0
        self.distance = inf
        self.parent = None

    def snapshot(self) -> "Cell":
        """Detached copy handed to progress sinks."""
        return replace(self)


@dataclass
class Grid:
    width: int
    height: int
    cells: List[List[Cell]]             # [row][col]

    @classmethod
    def filled(cls, width: int, height: int, wall: bool = False) -> "Grid":
        cells = [[Cell(x, y, is_wall=wall) for x in range(width)] for y in range(height)]
        return cls(width, height, cells)

    def in_bounds(self, c: Coord) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def is_block(self, c: Coord) -> bool:
        x, y = c
        return self.cells[y][x].is_wall

    def cell(self, c: Coord) -> Cell:
        x, y = c
        return self.cells[y][x]

    __getitem__ = cell

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def __len__(self) -> int:
        return self.width * self.height

    def passages(self) -> List[Coord]:
        return [c.pos for c in self if not c.is_wall]

    # -------------------- roles --------------------

    @property
    def start(self) -> Optional[Coord]:
        for c in self:
            if c.is_start:
                return c.pos
        return None

    @property
    def end(self) -> Optional[Coord]:
        for c in self:
            if c.is_end:
                return c.pos
        return None

    # -------------------- edit operations --------------------

    def toggle_wall(self, c: Coord) -> bool:
        """Flip the wall flag. Start/end cells are left untouched (returns False)."""
        cell = self.cell(c)
        if cell.is_start or cell.is_end:
            return False
        cell.is_wall = not cell.is_wall
        return True

    def set_start(self, c: Coord) -> None:
        for other in self:
            other.is_start = False
        cell = self.cell(c)
        cell.is_start = True
        cell.is_end = False
        cell.is_wall = False

    def set_end(self, c: Coord) -> None:
        for other in self:
            other.is_end = False
        cell = self.cell(c)
        cell.is_end = True
        cell.is_start = False
        cell.is_wall = False

    def clear_walls(self) -> None:
        for c in self:
            c.is_wall = False
            c.reset_search_state()

    # -------------------- search bookkeeping --------------------

    def reset_search_state(self) -> None:
        for c in self:
            c.reset_search_state()

    def mark_path(self, path: Sequence[Coord]) -> None:
        for p in path:
            cell = self.cell(p)
            cell.is_path = True
            cell.is_exploring = False

    def to_text(self) -> str:
        rows = []
        for row in self.cells:
            line = []
            for c in row:
                if c.is_start:
                    line.append("S")
                elif c.is_end:
                    line.append("E")
                elif c.is_wall:
                    line.append("#")
                elif c.is_path:
                    line.append("*")
                else:
                    line.append(".")
            rows.append("".join(line))
        return "\n".join(rows)


@dataclass(frozen=True)
class AlgorithmResult:
    algo: str
    path: Tuple[Coord, ...] = ()
    visited_nodes: FrozenSet[Coord] = frozenset()
    execution_time: float = 0.0         # seconds, wall clock
    path_length: int = 0
    nodes_explored: int = 0
    success: bool = False
    error: Optional[str] = None         # set when a run aborted on a broken parent chain


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path" | "error"
    opened: List[Coord] = field(default_factory=list)
    closed: List[Coord] = field(default_factory=list)
    current: Optional[Coord] = None
    path: Optional[List[Coord]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.status in ("done", "no_path", "error")
