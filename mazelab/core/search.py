# mazelab/core/search.py
#!/usr/bin/env python3
"""
Shared search substrate + the stepwise Algorithm API used by every solver.

Algorithm API (same contract the viewer drives):
- init(grid, start=None, end=None)  - reset()  - step() -> StepResult
plus two drivers built on top of step():
- steps() -> iterator of StepResult, stops after the terminal step
- run()   -> AlgorithmResult, the whole search in one go (batch / compare mode)

One step() is one frontier pop that gets processed: the popped cell is
reported as ``current`` and marked visited + exploring on the grid.
Subclasses fill in _seed(), _expand() and _frontier_size().
"""

import time
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set

from mazelab.core.errors import PathReconstructionError
from mazelab.core.types import AlgorithmResult, Coord, Grid, StepResult

# down, right, up, left -- this order is the tie-break for every solver
DIRECTIONS = [(0, 1), (1, 0), (0, -1), (-1, 0)]


def get_neighbors(c: Coord, grid: Grid) -> List[Coord]:
    """Return in-bounds, non-wall 4-connected neighbours of c."""
    x, y = c
    out: List[Coord] = []
    for dx, dy in DIRECTIONS:
        n = (x + dx, y + dy)
        if grid.in_bounds(n) and not grid.is_block(n):
            out.append(n)
    return out


def heuristic(a: Coord, b: Coord) -> int:
    """Manhattan distance, admissible and consistent on a 4-connected unit grid."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def reconstruct_path(grid: Grid, end: Coord) -> List[Coord]:
    """
    Follow parent links from ``end`` to the parent-less cell and return the
    path in start -> end order. A chain that loops raises PathReconstructionError.
    """
    path: List[Coord] = []
    cur: Optional[Coord] = end
    limit = len(grid)
    while cur is not None:
        if len(path) >= limit:
            raise PathReconstructionError(f"parent chain from {end} does not terminate")
        if not grid.in_bounds(cur):
            raise PathReconstructionError(f"parent chain from {end} leaves the grid at {cur}")
        path.append(cur)
        cur = grid.cell(cur).parent
    path.reverse()
    return path


def reset_search_state(grid: Grid) -> None:
    grid.reset_search_state()


@dataclass
class SearchAlgo:
    name: str = "search"
    kind: str = ""
    pace: float = 1.0          # share of the host's step delay one step() is worth

    grid: Optional[Grid] = None
    start_cell: Optional[Coord] = None
    goal_cell: Optional[Coord] = None
    visited: Set[Coord] = field(default_factory=set)
    path: Optional[List[Coord]] = None
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    error: Optional[str] = None

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Optional[Coord] = None, end: Optional[Coord] = None) -> None:
        """Bind to a grid. start/end default to the grid's start/end cells."""
        self.grid = grid
        self.start_cell = start if start is not None else grid.start
        self.goal_cell = end if end is not None else grid.end
        self.reset()

    def reset(self) -> None:
        """Clear the grid's search fields and all internal state, then seed the frontier."""
        if self.grid is None:
            return
        self.grid.reset_search_state()
        self.visited = set()
        self.path = None
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.error = None
        self._seed()

    # -------------------- hooks --------------------

    def _seed(self) -> None:
        raise NotImplementedError

    def _expand(self) -> StepResult:
        raise NotImplementedError

    def _frontier_size(self) -> int:
        raise NotImplementedError

    # -------------------- helpers --------------------

    def _neighbors4(self, c: Coord) -> List[Coord]:
        return get_neighbors(c, self.grid)

    def _process(self, u: Coord) -> None:
        """Book-keeping for a popped cell that is not the goal."""
        cell = self.grid.cell(u)
        cell.is_visited = True
        cell.is_exploring = True
        self.popped_count += 1

    def _finish(self, u: Coord, path: List[Coord]) -> StepResult:
        self.done = True
        self.path = path
        self.grid.cell(u).is_visited = True
        return StepResult(status="done", closed=[u], current=u, path=path,
                          metrics=self._metrics(path_len=len(path) - 1))

    def _exhausted(self) -> StepResult:
        self.no_path = True
        return StepResult(status="no_path", metrics=self._metrics())

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        if self.grid is None or self.start_cell is None or self.goal_cell is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=self.path,
                              metrics=self._metrics(path_len=len(self.path) - 1))
        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())
        if self.error:
            return StepResult(status="error", metrics=self._metrics())

        try:
            return self._expand()
        except PathReconstructionError as ex:
            self.error = str(ex)
            return StepResult(status="error", metrics=self._metrics())

    def steps(self) -> Iterator[StepResult]:
        """Yield every step until (and including) the terminal one."""
        while True:
            res = self.step()
            yield res
            if res.terminal or res.status == "idle":
                return

    def run(self) -> AlgorithmResult:
        """Batch mode: reset, search to completion, return the result."""
        t0 = time.perf_counter()
        self.reset()
        for _ in self.steps():
            pass
        return self.result(time.perf_counter() - t0)

    def result(self, elapsed: float) -> AlgorithmResult:
        path = tuple(self.path) if self.done and self.path else ()
        return AlgorithmResult(
            algo=self.kind or self.name,
            path=path,
            visited_nodes=frozenset(self.visited),
            execution_time=elapsed,
            path_length=len(path) - 1 if path else 0,
            nodes_explored=self.popped_count,
            success=bool(path),
            error=self.error,
        )

    # -------------------- metrics --------------------

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": self._frontier_size() if self.grid is not None else 0,
            "closed_count": len(self.visited),
            "path_len": path_len,
        }
