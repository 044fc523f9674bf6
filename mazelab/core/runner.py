# mazelab/core/runner.py
#!/usr/bin/env python3
"""
Dispatch boundary between callers (viewer, bench CLI, tests) and the solvers.

- solve(kind, grid, ...)   one run, optionally paced for animation
- compare_all(grid, ...)   every solver in turn on the same walls, batch mode
"""

import random
import time
from typing import Callable, Dict, Optional, Sequence, Tuple

from mazelab.core.astar import AStarAlgo
from mazelab.core.bfs import BFSAlgo
from mazelab.core.bidirectional import BidirectionalAlgo
from mazelab.core.dfs import DFSAlgo
from mazelab.core.dijkstra import DijkstraAlgo
from mazelab.core.errors import MissingEndpointError, UnknownKindError
from mazelab.core.search import SearchAlgo
from mazelab.core.types import AlgorithmResult, Cell, Coord, Grid

ALGORITHMS = {
    "astar":         AStarAlgo,
    "dijkstra":      DijkstraAlgo,
    "bfs":           BFSAlgo,
    "dfs":           DFSAlgo,
    "bidirectional": BidirectionalAlgo,
}
ALGORITHM_ORDER = ("astar", "dijkstra", "bfs", "dfs", "bidirectional")

ALGORITHM_INFO = {
    "astar": {
        "name": "A* Search",
        "description": "Uses heuristics to find optimal path efficiently",
        "time": "O(b^d)", "space": "O(b^d)",
        "optimal": True, "complete": True,
    },
    "dijkstra": {
        "name": "Dijkstra's Algorithm",
        "description": "Guarantees shortest path, explores uniformly",
        "time": "O((V + E) log V)", "space": "O(V)",
        "optimal": True, "complete": True,
    },
    "bfs": {
        "name": "Breadth-First Search",
        "description": "Explores level by level, guarantees shortest path",
        "time": "O(V + E)", "space": "O(V)",
        "optimal": True, "complete": True,
    },
    "dfs": {
        "name": "Depth-First Search",
        "description": "Explores as far as possible before backtracking",
        "time": "O(V + E)", "space": "O(V)",
        "optimal": False, "complete": True,
    },
    "bidirectional": {
        "name": "Bidirectional Search",
        "description": "Searches from both start and end simultaneously",
        "time": "O(b^(d/2))", "space": "O(b^(d/2))",
        "optimal": True, "complete": True,
    },
}

ProgressSink = Callable[[Cell], None]


def make_algo(kind: str, rng: Optional[random.Random] = None) -> SearchAlgo:
    if kind not in ALGORITHMS:
        raise UnknownKindError("algorithm", kind, ALGORITHM_ORDER)
    if kind == "dfs":
        return DFSAlgo(rng=rng if rng is not None else random.Random())
    return ALGORITHMS[kind]()


def validate_endpoints(grid: Grid, start: Optional[Coord] = None,
                       end: Optional[Coord] = None) -> Tuple[Coord, Coord]:
    """Caller-side precondition check: a non-empty grid with a start and an end."""
    if grid is None or grid.width == 0 or grid.height == 0:
        raise MissingEndpointError("the grid is empty")
    start = start if start is not None else grid.start
    end = end if end is not None else grid.end
    if start is None or end is None:
        raise MissingEndpointError("please set both start and end points")
    for label, c in (("start", start), ("end", end)):
        if not grid.in_bounds(c):
            raise MissingEndpointError(f"{label} {c} is outside the {grid.width}x{grid.height} grid")
    return start, end


def solve(kind: str, grid: Grid, start: Optional[Coord] = None, end: Optional[Coord] = None,
          progress: Optional[ProgressSink] = None, step_delay: float = 0.0,
          rng: Optional[random.Random] = None,
          sleep: Callable[[float], None] = time.sleep) -> AlgorithmResult:
    """
    Run one solver on ``grid``. With a progress sink and step_delay > 0 each
    processed cell is handed to the sink and the call sleeps step_delay
    (scaled by the solver's pace) before the next step; with step_delay == 0
    it runs straight through. execution_time covers the whole call.
    """
    start, end = validate_endpoints(grid, start, end)
    algo = make_algo(kind, rng)

    t0 = time.perf_counter()
    algo.init(grid, start, end)
    paced = progress is not None and step_delay > 0
    for res in algo.steps():
        if paced and res.status == "running" and res.current is not None:
            progress(grid.cell(res.current).snapshot())
            sleep(step_delay * algo.pace)
    result = algo.result(time.perf_counter() - t0)

    if result.success:
        grid.mark_path(result.path)
    return result


def compare_all(grid: Grid, kinds: Sequence[str] = ALGORITHM_ORDER,
                rng: Optional[random.Random] = None) -> Dict[str, AlgorithmResult]:
    """Run each solver back to back on the same walls. Search state is reset before every run."""
    validate_endpoints(grid)
    results: Dict[str, AlgorithmResult] = {}
    for kind in kinds:
        grid.reset_search_state()
        results[kind] = solve(kind, grid, rng=rng)
    return results
