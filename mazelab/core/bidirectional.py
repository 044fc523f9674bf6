# mazelab/core/bidirectional.py
#!/usr/bin/env python3
"""
Bidirectional BFS - two FIFO frontiers, one from the start and one from the
end, expanded alternately (one pop per step(), so a forward step and a
backward step together make one outer iteration).

Forward discoveries record ``parent`` on the cell (pointing back toward the
start). Backward discoveries record ``succ`` (pointing on toward the end)
for every cell they reach, so both legs of the final path can always be
walked; a broken chain is reported, never truncated.

The search stops the moment a popped cell has already been reached by the
other side. The path is then joined at the cell of the overlap with the
smallest forward + backward distance, which keeps the result shortest.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from mazelab.core.errors import PathReconstructionError
from mazelab.core.search import SearchAlgo, reconstruct_path
from mazelab.core.types import Coord, StepResult

FORWARD, BACKWARD = 0, 1


@dataclass
class BidirectionalAlgo(SearchAlgo):
    name: str = "Bidirectional"
    kind: str = "bidirectional"
    pace: float = 0.5

    fwd_queue: Deque[Coord] = field(default_factory=deque)
    bwd_queue: Deque[Coord] = field(default_factory=deque)
    fwd_dist: Dict[Coord, int] = field(default_factory=dict)   # discovery order kept
    bwd_dist: Dict[Coord, int] = field(default_factory=dict)
    succ: Dict[Coord, Optional[Coord]] = field(default_factory=dict)
    turn: int = FORWARD
    meeting: Optional[Coord] = None

    def _seed(self) -> None:
        s, e = self.start_cell, self.goal_cell
        self.fwd_queue = deque([s])
        self.bwd_queue = deque([e])
        self.fwd_dist = {s: 0}
        self.bwd_dist = {e: 0}
        self.succ = {e: None}
        self.turn = FORWARD
        self.meeting = None
        self.grid.cell(s).distance = 0
        self.grid.cell(e).distance = 0

    def _frontier_size(self) -> int:
        return len(self.fwd_queue) + len(self.bwd_queue)

    def _expand(self) -> StepResult:
        if not self.fwd_queue and not self.bwd_queue:
            return self._exhausted()

        side = self.turn
        if side == FORWARD and not self.fwd_queue:
            side = BACKWARD
        elif side == BACKWARD and not self.bwd_queue:
            side = FORWARD
        self.turn = BACKWARD if side == FORWARD else FORWARD

        if side == FORWARD:
            queue, mine, other = self.fwd_queue, self.fwd_dist, self.bwd_dist
        else:
            queue, mine, other = self.bwd_queue, self.bwd_dist, self.fwd_dist

        u = queue.popleft()
        self.visited.add(u)

        if u in other:
            self.meeting = self._best_meeting(u)
            return self._finish(u, self._join(self.meeting))

        self._process(u)

        opened_now: List[Coord] = []
        for v in self._neighbors4(u):
            if v in mine:
                continue
            mine[v] = mine[u] + 1
            if side == FORWARD:
                cell = self.grid.cell(v)
                cell.parent = u
                cell.distance = mine[v]
            else:
                self.succ[v] = u
            queue.append(v)
            opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def _best_meeting(self, u: Coord) -> Coord:
        best, best_len = u, self.fwd_dist[u] + self.bwd_dist[u]
        for c, df in self.fwd_dist.items():
            db = self.bwd_dist.get(c)
            if db is not None and df + db < best_len:
                best, best_len = c, df + db
        return best

    def _join(self, meet: Coord) -> List[Coord]:
        path = reconstruct_path(self.grid, meet)
        if path[0] != self.start_cell:
            raise PathReconstructionError(f"forward leg from {meet} ends at {path[0]}, not the start")
        cur = meet
        while cur != self.goal_cell:
            nxt = self.succ.get(cur)
            if nxt is None:
                raise PathReconstructionError(f"backward leg broken at {cur}")
            path.append(nxt)
            cur = nxt
            if len(path) > len(self.grid):
                raise PathReconstructionError(f"backward leg from {meet} does not reach the end")
        return path

