# mazelab/core/astar.py
#!/usr/bin/env python3
"""
A* - one expansion per step() for animation.

Heuristic:
- Manhattan for 4-connected unit-cost grids.

Tie-breaking in the PQ:
- (f, h, seq, cell): lower f, then lower h, then FIFO by seq.
"""

from dataclasses import dataclass, field
from typing import List, Set, Tuple
import heapq

from mazelab.core.search import SearchAlgo, heuristic, reconstruct_path
from mazelab.core.types import Coord, StepResult


@dataclass
class AStarAlgo(SearchAlgo):
    name: str = "A*"
    kind: str = "astar"

    open_pq: List[Tuple[int, int, int, Coord]] = field(default_factory=list)  # (f, h, seq, cell)
    open_set: Set[Coord] = field(default_factory=set)   # for overlay
    seq: int = 0  # monotonic counter for PQ stability

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _h(self, c: Coord) -> int:
        return heuristic(c, self.goal_cell)

    def _push(self, c: Coord) -> None:
        cell = self.grid.cell(c)
        heapq.heappush(self.open_pq, (cell.f_cost, cell.h_cost, self._bump(), c))
        self.open_set.add(c)

    def _seed(self) -> None:
        self.open_pq = []
        self.open_set = set()
        self.seq = 0
        s = self.grid.cell(self.start_cell)
        s.g_cost = 0
        s.h_cost = self._h(self.start_cell)
        s.f_cost = s.h_cost
        self._push(self.start_cell)

    def _frontier_size(self) -> int:
        return len(self.open_set)

    def _expand(self) -> StepResult:
        # Pop best, skipping entries superseded by a cheaper push
        while self.open_pq:
            f_u, _, _, u = heapq.heappop(self.open_pq)
            if u not in self.visited and f_u == self.grid.cell(u).f_cost:
                break
        else:
            return self._exhausted()

        self.open_set.discard(u)
        self.visited.add(u)

        if u == self.goal_cell:
            return self._finish(u, reconstruct_path(self.grid, u))

        self._process(u)
        g_u = self.grid.cell(u).g_cost

        opened_now: List[Coord] = []
        for v in self._neighbors4(u):
            if v in self.visited:
                continue
            cell = self.grid.cell(v)
            alt = g_u + 1
            if v in self.open_set and alt >= cell.g_cost:
                continue
            cell.parent = u
            cell.g_cost = alt
            cell.h_cost = self._h(v)
            cell.f_cost = alt + cell.h_cost
            if v not in self.open_set:
                opened_now.append(v)
            self._push(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())
