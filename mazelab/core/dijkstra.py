# mazelab/core/dijkstra.py
#!/usr/bin/env python3

from dataclasses import dataclass, field
from math import inf
from typing import Dict, List

from mazelab.core.search import SearchAlgo, reconstruct_path
from mazelab.core.types import Coord, StepResult


@dataclass
class DijkstraAlgo(SearchAlgo):
    """
    Textbook Dijkstra over every passage cell. The minimum is found with a
    linear scan of the unsettled set (row-major order, first minimum wins);
    settled cells are never revisited.
    """
    name: str = "Dijkstra"
    kind: str = "dijkstra"

    unsettled: Dict[Coord, None] = field(default_factory=dict)   # ordered set
    reached: int = 0   # unsettled cells with a finite distance

    def _seed(self) -> None:
        self.unsettled = {}
        for cell in self.grid:
            if not cell.is_wall:
                self.unsettled[cell.pos] = None
        self.grid.cell(self.start_cell).distance = 0
        self.unsettled.setdefault(self.start_cell, None)
        self.reached = 1

    def _frontier_size(self) -> int:
        return self.reached

    def _expand(self) -> StepResult:
        u = None
        best = inf
        for c in self.unsettled:
            d = self.grid.cell(c).distance
            if d < best:
                u, best = c, d
        if u is None:
            return self._exhausted()

        del self.unsettled[u]
        self.reached -= 1
        self.visited.add(u)

        if u == self.goal_cell:
            return self._finish(u, reconstruct_path(self.grid, u))

        self._process(u)

        opened_now: List[Coord] = []
        for v in self._neighbors4(u):
            if v not in self.unsettled:
                continue
            cell = self.grid.cell(v)
            alt = best + 1
            if alt < cell.distance:
                if cell.distance == inf:
                    opened_now.append(v)
                    self.reached += 1
                cell.distance = alt
                cell.parent = u

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())
