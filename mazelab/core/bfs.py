# mazelab/core/bfs.py
#!/usr/bin/env python3

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Set

from mazelab.core.search import SearchAlgo, reconstruct_path
from mazelab.core.types import Coord, StepResult


@dataclass
class BFSAlgo(SearchAlgo):
    """FIFO queue, each cell enqueued at most once."""
    name: str = "BFS"
    kind: str = "bfs"

    queue: Deque[Coord] = field(default_factory=deque)
    discovered: Set[Coord] = field(default_factory=set)

    def _seed(self) -> None:
        self.queue = deque([self.start_cell])
        self.discovered = {self.start_cell}

    def _frontier_size(self) -> int:
        return len(self.queue)

    def _expand(self) -> StepResult:
        if not self.queue:
            return self._exhausted()

        u = self.queue.popleft()
        self.visited.add(u)

        if u == self.goal_cell:
            return self._finish(u, reconstruct_path(self.grid, u))

        self._process(u)

        opened_now: List[Coord] = []
        for v in self._neighbors4(u):
            if v not in self.discovered:
                self.discovered.add(v)
                self.grid.cell(v).parent = u
                self.queue.append(v)
                opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())
