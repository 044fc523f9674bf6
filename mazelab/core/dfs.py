# mazelab/core/dfs.py
#!/usr/bin/env python3

import random
from dataclasses import dataclass, field
from typing import List

from mazelab.core.search import SearchAlgo, reconstruct_path
from mazelab.core.types import Coord, StepResult


@dataclass
class DFSAlgo(SearchAlgo):
    """
    LIFO stack with the neighbour order shuffled on every expansion. A cell can
    sit on the stack more than once; stale copies are skipped when popped.
    Complete but not optimal.
    """
    name: str = "DFS"
    kind: str = "dfs"

    rng: random.Random = field(default_factory=random.Random)
    stack: List[Coord] = field(default_factory=list)

    def _seed(self) -> None:
        self.stack = [self.start_cell]

    def _frontier_size(self) -> int:
        return len(self.stack)

    def _expand(self) -> StepResult:
        while self.stack:
            u = self.stack.pop()
            if u not in self.visited:
                break
        else:
            return self._exhausted()

        self.visited.add(u)

        if u == self.goal_cell:
            return self._finish(u, reconstruct_path(self.grid, u))

        self._process(u)

        neighbors = self._neighbors4(u)
        self.rng.shuffle(neighbors)
        opened_now: List[Coord] = []
        for v in neighbors:
            if v not in self.visited:
                # last push is popped first, so its parent wins
                self.grid.cell(v).parent = u
                self.stack.append(v)
                opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())
