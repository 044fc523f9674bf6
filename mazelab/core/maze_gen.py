# mazelab/core/maze_gen.py
#!/usr/bin/env python3
"""
Maze generators. Every generator returns a fresh Grid and draws all of its
randomness from the ``rng`` it is handed, so a seeded ``random.Random`` gives
a reproducible maze.

- recursive : randomized depth-first carving on the odd lattice (perfect maze)
- prim      : randomized Prim growth from the centre cell
- kruskal   : randomized Kruskal over the odd lattice with union-find (perfect maze)
- empty     : open grid sprinkled with random walls (no connectivity guarantee)
"""

import random
from typing import Callable, Dict, List, Optional, Tuple

from mazelab.core.errors import UnknownKindError
from mazelab.core.types import Cell, Coord, Grid

STEP2 = [(0, 2), (2, 0), (0, -2), (-2, 0)]
DEFAULT_DENSITY = 0.3


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def create_empty_maze(width: int, height: int) -> Grid:
    return Grid.filled(width, height, wall=False)


# -------------------- recursive backtracking --------------------

def recursive_backtracking(width: int, height: int, rng: Optional[random.Random] = None) -> Grid:
    rng = _rng(rng)
    w = width - 1 if width % 2 == 0 else width
    h = height - 1 if height % 2 == 0 else height
    grid = Grid.filled(w, h, wall=True)

    start = grid.cells[1][1]
    start.is_wall = False
    stack: List[Cell] = [start]

    while stack:
        cur = stack[-1]
        neighbors = [grid.cells[cur.y + dy][cur.x + dx]
                     for dx, dy in STEP2
                     if 0 < cur.x + dx < w - 1 and 0 < cur.y + dy < h - 1
                     and grid.cells[cur.y + dy][cur.x + dx].is_wall]
        if neighbors:
            nxt = rng.choice(neighbors)
            grid.cells[(cur.y + nxt.y) // 2][(cur.x + nxt.x) // 2].is_wall = False
            nxt.is_wall = False
            stack.append(nxt)
        else:
            stack.pop()
    return grid


# -------------------- prim --------------------

def _add_frontier(cell: Cell, grid: Grid, frontier: List[Cell], queued: set) -> None:
    """Queue the still-walled cells two steps from ``cell`` that lie inside the border."""
    for dx, dy in STEP2:
        nx, ny = cell.x + dx, cell.y + dy
        if not (0 < nx < grid.width - 1 and 0 < ny < grid.height - 1):
            continue
        nxt = grid.cells[ny][nx]
        if nxt.is_wall and nxt.pos not in queued:
            frontier.append(nxt)
            queued.add(nxt.pos)


def _passage_neighbors2(cell: Cell, grid: Grid) -> List[Cell]:
    out: List[Cell] = []
    for dx, dy in STEP2:
        n = (cell.x + dx, cell.y + dy)
        if grid.in_bounds(n) and not grid.is_block(n):
            out.append(grid.cell(n))
    return out


def prim(width: int, height: int, rng: Optional[random.Random] = None) -> Grid:
    rng = _rng(rng)
    grid = Grid.filled(width, height, wall=True)

    seed = grid.cells[height // 2][width // 2]
    seed.is_wall = False
    frontier: List[Cell] = []
    queued: set = set()          # mirrors the current content of `frontier`
    _add_frontier(seed, grid, frontier, queued)

    while frontier:
        cell = frontier.pop(rng.randrange(len(frontier)))
        queued.discard(cell.pos)
        if not cell.is_wall:
            continue
        carved = _passage_neighbors2(cell, grid)
        # a second carved neighbour would close a loop
        if len(carved) == 1:
            other = carved[0]
            grid.cells[(cell.y + other.y) // 2][(cell.x + other.x) // 2].is_wall = False
            cell.is_wall = False
            _add_frontier(cell, grid, frontier, queued)
    return grid


# -------------------- kruskal --------------------

class UnionFind:
    """Disjoint sets over 0..n-1: path compression plus union by rank."""

    def __init__(self, n: int):
        self.parent: List[int] = list(range(n))
        self.rank: List[int] = [0] * n

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets of a and b. False if they were already one set."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
        return True


def kruskal(width: int, height: int, rng: Optional[random.Random] = None) -> Grid:
    rng = _rng(rng)
    grid = Grid.filled(width, height, wall=True)

    index: Dict[Coord, int] = {}
    for y in range(1, height - 1, 2):
        for x in range(1, width - 1, 2):
            grid.cells[y][x].is_wall = False
            index[(x, y)] = len(index)
    sets = UnionFind(len(index))

    # (a, b, wall between) -- right and down only, so each pair appears once
    edges: List[Tuple[int, int, Cell]] = []
    for (x, y), i in index.items():
        if (x + 2, y) in index:
            edges.append((i, index[(x + 2, y)], grid.cells[y][x + 1]))
        if (x, y + 2) in index:
            edges.append((i, index[(x, y + 2)], grid.cells[y + 1][x]))

    # Fisher-Yates
    for i in range(len(edges) - 1, 0, -1):
        j = rng.randrange(i + 1)
        edges[i], edges[j] = edges[j], edges[i]

    for a, b, wall in edges:
        if sets.union(a, b):
            wall.is_wall = False
    return grid


# -------------------- post-processing --------------------

def add_random_walls(grid: Grid, density: float = DEFAULT_DENSITY,
                     rng: Optional[random.Random] = None) -> None:
    rng = _rng(rng)
    for cell in grid:
        if not cell.is_start and not cell.is_end and rng.random() < density:
            cell.is_wall = True


def ensure_start_end_accessible(grid: Grid, sx: int, sy: int, ex: int, ey: int) -> None:
    """Clear the 3x3 block around start and end (clipped to the grid)."""
    for cx, cy in ((sx, sy), (ex, ey)):
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if grid.in_bounds((cx + dx, cy + dy)):
                    grid.cells[cy + dy][cx + dx].is_wall = False


# -------------------- dispatch --------------------

def _empty_with_walls(width: int, height: int, rng: Optional[random.Random] = None,
                      density: float = DEFAULT_DENSITY) -> Grid:
    grid = create_empty_maze(width, height)
    add_random_walls(grid, density, rng)
    return grid


GENERATORS: Dict[str, Callable[..., Grid]] = {
    "recursive": recursive_backtracking,
    "prim":      prim,
    "kruskal":   kruskal,
    "empty":     _empty_with_walls,
}


def generate(kind: str, width: int, height: int, rng: Optional[random.Random] = None,
             density: float = DEFAULT_DENSITY) -> Grid:
    if kind not in GENERATORS:
        raise UnknownKindError("generator", kind, GENERATORS)
    if width < 3 or height < 3:
        raise ValueError(f"maze must be at least 3x3, got {width}x{height}")
    if kind == "empty":
        return _empty_with_walls(width, height, rng, density)
    return GENERATORS[kind](width, height, rng)


def build_maze(kind: str, size: int, rng: Optional[random.Random] = None) -> Grid:
    """
    Generate a square maze ready to solve: start at (1, 1), end at the
    opposite inner corner, both neighbourhoods cleared.
    """
    grid = generate(kind, size, size, rng)
    sx, sy = 1, 1
    ex, ey = grid.width - 2, grid.height - 2
    ensure_start_end_accessible(grid, sx, sy, ex, ey)
    grid.set_start((sx, sy))
    grid.set_end((ex, ey))
    return grid
