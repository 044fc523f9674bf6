# mazelab/app/bench.py
#!/usr/bin/env python3
"""
Headless comparison: build mazes, run every solver on each one in batch
mode, print the per-maze table and the averages.

    python -m mazelab.app.bench --gen kruskal --size 31 --runs 5 --seed 7
"""

import argparse
import random
import statistics
import sys
from typing import Dict, List, Optional

from mazelab.core.errors import MazeError
from mazelab.core.maze_gen import GENERATORS, build_maze
from mazelab.core.metrics import format_table
from mazelab.core.runner import ALGORITHM_ORDER, compare_all
from mazelab.core.types import AlgorithmResult


def run_batch(gen: str, size: int, runs: int, algorithms: List[str],
              seed: Optional[int] = None, show_maze: bool = False) -> List[Dict[str, AlgorithmResult]]:
    rng = random.Random(seed)
    all_runs = []
    for i in range(runs):
        grid = build_maze(gen, size, rng)
        results = compare_all(grid, algorithms, rng=rng)
        print(f"\n# run {i + 1}/{runs}: {gen} {grid.width}x{grid.height}")
        if show_maze:
            print(grid.to_text())
        print(format_table(results))
        all_runs.append(results)
    return all_runs


def aggregate_results(all_runs: List[Dict[str, AlgorithmResult]]) -> Dict[str, Dict[str, float]]:
    summary: Dict[str, Dict[str, float]] = {}
    if not all_runs:
        return summary
    for algo in all_runs[0]:
        rows = [r[algo] for r in all_runs]
        solved = [r for r in rows if r.success]
        summary[algo] = {
            "success_rate": len(solved) / len(rows),
            "time_ms_avg": statistics.mean(r.execution_time * 1000.0 for r in rows),
            "explored_avg": statistics.mean(r.nodes_explored for r in rows),
            "path_len_avg": statistics.mean(r.path_length for r in solved) if solved else 0.0,
        }
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compare maze solvers on generated mazes.")
    parser.add_argument("--gen", choices=list(GENERATORS), default="recursive")
    parser.add_argument("--size", type=int, default=25)
    parser.add_argument("--runs", type=int, default=3, help="Mazes to generate")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--algorithms", nargs="*", choices=list(ALGORITHM_ORDER), default=list(ALGORITHM_ORDER))
    parser.add_argument("--show-maze", action="store_true", help="Print each maze as text")
    args = parser.parse_args(argv)

    try:
        all_runs = run_batch(args.gen, args.size, args.runs, args.algorithms,
                             seed=args.seed, show_maze=args.show_maze)
    except (MazeError, ValueError) as ex:
        print(f"Benchmark failed: {ex}")
        return 1

    print("\n# averages")
    for algo, row in aggregate_results(all_runs).items():
        print(f"{algo:<14} solved {row['success_rate'] * 100:5.1f}%  "
              f"time {row['time_ms_avg']:8.2f}ms  explored {row['explored_avg']:8.1f}  "
              f"path {row['path_len_avg']:6.1f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
