import random
import sys
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mazelab.core.astar import AStarAlgo
from mazelab.core.bfs import BFSAlgo
from mazelab.core.bidirectional import BidirectionalAlgo
from mazelab.core.dfs import DFSAlgo
from mazelab.core.dijkstra import DijkstraAlgo
from mazelab.core.errors import PathReconstructionError
from mazelab.core.maze_gen import build_maze, create_empty_maze
from mazelab.core.runner import ALGORITHM_ORDER, make_algo
from mazelab.core.search import get_neighbors, heuristic, reconstruct_path
from mazelab.core.types import Grid

OPTIMAL = ("astar", "dijkstra", "bfs", "bidirectional")


def open_grid(w: int, h: int, start, end, walls=()) -> Grid:
    grid = create_empty_maze(w, h)
    for c in walls:
        grid.toggle_wall(c)
    grid.set_start(start)
    grid.set_end(end)
    return grid


def run(kind: str, grid: Grid, seed: int = 0):
    algo = make_algo(kind, random.Random(seed))
    algo.init(grid)
    return algo.run()


def assert_valid_path(tc: unittest.TestCase, grid: Grid, path) -> None:
    tc.assertEqual(path[0], grid.start)
    tc.assertEqual(path[-1], grid.end)
    for a, b in zip(path, path[1:]):
        tc.assertEqual(heuristic(a, b), 1)
        tc.assertFalse(grid.is_block(b))


class SubstrateTestCase(unittest.TestCase):
    def test_neighbor_order_is_down_right_up_left(self) -> None:
        grid = create_empty_maze(3, 3)
        self.assertEqual(get_neighbors((1, 1), grid), [(1, 2), (2, 1), (1, 0), (0, 1)])

    def test_neighbors_skip_walls_and_edges(self) -> None:
        grid = create_empty_maze(3, 3)
        grid.toggle_wall((1, 0))
        self.assertEqual(get_neighbors((0, 0), grid), [(0, 1)])

    def test_heuristic_is_manhattan(self) -> None:
        self.assertEqual(heuristic((1, 1), (4, 5)), 7)
        self.assertEqual(heuristic((4, 5), (1, 1)), 7)
        self.assertEqual(heuristic((2, 2), (2, 2)), 0)

    def test_reconstruct_path_follows_parents(self) -> None:
        grid = create_empty_maze(3, 1)
        grid[(1, 0)].parent = (0, 0)
        grid[(2, 0)].parent = (1, 0)
        self.assertEqual(reconstruct_path(grid, (2, 0)), [(0, 0), (1, 0), (2, 0)])

    def test_reconstruct_path_rejects_a_cycle(self) -> None:
        grid = create_empty_maze(3, 1)
        grid[(1, 0)].parent = (2, 0)
        grid[(2, 0)].parent = (1, 0)
        with self.assertRaises(PathReconstructionError):
            reconstruct_path(grid, (2, 0))

    def test_reconstruct_path_rejects_out_of_grid_parent(self) -> None:
        grid = create_empty_maze(2, 1)
        grid[(1, 0)].parent = (7, 7)
        with self.assertRaises(PathReconstructionError):
            reconstruct_path(grid, (1, 0))


class ConcreteScenarioTestCase(unittest.TestCase):
    def test_open_five_by_five(self) -> None:
        for kind in OPTIMAL:
            with self.subTest(kind=kind):
                grid = open_grid(5, 5, (1, 1), (3, 3))
                res = run(kind, grid)
                self.assertTrue(res.success)
                self.assertEqual(res.path_length, 4)
                self.assertEqual(len(res.path), 5)
                self.assertGreaterEqual(len(res.visited_nodes), res.path_length + 1)
                assert_valid_path(self, grid, res.path)

    def test_walled_off_single_row(self) -> None:
        for kind in ALGORITHM_ORDER:
            with self.subTest(kind=kind):
                grid = open_grid(5, 1, (0, 0), (4, 0), walls=[(2, 0)])
                res = run(kind, grid)
                self.assertFalse(res.success)
                self.assertEqual(res.path, ())
                self.assertEqual(res.path_length, 0)
                self.assertIsNone(res.error)

    def test_start_equals_end(self) -> None:
        for kind in ALGORITHM_ORDER:
            with self.subTest(kind=kind):
                grid = create_empty_maze(4, 4)
                algo = make_algo(kind, random.Random(0))
                algo.init(grid, (2, 2), (2, 2))
                res = algo.run()
                self.assertTrue(res.success)
                self.assertEqual(res.path, ((2, 2),))
                self.assertEqual(res.path_length, 0)

    def test_detour_around_a_wall(self) -> None:
        # . . . . .
        # . # # # .
        # S # . # E      shortest route goes over the top or under the bottom
        # . # # # .
        # . . . . .
        walls = [(1, 1), (2, 1), (3, 1), (1, 2), (3, 2), (1, 3), (2, 3), (3, 3)]
        for kind in OPTIMAL:
            with self.subTest(kind=kind):
                grid = open_grid(5, 5, (0, 2), (4, 2), walls=walls)
                res = run(kind, grid)
                self.assertEqual(res.path_length, 8)
                assert_valid_path(self, grid, res.path)

    def test_astar_explores_less_than_bfs_in_the_open(self) -> None:
        a = run("astar", open_grid(9, 9, (0, 0), (8, 8)))
        b = run("bfs", open_grid(9, 9, (0, 0), (8, 8)))
        self.assertEqual(a.path_length, b.path_length)
        self.assertLess(a.nodes_explored, b.nodes_explored)


class MazePropertyTestCase(unittest.TestCase):
    def _mazes(self):
        for kind in ("recursive", "prim", "kruskal", "empty"):
            for seed in range(6):
                yield kind, seed, build_maze(kind, 21, random.Random(seed))

    def test_optimal_solvers_agree_and_dfs_is_no_shorter(self) -> None:
        for kind, seed, grid in self._mazes():
            with self.subTest(gen=kind, seed=seed):
                results = {k: run(k, grid, seed) for k in ALGORITHM_ORDER}
                bfs = results["bfs"]
                for k in ALGORITHM_ORDER:
                    self.assertEqual(results[k].success, bfs.success)
                if not bfs.success:
                    continue
                for k in OPTIMAL:
                    self.assertEqual(results[k].path_length, bfs.path_length, k)
                    assert_valid_path(self, grid, results[k].path)
                self.assertGreaterEqual(results["dfs"].path_length, bfs.path_length)
                assert_valid_path(self, grid, results["dfs"].path)

    def test_perfect_mazes_are_always_solvable(self) -> None:
        for kind in ("recursive", "kruskal"):
            for seed in range(4):
                grid = build_maze(kind, 25, random.Random(seed))
                for k in ALGORITHM_ORDER:
                    with self.subTest(gen=kind, seed=seed, algo=k):
                        self.assertTrue(run(k, grid, seed).success)

    def test_disconnected_regions_fail_everywhere(self) -> None:
        walls = [(3, y) for y in range(7)]
        for kind in ALGORITHM_ORDER:
            with self.subTest(kind=kind):
                grid = open_grid(7, 7, (0, 0), (6, 6), walls=walls)
                res = run(kind, grid)
                self.assertFalse(res.success)
                self.assertEqual((res.path, res.path_length), ((), 0))
                self.assertGreater(res.nodes_explored, 0)

    def test_deterministic_solvers_repeat_exactly(self) -> None:
        grid = build_maze("prim", 25, random.Random(11))
        for kind in OPTIMAL:
            with self.subTest(kind=kind):
                first, second = run(kind, grid), run(kind, grid)
                self.assertEqual(first.path, second.path)
                self.assertEqual(first.path_length, second.path_length)
                self.assertEqual(first.nodes_explored, second.nodes_explored)
                self.assertEqual(first.visited_nodes, second.visited_nodes)

    def test_dfs_repeats_with_the_same_seed(self) -> None:
        grid = build_maze("empty", 25, random.Random(8))
        a = run("dfs", grid, seed=42)
        b = run("dfs", grid, seed=42)
        self.assertEqual(a.path, b.path)


class StepContractTestCase(unittest.TestCase):
    def test_each_running_step_processes_one_cell(self) -> None:
        for kind in ALGORITHM_ORDER:
            with self.subTest(kind=kind):
                grid = build_maze("kruskal", 15, random.Random(2))
                algo = make_algo(kind, random.Random(0))
                algo.init(grid)
                steps = list(algo.steps())
                self.assertEqual(steps[-1].status, "done")
                self.assertTrue(all(s.status == "running" for s in steps[:-1]))
                self.assertEqual(len(steps) - 1, algo.popped_count)
                for s in steps[:-1]:
                    cell = grid.cell(s.current)
                    self.assertTrue(cell.is_visited and cell.is_exploring)
                self.assertEqual(steps[-1].path[-1], grid.end)

    def test_visited_nodes_are_the_popped_cells(self) -> None:
        for kind in ALGORITHM_ORDER:
            with self.subTest(kind=kind):
                grid = build_maze("kruskal", 15, random.Random(2))
                algo = make_algo(kind, random.Random(0))
                algo.init(grid)
                popped = {s.current for s in algo.steps() if s.current is not None}
                result = algo.result(0.0)
                self.assertTrue(result.success)
                self.assertEqual(result.visited_nodes, popped)
                if kind != "bidirectional":
                    self.assertIn(grid.end, result.visited_nodes)

    def test_step_after_finish_repeats_the_answer(self) -> None:
        algo = BFSAlgo()
        algo.init(open_grid(4, 4, (0, 0), (3, 3)))
        for _ in algo.steps():
            pass
        again = algo.step()
        self.assertEqual(again.status, "done")
        self.assertEqual(again.metrics["path_len"], 6)

    def test_unbound_algorithm_is_idle(self) -> None:
        self.assertEqual(AStarAlgo().step().status, "idle")

    def test_reset_allows_a_rerun(self) -> None:
        grid = open_grid(6, 6, (0, 0), (5, 5))
        algo = DijkstraAlgo()
        algo.init(grid)
        first = algo.run()
        algo.reset()
        self.assertEqual(algo.popped_count, 0)
        self.assertTrue(all(not c.is_visited for c in grid))
        second = algo.run()
        self.assertEqual(first.path, second.path)

    def test_init_resets_stale_grid_state(self) -> None:
        grid = open_grid(5, 5, (0, 0), (4, 4))
        grid[(2, 2)].parent = (9, 9)
        grid[(2, 2)].is_path = True
        algo = AStarAlgo()
        algo.init(grid)
        self.assertIsNone(grid[(2, 2)].parent)
        self.assertTrue(algo.run().success)

    def test_metrics_shape(self) -> None:
        algo = AStarAlgo()
        algo.init(open_grid(4, 4, (0, 0), (3, 3)))
        res = algo.step()
        self.assertEqual(res.metrics["algo"], "A*")
        self.assertEqual(res.metrics["popped"], 1)
        self.assertEqual(res.metrics["open_size"], 2)
        self.assertEqual(res.opened, [(0, 1), (1, 0)])


class AlgorithmDetailTestCase(unittest.TestCase):
    def test_astar_costs_are_filled_in(self) -> None:
        grid = open_grid(5, 5, (0, 0), (4, 0))
        algo = AStarAlgo()
        algo.init(grid)
        algo.run()
        end = grid[(4, 0)]
        self.assertEqual(end.g_cost, 4)
        self.assertEqual(end.h_cost, 0)
        self.assertEqual(end.f_cost, 4)

    def test_dijkstra_distances(self) -> None:
        grid = open_grid(5, 1, (0, 0), (4, 0))
        algo = DijkstraAlgo()
        algo.init(grid)
        algo.run()
        self.assertEqual([grid[(x, 0)].distance for x in range(5)], [0, 1, 2, 3, 4])

    def test_dfs_is_randomized_per_rng(self) -> None:
        grid = open_grid(9, 9, (0, 0), (8, 8))
        paths = set()
        for seed in range(8):
            algo = DFSAlgo(rng=random.Random(seed))
            algo.init(grid)
            paths.add(algo.run().path)
        self.assertGreater(len(paths), 1)

    def test_bfs_enqueues_each_cell_once(self) -> None:
        # the end is boxed in; 36 cells - 2 walls - the end itself
        grid = open_grid(6, 6, (0, 0), (5, 5), walls=[(4, 5), (5, 4)])
        algo = BFSAlgo()
        algo.init(grid)
        res = algo.run()
        self.assertFalse(res.success)
        self.assertEqual(res.nodes_explored, 33)

    def test_bidirectional_alternates_sides(self) -> None:
        grid = open_grid(7, 1, (0, 0), (6, 0))
        algo = BidirectionalAlgo()
        algo.init(grid)
        currents = [s.current for s in algo.steps() if s.status == "running"]
        self.assertEqual(currents[:4], [(0, 0), (6, 0), (1, 0), (5, 0)])

    def test_bidirectional_meets_and_joins(self) -> None:
        grid = open_grid(7, 1, (0, 0), (6, 0))
        algo = BidirectionalAlgo()
        algo.init(grid)
        res = algo.run()
        self.assertEqual(res.path, tuple((x, 0) for x in range(7)))
        self.assertIn(algo.meeting, res.path)

    def test_bidirectional_broken_backward_leg_is_reported(self) -> None:
        grid = open_grid(7, 1, (0, 0), (6, 0))
        algo = BidirectionalAlgo()
        algo.init(grid)
        algo.run()
        algo.succ = {algo.goal_cell: None}
        with self.assertRaises(PathReconstructionError):
            algo._join((3, 0))

    def test_broken_chain_turns_into_a_failed_result(self) -> None:
        grid = open_grid(5, 5, (0, 0), (4, 4))
        with mock.patch("mazelab.core.bfs.reconstruct_path",
                        side_effect=PathReconstructionError("chain broken")):
            algo = BFSAlgo()
            algo.init(grid)
            res = algo.run()
        self.assertFalse(res.success)
        self.assertEqual(res.path, ())
        self.assertEqual(res.error, "chain broken")
        self.assertEqual(algo.step().status, "error")


if __name__ == "__main__":
    unittest.main()
