import random
import unittest
from typing import List, Optional, Tuple

from onepath.core.constants import SearchState
from onepath.core.models import OutcomeKind
from onepath.engine.grid import GridConfig, PuzzleGrid
from onepath.engine.search import SearchConfig, SearchSession

Position = Tuple[int, int]


def brute_force_path(grid: PuzzleGrid, start: Position) -> Optional[List[Position]]:
    """Plain recursive DFS with no ordering or pruning."""

    visited = grid.new_visited()
    visited[start[0]][start[1]] = True
    path = [start]

    def extend() -> bool:
        if len(path) == grid.walkable_count:
            return True
        for row, col in grid.walkable_neighbors(path[-1]):
            if visited[row][col]:
                continue
            visited[row][col] = True
            path.append((row, col))
            if extend():
                return True
            path.pop()
            visited[row][col] = False
        return False

    return list(path) if extend() else None


def random_instances(seed: int, count: int):
    rng = random.Random(seed)
    for _ in range(count):
        height = rng.randint(1, 4)
        width = rng.randint(2, 5)
        cells = [(r, c) for r in range(height) for c in range(width)]
        obstacles = set(rng.sample(cells, rng.randint(0, len(cells) // 4)))
        grid = PuzzleGrid(GridConfig(height=height, width=width, obstacles=obstacles))
        start = rng.choice(grid.walkable_cells())
        yield grid, start


class PathAssertions(unittest.TestCase):
    def assertValidPath(self, grid: PuzzleGrid, start: Position, path) -> None:
        self.assertEqual(path[0], start)
        self.assertEqual(len(path), grid.walkable_count)
        self.assertEqual(set(path), set(grid.walkable_cells()))
        for (r1, c1), (r2, c2) in zip(path, path[1:]):
            self.assertEqual(abs(r1 - r2) + abs(c1 - c2), 1)


class SearchExampleTests(PathAssertions):
    def test_single_cell_grid_is_solved_immediately(self) -> None:
        grid = PuzzleGrid(GridConfig(height=1, width=1))
        session = SearchSession(grid, (0, 0))
        outcome = session.run()
        self.assertEqual(outcome.kind, OutcomeKind.SOLVED)
        self.assertEqual(outcome.path, ((0, 0),))
        self.assertEqual(outcome.steps, 0)

    def test_two_by_two_follows_tie_break_order(self) -> None:
        grid = PuzzleGrid(GridConfig(height=2, width=2))
        outcome = SearchSession(grid, (0, 0)).run()
        self.assertEqual(outcome.kind, OutcomeKind.SOLVED)
        self.assertEqual(outcome.path, ((0, 0), (1, 0), (1, 1), (0, 1)))

    def test_ring_around_center_obstacle(self) -> None:
        grid = PuzzleGrid(GridConfig(height=3, width=3, obstacles={(1, 1)}))
        outcome = SearchSession(grid, (0, 0)).run()
        self.assertEqual(outcome.kind, OutcomeKind.SOLVED)
        self.assertEqual(len(outcome.path), 8)
        self.assertValidPath(grid, (0, 0), list(outcome.path))

    def test_isolated_start_is_exhausted(self) -> None:
        grid = PuzzleGrid(GridConfig(height=3, width=3, obstacles={(0, 1), (1, 0)}))
        outcome = SearchSession(grid, (0, 0)).run()
        self.assertEqual(outcome.kind, OutcomeKind.EXHAUSTED)
        self.assertEqual(outcome.path, ())

    def test_backtracks_count_as_steps(self) -> None:
        # Two attempts from the middle plus three frame pops, the start's included.
        grid = PuzzleGrid(GridConfig(height=1, width=3))
        outcome = SearchSession(grid, (0, 1)).run()
        self.assertEqual(outcome.kind, OutcomeKind.EXHAUSTED)
        self.assertEqual(outcome.steps, 5)

    def test_parity_blocked_start_is_exhausted(self) -> None:
        # 3x3 has five "even" cells; starting on an odd cell cannot cover them.
        grid = PuzzleGrid(GridConfig(height=3, width=3))
        outcome = SearchSession(grid, (0, 1)).run()
        self.assertEqual(outcome.kind, OutcomeKind.EXHAUSTED)

    def test_larger_open_grid(self) -> None:
        grid = PuzzleGrid(GridConfig(height=8, width=8))
        outcome = SearchSession(grid, (0, 0)).run()
        self.assertEqual(outcome.kind, OutcomeKind.SOLVED)
        self.assertValidPath(grid, (0, 0), list(outcome.path))


class SearchPropertyTests(PathAssertions):
    def test_matches_brute_force_on_small_grids(self) -> None:
        for grid, start in random_instances(seed=7, count=40):
            with self.subTest(grid=grid, start=start, obstacles=sorted(grid.config.obstacles)):
                expected = brute_force_path(grid, start)
                outcome = SearchSession(grid, start).run()
                if expected is None:
                    self.assertEqual(outcome.kind, OutcomeKind.EXHAUSTED)
                else:
                    self.assertEqual(outcome.kind, OutcomeKind.SOLVED)
                    self.assertValidPath(grid, start, list(outcome.path))

    def test_forced_endpoint_pruning_preserves_feasibility(self) -> None:
        config = SearchConfig(forced_endpoint_pruning=True)
        for grid, start in random_instances(seed=11, count=40):
            with self.subTest(grid=grid, start=start, obstacles=sorted(grid.config.obstacles)):
                plain = SearchSession(grid, start).run()
                strict = SearchSession(grid, start, config=config).run()
                self.assertEqual(plain.kind, strict.kind)
                if strict.is_solved:
                    self.assertValidPath(grid, start, list(strict.path))

    def test_repeated_runs_are_identical(self) -> None:
        grid = PuzzleGrid(GridConfig(height=4, width=5, obstacles={(1, 2)}))
        first = SearchSession(grid, (0, 0)).run()
        second = SearchSession(grid, (0, 0)).run()
        self.assertEqual(first.kind, second.kind)
        self.assertEqual(first.path, second.path)
        self.assertEqual(first.steps, second.steps)


class SearchSessionStateTests(unittest.TestCase):
    def test_lifecycle_states(self) -> None:
        grid = PuzzleGrid(GridConfig(height=2, width=3))
        session = SearchSession(grid, (0, 0))
        self.assertEqual(session.state, SearchState.READY)
        session.begin()
        self.assertEqual(session.state, SearchState.RUNNING)
        self.assertEqual(session.path, [(0, 0)])
        self.assertEqual(len(session.stack), 1)
        session.run()
        self.assertEqual(session.state, SearchState.SOLVED)

    def test_path_and_visited_stay_in_sync(self) -> None:
        grid = PuzzleGrid(GridConfig(height=3, width=4, obstacles={(1, 1)}))
        session = SearchSession(grid, (0, 0))
        session.begin()
        while not session.state.is_terminal:
            visited_count = sum(row.count(True) for row in session.visited)
            self.assertEqual(visited_count, len(session.path))
            self.assertEqual(len(session.stack), len(session.path))
            session.step()

    def test_batch_respects_budget(self) -> None:
        grid = PuzzleGrid(GridConfig(height=6, width=6))
        session = SearchSession(grid, (0, 0))
        session.run_batch(5)
        self.assertEqual(session.steps, 5)
        self.assertEqual(session.state, SearchState.RUNNING)

    def test_terminal_session_releases_state(self) -> None:
        grid = PuzzleGrid(GridConfig(height=2, width=2))
        session = SearchSession(grid, (0, 0))
        session.run()
        self.assertEqual(session.path, [])
        self.assertEqual(session.stack, [])
        self.assertEqual(session.step(), SearchState.SOLVED)

    def test_cancel_flag_stops_at_next_step(self) -> None:
        class Flag:
            raised = False

            def is_set(self) -> bool:
                return self.raised

        flag = Flag()
        grid = PuzzleGrid(GridConfig(height=6, width=6))
        session = SearchSession(grid, (0, 0), cancel_flag=flag)
        session.run_batch(3)
        flag.raised = True
        session.step()
        self.assertEqual(session.state, SearchState.CANCELLED)
        assert session.outcome is not None
        self.assertEqual(session.outcome.path, ())
        self.assertEqual(session.outcome.steps, 3)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
