"""Feasibility tests applied after every tentative move.

Each test inspects the cells that are still unvisited. A partial path can only
be completed if one walk starting next to the current tail covers all of
them, which gives three necessary conditions:

* the unvisited cells form a single 4-connected region;
* when more than one cell remains, none of them is cut off from every other
  unvisited cell (degree 0);
* optionally, at most one unvisited cell is a forced endpoint, i.e. it could
  be entered but never left again.

All tests are ``O(rows * cols)`` and never reject a completable path.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import List, Optional, Sequence

from ..core.models import Position
from .grid import PuzzleGrid
from .ordering import degree


class PruneReason(str, Enum):
    """Why a candidate move was rejected."""

    DISCONNECTED = "DISCONNECTED"
    DEAD_END = "DEAD_END"
    FORCED_ENDPOINTS = "FORCED_ENDPOINTS"


def _first_unvisited(grid: PuzzleGrid, visited: Sequence[Sequence[bool]]) -> Optional[Position]:
    for row, col in grid.walkable_cells():
        if not visited[row][col]:
            return (row, col)
    return None


def reachable_count(grid: PuzzleGrid, visited: Sequence[Sequence[bool]], seed: Position) -> int:
    """Flood fill from ``seed`` over unvisited walkable cells and count them."""

    seen: List[List[bool]] = grid.new_visited()
    seen[seed[0]][seed[1]] = True
    queue = deque([seed])
    count = 0
    while queue:
        pos = queue.popleft()
        count += 1
        for nr, nc in grid.walkable_neighbors(pos):
            if visited[nr][nc] or seen[nr][nc]:
                continue
            seen[nr][nc] = True
            queue.append((nr, nc))
    return count


def is_connected(grid: PuzzleGrid, visited: Sequence[Sequence[bool]], remaining: int) -> bool:
    """True when the ``remaining`` unvisited cells form one region."""

    if remaining <= 1:
        return True
    seed = _first_unvisited(grid, visited)
    if seed is None:
        return False
    return reachable_count(grid, visited, seed) == remaining


def has_dead_end(grid: PuzzleGrid, visited: Sequence[Sequence[bool]], remaining: int) -> bool:
    """True when some unvisited cell has no unvisited neighbor left."""

    if remaining <= 1:
        return False
    for row, col in grid.walkable_cells():
        if visited[row][col]:
            continue
        if degree(grid, visited, (row, col)) == 0:
            return True
    return False


def forced_endpoint_count(
    grid: PuzzleGrid, visited: Sequence[Sequence[bool]], tail: Position
) -> int:
    """Count unvisited cells that could only ever be the last cell of the path.

    A cell next to the tail can still be entered from it, so the tail counts
    as one extra open neighbor.
    """

    tail_row, tail_col = tail
    forced = 0
    for row, col in grid.walkable_cells():
        if visited[row][col]:
            continue
        options = degree(grid, visited, (row, col))
        if abs(row - tail_row) + abs(col - tail_col) == 1:
            options += 1
        if options <= 1:
            forced += 1
    return forced


class PruningOracle:
    """Runs the configured feasibility tests for one grid."""

    def __init__(self, grid: PuzzleGrid, forced_endpoints: bool = False) -> None:
        self.grid = grid
        self.forced_endpoints = forced_endpoints

    def check(
        self, visited: Sequence[Sequence[bool]], path_length: int, tail: Position
    ) -> Optional[PruneReason]:
        """Return the first failed test, or ``None`` when the move may stand.

        Must be called after ``tail`` has been marked visited and appended.
        """

        remaining = self.grid.walkable_count - path_length
        if remaining <= 1:
            return None
        if has_dead_end(self.grid, visited, remaining):
            return PruneReason.DEAD_END
        if not is_connected(self.grid, visited, remaining):
            return PruneReason.DISCONNECTED
        if self.forced_endpoints and forced_endpoint_count(self.grid, visited, tail) > 1:
            return PruneReason.FORCED_ENDPOINTS
        return None
