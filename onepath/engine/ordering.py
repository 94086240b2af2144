"""Warnsdorff move ordering for 4-connected grids."""

from __future__ import annotations

from typing import List, Sequence

from ..core.models import Position
from .grid import PuzzleGrid


def degree(grid: PuzzleGrid, visited: Sequence[Sequence[bool]], pos: Position) -> int:
    """Count walkable, unvisited orthogonal neighbors of ``pos``."""

    return sum(1 for nr, nc in grid.walkable_neighbors(pos) if not visited[nr][nc])


def ordered_candidates(
    grid: PuzzleGrid, visited: Sequence[Sequence[bool]], tail: Position
) -> List[Position]:
    """Return the unvisited neighbors of ``tail``, most constrained first.

    ``sorted`` is stable, so equal degrees keep the up, down, left, right
    enumeration order and the search stays deterministic.
    """

    candidates = [pos for pos in grid.walkable_neighbors(tail) if not visited[pos[0]][pos[1]]]
    return sorted(candidates, key=lambda pos: degree(grid, visited, pos))
