"""Shared constants and enumerations for the one-line puzzle solver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


class CellType(str, Enum):
    """All supported cell types in the grid."""

    WALKABLE = "WALKABLE"
    OBSTACLE = "OBSTACLE"


class SearchState(str, Enum):
    """Lifecycle of one search attempt."""

    READY = "READY"
    RUNNING = "RUNNING"
    SOLVED = "SOLVED"
    EXHAUSTED = "EXHAUSTED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self not in {SearchState.READY, SearchState.RUNNING}


# Enumeration order doubles as the tie-break for move ordering: up, down, left, right.
NEIGHBOR_STEPS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

DEFAULT_STEP_BUDGET = 10_000


@dataclass(frozen=True)
class Bounds:
    """Rectangle of ``(row, col)`` positions with the origin at the top left."""

    rows: int
    cols: int

    def contains(self, pos: Tuple[int, int]) -> bool:
        row, col = pos
        return 0 <= row < self.rows and 0 <= col < self.cols

    def positions(self) -> Iterator[Tuple[int, int]]:
        """All positions in row-major order."""

        for row in range(self.rows):
            for col in range(self.cols):
                yield (row, col)

    def adjacent(self, pos: Tuple[int, int]) -> Iterator[Tuple[int, int]]:
        """In-bounds orthogonal neighbors of ``pos`` in ``NEIGHBOR_STEPS`` order."""

        row, col = pos
        for dr, dc in NEIGHBOR_STEPS:
            neighbor = (row + dr, col + dc)
            if self.contains(neighbor):
                yield neighbor
