"""Grid representation and helper utilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, List, Tuple

from ..core.constants import Bounds, CellType
from ..core.exceptions import InvalidConfiguration
from ..core.models import Position


@dataclass
class GridConfig:
    """Configuration values driving the grid layout."""

    height: int
    width: int
    obstacles: FrozenSet[Position] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        self.obstacles = frozenset((int(r), int(c)) for r, c in self.obstacles)

    def bounds(self) -> Bounds:
        return Bounds(rows=self.height, cols=self.width)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[bool]]) -> "GridConfig":
        """Build a config from a row-major walkability matrix (True = walkable)."""

        matrix = [list(row) for row in rows]
        if not matrix:
            raise InvalidConfiguration("Grid needs at least one row")
        width = len(matrix[0])
        if any(len(row) != width for row in matrix):
            raise InvalidConfiguration("All grid rows must have the same width")
        obstacles = {
            (r, c)
            for r, row in enumerate(matrix)
            for c, walkable in enumerate(row)
            if not walkable
        }
        return cls(height=len(matrix), width=width, obstacles=frozenset(obstacles))


class PuzzleGrid:
    """Read-only snapshot of walkability for one search.

    Cells are stored as tuples so nothing can flip walkability while a search
    holds a reference to the grid. ``walkable_count`` is computed once.
    """

    def __init__(self, config: GridConfig) -> None:
        if config.height <= 0 or config.width <= 0:
            raise InvalidConfiguration(
                f"Grid dimensions must be positive, got {config.height}x{config.width}"
            )
        self.config = config
        self.bounds = config.bounds()
        for pos in config.obstacles:
            if not self.bounds.contains(pos):
                raise InvalidConfiguration(f"Obstacle outside bounds: {pos}")
        self.cells: Tuple[Tuple[CellType, ...], ...] = tuple(
            tuple(
                CellType.OBSTACLE if (r, c) in config.obstacles else CellType.WALKABLE
                for c in range(self.bounds.cols)
            )
            for r in range(self.bounds.rows)
        )
        self._walkable: Tuple[Position, ...] = tuple(
            pos for pos in self.bounds.positions() if self.cell(*pos) == CellType.WALKABLE
        )
        self._walkable_count = len(self._walkable)
        if self._walkable_count == 0:
            raise InvalidConfiguration("Grid has no walkable cells")

    @property
    def rows(self) -> int:
        return self.bounds.rows

    @property
    def cols(self) -> int:
        return self.bounds.cols

    @property
    def walkable_count(self) -> int:
        return self._walkable_count

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def cell(self, row: int, col: int) -> CellType:
        return self.cells[row][col]

    def in_bounds(self, pos: Position) -> bool:
        return self.bounds.contains(pos)

    def is_walkable(self, pos: Position) -> bool:
        return self.bounds.contains(pos) and self.cell(*pos) == CellType.WALKABLE

    def walkable_neighbors(self, pos: Position) -> Iterator[Position]:
        """Yield walkable orthogonal neighbors in up, down, left, right order."""

        for neighbor in self.bounds.adjacent(pos):
            if self.cell(*neighbor) == CellType.WALKABLE:
                yield neighbor

    def walkable_cells(self) -> Tuple[Position, ...]:
        """Walkable cells in row-major order."""

        return self._walkable

    def require_start(self, pos: Position) -> Position:
        """Return ``pos`` as a start cell or raise :class:`InvalidConfiguration`."""

        row, col = pos
        if not self.bounds.contains((row, col)):
            raise InvalidConfiguration(f"Start cell outside bounds: {(row, col)}")
        if self.cells[row][col] != CellType.WALKABLE:
            raise InvalidConfiguration(f"Start cell is an obstacle: {(row, col)}")
        return (row, col)

    def new_visited(self) -> List[List[bool]]:
        return [[False] * self.bounds.cols for _ in range(self.bounds.rows)]

    def __repr__(self) -> str:
        return (
            f"PuzzleGrid({self.bounds.rows}x{self.bounds.cols}, "
            f"walkable={self._walkable_count})"
        )
