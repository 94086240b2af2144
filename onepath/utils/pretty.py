"""Pretty-print helpers for puzzle grids and search results."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Dict, Optional, Sequence

from ..core.constants import CellType
from ..core.models import OutcomeKind, Position

if TYPE_CHECKING:
    from ..core.models import SearchOutcome
    from ..engine.grid import PuzzleGrid


SYMBOLS = {
    CellType.OBSTACLE: "#",
    CellType.WALKABLE: ".",
}


def format_grid(
    grid: PuzzleGrid,
    path: Optional[Sequence[Position]] = None,
    start: Optional[Position] = None,
) -> str:
    """Render the grid; path cells show their 1-based visit order."""

    order: Dict[Position, int] = {pos: index + 1 for index, pos in enumerate(path or ())}
    width = max(2, len(str(len(order))))
    header_cells = [f"{c:>{width}}" for c in range(grid.cols)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * ((width + 1) * grid.cols - 1))
    for r in range(grid.rows):
        row_cells = []
        for c in range(grid.cols):
            if (r, c) in order:
                symbol = str(order[(r, c)])
            elif (r, c) == start:
                symbol = "S"
            else:
                symbol = SYMBOLS[grid.cell(r, c)]
            row_cells.append(f"{symbol:>{width}}")
        lines.append(f"{r:>2} | {' '.join(row_cells)}")
    return "\n".join(lines)


def print_search_summary(
    outcome: SearchOutcome,
    grid: PuzzleGrid,
    *,
    start: Optional[Position] = None,
    prunes: Optional[Dict[str, int]] = None,
    stream=None,
) -> None:
    """Print grid + stats for a finished search."""

    stream = stream or sys.stdout
    print(format_grid(grid, path=outcome.path, start=start), file=stream)

    total_cells = grid.rows * grid.cols
    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {grid.rows} x {grid.cols} ({total_cells} cells)", file=stream)
    print(f"  Walkable:      {grid.walkable_count}", file=stream)
    print(f"  Obstacles:     {total_cells - grid.walkable_count}", file=stream)

    print(file=stream)
    print("--- Search ---", file=stream)
    print(f"  Outcome:       {outcome.kind.value}", file=stream)
    if outcome.kind == OutcomeKind.SOLVED:
        print(f"  Path length:   {len(outcome.path)}", file=stream)
        print(f"  Ends at:       {outcome.path[-1]}", file=stream)
    print(f"  Steps:         {outcome.steps}", file=stream)
    print(f"  Elapsed:       {outcome.elapsed_ms} ms", file=stream)
    if prunes:
        parts = [f"{name.lower()}:{count}" for name, count in prunes.items()]
        print(f"  Prunes:        {' '.join(parts)}", file=stream)
