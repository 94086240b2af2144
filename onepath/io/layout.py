"""Text layout reader for puzzle grids.

One grid row per non-blank line: ``.`` walkable, ``#`` or ``X`` obstacle,
``S`` the (walkable) start cell. Leading and trailing whitespace is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..core.exceptions import LayoutParseError
from ..core.models import Position
from ..engine.grid import GridConfig


WALKABLE_SYMBOLS = {".", "S"}
OBSTACLE_SYMBOLS = {"#", "X"}
START_SYMBOL = "S"


@dataclass
class Layout:
    """A parsed puzzle layout: grid configuration plus optional start."""

    config: GridConfig
    start: Optional[Position] = None


def parse_layout(text: str) -> Layout:
    rows: List[str] = [line.strip() for line in text.splitlines() if line.strip()]
    if not rows:
        raise LayoutParseError("Layout is empty")
    width = len(rows[0])
    walkable: List[List[bool]] = []
    start: Optional[Position] = None
    for r, line in enumerate(rows):
        if len(line) != width:
            raise LayoutParseError(
                f"Row {r} has width {len(line)}, expected {width}"
            )
        cells: List[bool] = []
        for c, symbol in enumerate(line.upper()):
            if symbol not in OBSTACLE_SYMBOLS and symbol not in WALKABLE_SYMBOLS:
                raise LayoutParseError(f"Unknown symbol {symbol!r} at ({r},{c})")
            cells.append(symbol in WALKABLE_SYMBOLS)
            if symbol == START_SYMBOL:
                if start is not None:
                    raise LayoutParseError(
                        f"Multiple start cells: {start} and {(r, c)}"
                    )
                start = (r, c)
        walkable.append(cells)
    return Layout(config=GridConfig.from_rows(walkable), start=start)


def load_layout(path: Path | str) -> Layout:
    """Read and parse a layout file."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise LayoutParseError(f"Cannot read layout {path}: {exc}") from exc
    return parse_layout(text)


def parse_position(value: str) -> Position:
    """Parse ``"R,C"`` into a position tuple."""

    parts = value.replace(" ", "").split(",")
    if len(parts) != 2:
        raise LayoutParseError(f"Expected ROW,COL, got {value!r}")
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError as exc:
        raise LayoutParseError(f"Expected integer ROW,COL, got {value!r}") from exc
