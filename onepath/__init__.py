"""One-line puzzle solver: Hamiltonian paths on grids with obstacles.

This package exposes the public API surface via:

- ``onepath.engine.grid.PuzzleGrid``: immutable walkability snapshot.
- ``onepath.engine.scheduler.start_search``: cancellable, batched search.
- ``onepath.engine.search.SearchSession``: the explicit-stack backtracking engine.
"""

from .core.exceptions import InvalidConfiguration, OnePathError
from .core.models import OutcomeKind, SearchOutcome
from .engine.grid import GridConfig, PuzzleGrid
from .engine.scheduler import SearchHandle, solve, start_search
from .engine.search import SearchConfig

__all__ = [
    "GridConfig",
    "InvalidConfiguration",
    "OnePathError",
    "OutcomeKind",
    "PuzzleGrid",
    "SearchConfig",
    "SearchHandle",
    "SearchOutcome",
    "solve",
    "start_search",
]

__version__ = "0.1.0"
