"""Explicit-stack backtracking search for Hamiltonian paths on a grid.

The session keeps the whole depth-first search in plain data (visited mask,
partial path, frame stack) instead of the interpreter call stack, so a caller
can stop after any number of steps and resume later. One frame exists per
path cell: frame ``i`` holds the ordered successor candidates of ``path[i]``.
"""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Protocol

from ..core.constants import DEFAULT_STEP_BUDGET, SearchState
from ..core.exceptions import InvalidConfiguration
from ..core.models import Position, SearchFrame, SearchOutcome
from .grid import PuzzleGrid
from .ordering import ordered_candidates
from .pruning import PruneReason, PruningOracle


@dataclass
class SearchConfig:
    """Tunables for one search attempt."""

    step_budget_per_batch: int = DEFAULT_STEP_BUDGET
    forced_endpoint_pruning: bool = False

    def __post_init__(self) -> None:
        if self.step_budget_per_batch <= 0:
            raise InvalidConfiguration(
                f"step_budget_per_batch must be positive, got {self.step_budget_per_batch}"
            )


class CancellationFlag(Protocol):
    def is_set(self) -> bool:
        """Return True once cancellation has been requested."""


class SearchSession:
    """Owns the mutable state of exactly one search attempt."""

    def __init__(
        self,
        grid: PuzzleGrid,
        start: Position,
        config: Optional[SearchConfig] = None,
        cancel_flag: Optional[CancellationFlag] = None,
    ) -> None:
        self.grid = grid
        self.start = grid.require_start(start)
        self.config = config or SearchConfig()
        self.cancel_flag = cancel_flag
        self.oracle = PruningOracle(grid, forced_endpoints=self.config.forced_endpoint_pruning)
        self.state = SearchState.READY
        self.steps = 0
        self.prunes: Counter = Counter()
        self.outcome: Optional[SearchOutcome] = None
        self.visited: List[List[bool]] = []
        self.path: List[Position] = []
        self.stack: List[SearchFrame] = []
        self._started_at: Optional[float] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def begin(self) -> None:
        """Seed the search with the start cell; no-op once running."""

        if self.state != SearchState.READY:
            return
        self.visited = self.grid.new_visited()
        self.visited[self.start[0]][self.start[1]] = True
        self.path = [self.start]
        self.stack = [SearchFrame(ordered_candidates(self.grid, self.visited, self.start))]
        self._started_at = time.perf_counter()
        self.state = SearchState.RUNNING

    @property
    def elapsed_ms(self) -> int:
        if self._started_at is None:
            return 0
        return int((time.perf_counter() - self._started_at) * 1000)

    @property
    def cancel_requested(self) -> bool:
        return self.cancel_flag is not None and self.cancel_flag.is_set()

    def cancel(self) -> SearchOutcome:
        """Terminate as cancelled unless a terminal outcome already exists."""

        if self.outcome is None:
            self._finish(SearchState.CANCELLED, SearchOutcome.cancelled(self.steps, self.elapsed_ms))
        assert self.outcome is not None
        return self.outcome

    def _finish(self, state: SearchState, outcome: SearchOutcome) -> None:
        self.state = state
        self.outcome = outcome
        self.visited = []
        self.path = []
        self.stack = []

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------
    def step(self) -> SearchState:
        """Perform one unit of work: a backtrack or one candidate attempt.

        Popping an exhausted frame is a step on its own, separate from the
        attempt that follows it, so ``steps`` counts backtracks and attempts
        together rather than attempts alone.
        """

        if self.state == SearchState.READY:
            self.begin()
        if self.state.is_terminal:
            return self.state

        if self.cancel_requested:
            self.cancel()
            return self.state
        if len(self.path) == self.grid.walkable_count:
            outcome = SearchOutcome.solved(self.path, self.steps, self.elapsed_ms)
            self._finish(SearchState.SOLVED, outcome)
            return self.state
        if not self.stack:
            self._finish(SearchState.EXHAUSTED, SearchOutcome.exhausted(self.steps, self.elapsed_ms))
            return self.state

        self.steps += 1
        frame = self.stack[-1]
        if frame.exhausted:
            self.stack.pop()
            row, col = self.path.pop()
            self.visited[row][col] = False
            return self.state

        candidate = frame.take_next()
        row, col = candidate
        self.visited[row][col] = True
        self.path.append(candidate)
        reason = self.oracle.check(self.visited, len(self.path), candidate)
        if reason is not None:
            self.prunes[reason] += 1
            self.path.pop()
            self.visited[row][col] = False
            return self.state
        self.stack.append(SearchFrame(ordered_candidates(self.grid, self.visited, candidate)))
        return self.state

    def run_batch(self, budget: int) -> SearchState:
        """Run up to ``budget`` steps, stopping early on a terminal state.

        The terminal checks (cancel, solved, exhausted) do not consume budget,
        so a batch that reaches a terminal condition on its last step still
        reports that state instead of waiting for the next batch.
        """

        if self.state == SearchState.READY:
            self.begin()
        target = self.steps + budget
        while not self.state.is_terminal and self.steps < target:
            self.step()
        if not self.state.is_terminal and self._is_decided():
            self.step()
        return self.state

    def _is_decided(self) -> bool:
        return (
            self.cancel_requested
            or len(self.path) == self.grid.walkable_count
            or not self.stack
        )

    def run(self) -> SearchOutcome:
        """Run to completion without yielding."""

        while not self.state.is_terminal:
            self.run_batch(self.config.step_budget_per_batch)
        assert self.outcome is not None
        return self.outcome

    def prune_summary(self) -> dict:
        return {reason.value: self.prunes.get(reason, 0) for reason in PruneReason}
