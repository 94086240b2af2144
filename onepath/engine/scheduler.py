"""Cooperative driver that runs a search session in bounded batches.

The handle never runs steps on its own: the host pulls batches through
:meth:`SearchHandle.batches`, and every ``yield`` is a point where the host
regains control (to repaint, poll input, or call :meth:`SearchHandle.cancel`).
:meth:`SearchHandle.run` drains the generator for hosts that just want an
answer, and :meth:`SearchHandle.submit` moves that onto an executor thread.
"""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future
from typing import Callable, Iterator, List, Optional

from ..core.constants import SearchState
from ..core.exceptions import SearchStateError
from ..core.models import Position, ProgressSnapshot, SearchOutcome
from ..utils.logger import get_logger
from .grid import PuzzleGrid
from .search import SearchConfig, SearchSession


LOGGER = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]
CompleteCallback = Callable[[SearchOutcome], None]


class CancellationToken:
    """Thread-safe, idempotent cancellation flag."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()


class SearchHandle:
    """Caller-facing handle for one cancellable search attempt."""

    def __init__(self, session: SearchSession, token: CancellationToken) -> None:
        self.session = session
        self.token = token
        self._progress_callbacks: List[ProgressCallback] = []
        self._complete_callbacks: List[CompleteCallback] = []
        self._started = False
        self._delivered = False
        self._lock = threading.Lock()

    @property
    def state(self) -> SearchState:
        return self.session.state

    @property
    def outcome(self) -> Optional[SearchOutcome]:
        return self.session.outcome

    @property
    def step_budget(self) -> int:
        return self.session.config.step_budget_per_batch

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def cancel(self) -> None:
        self.token.cancel()

    def on_progress(self, callback: ProgressCallback) -> "SearchHandle":
        self._progress_callbacks.append(callback)
        return self

    def on_complete(self, callback: CompleteCallback) -> "SearchHandle":
        """Register ``callback``; it runs at once if the search already ended."""

        with self._lock:
            delivered = self._delivered
            if not delivered:
                self._complete_callbacks.append(callback)
        if delivered:
            assert self.session.outcome is not None
            callback(self.session.outcome)
        return self

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------
    def batches(self) -> Iterator[ProgressSnapshot]:
        """Run the search one batch per ``next()`` call.

        Yields a snapshot after each batch that leaves the search running.
        Completion callbacks fire once the session reaches a terminal state,
        before the generator stops. A generator that is closed, abandoned or
        interrupted before that point cancels the search on the way out.
        """

        if self._started:
            raise SearchStateError("Search handle has already been driven")
        self._started = True
        session = self.session
        LOGGER.debug(
            "Starting search from %s on %r (budget %d steps/batch)",
            session.start,
            session.grid,
            self.step_budget,
        )
        session.begin()
        try:
            while True:
                if self.token.is_set():
                    session.cancel()
                else:
                    session.run_batch(self.step_budget)
                if session.state.is_terminal:
                    break
                snapshot = ProgressSnapshot(
                    steps=session.steps,
                    elapsed_ms=session.elapsed_ms,
                    path_length=len(session.path),
                )
                for callback in self._progress_callbacks:
                    callback(snapshot.steps, snapshot.elapsed_ms)
                yield snapshot
        finally:
            if not session.state.is_terminal:
                session.cancel()
            if not self._delivered:
                self._complete()

    def _complete(self) -> None:
        outcome = self.session.outcome
        assert outcome is not None
        LOGGER.debug(
            "Search finished: %s after %d steps in %d ms",
            outcome.kind.value,
            outcome.steps,
            outcome.elapsed_ms,
        )
        with self._lock:
            callbacks, self._complete_callbacks = self._complete_callbacks, []
            self._delivered = True
        for callback in callbacks:
            callback(outcome)

    def run(self, yield_control: Optional[Callable[[], None]] = None) -> SearchOutcome:
        """Drive every batch, calling ``yield_control`` between batches."""

        batches = self.batches()
        try:
            for _ in batches:
                if yield_control is not None:
                    yield_control()
        finally:
            batches.close()
        assert self.session.outcome is not None
        return self.session.outcome

    def submit(self, executor: Executor) -> "Future[SearchOutcome]":
        """Run the search on ``executor``; :meth:`cancel` stays usable meanwhile."""

        return executor.submit(self.run)


def start_search(
    grid: PuzzleGrid,
    start: Position,
    step_budget_per_batch: Optional[int] = None,
    config: Optional[SearchConfig] = None,
) -> SearchHandle:
    """Validate inputs and return a ready, not yet running, search handle.

    Raises :class:`~onepath.core.exceptions.InvalidConfiguration` for an
    unusable start cell or batch budget before any search step runs.
    """

    config = config or SearchConfig()
    if step_budget_per_batch is not None:
        config = SearchConfig(
            step_budget_per_batch=step_budget_per_batch,
            forced_endpoint_pruning=config.forced_endpoint_pruning,
        )
    token = CancellationToken()
    session = SearchSession(grid, start, config=config, cancel_flag=token)
    return SearchHandle(session, token)


def solve(
    grid: PuzzleGrid,
    start: Position,
    config: Optional[SearchConfig] = None,
) -> SearchOutcome:
    """Run a search to completion and return its outcome."""

    return start_search(grid, start, config=config).run()

