"""Data models shared by the search engine and its hosts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

Position = Tuple[int, int]


class OutcomeKind(str, Enum):
    """Terminal result of a search attempt."""

    SOLVED = "SOLVED"
    EXHAUSTED = "EXHAUSTED"
    CANCELLED = "CANCELLED"


@dataclass
class SearchFrame:
    """Ordered successor candidates for one path cell plus a cursor."""

    candidates: List[Position]
    index: int = 0

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.candidates)

    def take_next(self) -> Position:
        candidate = self.candidates[self.index]
        self.index += 1
        return candidate


@dataclass(frozen=True)
class SearchOutcome:
    """Result delivered exactly once when a search terminates.

    ``path`` is only populated for :attr:`OutcomeKind.SOLVED`; exhausted and
    cancelled searches never expose a partial path.
    """

    kind: OutcomeKind
    path: Tuple[Position, ...] = ()
    steps: int = 0
    elapsed_ms: int = 0

    @classmethod
    def solved(cls, path: List[Position], steps: int = 0, elapsed_ms: int = 0) -> "SearchOutcome":
        return cls(OutcomeKind.SOLVED, tuple(path), steps, elapsed_ms)

    @classmethod
    def exhausted(cls, steps: int = 0, elapsed_ms: int = 0) -> "SearchOutcome":
        return cls(OutcomeKind.EXHAUSTED, (), steps, elapsed_ms)

    @classmethod
    def cancelled(cls, steps: int = 0, elapsed_ms: int = 0) -> "SearchOutcome":
        return cls(OutcomeKind.CANCELLED, (), steps, elapsed_ms)

    @property
    def is_solved(self) -> bool:
        return self.kind == OutcomeKind.SOLVED

    def to_jsonable(self) -> dict:
        return {
            "status": self.kind.value.lower(),
            "path": [list(pos) for pos in self.path],
            "steps": self.steps,
            "elapsed_ms": self.elapsed_ms,
        }


@dataclass(frozen=True)
class ProgressSnapshot:
    """Progress report emitted between scheduler batches."""

    steps: int
    elapsed_ms: int
    path_length: int = 0
