"""Value objects describing board deltas handed to the presentation layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

from gemfall.components.board import BoardSnapshot, Position


@dataclass(slots=True, frozen=True)
class FallEvent:
    column: int
    origin_row: int
    destination_row: int
    token_type: str

    @property
    def distance(self) -> int:
        return self.destination_row - self.origin_row


@dataclass(slots=True, frozen=True)
class TileSpawn:
    """A fresh token dropped into a vacated top-of-column cell."""
    column: int
    row: int
    token_type: str


@dataclass(slots=True, frozen=True)
class MatchRun:
    orientation: str  # 'horizontal' or 'vertical'
    positions: Tuple[Position, ...]
    token_type: str

    def __len__(self) -> int:
        return len(self.positions)


@dataclass(slots=True, frozen=True)
class CascadeStep:
    """Everything one detect/remove/collapse/refill iteration changed."""
    depth: int
    removed: Tuple[Tuple[Position, str], ...]
    runs: Tuple[MatchRun, ...]
    falls: Tuple[FallEvent, ...]
    spawned: Tuple[TileSpawn, ...]
    points: int

    @property
    def removed_positions(self) -> frozenset:
        return frozenset(pos for pos, _ in self.removed)


class SwapRejection(Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_ADJACENT = "not_adjacent"
    NO_MATCH = "no_match"
    BUSY = "busy"

    @property
    def invalid_move(self) -> bool:
        return self in (SwapRejection.OUT_OF_BOUNDS, SwapRejection.NOT_ADJACENT)


@dataclass(slots=True, frozen=True)
class SwapOutcome:
    accepted: bool
    reason: Optional[SwapRejection] = None
    steps: Tuple[CascadeStep, ...] = field(default_factory=tuple)

    @classmethod
    def rejected(cls, reason: SwapRejection) -> SwapOutcome:
        return cls(accepted=False, reason=reason)

    @classmethod
    def resolved(cls, steps) -> SwapOutcome:
        return cls(accepted=True, steps=tuple(steps))

    @property
    def score_delta(self) -> int:
        return sum(step.points for step in self.steps)

    def __bool__(self) -> bool:
        return self.accepted


@dataclass(slots=True, frozen=True)
class GameSnapshot:
    board: BoardSnapshot
    score: int
    has_moves: bool = True

    def __iter__(self) -> Iterator:
        # Unpacks as (board, score).
        yield self.board
        yield self.score
