"""Session state resource: score, resolution phase and selection."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class ResolutionPhase(Enum):
    """Phases a swap request moves through; IDLE is the only one accepting input."""
    IDLE = auto()
    VALIDATING = auto()
    RESOLVING = auto()


@dataclass(slots=True)
class GameState:
    """Singleton component storing score and the swap state machine."""
    score: int = 0
    phase: ResolutionPhase = ResolutionPhase.IDLE
    selected: Optional[Tuple[int, int]] = None
    cascade_depth: int = 0

    @property
    def resolving(self) -> bool:
        return self.phase is not ResolutionPhase.IDLE

    def reset(self) -> None:
        self.score = 0
        self.phase = ResolutionPhase.IDLE
        self.selected = None
        self.cascade_depth = 0
