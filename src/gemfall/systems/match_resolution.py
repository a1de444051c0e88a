import logging
from typing import Callable, List, Optional

from esper import World

from gemfall.components.cascade import CascadeStep
from gemfall.constants import POINTS_PER_TILE
from gemfall.events.bus import (EventBus, EVENT_MATCH_FOUND, EVENT_MATCH_CLEARED, EVENT_GRAVITY_APPLIED,
                                EVENT_REFILL_COMPLETED, EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE,
                                EVENT_SCORE_CHANGED)
from gemfall.systems.board_ops import (apply_gravity, clear_positions, find_runs, find_valid_swaps,
                                       get_board, get_game_state, refill_empty_cells)
from gemfall.systems.token_generator import TokenGenerator

log = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Runs detect -> score -> remove -> collapse -> refill until the board is stable.

    The whole cascade is computed before any event goes out. Subscribers see
    a settled board and replay the returned steps at their own pace; one that
    raises cannot leave the board half collapsed.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        generator: TokenGenerator,
        *,
        points_per_tile: int = POINTS_PER_TILE,
        on_stalemate: Optional[Callable[[], None]] = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.generator = generator
        self.points_per_tile = points_per_tile
        # Called with no arguments when a cascade ends with no valid swap left.
        self.on_stalemate = on_stalemate

    def resolve(self) -> List[CascadeStep]:
        steps = self.run_cascade()
        try:
            self.publish(steps)
        finally:
            self.check_stalemate()
        return steps

    def run_cascade(self) -> List[CascadeStep]:
        """Mutate board and score until no run is left. Emits nothing."""
        board = get_board(self.world)
        state = get_game_state(self.world)
        steps: List[CascadeStep] = []
        state.cascade_depth = 0
        while True:
            runs = find_runs(board)
            if not runs:
                break
            depth = state.cascade_depth + 1
            state.cascade_depth = depth
            positions = sorted({pos for run in runs for pos in run.positions})
            log.debug("Matched %d gems at cascade depth %d", len(positions), depth)
            points = len(positions) * self.points_per_tile
            state.score += points
            removed = clear_positions(board, positions)
            falls = apply_gravity(board)
            spawned = refill_empty_cells(board, self.generator)
            steps.append(CascadeStep(
                depth=depth,
                removed=tuple(removed),
                runs=tuple(runs),
                falls=tuple(falls),
                spawned=tuple(spawned),
                points=points,
            ))
        if steps:
            log.debug("Cascade complete after %d steps, +%d points", len(steps), sum(s.points for s in steps))
        return steps

    def publish(self, steps: List[CascadeStep]) -> None:
        """Emit the per-step events for an already applied cascade."""
        if not steps:
            return
        score_delta = sum(step.points for step in steps)
        score = get_game_state(self.world).score - score_delta
        for step in steps:
            positions = sorted(step.removed_positions)
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=step.depth)
            score += step.points
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=score, delta=step.points)
            self.event_bus.emit(
                EVENT_MATCH_CLEARED,
                positions=positions,
                types=[(col, row, token) for (col, row), token in step.removed],
            )
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, falls=list(step.falls))
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=list(step.spawned))
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=step.depth, step=step)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=steps[-1].depth, score_delta=score_delta)

    def check_stalemate(self) -> None:
        if self.on_stalemate is not None and not find_valid_swaps(get_board(self.world)):
            self.on_stalemate()
