"""Headless match-3 session.

Sets up the ECS world, event bus and board systems, and exposes the three
operations a presentation layer drives: ``initialize``, ``attempt_swap`` and
``current_state``.
"""
from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, Tuple

from gemfall.components.board import Board, BoardSnapshot, Position
from gemfall.components.cascade import GameSnapshot, SwapOutcome, SwapRejection
from gemfall.components.game_state import ResolutionPhase
from gemfall.components.tile_types import default_token_kinds
from gemfall.constants import GRID_SIZE, MIN_RUN_LENGTH, POINTS_PER_TILE, TOKEN_KIND_COUNT
from gemfall.events.bus import EventBus, EVENT_SWAP_RESOLVED, EVENT_TILE_SWAP_INVALID, EVENT_TILE_SWAP_REQUEST
from gemfall.systems.board import BoardSystem
from gemfall.systems.board_ops import find_valid_swaps, get_game_state, get_tile_registry
from gemfall.systems.match import MatchSystem
from gemfall.systems.match_resolution import MatchResolutionSystem
from gemfall.systems.token_generator import TokenGenerator
from gemfall.world import create_world

log = logging.getLogger(__name__)


class GameSession:
    def __init__(
        self,
        event_bus: EventBus | None = None,
        *,
        reshuffle_on_stalemate: bool = False,
        points_per_tile: int = POINTS_PER_TILE,
    ):
        self.event_bus = event_bus or EventBus()
        self.reshuffle_on_stalemate = reshuffle_on_stalemate
        self.points_per_tile = points_per_tile
        self.world = None
        self.generator: TokenGenerator | None = None
        self.board_system: BoardSystem | None = None
        self.match_system: MatchSystem | None = None
        self.match_resolution_system: MatchResolutionSystem | None = None

    def initialize(
        self,
        size: int = GRID_SIZE,
        kind_count: int = TOKEN_KIND_COUNT,
        seed: int | None = None,
    ) -> BoardSnapshot:
        """Build a match-free board and reset score, phase and selection."""
        if self.world is not None and get_game_state(self.world).resolving:
            raise RuntimeError("Cannot re-initialize the session while a cascade is resolving")
        if size < MIN_RUN_LENGTH:
            raise ValueError(f"Board size must be at least {MIN_RUN_LENGTH}, got {size}")
        if kind_count < MIN_RUN_LENGTH:
            raise ValueError(f"At least {MIN_RUN_LENGTH} token kinds are required, got {kind_count}")
        rng = random.Random(seed)
        kinds = default_token_kinds(kind_count)
        if self.world is None:
            self._create_systems(size, kinds, rng)
        else:
            setattr(self.world, "random", rng)
            get_tile_registry(self.world).kinds = list(kinds)
            self._sync_generator()
            get_game_state(self.world).reset()
            self.board_system.rebuild(size)
        return self.board.snapshot()

    def _create_systems(self, size: int, kinds: Sequence[str], rng: random.Random) -> None:
        self.world = create_world(kinds=kinds, rng=rng)
        self.generator = TokenGenerator(get_tile_registry(self.world).spawnable_types(), self.world.random)
        self.board_system = BoardSystem(self.world, self.event_bus, self.generator, size=size)
        self.match_system = MatchSystem(self.world, self.event_bus)
        self.match_resolution_system = MatchResolutionSystem(
            self.world,
            self.event_bus,
            self.generator,
            points_per_tile=self.points_per_tile,
            on_stalemate=self.board_system.reshuffle if self.reshuffle_on_stalemate else None,
        )
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def _sync_generator(self) -> None:
        # TileTypes and world.random are authoritative; the generator follows them.
        registry = get_tile_registry(self.world)
        self.generator.kinds = registry.spawnable_types()
        self.generator.rng = self.world.random

    def _require_world(self):
        if self.world is None:
            raise RuntimeError("Session is not initialized; call initialize() first")
        return self.world

    @property
    def board(self) -> Board:
        self._require_world()
        return self.board_system.board

    @property
    def score(self) -> int:
        return get_game_state(self._require_world()).score

    def attempt_swap(self, a: Position, b: Position) -> SwapOutcome:
        """Validate and, when accepted, fully resolve the swap of cells a and b."""
        state = get_game_state(self._require_world())
        src: Tuple[int, int] = tuple(a)
        dst: Tuple[int, int] = tuple(b)
        if state.resolving:
            log.debug("Swap %s -> %s rejected: cascade in progress", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=SwapRejection.BUSY)
            return SwapOutcome.rejected(SwapRejection.BUSY)
        state.phase = ResolutionPhase.VALIDATING
        try:
            # Board and score are settled before any subscriber hears about the swap.
            reason = self.match_system.apply_swap(src, dst)
            if reason is None:
                state.phase = ResolutionPhase.RESOLVING
                resolver = self.match_resolution_system
                steps = resolver.run_cascade()
                outcome = SwapOutcome.resolved(steps)
                try:
                    self.match_system.announce(src, dst, None)
                    resolver.publish(steps)
                finally:
                    resolver.check_stalemate()
            else:
                log.debug("Swap %s -> %s rejected: %s", src, dst, reason.value)
                outcome = SwapOutcome.rejected(reason)
                self.match_system.announce(src, dst, reason)
        finally:
            state.phase = ResolutionPhase.IDLE
        self.event_bus.emit(EVENT_SWAP_RESOLVED, outcome=outcome)
        return outcome

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.attempt_swap(src, dst)

    def current_state(self) -> GameSnapshot:
        board = self.board
        return GameSnapshot(
            board=board.snapshot(),
            score=self.score,
            has_moves=bool(find_valid_swaps(board)),
        )

    def hint(self) -> Optional[Tuple[Position, Position]]:
        swaps = find_valid_swaps(self.board)
        return swaps[0] if swaps else None

    def reset_board(self) -> BoardSnapshot:
        """Rebuild the board without touching the score."""
        state = get_game_state(self._require_world())
        if state.resolving:
            raise RuntimeError("Cannot rebuild the board while a cascade is resolving")
        self.board_system.rebuild()
        return self.board.snapshot()
