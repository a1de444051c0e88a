from __future__ import annotations

import logging
from typing import Optional, Tuple

from esper import World

from gemfall.components.board import Board
from gemfall.constants import GRID_SIZE
from gemfall.events.bus import (EventBus, EVENT_BOARD_INITIALIZED, EVENT_BOARD_RESHUFFLED,
                                EVENT_TILE_CLICK, EVENT_TILE_DESELECT, EVENT_TILE_SELECTED,
                                EVENT_TILE_DESELECTED, EVENT_TILE_SWAP_REQUEST)
from gemfall.systems.board_ops import fill_initial_board, get_game_state, is_adjacent, respawn_board
from gemfall.systems.token_generator import TokenGenerator

log = logging.getLogger(__name__)


class BoardSystem:
    def __init__(self, world: World, event_bus: EventBus, generator: TokenGenerator, size: int = GRID_SIZE):
        self.world = world
        self.event_bus = event_bus
        self.generator = generator
        # Single board entity; rebuild() swaps its Board component in place.
        self.board_entity = self.world.create_entity(Board(size=size))
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_TILE_DESELECT, self.on_deselect)
        self._init_board()

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def selected(self) -> Optional[Tuple[int, int]]:
        return get_game_state(self.world).selected

    def _init_board(self):
        fill_initial_board(self.board, self.generator)
        self.event_bus.emit(EVENT_BOARD_INITIALIZED, board=self.board.snapshot())

    def rebuild(self, size: int | None = None):
        """Throw the current grid away and build a fresh match-free one."""
        if size is not None and size != self.board.size:
            self.world.add_component(self.board_entity, Board(size=size))
        get_game_state(self.world).selected = None
        self._init_board()

    def reshuffle(self):
        respawn_board(self.board, self.generator)
        log.debug("Board reshuffled after stalemate")
        self.event_bus.emit(EVENT_BOARD_RESHUFFLED, board=self.board.snapshot())

    def on_tile_click(self, sender, **kwargs):
        col = kwargs.get('col')
        row = kwargs.get('row')
        if col is None or row is None:
            return
        state = get_game_state(self.world)
        # Board belongs to the cascade while it runs.
        if state.resolving:
            return
        pos = (col, row)
        if not self.board.in_bounds(pos):
            return
        if state.selected is None:
            state.selected = pos
            self.event_bus.emit(EVENT_TILE_SELECTED, col=col, row=row)
        elif state.selected == pos:
            self._clear_selection(reason='same_tile')
        elif is_adjacent(state.selected, pos):
            src = state.selected
            state.selected = None
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=pos)
        else:
            # Change selection to new tile
            state.selected = pos
            self.event_bus.emit(EVENT_TILE_SELECTED, col=col, row=row)

    def on_deselect(self, sender, **kwargs):
        self._clear_selection(reason=kwargs.get('reason', 'request'))

    def _clear_selection(self, reason: str):
        state = get_game_state(self.world)
        prev = state.selected
        if prev is None:
            return
        state.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev=prev)
