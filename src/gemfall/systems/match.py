from typing import Optional, Tuple

from esper import World

from gemfall.components.cascade import SwapRejection
from gemfall.events.bus import EventBus, EVENT_TILE_SWAP_VALID, EVENT_TILE_SWAP_INVALID
from gemfall.systems.board_ops import get_board, has_line_match, is_adjacent, swap_tiles


class MatchSystem:
    """Decides whether a requested swap stands or is reverted."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def check_move(self, src: Tuple[int, int], dst: Tuple[int, int]) -> Optional[SwapRejection]:
        """Return why src/dst is not a legal move, or None if it is."""
        board = get_board(self.world)
        if not (board.in_bounds(src) and board.in_bounds(dst)):
            return SwapRejection.OUT_OF_BOUNDS
        if not is_adjacent(src, dst):
            return SwapRejection.NOT_ADJACENT
        return None

    def try_swap(self, src: Tuple[int, int], dst: Tuple[int, int]) -> bool:
        return self.swap_or_reject(src, dst) is None

    def swap_or_reject(self, src: Tuple[int, int], dst: Tuple[int, int]) -> Optional[SwapRejection]:
        reason = self.apply_swap(src, dst)
        self.announce(src, dst, reason)
        return reason

    def apply_swap(self, src: Tuple[int, int], dst: Tuple[int, int]) -> Optional[SwapRejection]:
        """Swap src/dst and keep it only if either cell now sits in a run.

        Only the rows and columns through the two swapped cells are scanned; a
        match elsewhere on the board does not make the move valid. Returns the
        rejection reason, or None when the swap was kept. Emits nothing, so the
        board is settled before any subscriber runs.
        """
        reason = self.check_move(src, dst)
        if reason is not None:
            return reason
        board = get_board(self.world)
        if not swap_tiles(board, src, dst):
            return SwapRejection.NO_MATCH
        if has_line_match(board, src) or has_line_match(board, dst):
            return None
        board.swap(src, dst)
        return SwapRejection.NO_MATCH

    def announce(self, src: Tuple[int, int], dst: Tuple[int, int], reason: Optional[SwapRejection]) -> None:
        if reason is None:
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        else:
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
