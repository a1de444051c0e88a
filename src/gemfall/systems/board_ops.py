from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from esper import World

from gemfall.components.board import Board, Position
from gemfall.components.cascade import FallEvent, MatchRun, TileSpawn
from gemfall.components.game_state import GameState
from gemfall.components.tile_types import TileTypes
from gemfall.constants import MIN_RUN_LENGTH, RESHUFFLE_MAX_ATTEMPTS
from gemfall.systems.token_generator import TokenGenerator

Layout = List[List[str]]
Swap = Tuple[Position, Position]


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found; create the board before resolving moves")


def get_tile_registry(world: World) -> TileTypes:
    for _, registry in world.get_component(TileTypes):
        return registry
    raise RuntimeError("TileTypes definitions not found")


def get_game_state(world: World) -> GameState:
    """Return the shared GameState component, creating it if absent."""
    for _, state in world.get_component(GameState):
        return state
    state = GameState()
    world.create_entity(state)
    return state


def is_adjacent(a: Position, b: Position) -> bool:
    ac, ar = a
    bc, br = b
    return abs(ac - bc) + abs(ar - br) == 1


def swap_tiles(board: Board, src: Position, dst: Position) -> bool:
    """Exchange the tokens at two occupied, in-bounds cells."""
    if not (board.in_bounds(src) and board.in_bounds(dst)):
        return False
    if board.get(src) is None or board.get(dst) is None:
        return False
    board.swap(src, dst)
    return True


# ----------------------------------------------------------------------------
# Initial layout
# ----------------------------------------------------------------------------

def _completes_run(layout: Layout, row_values: List[str], col: int, row: int, candidate: str) -> bool:
    if col >= 2 and row_values[col - 1] == candidate and row_values[col - 2] == candidate:
        return True
    if row >= 2 and layout[row - 1][col] == candidate and layout[row - 2][col] == candidate:
        return True
    return False


def build_initial_layout(size: int, generator: TokenGenerator) -> Layout:
    """Raster-fill a size x size layout with no run of three looking left or up.

    Each cell redraws until the candidate does not equal both of its left
    neighbours or both of its upper neighbours. With three or more kinds at
    most two candidates are ever excluded, so the loop terminates.
    """
    if len(set(generator.kinds)) < MIN_RUN_LENGTH:
        raise ValueError(f"At least {MIN_RUN_LENGTH} token kinds are needed to build a board without matches")
    layout: Layout = []
    for row in range(size):
        row_values: List[str] = []
        for col in range(size):
            candidate = generator.next()
            while _completes_run(layout, row_values, col, row, candidate):
                candidate = generator.next()
            row_values.append(candidate)
        layout.append(row_values)
    return layout


def fill_initial_board(board: Board, generator: TokenGenerator) -> None:
    board.load(build_initial_layout(board.size, generator))


def respawn_board(
    board: Board,
    generator: TokenGenerator,
    *,
    max_attempts: int = RESHUFFLE_MAX_ATTEMPTS,
) -> None:
    """Refill the entire board with tiles that contain no matches and at least one valid move."""
    for _ in range(max_attempts):
        candidate = Board(size=board.size, cells=build_initial_layout(board.size, generator))
        if find_all_matches(candidate):
            continue
        if not find_valid_swaps(candidate):
            continue
        board.load(candidate.cells)
        return
    raise RuntimeError("Unable to respawn board without matches and valid swaps")


# ----------------------------------------------------------------------------
# Match detection
# ----------------------------------------------------------------------------

def _scan_line(board: Board, cells: Iterable[Position], orientation: str) -> List[MatchRun]:
    runs: List[MatchRun] = []
    run: List[Position] = []
    last_type: Optional[str] = None
    for pos in cells:
        tval = board.get(pos)
        if tval is not None and tval == last_type:
            run.append(pos)
            continue
        if len(run) >= MIN_RUN_LENGTH:
            runs.append(MatchRun(orientation, tuple(run), last_type))
        run = [pos] if tval is not None else []
        last_type = tval
    if len(run) >= MIN_RUN_LENGTH:
        runs.append(MatchRun(orientation, tuple(run), last_type))
    return runs


def find_runs(board: Board) -> List[MatchRun]:
    """Detect every maximal horizontal or vertical run of length >= 3."""
    size = board.size
    runs: List[MatchRun] = []
    for row in range(size):
        runs.extend(_scan_line(board, ((col, row) for col in range(size)), 'horizontal'))
    for col in range(size):
        runs.extend(_scan_line(board, ((col, row) for row in range(size)), 'vertical'))
    return runs


def find_all_matches(board: Board) -> Set[Position]:
    """Return the set of cells belonging to any run; crossing cells appear once."""
    return {pos for run in find_runs(board) for pos in run.positions}


def _run_length(board: Board, pos: Position, step: Position, token: str) -> int:
    col, row = pos
    dc, dr = step
    count = 0
    col, row = col + dc, row + dr
    while board.in_bounds((col, row)) and board.get((col, row)) == token:
        count += 1
        col, row = col + dc, row + dr
    return count


def has_line_match(board: Board, pos: Position) -> bool:
    """Return True if pos sits in a horizontal or vertical run of three or more."""
    token = board.get(pos)
    if token is None:
        return False
    horizontal = 1 + _run_length(board, pos, (-1, 0), token) + _run_length(board, pos, (1, 0), token)
    if horizontal >= MIN_RUN_LENGTH:
        return True
    vertical = 1 + _run_length(board, pos, (0, -1), token) + _run_length(board, pos, (0, 1), token)
    return vertical >= MIN_RUN_LENGTH


def predict_swap_creates_match(board: Board, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would put either cell in a run, without touching board."""
    if not is_adjacent(src, dst):
        return False
    swapped = board.copy()
    if not swap_tiles(swapped, src, dst):
        return False
    return has_line_match(swapped, src) or has_line_match(swapped, dst)


def find_valid_swaps(board: Board) -> List[Swap]:
    """Enumerate adjacent swaps that would produce a match."""
    swaps: List[Swap] = []
    size = board.size
    for col, row in board.positions():
        pos = (col, row)
        right = (col + 1, row)
        if col + 1 < size and predict_swap_creates_match(board, pos, right):
            swaps.append((pos, right))
        down = (col, row + 1)
        if row + 1 < size and predict_swap_creates_match(board, pos, down):
            swaps.append((pos, down))
    return swaps


# ----------------------------------------------------------------------------
# Removal, gravity, refill
# ----------------------------------------------------------------------------

def clear_positions(board: Board, positions: Iterable[Position]) -> List[Tuple[Position, str]]:
    """Empty every occupied cell in positions and return what was removed, sorted."""
    removed: List[Tuple[Position, str]] = []
    for pos in sorted(set(positions)):
        token = board.get(pos)
        if token is None:
            continue
        removed.append((pos, token))
        board.set(pos, None)
    return removed


def compute_gravity_moves(board: Board) -> List[FallEvent]:
    """Plan the stable per-column compaction toward the bottom row.

    Moves are listed column by column, bottom-most first, which is also a
    safe order to apply them in.
    """
    moves: List[FallEvent] = []
    for col in range(board.size):
        empty_spots = 0
        for row in range(board.size - 1, -1, -1):
            token = board.get((col, row))
            if token is None:
                empty_spots += 1
            elif empty_spots:
                moves.append(FallEvent(col, row, row + empty_spots, token))
    return moves


def apply_gravity_moves(board: Board, moves: Iterable[FallEvent]) -> None:
    for move in moves:
        board.set((move.column, move.destination_row), move.token_type)
        board.set((move.column, move.origin_row), None)


def apply_gravity(board: Board) -> List[FallEvent]:
    moves = compute_gravity_moves(board)
    apply_gravity_moves(board, moves)
    return moves


def refill_empty_cells(board: Board, generator: TokenGenerator) -> List[TileSpawn]:
    """Draw a fresh token for every empty cell, column by column from the top.

    No run avoidance here: refills may complete new runs and keep a cascade going.
    """
    spawned: List[TileSpawn] = []
    for col in range(board.size):
        for row in range(board.size):
            if board.get((col, row)) is not None:
                continue
            token = generator.next()
            board.set((col, row), token)
            spawned.append(TileSpawn(col, row, token))
    return spawned
