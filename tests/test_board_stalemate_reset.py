import pytest

from gemfall.components.board import Board
from gemfall.events.bus import EVENT_BOARD_RESHUFFLED
from gemfall.session import GameSession
from gemfall.systems.board_ops import find_all_matches, find_valid_swaps, respawn_board
from gemfall.systems.token_generator import TokenGenerator

from tests.helpers import KINDS, ScriptedRandom, diagonal_layout, load_layout


def test_stalemate_triggers_board_reset():
    game = GameSession(reshuffle_on_stalemate=True)
    game.initialize(size=6, kind_count=5, seed=1234)
    board = load_layout(game, diagonal_layout(6, KINDS))
    assert not find_all_matches(board), "Setup should not contain initial matches"
    assert not find_valid_swaps(board), "Pattern should eliminate all valid moves"
    reshuffled = []
    game.event_bus.subscribe(EVENT_BOARD_RESHUFFLED, lambda s, **k: reshuffled.append(k['board']))

    game.match_resolution_system.resolve()

    assert reshuffled == [game.board.snapshot()]
    assert not find_all_matches(game.board)
    assert find_valid_swaps(game.board)
    assert game.score == 0


def test_stalemate_left_alone_by_default(session):
    board = load_layout(session, diagonal_layout(8, KINDS))
    before = board.snapshot()
    session.match_resolution_system.resolve()
    assert session.board.snapshot() == before
    assert session.current_state().has_moves is False


def test_respawn_gives_up_when_no_layout_is_playable():
    kinds = ['blue', 'green', 'purple']
    # Every attempt replays the same dead diagonal layout.
    script = [token for row in diagonal_layout(3, kinds) for token in row]
    generator = TokenGenerator(kinds, ScriptedRandom(script))
    board = Board(size=3)
    with pytest.raises(RuntimeError):
        respawn_board(board, generator, max_attempts=3)
    assert board.snapshot() == ((None,) * 3,) * 3
