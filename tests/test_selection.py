from gemfall.components.game_state import ResolutionPhase
from gemfall.events.bus import (EVENT_SWAP_RESOLVED, EVENT_TILE_CLICK, EVENT_TILE_DESELECT,
                                EVENT_TILE_DESELECTED, EVENT_TILE_SELECTED, EVENT_TILE_SWAP_REQUEST)
from gemfall.systems.board_ops import get_game_state

from tests.helpers import GREEN, PURPLE, load_layout, scenario_layout, script_refills


def test_click_selects_tile(session):
    selected = {}
    session.event_bus.subscribe(EVENT_TILE_SELECTED, lambda s, **k: selected.update(k))
    session.event_bus.emit(EVENT_TILE_CLICK, col=2, row=4)
    assert session.board_system.selected == (2, 4)
    assert selected == {'col': 2, 'row': 4}


def test_second_adjacent_click_requests_and_resolves_swap(session):
    load_layout(session, scenario_layout())
    script_refills(session, [GREEN, PURPLE, GREEN])
    requests = {}
    outcomes = []
    session.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, lambda s, **k: requests.update(k))
    session.event_bus.subscribe(EVENT_SWAP_RESOLVED, lambda s, **k: outcomes.append(k['outcome']))
    session.event_bus.emit(EVENT_TILE_CLICK, col=2, row=4)
    session.event_bus.emit(EVENT_TILE_CLICK, col=3, row=4)
    assert requests == {'src': (2, 4), 'dst': (3, 4)}
    assert session.board_system.selected is None
    assert len(outcomes) == 1 and outcomes[0].accepted
    assert session.score == 300


def test_non_adjacent_click_moves_selection(session):
    session.event_bus.emit(EVENT_TILE_CLICK, col=0, row=0)
    session.event_bus.emit(EVENT_TILE_CLICK, col=5, row=5)
    assert session.board_system.selected == (5, 5)


def test_clicking_same_tile_or_deselect_clears(session):
    cleared = []
    session.event_bus.subscribe(EVENT_TILE_DESELECTED, lambda s, **k: cleared.append(k['reason']))
    session.event_bus.emit(EVENT_TILE_CLICK, col=1, row=1)
    session.event_bus.emit(EVENT_TILE_CLICK, col=1, row=1)
    assert session.board_system.selected is None
    session.event_bus.emit(EVENT_TILE_CLICK, col=1, row=1)
    session.event_bus.emit(EVENT_TILE_DESELECT)
    assert session.board_system.selected is None
    assert cleared == ['same_tile', 'request']


def test_clicks_outside_board_are_ignored(session):
    session.event_bus.emit(EVENT_TILE_CLICK, col=9, row=0)
    session.event_bus.emit(EVENT_TILE_CLICK, row=0)
    assert session.board_system.selected is None


def test_tile_click_ignored_during_cascade(session):
    state = get_game_state(session.world)
    state.phase = ResolutionPhase.RESOLVING
    session.event_bus.emit(EVENT_TILE_CLICK, col=0, row=0)
    assert session.board_system.selected is None, 'Selection should be blocked while cascade active'
    state.phase = ResolutionPhase.IDLE
    session.event_bus.emit(EVENT_TILE_CLICK, col=0, row=0)
    assert session.board_system.selected == (0, 0), 'Selection should work again after cascade complete'
