import sys, os

import pytest

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from tests.helpers import KINDS, ScriptedRandom, load_layout, striped_layout


@pytest.fixture
def session():
    from gemfall.session import GameSession
    game = GameSession()
    game.initialize(size=8, kind_count=5, seed=1234)
    return game


__all__ = [
    "KINDS",
    "ScriptedRandom",
    "load_layout",
    "striped_layout",
]
