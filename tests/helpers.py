from __future__ import annotations

import random
from itertools import cycle
from typing import Sequence

from gemfall.components.board import Board

KINDS = ['blue', 'green', 'purple', 'red', 'yellow']
BLUE, GREEN, PURPLE, RED, YELLOW = KINDS


class ScriptedRandom(random.Random):
    """Random whose choice() replays a fixed script, cycling once exhausted."""

    def __init__(self, script: Sequence[str]):
        super().__init__(0)
        self.script = list(script)
        self._values = cycle(self.script)
        self.draws = 0

    def choice(self, seq):
        value = next(self._values)
        assert value in seq, f"Scripted value {value!r} not in {seq!r}"
        self.draws += 1
        return value


def striped_layout(size: int = 8, kinds: Sequence[str] = KINDS) -> list[list[str]]:
    """Layout where no two neighbouring cells share a kind (needs five kinds)."""
    return [[kinds[(col + 2 * row) % len(kinds)] for col in range(size)] for row in range(size)]


def diagonal_layout(size: int, kinds: Sequence[str]) -> list[list[str]]:
    """Three-kind diagonal stripes: no matches and no valid swap."""
    return [[kinds[(col + row) % 3] for col in range(size)] for row in range(size)]


def load_layout(session, layout) -> Board:
    board = session.board
    board.load(layout)
    return board


def script_refills(session, script: Sequence[str]) -> ScriptedRandom:
    rng = ScriptedRandom(script)
    session.generator.rng = rng
    return rng


def scenario_layout() -> list[list[str]]:
    """Row 4 reads blue, blue, green, blue; swapping (2,4) and (3,4) completes a run."""
    layout = striped_layout()
    layout[4][0:4] = [BLUE, BLUE, GREEN, BLUE]
    return layout
