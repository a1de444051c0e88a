from __future__ import annotations

import random
from typing import Sequence


class TokenGenerator:
    """Uniform random draw from a fixed alphabet of token kinds.

    Used for both the initial fill and post-collapse refill. ``rng`` may be
    swapped out at any time (tests install scripted generators this way).
    """

    def __init__(self, kinds: Sequence[str], rng: random.Random | None = None):
        if not kinds:
            raise ValueError("TokenGenerator needs at least one token kind")
        self.kinds = list(kinds)
        self.rng = rng or random.Random()

    def next(self) -> str:
        return self.rng.choice(self.kinds)
