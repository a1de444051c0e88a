import random
from typing import Sequence

from esper import World

from gemfall.components.game_state import GameState
from gemfall.components.tile_types import TileTypes, default_token_kinds
from gemfall.constants import TOKEN_KIND_COUNT


def create_world(
    *,
    kind_count: int = TOKEN_KIND_COUNT,
    kinds: Sequence[str] | None = None,
    rng: random.Random | None = None,
) -> World:
    """Create the session world with its GameState and TileTypes singletons.

    The board entity itself is owned by BoardSystem. The session RNG is
    attached as ``world.random`` so every system draws from the same stream.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    world.create_entity(GameState())
    world.create_entity(TileTypes(kinds=list(kinds) if kinds else default_token_kinds(kind_count)))
    return world
