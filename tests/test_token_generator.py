import random
from collections import Counter

import pytest

from gemfall.components.tile_types import TileTypes, default_token_kinds
from gemfall.systems.token_generator import TokenGenerator


def test_default_kinds_follow_palette():
    assert default_token_kinds(5) == ['blue', 'green', 'purple', 'red', 'yellow']
    assert default_token_kinds(3) == ['blue', 'green', 'purple']
    assert default_token_kinds(7)[5:] == ['gem5', 'gem6']


def test_tile_types_drop_duplicates():
    registry = TileTypes(kinds=['red', 'blue', 'red', ''])
    assert registry.spawnable_types() == ['red', 'blue']
    assert len(registry) == 2


def test_draws_cover_alphabet_roughly_uniformly():
    kinds = default_token_kinds(5)
    generator = TokenGenerator(kinds, random.Random(7))
    counts = Counter(generator.next() for _ in range(5000))
    assert set(counts) == set(kinds)
    for kind in kinds:
        assert 800 < counts[kind] < 1200, counts


def test_same_seed_same_sequence():
    kinds = default_token_kinds(5)
    first = TokenGenerator(kinds, random.Random(99))
    second = TokenGenerator(kinds, random.Random(99))
    assert [first.next() for _ in range(50)] == [second.next() for _ in range(50)]


def test_empty_alphabet_rejected():
    with pytest.raises(ValueError):
        TokenGenerator([])
