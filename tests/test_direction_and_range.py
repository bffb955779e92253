import random

import pytest

from roomchain.errors import ConfigurationError
from roomchain.geometry import Direction
from roomchain.random_source import IntRange, SeededRandom


@pytest.mark.parametrize("d", list(Direction))
def test_opposite_is_an_involution(d):
    assert d.opposite().opposite() is d
    assert d.opposite() is not d


@pytest.mark.parametrize("d", list(Direction))
def test_four_clockwise_turns_return_home(d):
    turned = d
    for _ in range(4):
        turned = turned.rotate_clockwise()
    assert turned is d


def test_direction_numbering_matches_compass_order():
    assert Direction.NORTH.opposite() is Direction.SOUTH
    assert Direction.EAST.opposite() is Direction.WEST
    assert Direction.NORTH.rotate_clockwise() is Direction.EAST
    assert Direction.WEST.rotate_clockwise() is Direction.NORTH


def test_int_range_sample_stays_in_half_open_interval():
    rng = SeededRandom(1234)
    r = IntRange(3, 10)
    seen = {r.sample(rng) for _ in range(2000)}
    assert min(seen) >= 3
    assert max(seen) <= 9
    assert 10 not in seen
    # Large sample should hit every value
    assert seen == set(range(3, 10))


def test_int_range_degenerate_returns_min():
    rng = SeededRandom(0)
    r = IntRange(4, 4)
    assert all(r.sample(rng) == 4 for _ in range(10))
    assert 4 in r
    assert 5 not in r


def test_int_range_rejects_inverted_bounds():
    with pytest.raises(ConfigurationError):
        IntRange(5, 2)


def test_seeded_random_is_reproducible():
    a = SeededRandom(99)
    b = SeededRandom(99)
    assert [a.randrange(0, 100) for _ in range(20)] == [b.randrange(0, 100) for _ in range(20)]


def test_seeded_random_empty_span_returns_low_bound():
    rng = SeededRandom(5)
    assert rng.randrange(7, 7) == 7
    assert rng.randrange(7, 3) == 7


def test_seeded_random_choice_rejects_empty():
    with pytest.raises(IndexError):
        SeededRandom(1).choice([])


def test_int_range_accepts_plain_random_module_generator():
    rng = random.Random(7)
    assert IntRange(4, 4).sample(rng) == 4
    assert all(3 <= IntRange(3, 5).sample(rng) < 5 for _ in range(50))
