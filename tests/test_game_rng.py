import pytest

from game_rng import GameRNG


def test_get_int_covers_both_bounds():
    rng = GameRNG(5)
    draws = {rng.get_int(1, 3) for _ in range(300)}
    assert draws == {1, 2, 3}
    assert rng.get_int(4, 4) == 4


def test_get_int_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        GameRNG(1).get_int(3, 1)


def test_get_float_stays_in_range():
    rng = GameRNG(8)
    for _ in range(200):
        value = rng.get_float(2.0, 3.0)
        assert 2.0 <= value < 3.0


def test_chance_edges():
    rng = GameRNG(2)
    assert not any(rng.chance(0.0) for _ in range(100))
    assert not any(rng.chance(-0.5) for _ in range(100))
    assert all(rng.chance(1.0) for _ in range(100))
    hits = sum(rng.chance(0.5) for _ in range(1000))
    assert 350 < hits < 650


def test_choice():
    rng = GameRNG(4)
    items = ["a", "b", "c"]
    assert {rng.choice(items) for _ in range(200)} == set(items)
    with pytest.raises(ValueError):
        rng.choice([])


def test_get_offset_bounds():
    rng = GameRNG(6)
    offsets = [rng.get_offset(2) for _ in range(300)]
    assert all(-2 <= dx <= 2 and -2 <= dy <= 2 for dx, dy in offsets)
    assert {dx for dx, _ in offsets} == {-2, -1, 0, 1, 2}
    assert rng.get_offset(0) == (0, 0)
    with pytest.raises(ValueError):
        rng.get_offset(-1)


def test_same_seed_same_draws():
    first, second = GameRNG(42), GameRNG(42)
    assert [first.get_int(0, 1000) for _ in range(20)] == [second.get_int(0, 1000) for _ in range(20)]
    assert first.initial_seed == 42


def test_shuffle_keeps_elements():
    rng = GameRNG(3)
    items = list(range(10))
    rng.shuffle(items)
    assert sorted(items) == list(range(10))


def test_state_round_trip():
    rng = GameRNG(11)
    rng.get_int(0, 10)
    state = rng.get_state()
    expected = [rng.get_float() for _ in range(5)]

    other = GameRNG(99)
    other.set_state(state)
    assert other.initial_seed == 11
    assert [other.get_float() for _ in range(5)] == expected
