import random
from collections import Counter

from drillbot.arrangement import ArrangementEngine, ChipBox, Zone, resolve_drop_index

WORDS = ["cat", "The", "sleeps", "the", "on", "mat"]


def test_place_and_unplace_append_to_the_end():
    engine = ArrangementEngine(WORDS)
    assert engine.place(1)
    assert engine.place(0)
    assert engine.assembled == ("The", "cat")
    assert engine.pool == ("sleeps", "the", "on", "mat")
    assert engine.unplace(0)
    assert engine.assembled == ("cat",)
    assert engine.pool[-1] == "The"


def test_reorder_within_zone():
    engine = ArrangementEngine(["a", "b", "c"])
    assert engine.move_within_zone(Zone.POOL, 0, 3)
    assert engine.pool == ("b", "c", "a")
    assert engine.move_within_zone(Zone.POOL, 2, 0)
    assert engine.pool == ("a", "b", "c")


def test_invalid_indices_are_noops():
    engine = ArrangementEngine(["a", "b"])
    assert not engine.place(5)
    assert not engine.unplace(0)
    assert not engine.move_within_zone(Zone.POOL, -1, 0)
    assert not engine.move_between_zones(Zone.POOL, 0, Zone.ASSEMBLED, 3)
    assert engine.pool == ("a", "b")
    assert engine.assembled == ()


def test_multiset_is_preserved_across_random_moves():
    rng = random.Random(7)
    engine = ArrangementEngine(WORDS)
    zones = list(Zone)
    for _ in range(300):
        src = rng.choice(zones)
        dst = rng.choice(zones)
        engine.move_between_zones(src, rng.randint(-1, 7), dst, rng.randint(-1, 7))
        assert engine.check_invariant()
    assert Counter(engine.pool) + Counter(engine.assembled) == Counter(WORDS)


def test_drop_index_uses_chip_midpoints():
    boxes = [ChipBox(0, 40), ChipBox(50, 40), ChipBox(100, 60)]
    assert resolve_drop_index(5, boxes) == 0
    assert resolve_drop_index(30, boxes) == 1
    assert resolve_drop_index(129, boxes) == 2
    assert resolve_drop_index(500, boxes) == 3
    assert resolve_drop_index(10, []) == 0


def test_drop_moves_chip_into_other_zone():
    engine = ArrangementEngine(["x", "y", "z"])
    engine.place(0)
    engine.place(0)
    boxes = [ChipBox(0, 20), ChipBox(30, 20)]
    assert engine.drop(Zone.POOL, 0, Zone.ASSEMBLED, 35, boxes)
    assert engine.assembled == ("x", "z", "y")


def test_clear_returns_everything_to_pool():
    engine = ArrangementEngine(["a", "b", "c"])
    engine.place(2)
    engine.place(0)
    assert engine.clear()
    assert engine.assembled == ()
    assert sorted(engine.pool) == ["a", "b", "c"]
    assert not engine.clear()


def test_lock_freezes_both_zones():
    engine = ArrangementEngine(["a", "b"])
    engine.place(0)
    engine.lock()
    assert engine.locked
    assert not engine.place(0)
    assert not engine.unplace(0)
    assert not engine.move_within_zone(Zone.POOL, 0, 1)
    assert engine.assembled == ("a",)


def test_reveal_orders_existing_chips_canonically():
    engine = ArrangementEngine(["mat", "the", "on", "sleeps", "cat", "The"])
    engine.place(3)
    engine.reveal(["The", "cat", "sleeps", "on", "the", "mat"])
    assert engine.pool == ()
    assert [w.lower() for w in engine.assembled] == ["the", "cat", "sleeps", "on", "the", "mat"]
    assert engine.locked
    assert engine.check_invariant()
