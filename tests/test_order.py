"""
Tests for slice order maintenance.
"""

from collections import Counter
import random

from spinwheel.wheel.models import WheelItem
from spinwheel.wheel.order import (
    default_slice_order,
    reconcile_slice_order,
    remove_one_slice,
    shuffle_slice_order,
)

P, S, T = "default-1", "default-2", "default-3"


def _items(pizza=3, sushi=2, tacos=1):
    return [
        WheelItem(id=P, name="Pizza", weight=pizza),
        WheelItem(id=S, name="Sushi", weight=sushi),
        WheelItem(id=T, name="Tacos", weight=tacos),
    ]


class TestDefaultOrder:
    """Tests for the grouped default order."""

    def test_grouped(self, default_items):
        assert default_slice_order(default_items) == [P, P, P, S, S, T]

    def test_empty(self):
        assert default_slice_order([]) == []


class TestReconcile:
    """Tests for reconcile_slice_order."""

    def test_counts_match_weights(self):
        """Test that every item appears exactly weight times."""
        items = _items(4, 1, 2)
        order = reconcile_slice_order(items, [T, "gone", P, S, S, S, P])
        counts = Counter(order)
        assert counts == {P: 4, S: 1, T: 2}

    def test_consistent_order_unchanged(self):
        order = [S, P, T, P, S, P]
        assert reconcile_slice_order(_items(), order) == order

    def test_idempotent(self):
        items = _items(2, 3, 1)
        once = reconcile_slice_order(items, [T, P, P, P, S])
        assert reconcile_slice_order(items, once) == once

    def test_shrink_drops_trailing_occurrence(self):
        """Test that Sushi 2 -> 1 keeps the first Sushi slice in place."""
        order = reconcile_slice_order(_items(sushi=1), [P, P, P, S, S, T])
        assert order == [P, P, P, S, T]

    def test_grow_appends_at_end(self):
        """Test that the surviving order is kept as a prefix when weights grow."""
        prior = [P, S, P, T, P, S]
        order = reconcile_slice_order(_items(tacos=3), prior)
        assert order[:len(prior)] == prior
        assert order[len(prior):] == [T, T]

    def test_new_item_appended(self):
        items = _items() + [WheelItem(id="new", name="Curry", weight=2)]
        order = reconcile_slice_order(items, [P, P, P, S, S, T])
        assert order == [P, P, P, S, S, T, "new", "new"]

    def test_deleted_item_dropped(self):
        items = [i for i in _items() if i.id != S]
        assert reconcile_slice_order(items, [P, S, P, S, P, T]) == [P, P, P, T]

    def test_empty_prior_gives_grouped(self):
        assert reconcile_slice_order(_items(), []) == [P, P, P, S, S, T]

    def test_no_items(self):
        assert reconcile_slice_order([], [P, S]) == []


class TestShuffle:
    """Tests for shuffle_slice_order."""

    def test_is_permutation(self):
        order = [P, P, P, S, S, T]
        shuffled = shuffle_slice_order(order, random.Random(3))
        assert sorted(shuffled) == sorted(order)

    def test_does_not_modify_input(self):
        order = [P, P, P, S, S, T]
        shuffle_slice_order(order, random.Random(3))
        assert order == [P, P, P, S, S, T]

    def test_seeded_is_deterministic(self):
        order = [P, P, P, S, S, T]
        assert shuffle_slice_order(order, random.Random(9)) == shuffle_slice_order(
            order, random.Random(9)
        )

    def test_reaches_other_arrangements(self):
        order = [P, P, P, S, S, T]
        rng = random.Random(11)
        results = {tuple(shuffle_slice_order(order, rng)) for _ in range(50)}
        assert len(results) > 1

    def test_short_orders(self):
        assert shuffle_slice_order([], random.Random(1)) == []
        assert shuffle_slice_order([P], random.Random(1)) == [P]


class TestRemoveOneSlice:
    """Tests for remove_one_slice."""

    def test_removes_last_occurrence(self):
        items = _items(pizza=2)
        new_items, order = remove_one_slice(items, [P, S, P, T, S], P)
        assert order == [P, S, T, S]
        assert next(i for i in new_items if i.id == P).weight == 1

    def test_drops_item_at_zero(self):
        new_items, order = remove_one_slice(_items(), [P, P, P, S, S, T], T)
        assert order == [P, P, P, S, S]
        assert [i.id for i in new_items] == [P, S]

    def test_unknown_id_unchanged(self):
        items = _items()
        order = [P, P, P, S, S, T]
        new_items, new_order = remove_one_slice(items, order, "nope")
        assert new_items == items
        assert new_order == order

    def test_result_stays_consistent(self):
        """Test that the weights still match the order after removal."""
        new_items, order = remove_one_slice(_items(), [S, P, T, P, S, P], S)
        assert reconcile_slice_order(new_items, order) == order
