"""
Randomised property tests against a dict reference model.
"""

import random

import pytest

from btree import BTree, KeyNotFoundError, TreeEmptyError

SEEDS = [0, 1, 7, 42, 2024]


def assert_matches(tree: BTree, model: dict) -> None:
    """Check the tree holds exactly the model's entries and is well-formed."""
    tree.validate()
    assert [entry.as_tuple() for entry in tree.traverse()] == sorted(model.items())
    assert tree.size() == len(model)


class TestInsertProperties:
    """Properties of insert sequences."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_sortedness_and_round_trip(self, order, seed):
        """Test traverse is strictly ascending and search returns the latest value."""
        rng = random.Random(seed)
        tree = BTree(order)
        model = {}

        for _ in range(400):
            key = rng.randrange(200)
            value = rng.random()
            tree.insert(key, value)
            model[key] = value

        keys = [entry.key for entry in tree.traverse()]
        assert all(a < b for a, b in zip(keys, keys[1:]))
        for key, value in model.items():
            assert tree.search(key) == value
        assert_matches(tree, model)

    def test_upsert_keeps_count(self, order, shuffled_keys):
        """Test re-inserting every key changes values but not the count."""
        tree = BTree(order)
        for key in shuffled_keys:
            tree.insert(key, "first")
        for key in shuffled_keys:
            tree.insert(key, "second")

        assert len(tree.traverse()) == len(shuffled_keys)
        assert all(entry.value == "second" for entry in tree.traverse())
        tree.validate()


class TestRemoveProperties:
    """Properties of mixed insert/remove workloads."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_size_conservation(self, order, seed):
        """Test N distinct inserts then M removes leave N - M entries."""
        rng = random.Random(seed)
        keys = rng.sample(range(10_000), 300)
        tree = BTree(order)
        for key in keys:
            tree.insert(key, -key)

        removed = rng.sample(keys, 170)
        for key in removed:
            tree.remove(key)
            tree.validate()

        assert len(tree.traverse()) == len(keys) - len(removed)
        remaining = {entry.key for entry in tree.traverse()}
        assert remaining == set(keys) - set(removed)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_mixed_workload(self, order, seed):
        """Test interleaved operations against a dict model."""
        rng = random.Random(seed)
        tree = BTree(order)
        model = {}

        for step in range(1500):
            key = rng.randrange(150)
            if rng.random() < 0.55:
                tree.insert(key, step)
                model[key] = step
            elif not model:
                with pytest.raises(TreeEmptyError):
                    tree.remove(key)
            elif key in model:
                tree.remove(key)
                del model[key]
                assert key not in tree
            else:
                before = tree.traverse()
                with pytest.raises(KeyNotFoundError):
                    tree.remove(key)
                assert tree.traverse() == before

            tree.validate()

        assert_matches(tree, model)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_drain_in_random_order(self, order, seed):
        """Test removing every key returns the tree to empty."""
        rng = random.Random(seed)
        keys = list(range(250))
        rng.shuffle(keys)
        tree = BTree(order)
        for key in keys:
            tree.insert(key, key)

        rng.shuffle(keys)
        for key in keys:
            tree.remove(key)
            tree.validate()

        assert tree.is_empty()
        with pytest.raises(TreeEmptyError):
            tree.remove(keys[0])

    def test_height_stays_logarithmic(self, order):
        """Test height is bounded by the minimum fan-out."""
        tree = BTree(order)
        n = 2000
        for key in range(n):
            tree.insert(key, key)

        min_fanout = (order - 1) // 2 + 1
        bound = 1
        capacity = 1
        while capacity < n:
            capacity *= min_fanout
            bound += 1
        assert tree.height() <= bound


class TestSeparatorMergeRegression:
    """Deletions that merge two minimal internal children around a separator."""

    def test_shuffled_drain_then_refill(self):
        """Test the tree stays well-formed and insertable after such merges."""
        keys = list(range(40))
        random.Random(0).shuffle(keys)
        tree = BTree(3)
        for key in keys:
            tree.insert(key, key)

        for key in keys[:20]:
            tree.remove(key)
            tree.validate()

        for key in keys:
            tree.insert(key, -key)
            tree.validate()

        assert_matches(tree, {key: -key for key in keys})

    @pytest.mark.parametrize("order", [3, 5, 7, 9, 11, 13])
    @pytest.mark.parametrize("seed", range(8))
    def test_odd_orders_stay_below_capacity(self, order, seed):
        """Test no node is left holding order keys after removals."""
        rng = random.Random(seed)
        keys = list(range(order * 40))
        rng.shuffle(keys)
        tree = BTree(order)
        model = {}
        for key in keys:
            tree.insert(key, key)
            model[key] = key

        for key in rng.sample(keys, len(keys) // 2):
            tree.remove(key)
            del model[key]
            tree.validate()

        for key in keys:
            tree.insert(key, key)
            model[key] = key
        assert_matches(tree, model)
