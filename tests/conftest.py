"""
Shared pytest fixtures for B-tree tests.
"""

import random

import pytest

from btree import BTree


@pytest.fixture
def tree():
    """Provide an empty tree with the smallest order."""
    return BTree(3)


@pytest.fixture(params=[3, 4, 5, 8])
def order(request):
    """Parametrize a test over odd and even branching factors."""
    return request.param


@pytest.fixture
def sample_entries():
    """Provide sample key-value entries for testing."""
    return [(1, "a"), (2, "b"), (3, "c"), (4, "d"), (5, "e"), (6, "f"), (7, "g")]


@pytest.fixture
def shuffled_keys():
    """Provide 500 distinct integer keys in a fixed shuffled order."""
    keys = list(range(500))
    random.Random(1234).shuffle(keys)
    return keys
