"""
B-tree based ordered key-value container.

This package provides an embeddable sorted map with:
- insert(key, value) - O(log N) upsert
- search(key) - O(log N) point lookup
- remove(key) - O(log N) deletion with borrow/merge rebalancing
- traverse() - full in-order enumeration

The container is not thread-safe; callers serialize mutating access.
"""

from btree.models.entry import Entry
from btree.models.exceptions import (
    BTreeError,
    ErrorKind,
    InvalidOrderError,
    KeyNotFoundError,
    TreeEmptyError,
    TreeInvariantError,
)
from btree.models.sortedcontainers import BTree

__all__ = [
    "BTree",
    "Entry",
    "BTreeError",
    "ErrorKind",
    "InvalidOrderError",
    "KeyNotFoundError",
    "TreeEmptyError",
    "TreeInvariantError",
]
