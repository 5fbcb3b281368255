"""
Data models for the B-tree container.
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
from btree.models.node import Node

__all__ = [
    "Entry",
    "Node",
    "BTreeError",
    "ErrorKind",
    "InvalidOrderError",
    "KeyNotFoundError",
    "TreeEmptyError",
    "TreeInvariantError",
]
