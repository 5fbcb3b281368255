"""
Custom exceptions for the B-tree container.
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Closed set of failure kinds reported by the container."""

    INVALID_ORDER = "invalid_order"
    KEY_NOT_FOUND = "key_not_found"
    TREE_EMPTY = "tree_empty"
    INVARIANT_VIOLATION = "invariant_violation"


class BTreeError(Exception):
    """Base class for all container errors."""

    kind: ErrorKind


class InvalidOrderError(BTreeError, ValueError):
    """
    Raised when a tree is constructed with a branching factor that is too small.

    Fatal to construction; no tree is created.
    """

    kind = ErrorKind.INVALID_ORDER

    def __init__(self, order: Any, minimum: int):
        """
        Initialize invalid order error.

        Args:
            order: The rejected order.
            minimum: Smallest accepted order.
        """
        self.order = order
        self.minimum = minimum
        super().__init__(f"order must be at least {minimum}, got {order!r}")


class KeyNotFoundError(BTreeError, KeyError):
    """Raised by search and remove when the key is not stored in the tree."""

    kind = ErrorKind.KEY_NOT_FOUND

    def __init__(self, key: Any):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"key not found: {self.key!r}"


class TreeEmptyError(BTreeError):
    """Raised when removing from (or reading the bounds of) an empty tree."""

    kind = ErrorKind.TREE_EMPTY

    def __init__(self) -> None:
        super().__init__("tree is empty")


class TreeInvariantError(BTreeError):
    """
    Raised by BTree.validate() when the structure is inconsistent.

    This indicates a bug in the tree maintenance code, never a caller error.
    """

    kind = ErrorKind.INVARIANT_VIOLATION

    def __init__(self, message: str, depth: int | None = None):
        """
        Initialize invariant error.

        Args:
            message: Description of the violated property.
            depth: Depth of the offending node (root is 0), if known.
        """
        self.depth = depth
        if depth is not None:
            message = f"{message} (at depth {depth})"
        super().__init__(message)
