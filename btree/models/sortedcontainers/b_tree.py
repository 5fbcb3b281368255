"""
B-Tree implementation for sorted key-value storage.

Holds the root reference and the policies that change the height of the
tree: growing a new root when the old one splits and collapsing an emptied
root into its only child.
"""

import logging
from collections.abc import AsyncIterator, Iterator
from typing import Any

from btree.interfaces.sorted_container import SortedContainer
from btree.models.entry import Entry
from btree.models.exceptions import (
    InvalidOrderError,
    KeyNotFoundError,
    TreeEmptyError,
    TreeInvariantError,
)
from btree.models.node import Node

logger = logging.getLogger(__name__)

# Open bound marker for separator checks
_UNBOUNDED = object()


class BTree(SortedContainer):
    """
    B-Tree implementation of SortedContainer.

    Properties maintained:
    1. Every node holds fewer than order keys
    2. Keys within a node are strictly ascending
    3. Separator keys bound the key ranges of their adjacent children
    4. Every non-root node holds at least (order - 1) // 2 keys
    5. All leaves are at the same depth

    Not thread-safe. Concurrent readers are fine only while no mutation is
    in flight.
    """

    # Default branching factor
    DEFAULT_ORDER = 4

    # Smallest branching factor that keeps splits well-formed
    MIN_ORDER = 3

    def __init__(self, order: int = DEFAULT_ORDER) -> None:
        """
        Initialize an empty tree.

        Args:
            order: Branching factor. A node holds at most order - 1 keys at
                rest and order + 1 children while splitting.

        Raises:
            InvalidOrderError: If order is not an int or is below MIN_ORDER.
        """
        if isinstance(order, bool) or not isinstance(order, int) or order < self.MIN_ORDER:
            logger.warning("Rejected B-tree order %r (minimum %d)", order, self.MIN_ORDER)
            raise InvalidOrderError(order, self.MIN_ORDER)

        self._order = order
        self._root: Node | None = None
        self._size: int = 0

    def __repr__(self) -> str:
        return f"BTree(order={self._order}, size={self._size})"

    @property
    def order(self) -> int:
        return self._order

    # === CORE OPERATIONS ===
    def search(self, key: Any) -> Any:
        """
        Retrieve the value stored under key. O(log N)

        Raises:
            KeyNotFoundError: If the key is absent.
        """
        node = self._root
        while node is not None:
            index, found = node.search(key)
            if found:
                return node.keys[index].value
            node = node.children[index]

        raise KeyNotFoundError(key)

    def insert(self, key: Any, value: Any) -> None:
        """Insert a key-value pair, replacing the value of an existing key. O(log N)"""
        entry = Entry(key=key, value=value)
        is_new = not self.has(key)

        if self._root is None:
            self._root = Node(self._order)

        if self._root.insert(entry):
            self._grow()

        if is_new:
            self._size += 1

    def remove(self, key: Any) -> None:
        """
        Remove key and its value. O(log N)

        Raises:
            TreeEmptyError: If the tree holds no entries.
            KeyNotFoundError: If the key is absent. The tree is unchanged.
        """
        if self._root is None:
            raise TreeEmptyError()

        underflowed = self._root.remove(key)
        self._size -= 1

        if underflowed and self._root.is_empty():
            self._shrink()

    def traverse(self) -> list[Entry]:
        """Return every entry in ascending key order."""
        if self._root is None:
            return []
        return self._root.traverse()

    # === SORTED CONTAINER ===
    def put(self, key: Any, value: Any) -> None:
        self.insert(key, value)

    def get(self, key: Any, default: Any = None) -> Any:
        try:
            return self.search(key)
        except KeyNotFoundError:
            return default

    def delete(self, key: Any) -> bool:
        try:
            self.remove(key)
        except (KeyNotFoundError, TreeEmptyError):
            return False
        return True

    def has(self, key: Any) -> bool:
        try:
            self.search(key)
        except KeyNotFoundError:
            return False
        return True

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._root is not None

    def __contains__(self, key: Any) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return _InOrderIterator(self._root)

    def __aiter__(self) -> AsyncIterator[tuple[Any, Any]]:
        return _AsyncInOrderIterator(self._root)

    # === SHAPE ===
    def is_empty(self) -> bool:
        return self._root is None

    def height(self) -> int:
        """Number of levels; 0 for an empty tree, 1 for a lone root leaf."""
        height = 0
        node = self._root
        while node is not None:
            height += 1
            node = node.children[0]
        return height

    def min(self) -> Entry:
        """Return the entry with the smallest key."""
        if self._root is None:
            raise TreeEmptyError()
        return self._root.min_entry()

    def max(self) -> Entry:
        """Return the entry with the largest key."""
        if self._root is None:
            raise TreeEmptyError()
        return self._root.max_entry()

    def clear(self) -> None:
        """Drop every entry."""
        logger.debug("Clearing B-tree with %d entries", self._size)
        self._root = None
        self._size = 0

    def _grow(self) -> None:
        """Split the overfull root under a new root, adding one level."""
        old_root = self._root
        median, right = old_root.split()

        root = Node(self._order)
        root.insert_key(0, median)
        root.insert_child(0, old_root)
        root.insert_child(1, right)

        self._root = root
        logger.debug("B-tree root split, height now %d", self.height())

    def _shrink(self) -> None:
        """Replace an emptied root with its only child, removing one level."""
        old_root = self._root
        if old_root.is_leaf():
            self._root = None
            logger.debug("B-tree emptied")
            return

        self._root = old_root.remove_child(0)
        logger.debug("B-tree root collapsed, height now %d", self.height())

    # === INVARIANTS ===
    def validate(self) -> None:
        """
        Check every structural invariant of the tree.

        Raises:
            TreeInvariantError: Naming the first violated property.
        """
        if self._root is None:
            if self._size != 0:
                raise TreeInvariantError(f"empty tree reports size {self._size}")
            return

        if self._root.is_empty():
            raise TreeInvariantError("root is empty at rest", depth=0)

        seen: set[int] = set()
        leaf_depths: set[int] = set()
        count = self._validate_node(
            self._root, 0, _UNBOUNDED, _UNBOUNDED, seen, leaf_depths
        )

        if len(leaf_depths) != 1:
            raise TreeInvariantError(f"leaves at different depths {sorted(leaf_depths)}")
        if count != self._size:
            raise TreeInvariantError(f"size is {self._size} but tree holds {count} keys")

    def _validate_node(
        self,
        node: Node,
        depth: int,
        lower: Any,
        upper: Any,
        seen: set[int],
        leaf_depths: set[int],
    ) -> int:
        """Validate one subtree and return the number of keys it holds."""
        if id(node) in seen:
            raise TreeInvariantError("node reachable from two parents", depth)
        seen.add(id(node))

        if node.order != self._order:
            raise TreeInvariantError(f"node order {node.order} != tree order", depth)
        if node.num_keys >= self._order:
            raise TreeInvariantError(f"node holds {node.num_keys} keys at rest", depth)
        if depth > 0 and node.is_underflowed():
            raise TreeInvariantError(
                f"node holds {node.num_keys} keys, minimum is {node.min_keys}", depth
            )
        if not node.is_leaf() and node.num_children != node.num_keys + 1:
            raise TreeInvariantError(
                f"internal node has {node.num_keys} keys and {node.num_children} children",
                depth,
            )
        if any(slot is not None for slot in node.keys[node.num_keys :]):
            raise TreeInvariantError("stale key slot beyond num_keys", depth)
        if any(slot is not None for slot in node.children[node.num_children :]):
            raise TreeInvariantError("stale child slot beyond num_children", depth)

        entries = node.entries()
        for i, entry in enumerate(entries):
            if entry is None:
                raise TreeInvariantError(f"empty key slot {i}", depth)
            if i > 0 and not entries[i - 1].key < entry.key:
                raise TreeInvariantError(f"keys out of order at slot {i}", depth)
            if lower is not _UNBOUNDED and not lower < entry.key:
                raise TreeInvariantError(f"key {entry.key!r} not above separator", depth)
            if upper is not _UNBOUNDED and not entry.key < upper:
                raise TreeInvariantError(f"key {entry.key!r} not below separator", depth)

        if node.is_leaf():
            leaf_depths.add(depth)
            return node.num_keys

        count = node.num_keys
        for i, child in enumerate(node.child_nodes()):
            if child is None:
                raise TreeInvariantError(f"empty child slot {i}", depth)
            child_lower = entries[i - 1].key if i > 0 else lower
            child_upper = entries[i].key if i < node.num_keys else upper
            count += self._validate_node(
                child, depth + 1, child_lower, child_upper, seen, leaf_depths
            )
        return count


class _InOrderIterator(Iterator[tuple[Any, Any]]):
    """Lazy in-order iterator over a B-tree."""

    def __init__(self, root: Node | None) -> None:
        # Frames of [node, next key index]
        self._stack: list[list[Any]] = []
        _push_left_path(self._stack, root)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return self

    def __next__(self) -> tuple[Any, Any]:
        entry = _advance(self._stack)
        if entry is None:
            raise StopIteration
        return entry.as_tuple()


class _AsyncInOrderIterator(AsyncIterator[tuple[Any, Any]]):
    """Async iterator over a B-tree (in-memory, no I/O)."""

    def __init__(self, root: Node | None) -> None:
        self._stack: list[list[Any]] = []
        _push_left_path(self._stack, root)

    def __aiter__(self) -> "_AsyncInOrderIterator":
        return self

    async def __anext__(self) -> tuple[Any, Any]:
        entry = _advance(self._stack)
        if entry is None:
            raise StopAsyncIteration
        return entry.as_tuple()


def _push_left_path(stack: list[list[Any]], node: Node | None) -> None:
    """Push node and its leftmost descendants onto the stack."""
    while node is not None:
        stack.append([node, 0])
        node = node.children[0]


def _advance(stack: list[list[Any]]) -> Entry | None:
    """Pop the next in-order entry off the frame stack, or None when done."""
    while stack:
        frame = stack[-1]
        node, index = frame
        if index < node.num_keys:
            frame[1] = index + 1
            if not node.is_leaf():
                _push_left_path(stack, node.children[index + 1])
            return node.keys[index]
        stack.pop()
    return None
