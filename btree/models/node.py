"""
Node - fixed-capacity slot array of entries and child references.

All split, merge, borrow and search logic lives here and only ever touches a
node's own slots and those of its direct children. Structural problems are
reported to the caller through return values (overflow after insert,
underflow after remove) and repaired bottom-up by the parent.
"""

from collections.abc import Iterator
from typing import Any

from btree.models.entry import Entry
from btree.models.exceptions import KeyNotFoundError, TreeInvariantError


class Node:
    """
    A single B-tree node.

    Slots beyond num_keys / num_children are always None, and every move
    between slot arrays clears the source slot, so a child is referenced by
    exactly one parent slot at any time.

    Attributes:
        order: Branching factor. At most order keys (transiently, mid-insert)
            and order + 1 children.
        num_keys: Number of occupied key slots.
        num_children: Number of occupied child slots (0 for a leaf).
        keys: Key slots, ascending in keys[0:num_keys].
        children: Child slots, children[0:num_children].
    """

    def __init__(self, order: int) -> None:
        self.order = order
        self.num_keys = 0
        self.num_children = 0
        self.keys: list[Entry | None] = [None] * order
        self.children: list["Node | None"] = [None] * (order + 1)

    def __repr__(self) -> str:
        keys = [entry.key for entry in self.entries()]
        return f"Node(keys={keys!r}, children={self.num_children})"

    @property
    def min_keys(self) -> int:
        """Fewest keys a non-root node may hold once rebalancing completes."""
        return (self.order - 1) // 2

    def is_leaf(self) -> bool:
        return self.num_children == 0

    def is_empty(self) -> bool:
        return self.num_keys == 0

    def is_full(self) -> bool:
        """True when the node holds order keys and must be split."""
        return self.num_keys == self.order

    def has_surplus(self) -> bool:
        """True when the node can give a key away and still meet the minimum."""
        return self.num_keys > self.min_keys

    def is_underflowed(self) -> bool:
        return self.num_keys < self.min_keys

    def entries(self) -> list[Entry]:
        return list(self.keys[: self.num_keys])

    def child_nodes(self) -> list["Node"]:
        return list(self.children[: self.num_children])

    # === SLOT PRIMITIVES ===
    def insert_key(self, index: int, entry: Entry) -> None:
        """Insert entry at index, shifting later keys right."""
        for i in range(self.num_keys, index, -1):
            self.keys[i] = self.keys[i - 1]
        self.keys[index] = entry
        self.num_keys += 1

    def insert_child(self, index: int, child: "Node") -> None:
        """Insert child at index, shifting later children right."""
        for i in range(self.num_children):
            if self.children[i] is child:
                raise TreeInvariantError(f"child already attached at slot {i}")

        for i in range(self.num_children, index, -1):
            self.children[i] = self.children[i - 1]
        self.children[index] = child
        self.num_children += 1

    def remove_key(self, index: int) -> Entry:
        """Remove and return the entry at index, shifting later keys left."""
        entry = self.keys[index]
        for i in range(index, self.num_keys - 1):
            self.keys[i] = self.keys[i + 1]
        self.keys[self.num_keys - 1] = None
        self.num_keys -= 1
        return entry

    def remove_child(self, index: int) -> "Node":
        """Detach and return the child at index, shifting later children left."""
        child = self.children[index]
        for i in range(index, self.num_children - 1):
            self.children[i] = self.children[i + 1]
        self.children[self.num_children - 1] = None
        self.num_children -= 1
        return child

    # === SEARCH ===
    def search(self, key: Any) -> tuple[int, bool]:
        """
        Binary search the key slots.

        Args:
            key: The key to locate.

        Returns:
            (index, found). When found, index is the slot holding key;
            otherwise it is the first slot whose key is greater than key,
            which is also the child to descend into.
        """
        low, high = 0, self.num_keys - 1

        while low <= high:
            mid = low + (high - low) // 2
            current = self.keys[mid].key

            if current > key:
                high = mid - 1
            elif current < key:
                low = mid + 1
            else:
                return mid, True

        return low, False

    def min_entry(self) -> Entry:
        """Return the smallest entry in this subtree."""
        node = self
        while not node.is_leaf():
            node = node.children[0]
        return node.keys[0]

    def max_entry(self) -> Entry:
        """Return the largest entry in this subtree."""
        node = self
        while not node.is_leaf():
            node = node.children[node.num_children - 1]
        return node.keys[node.num_keys - 1]

    # === INSERT ===
    def split(self) -> tuple[Entry, "Node"]:
        """
        Split an overfull node around its median.

        Keys (and children) after the median move to a new right sibling.
        The caller places the median and the sibling into the parent.

        Returns:
            (median, right) tuple.
        """
        mid = self.num_keys // 2
        if self.num_keys % 2 == 0:
            mid -= 1

        median = self.keys[mid]
        right = Node(self.order)

        moved = self.num_keys - mid - 1
        for i in range(moved):
            right.keys[i] = self.keys[mid + 1 + i]
            self.keys[mid + 1 + i] = None
        self.keys[mid] = None

        self.num_keys = mid
        right.num_keys = moved

        if self.num_children > 0:
            moved = self.num_children - mid - 1
            for i in range(moved):
                right.children[i] = self.children[mid + 1 + i]
                self.children[mid + 1 + i] = None

            self.num_children = mid + 1
            right.num_children = moved

        return median, right

    def insert(self, entry: Entry) -> bool:
        """
        Insert or replace an entry in this subtree.

        Args:
            entry: The entry to store.

        Returns:
            True if this node now holds order keys and must be split by
            its caller.
        """
        index, found = self.search(entry.key)
        if found:
            self.keys[index] = entry
            return False

        if self.is_leaf():
            self.insert_key(index, entry)
            return self.is_full()

        if self.children[index].insert(entry):
            self._split_child(index)

        return self.is_full()

    def _split_child(self, index: int) -> None:
        """Split children[index] and absorb its median and right half."""
        median, right = self.children[index].split()
        self.insert_key(index, median)
        self.insert_child(index + 1, right)

    # === REMOVE ===
    def remove(self, key: Any) -> bool:
        """
        Remove key from this subtree.

        Args:
            key: The key to remove.

        Returns:
            True if this node fell below minimum occupancy and must be
            rebalanced by its parent.

        Raises:
            KeyNotFoundError: If the key is not in this subtree. Nothing
                is modified in that case.
        """
        index, found = self.search(key)
        if found:
            if self.is_leaf():
                self.remove_key(index)
            else:
                self._remove_separator(index)
            return self.is_underflowed()

        if self.is_leaf():
            raise KeyNotFoundError(key)

        if self.children[index].remove(key):
            self.fill(index)

        return self.is_underflowed()

    def _remove_separator(self, index: int) -> None:
        """Remove keys[index] from an internal node."""
        left, right = self.children[index], self.children[index + 1]

        if left.has_surplus():
            predecessor = left.max_entry()
            self.keys[index] = predecessor
            if left.remove(predecessor.key):
                self.fill(index)
        elif right.has_surplus():
            successor = right.min_entry()
            self.keys[index] = successor
            if right.remove(successor.key):
                self.fill(index + 1)
        else:
            key = self.keys[index].key
            self.merge(index)
            # The merged child locates the key again by its own search.
            child = self.children[index]
            if child.remove(key):
                self.fill(index)
            elif child.is_full():
                # Promotion inside the merged child kept all order keys.
                self._split_child(index)

    # === REBALANCING ===
    def borrow_left(self, index: int) -> None:
        """Rotate the last key of children[index - 1] into children[index]."""
        left, child = self.children[index - 1], self.children[index]

        child.insert_key(0, self.keys[index - 1])
        if not left.is_leaf():
            child.insert_child(0, left.remove_child(left.num_children - 1))

        self.keys[index - 1] = left.remove_key(left.num_keys - 1)

    def borrow_right(self, index: int) -> None:
        """Rotate the first key of children[index + 1] into children[index]."""
        child, right = self.children[index], self.children[index + 1]

        child.insert_key(child.num_keys, self.keys[index])
        if not right.is_leaf():
            child.insert_child(child.num_children, right.remove_child(0))

        self.keys[index] = right.remove_key(0)

    def merge(self, index: int) -> None:
        """
        Fold keys[index] and children[index + 1] into children[index].

        The separator and the emptied right child slot are removed from
        this node.
        """
        left, right = self.children[index], self.children[index + 1]

        left.insert_key(left.num_keys, self.keys[index])

        for i in range(right.num_keys):
            entry = right.keys[i]
            right.keys[i] = None
            left.insert_key(left.num_keys, entry)

        for i in range(right.num_children):
            child = right.children[i]
            right.children[i] = None
            left.insert_child(left.num_children, child)

        right.num_keys = 0
        right.num_children = 0

        self.remove_key(index)
        self.remove_child(index + 1)

    def fill(self, index: int) -> None:
        """
        Restore minimum occupancy of children[index].

        Borrows from a sibling with surplus keys (left first), otherwise
        merges with a sibling (left first).
        """
        if index > 0 and self.children[index - 1].has_surplus():
            self.borrow_left(index)
        elif index < self.num_keys and self.children[index + 1].has_surplus():
            self.borrow_right(index)
        elif index > 0:
            self.merge(index - 1)
        else:
            self.merge(index)

    # === TRAVERSAL ===
    def iter_entries(self) -> Iterator[Entry]:
        """Yield this subtree's entries in ascending key order."""
        if self.is_leaf():
            yield from self.entries()
            return

        for i in range(self.num_children):
            yield from self.children[i].iter_entries()
            if i < self.num_keys:
                yield self.keys[i]

    def traverse(self) -> list[Entry]:
        """Return this subtree's entries in ascending key order."""
        return list(self.iter_entries())
