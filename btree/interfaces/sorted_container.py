"""
SortedContainer abstract base class for ordered key-value maps.
"""

from abc import abstractmethod
from typing import Any

from btree.interfaces.traversable import Traversable


class SortedContainer(Traversable):
    """
    Ordered map over keys that support < and > against each other.

    Mutations are not synchronized; callers hold a single writer at a time.

    Implementations:
    - BTree: multiway balanced search tree with configurable order
    """

    @abstractmethod
    def put(self, key: Any, value: Any) -> None:
        """
        Store value under key.

        An existing key keeps its position and count; only its value is
        replaced (last writer wins).
        """
        pass

    @abstractmethod
    def get(self, key: Any, default: Any = None) -> Any:
        """
        Look up key without raising.

        Args:
            key: The key to look up.
            default: Returned when key is not stored.
        """
        pass

    @abstractmethod
    def delete(self, key: Any) -> bool:
        """
        Drop key and its value if present.

        Returns:
            False when the key is missing or the container is empty, in
            which case nothing changes. True otherwise.
        """
        pass

    @abstractmethod
    def has(self, key: Any) -> bool:
        """Membership test by key order, not identity."""
        pass

    @abstractmethod
    def size(self) -> int:
        """Number of distinct keys stored. O(1)"""
        pass
