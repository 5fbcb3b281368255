"""
Traversable protocol for data structures that support full ordered traversal.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator
from typing import Any

from btree.models.entry import Entry


class Traversable(ABC):
    """
    Protocol for data structures that can be walked in ascending key order.

    Implementations must support:
    - Materialized traversal via traverse()
    - Lazy iteration via __iter__
    - Async iteration via __aiter__
    """

    @abstractmethod
    def traverse(self) -> list[Entry]:
        """
        Return every entry in ascending key order.

        The sequence is recomputed on each call.
        """
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        """Return an iterator over all key-value pairs in sorted order."""
        pass

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[tuple[Any, Any]]:
        """Return an async iterator over all key-value pairs in sorted order."""
        pass
