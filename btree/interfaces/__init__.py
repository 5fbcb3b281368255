"""
Abstract base classes for sorted containers.
"""

from btree.interfaces.sorted_container import SortedContainer
from btree.interfaces.traversable import Traversable

__all__ = ["SortedContainer", "Traversable"]
