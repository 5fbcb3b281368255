"""
Sorted container implementations.
"""

from btree.models.sortedcontainers.b_tree import BTree

__all__ = ["BTree"]
