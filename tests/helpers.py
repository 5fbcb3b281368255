"""
Helpers for building and inspecting nodes in tests.
"""

from btree.models.entry import Entry
from btree.models.node import Node


def build_node(order: int, keys: list, children: list | None = None) -> Node:
    """Build a node directly from keys and already-built children."""
    node = Node(order)
    for i, key in enumerate(keys):
        node.insert_key(i, Entry(key=key, value=f"v{key}"))
    for i, child in enumerate(children or []):
        node.insert_child(i, child)
    return node


def keys_of(node: Node) -> list:
    """Return the keys held directly by a node."""
    return [entry.key for entry in node.entries()]
