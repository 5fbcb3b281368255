"""
Entry dataclass for key/value pairs held by tree nodes.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Entry:
    """
    An immutable key/value pair stored in a node slot.

    An upsert replaces the whole Entry; the key never changes in place.

    Attributes:
        key: Totally-ordered key.
        value: Arbitrary associated value.
    """

    key: Any
    value: Any

    def as_tuple(self) -> tuple[Any, Any]:
        """Return the entry as a (key, value) tuple."""
        return (self.key, self.value)
