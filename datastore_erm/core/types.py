"""Value types shared by the schema layer and the backends.

Instances are plain dicts: attribute name -> value, plus the implicit
``kind`` entry and, once assigned, the ``key`` entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

Instance = dict[str, Any]

KIND = "kind"
KEY = "key"
RESERVED_NAMES = frozenset({KIND, KEY})


@dataclass(frozen=True)
class Key:
    """Hierarchical entity identifier.

    A key is identified by either a string ``name`` or an integer ``id`` and
    may be scoped under a ``parent`` key.
    """

    kind: str
    name: str | None = None
    id: int | None = None
    parent: Key | None = None

    def __post_init__(self) -> None:
        if (self.name is None) == (self.id is None):
            raise ValueError("Key requires exactly one of name or id")

    @property
    def path(self) -> tuple[Key, ...]:
        """Keys from the root ancestor down to this key."""
        chain: list[Key] = []
        current: Key | None = self
        while current is not None:
            chain.append(current)
            current = current.parent
        return tuple(reversed(chain))

    def is_ancestor_of(self, other: Key) -> bool:
        """True if this key is a strict ancestor of ``other``."""
        parent = other.parent
        while parent is not None:
            if parent == self:
                return True
            parent = parent.parent
        return False

    def __str__(self) -> str:
        local = f'{self.kind}("{self.name}")' if self.name is not None else f"{self.kind}({self.id})"
        if self.parent is None:
            return local
        return f"{self.parent}/{local}"


def create_key(kind: str, name_or_id: str | int, parent: Key | None = None) -> Key:
    """Build a key from a kind and a name (str) or id (int)."""
    if isinstance(name_or_id, bool):
        raise TypeError("Key id must be a str or int, not bool")
    if isinstance(name_or_id, int):
        return Key(kind=kind, id=name_or_id, parent=parent)
    return Key(kind=kind, name=str(name_or_id), parent=parent)


@dataclass(frozen=True)
class LongText:
    """Marker for unindexed large text values."""

    value: Any

    def __str__(self) -> str:
        return str(self.value)
