"""Backend protocol.

Every document-store backend MUST implement this protocol. Entities travel
as property dicts; records returned by ``get`` and ``query`` also carry the
``kind`` and ``key`` entries.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from datastore_erm.core.types import Key
from datastore_erm.query.builder import Query


@runtime_checkable
class Backend(Protocol):
    """Key-value document store protocol."""

    def put(
        self,
        kind: str,
        key: Key | None,
        properties: dict[str, Any],
        parent: Key | None = None,
    ) -> Key:
        """Store an entity and return its key.

        With ``key=None`` the backend assigns a unique id, scoped under
        ``parent`` if given.
        """
        ...

    def get(self, key: Key) -> dict[str, Any]:
        """Fetch an entity. Raises EntityNotFoundError if absent."""
        ...

    def delete(self, *keys: Key) -> None:
        """Delete entities. Missing keys are ignored."""
        ...

    def update(self, key: Key, properties: dict[str, Any]) -> Key:
        """Merge properties into a stored entity. Raises EntityNotFoundError if absent."""
        ...

    def query(self, query: Query) -> list[dict[str, Any]]:
        """Run a query and return the matching entities."""
        ...
