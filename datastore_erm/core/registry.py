"""Entity registry - kind -> EntityDefinition dispatch table.

Populated once at declaration time, then read-only. Preprocess/postprocess
for an arbitrary instance is dispatched on its ``kind`` entry.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from datastore_erm.core.exceptions import DuplicateEntityError, UnknownEntityError
from datastore_erm.core.types import KIND, Instance

if TYPE_CHECKING:
    from datastore_erm.schema.definition import EntityDefinition


class EntityRegistry:
    """Holds compiled entity definitions by kind."""

    def __init__(self) -> None:
        self._definitions: dict[str, EntityDefinition] = {}

    def register(self, definition: EntityDefinition) -> EntityDefinition:
        """Register a compiled definition.

        Raises:
            DuplicateEntityError: If the kind is already registered.
        """
        if definition.name in self._definitions:
            raise DuplicateEntityError(definition.name)
        self._definitions[definition.name] = definition
        return definition

    def get(self, kind: str) -> EntityDefinition:
        """Look up a definition by kind.

        Raises:
            UnknownEntityError: If no definition has that kind.
        """
        try:
            return self._definitions[kind]
        except KeyError:
            raise UnknownEntityError(kind) from None

    def has(self, kind: str) -> bool:
        """Check if a kind is registered."""
        return kind in self._definitions

    @property
    def kinds(self) -> list[str]:
        """List all registered kinds, sorted alphabetically."""
        return sorted(self._definitions)

    def preprocess(self, instance: Mapping[str, Any]) -> Instance:
        """Preprocess ``instance`` with the definition of its kind."""
        return self._for_instance(instance).preprocess(instance)

    def postprocess(self, instance: Mapping[str, Any]) -> Instance:
        """Postprocess ``instance`` with the definition of its kind."""
        return self._for_instance(instance).postprocess(instance)

    def _for_instance(self, instance: Mapping[str, Any]) -> EntityDefinition:
        kind = instance.get(KIND)
        if kind is None:
            raise UnknownEntityError(repr(kind))
        return self.get(kind)

    def __contains__(self, kind: object) -> bool:
        return kind in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


default_entities = EntityRegistry()
