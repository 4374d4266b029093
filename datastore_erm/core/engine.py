"""Mapping engine.

The Engine ties a backend to a transform registry and an entity registry:
entities are declared through it, and it hands out repositories and performs
kind-dispatched lookups by key.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from datastore_erm.core.config import ErmConfig, load_backend
from datastore_erm.core.registry import EntityRegistry
from datastore_erm.core.transforms import TransformRegistry
from datastore_erm.core.types import KIND, Instance, Key
from datastore_erm.repository.base import EntityRepository
from datastore_erm.schema.compiler import define_entity
from datastore_erm.schema.definition import AttributeSpec, EntityDefinition
from datastore_erm.schema.protocol import Mapper

logger = logging.getLogger(__name__)


class Engine:
    """Entry point binding entity declarations to a backend.

    Each engine owns its registries unless they are passed in, so separate
    engines never see each other's entities.
    """

    def __init__(
        self,
        backend: Any,
        transforms: TransformRegistry | None = None,
        entities: EntityRegistry | None = None,
        strict: bool = False,
    ) -> None:
        self._backend = backend
        self._transforms = transforms if transforms is not None else TransformRegistry()
        self._entities = entities if entities is not None else EntityRegistry()
        self._strict = strict

    @classmethod
    def from_config(cls, config: ErmConfig) -> Engine:
        """Create an Engine from an ErmConfig.

        Args:
            config: ErmConfig instance

        Returns:
            Engine instance
        """
        return cls(load_backend(config), strict=config.strict)

    @property
    def backend(self) -> Any:
        return self._backend

    @property
    def transforms(self) -> TransformRegistry:
        return self._transforms

    @property
    def entities(self) -> EntityRegistry:
        return self._entities

    def define(
        self,
        name: str,
        attributes: Sequence[str | AttributeSpec],
        parent: EntityDefinition | str | None = None,
        options: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        strict: bool | None = None,
    ) -> EntityDefinition:
        """Declare an entity against this engine's registries.

        ``parent`` may be a definition or the kind of an already declared one.
        """
        if isinstance(parent, str):
            parent = self._entities.get(parent)
        return define_entity(
            name,
            attributes,
            parent=parent,
            options=options,
            transforms=self._transforms,
            entities=self._entities,
            strict=self._strict if strict is None else strict,
        )

    def repository(
        self,
        entity: EntityDefinition | str,
        mapper: Mapper[Any] | None = None,
    ) -> EntityRepository[Any]:
        """Return the accessor suite for a declared entity."""
        definition = self._entities.get(entity) if isinstance(entity, str) else entity
        return EntityRepository(definition, self._backend, mapper=mapper)

    def get(self, key: Key) -> Instance:
        """Fetch any entity by key and postprocess it by its kind.

        Raises:
            EntityNotFoundError: If no entity is stored under ``key``.
            UnknownEntityError: If the stored kind was never declared.
        """
        record = self._backend.get(key)
        record.setdefault(KIND, key.kind)
        return self._entities.postprocess(record)

    def delete(self, *keys: Key) -> None:
        """Delete entities of any kind."""
        logger.debug("Deleting %d entities", len(keys))
        self._backend.delete(*keys)
