"""Schema layer - entity declarations compiled into definitions."""

from __future__ import annotations

from datastore_erm.schema.builder import EntityBuilder, entity
from datastore_erm.schema.compiler import compile_entity, define_entity
from datastore_erm.schema.definition import NO_DEFAULT, AttributeSpec, EntityDefinition
from datastore_erm.schema.keys import KEY_SEPARATOR, derive_key
from datastore_erm.schema.model import ModelMapper

__all__ = [
    "AttributeSpec",
    "EntityDefinition",
    "EntityBuilder",
    "entity",
    "compile_entity",
    "define_entity",
    "derive_key",
    "KEY_SEPARATOR",
    "NO_DEFAULT",
    "ModelMapper",
]
