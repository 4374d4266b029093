"""datastore_erm - entity-relational mapping over a key-value document store."""

from __future__ import annotations

from datastore_erm.adapters.memory import InMemoryBackend
from datastore_erm.adapters.protocol import Backend
from datastore_erm.core.config import ErmConfig, load_backend
from datastore_erm.core.engine import Engine
from datastore_erm.core.exceptions import (
    BackendError,
    BackendLoadError,
    DeserializationError,
    DuplicateEntityError,
    DuplicateTransformError,
    EntityNotFoundError,
    ErmError,
    IncompleteKeyError,
    InvalidFilterOperatorError,
    InvalidKeyError,
    InvalidSortDirectionError,
    KeyDerivationError,
    MappingError,
    ModelMismatchError,
    ParentKeyError,
    QueryError,
    SchemaCompilationError,
    SchemaError,
    SerializationError,
    TransformError,
    UnknownAttributeError,
    UnknownEntityError,
    UnknownTransformError,
)
from datastore_erm.core.registry import EntityRegistry
from datastore_erm.core.transforms import Transform, TransformRegistry
from datastore_erm.core.types import Key, LongText, create_key
from datastore_erm.query.builder import FilterOperator, Query, SortDirection, query, select
from datastore_erm.repository.base import EntityRepository
from datastore_erm.schema.builder import entity
from datastore_erm.schema.compiler import compile_entity, define_entity
from datastore_erm.schema.definition import AttributeSpec, EntityDefinition
from datastore_erm.schema.model import ModelMapper

__all__ = [
    # Engine
    "Engine",
    "ErmConfig",
    "load_backend",
    # Backends
    "Backend",
    "InMemoryBackend",
    # Registries
    "EntityRegistry",
    "TransformRegistry",
    "Transform",
    # Schema
    "AttributeSpec",
    "EntityDefinition",
    "compile_entity",
    "define_entity",
    "entity",
    # Repository
    "EntityRepository",
    "ModelMapper",
    # Types
    "Key",
    "LongText",
    "create_key",
    # Query
    "Query",
    "FilterOperator",
    "SortDirection",
    "query",
    "select",
    # Exceptions
    "ErmError",
    "TransformError",
    "UnknownTransformError",
    "DuplicateTransformError",
    "SerializationError",
    "DeserializationError",
    "SchemaError",
    "SchemaCompilationError",
    "UnknownAttributeError",
    "DuplicateEntityError",
    "UnknownEntityError",
    "KeyDerivationError",
    "IncompleteKeyError",
    "ParentKeyError",
    "InvalidKeyError",
    "QueryError",
    "InvalidFilterOperatorError",
    "InvalidSortDirectionError",
    "MappingError",
    "ModelMismatchError",
    "BackendError",
    "EntityNotFoundError",
    "BackendLoadError",
]
