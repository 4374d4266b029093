"""datastore_erm exception hierarchy.

Every error raised by the mapping layer derives from ErmError. Errors coming
from a backend implementation are propagated unchanged.
"""

from __future__ import annotations

from typing import Any


class ErmError(Exception):
    """Base exception for all datastore_erm errors."""


# --- Transforms ---


class TransformError(ErmError):
    """Base for transform registry errors."""


class UnknownTransformError(TransformError):
    """Raised when a transform name is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown transform: '{name}'")


class DuplicateTransformError(TransformError):
    """Raised when a transform name is registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Transform already registered: '{name}'")


class SerializationError(TransformError):
    """Raised when a value has no exact JSON representation."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Cannot serialize value: {detail}")


class DeserializationError(TransformError):
    """Raised when a stored textual value cannot be parsed back."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Cannot deserialize stored value: {detail}")


# --- Schema ---


class SchemaError(ErmError):
    """Base for entity declaration errors."""


class SchemaCompilationError(SchemaError):
    """Raised when an entity declaration is invalid."""

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(f"Cannot compile entity '{entity}': {detail}")


class UnknownAttributeError(SchemaError):
    """Raised by strict definitions when overrides carry undeclared attributes."""

    def __init__(self, entity: str, names: list[str]) -> None:
        self.entity = entity
        self.names = names
        super().__init__(f"Unknown attributes for entity '{entity}': {names}")


class DuplicateEntityError(SchemaError):
    """Raised when two definitions share the same kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Entity kind already defined: '{kind}'")


class UnknownEntityError(SchemaError):
    """Raised when a kind has no registered definition."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Entity kind not defined: '{kind}'")


# --- Keys ---


class KeyDerivationError(ErmError):
    """Base for key derivation errors."""


class IncompleteKeyError(KeyDerivationError):
    """Raised when a key-component attribute has no value."""

    def __init__(self, entity: str, missing: list[str]) -> None:
        self.entity = entity
        self.missing = missing
        super().__init__(f"Cannot derive key for '{entity}': missing key attributes {missing}")


class ParentKeyError(KeyDerivationError):
    """Raised when a parent key does not match the declared parent entity."""

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(f"Invalid parent key for '{entity}': {detail}")


class InvalidKeyError(KeyDerivationError):
    """Raised when an explicit key does not fit the entity being created."""

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(f"Invalid key for '{entity}': {detail}")


# --- Queries ---


class QueryError(ErmError):
    """Base for query builder errors."""


class InvalidFilterOperatorError(QueryError):
    """Raised for an unsupported filter operator."""

    def __init__(self, operator: Any) -> None:
        self.operator = operator
        super().__init__(f"Invalid filter operator: {operator!r}")


class InvalidSortDirectionError(QueryError):
    """Raised for an unsupported sort direction."""

    def __init__(self, direction: Any) -> None:
        self.direction = direction
        super().__init__(f"Invalid sort direction: {direction!r}")


# --- Mapping ---


class MappingError(ErmError):
    """Base for instance-to-model mapping errors."""


class ModelMismatchError(MappingError):
    """Raised when an instance cannot be mapped onto a model class."""

    def __init__(self, target_class: str, detail: str) -> None:
        self.target_class = target_class
        self.detail = detail
        super().__init__(f"Cannot map to {target_class}: {detail}")


# --- Backend ---


class BackendError(ErmError):
    """Base for backend errors."""


class EntityNotFoundError(BackendError):
    """Raised when no entity exists for a key."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Entity not found: {key}")


class BackendLoadError(BackendError):
    """Raised when a configured backend cannot be loaded."""
