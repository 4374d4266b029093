"""Instance-to-model mapper.

Supports dataclasses, Pydantic models, and plain classes.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from datastore_erm.core.exceptions import ModelMismatchError

T = TypeVar("T")


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    try:
        from pydantic import BaseModel

        return issubclass(cls, BaseModel)
    except ImportError:
        return False


def _get_field_names(cls: type) -> list[str] | None:
    """Extract field names from a class, or None if it takes arbitrary kwargs."""
    # Pydantic model
    if hasattr(cls, "model_fields"):
        return list(cls.model_fields.keys())

    # Dataclass
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls) if f.init]

    # Plain class - use __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        return None
    params = sig.parameters.values()
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params):
        return None
    return [p.name for p in params if p.name != "self"]


class ModelMapper(Generic[T]):
    """Maps entity instances onto a model class.

    Attribute names are converted to identifiers (``journal-abbrev`` ->
    ``journal_abbrev``), then aliased. Entries the model does not declare,
    such as ``kind`` or ``key``, are dropped.

    Detection order:
    1. Pydantic BaseModel -> model_validate(values)
    2. dataclass -> target_class(**values)
    3. Plain class -> target_class(**values)

    Args:
        target_class: The class to construct from instances.
        aliases: Optional attribute-name to field-name mapping.
    """

    def __init__(
        self,
        target_class: type[T],
        aliases: dict[str, str] | None = None,
    ) -> None:
        self._target_class = target_class
        self._aliases = aliases
        self._is_pydantic = _is_pydantic_model(target_class)
        self._fields = _get_field_names(target_class)

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def _field_values(self, instance: Mapping[str, Any]) -> dict[str, Any]:
        result = {}
        for name, value in instance.items():
            if self._aliases and name in self._aliases:
                field_name = self._aliases[name]
            else:
                field_name = name.replace("-", "_")
            if self._fields is None or field_name in self._fields:
                result[field_name] = value
        return result

    def map_one(self, instance: Mapping[str, Any]) -> T:
        """Map a single instance to a target_class object."""
        values = self._field_values(instance)

        if self._is_pydantic:
            try:
                return self._target_class.model_validate(values)  # type: ignore[attr-defined, no-any-return]
            except Exception as e:
                raise ModelMismatchError(self._target_class.__name__, str(e)) from e

        try:
            return self._target_class(**values)
        except TypeError as e:
            raise ModelMismatchError(self._target_class.__name__, str(e)) from e

    def map_many(self, instances: list[Mapping[str, Any]]) -> list[T]:
        """Map all instances via map_one."""
        return [self.map_one(instance) for instance in instances]
