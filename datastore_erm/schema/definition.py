"""Compiled entity definitions.

Frozen dataclasses produced by the schema compiler. A definition owns the
per-entity behaviors: blank/default instance factories, the default-merging
factory, the preprocess/postprocess pair and key derivation.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from datastore_erm.core.exceptions import UnknownAttributeError
from datastore_erm.core.transforms import Transform
from datastore_erm.core.types import KIND, RESERVED_NAMES, Instance, Key
from datastore_erm.schema.keys import derive_key, resolve_key
from datastore_erm.schema.merge import merge, merge_with, to_mapping


class _NoDefault:
    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


@dataclass(frozen=True)
class AttributeSpec:
    """Declaration of a single entity attribute.

    ``default`` may be a constant (deep-copied into every instance) or a
    zero-argument callable evaluated on every call.
    """

    name: str
    key: bool = False
    text: bool = False
    complex: bool = False
    default: Any = NO_DEFAULT
    transform: str | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def default_value(self) -> Any:
        if not self.has_default:
            return None
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default)


@dataclass(frozen=True)
class EntityDefinition:
    """Compiled, validated entity schema."""

    name: str
    attributes: tuple[AttributeSpec, ...]
    parent: EntityDefinition | None = None
    transforms: Mapping[str, Transform] = field(default_factory=dict, compare=False)
    strict: bool = False

    @property
    def kind(self) -> str:
        return self.name

    @property
    def attribute_names(self) -> list[str]:
        """Declared attribute names, in declaration order."""
        return [attr.name for attr in self.attributes]

    @property
    def key_attributes(self) -> list[str]:
        """Names of the key-component attributes, in declaration order."""
        return [attr.name for attr in self.attributes if attr.key]

    def attribute(self, name: str) -> AttributeSpec | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def make_blank(self) -> Instance:
        """Instance with every declared attribute set to None."""
        instance: Instance = {KIND: self.name}
        for attr in self.attributes:
            instance[attr.name] = None
        return instance

    def make_default(self) -> Instance:
        """Instance with declared defaults applied, None elsewhere."""
        instance: Instance = {KIND: self.name}
        for attr in self.attributes:
            instance[attr.name] = attr.default_value()
        return instance

    def make_with(self, overrides: Any = None) -> Instance:
        """Default instance overlaid with ``overrides``.

        Overrides win for every key they carry. Keys the schema does not
        declare are kept as-is, unless the definition is strict. The ``kind``
        entry cannot be overridden.

        Raises:
            UnknownAttributeError: On undeclared keys in strict mode.
        """
        values = to_mapping(overrides)
        if self.strict:
            declared = set(self.attribute_names) | RESERVED_NAMES
            unknown = [name for name in values if name not in declared]
            if unknown:
                raise UnknownAttributeError(self.name, unknown)

        values.pop(KIND, None)
        return merge(self.make_default(), values)

    def preprocess(self, instance: Mapping[str, Any]) -> Instance:
        """Convert an instance to its stored form."""
        return merge_with(lambda t, v: t.pre(v), self.transforms, instance)

    def postprocess(self, instance: Mapping[str, Any]) -> Instance:
        """Restore the logical form of a stored instance."""
        return merge_with(lambda t, v: t.post(v), self.transforms, instance)

    def derive_key(self, parent_key: Key | None, instance: Mapping[str, Any]) -> Key | None:
        """Derive the natural key of ``instance``; None without key attributes."""
        return derive_key(self, parent_key, instance)

    def resolve_key(self, parent_key: Key | None, instance: Mapping[str, Any]) -> Key | None:
        """Explicit ``key`` of ``instance`` if set and valid, else the derived key."""
        return resolve_key(self, parent_key, instance)

    def __repr__(self) -> str:
        return f"EntityDefinition(name={self.name!r}, attributes={self.attribute_names!r})"
