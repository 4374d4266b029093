"""Entity declaration DSL builder.

Provides a fluent builder on top of :func:`compile_entity`.
"""

from __future__ import annotations

from typing import Any

from datastore_erm.core.transforms import TransformRegistry
from datastore_erm.schema.compiler import compile_entity
from datastore_erm.schema.definition import NO_DEFAULT, AttributeSpec, EntityDefinition


def entity(name: str, parent: EntityDefinition | None = None) -> EntityBuilder:
    """Entry point for the entity declaration DSL.

    Args:
        name: The entity kind.
        parent: Definition of the ancestor entity, if any.

    Returns:
        A builder for chaining attribute declarations.
    """
    return EntityBuilder(name, parent)


class EntityBuilder:
    """Fluent builder for entity declarations."""

    def __init__(self, name: str, parent: EntityDefinition | None = None) -> None:
        self._name = name
        self._parent = parent
        self._attributes: list[AttributeSpec] = []
        self._strict = False

    def attribute(
        self,
        name: str,
        *,
        key: bool = False,
        text: bool = False,
        complex: bool = False,
        default: Any = NO_DEFAULT,
        transform: str | None = None,
    ) -> EntityBuilder:
        """Declare an attribute."""
        self._attributes.append(
            AttributeSpec(
                name=name,
                key=key,
                text=text,
                complex=complex,
                default=default,
                transform=transform,
            )
        )
        return self

    def attributes(self, *names: str) -> EntityBuilder:
        """Declare several plain attributes at once."""
        for name in names:
            self.attribute(name)
        return self

    def key(self, *names: str) -> EntityBuilder:
        """Declare key-component attributes, in key order."""
        for name in names:
            self.attribute(name, key=True)
        return self

    def strict(self, enabled: bool = True) -> EntityBuilder:
        """Reject undeclared attributes when building instances."""
        self._strict = enabled
        return self

    def build(self, transforms: TransformRegistry | None = None) -> EntityDefinition:
        """Compile and validate the declaration."""
        return compile_entity(
            self._name,
            self._attributes,
            parent=self._parent,
            transforms=transforms,
            strict=self._strict,
        )
