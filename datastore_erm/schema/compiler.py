"""Schema compiler - turns entity declarations into EntityDefinitions.

Declarations mirror ``defentity``: a kind name, an optional parent entity, an
ordered attribute list and per-attribute options::

    citation = compile_entity(
        "citation",
        ["pmid", "abstract", "year", "authors"],
        options={
            "abstract": {"transform": "text", "default": ""},
            "authors": {"transform": "serialize"},
        },
    )

All validation happens here, so a bad declaration fails at startup rather
than on first use.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from datastore_erm.core.exceptions import SchemaCompilationError
from datastore_erm.core.transforms import (
    SERIALIZE,
    TEXT,
    Transform,
    TransformRegistry,
    default_transforms,
)
from datastore_erm.core.types import RESERVED_NAMES
from datastore_erm.schema.definition import NO_DEFAULT, AttributeSpec, EntityDefinition

if TYPE_CHECKING:
    from datastore_erm.core.registry import EntityRegistry

logger = logging.getLogger(__name__)

_OPTION_NAMES = frozenset({"default", "transform", "key", "text", "complex"})


def _spec_from_options(entity: str, name: str, options: Mapping[str, Any]) -> AttributeSpec:
    unknown = set(options) - _OPTION_NAMES
    if unknown:
        raise SchemaCompilationError(
            entity, f"unknown options {sorted(unknown)} for attribute '{name}'"
        )
    return AttributeSpec(
        name=name,
        key=bool(options.get("key", False)),
        text=bool(options.get("text", False)),
        complex=bool(options.get("complex", False)),
        default=options.get("default", NO_DEFAULT),
        transform=options.get("transform"),
    )


def _transform_name(entity: str, attr: AttributeSpec) -> str | None:
    """Resolve the ``text``/``complex`` flags and an explicit transform name."""
    implied: list[str] = []
    if attr.text:
        implied.append(TEXT)
    if attr.complex:
        implied.append(SERIALIZE)
    if len(implied) > 1:
        raise SchemaCompilationError(
            entity, f"attribute '{attr.name}' cannot be both text and complex"
        )
    if attr.transform is not None:
        if implied and implied[0] != attr.transform:
            raise SchemaCompilationError(
                entity,
                f"attribute '{attr.name}' declares transform '{attr.transform}' "
                f"but its flags imply '{implied[0]}'",
            )
        return attr.transform
    return implied[0] if implied else None


def _normalize_attributes(
    name: str,
    attributes: Sequence[str | AttributeSpec],
    options: Mapping[str, Mapping[str, Any]],
) -> list[AttributeSpec]:
    if isinstance(attributes, str) or not attributes:
        raise SchemaCompilationError(name, "at least one attribute is required")

    specs: list[AttributeSpec] = []
    seen: set[str] = set()
    for item in attributes:
        if isinstance(item, AttributeSpec):
            if item.name in options:
                raise SchemaCompilationError(
                    name, f"attribute '{item.name}' is declared with both a spec and options"
                )
            spec = item
        elif isinstance(item, str):
            spec = _spec_from_options(name, item, options.get(item, {}))
        else:
            raise SchemaCompilationError(name, f"invalid attribute declaration {item!r}")

        if not spec.name:
            raise SchemaCompilationError(name, "attribute names must be non-empty")
        if spec.name in RESERVED_NAMES:
            raise SchemaCompilationError(name, f"'{spec.name}' is a reserved attribute name")
        if spec.name in seen:
            raise SchemaCompilationError(name, f"duplicate attribute '{spec.name}'")
        seen.add(spec.name)
        specs.append(spec)

    stray = set(options) - seen
    if stray:
        raise SchemaCompilationError(name, f"options given for undeclared attributes {sorted(stray)}")
    return specs


def compile_entity(
    name: str,
    attributes: Sequence[str | AttributeSpec],
    *,
    parent: EntityDefinition | None = None,
    options: Mapping[str, Mapping[str, Any]] | None = None,
    transforms: TransformRegistry | None = None,
    strict: bool = False,
) -> EntityDefinition:
    """Compile an entity declaration.

    Args:
        name: The entity kind.
        attributes: Ordered attribute names or AttributeSpecs.
        parent: Definition of the ancestor entity, if any.
        options: Attribute name -> ``{"default", "transform", "key", "text",
            "complex"}`` options for attributes given by name.
        transforms: Registry used to resolve transform names. Defaults to the
            process-wide registry holding the built-ins.
        strict: Reject undeclared keys in ``make_with``.

    Returns:
        The compiled EntityDefinition.

    Raises:
        SchemaCompilationError: If the declaration is invalid.
        UnknownTransformError: If an attribute references an unregistered
            transform.
    """
    if not name:
        raise SchemaCompilationError(repr(name), "entity name must be non-empty")
    if parent is not None and not isinstance(parent, EntityDefinition):
        raise SchemaCompilationError(name, f"parent must be an EntityDefinition, got {parent!r}")

    registry = transforms if transforms is not None else default_transforms
    specs = _normalize_attributes(name, attributes, options or {})

    resolved: dict[str, Transform] = {}
    for spec in specs:
        transform_name = _transform_name(name, spec)
        if transform_name is not None:
            resolved[spec.name] = registry.get(transform_name)

    definition = EntityDefinition(
        name=name,
        attributes=tuple(specs),
        parent=parent,
        transforms=MappingProxyType(resolved),
        strict=strict,
    )
    logger.debug(
        "Compiled entity %s: attributes=%s keys=%s transforms=%s",
        name,
        definition.attribute_names,
        definition.key_attributes,
        {attr: t.name for attr, t in resolved.items()},
    )
    return definition


def define_entity(
    name: str,
    attributes: Sequence[str | AttributeSpec],
    *,
    parent: EntityDefinition | None = None,
    options: Mapping[str, Mapping[str, Any]] | None = None,
    transforms: TransformRegistry | None = None,
    entities: EntityRegistry | None = None,
    strict: bool = False,
) -> EntityDefinition:
    """Compile an entity and register it for kind-based dispatch.

    Uses the process-wide entity registry unless ``entities`` is given.

    Raises:
        DuplicateEntityError: If the kind is already registered.
    """
    from datastore_erm.core.registry import default_entities

    definition = compile_entity(
        name,
        attributes,
        parent=parent,
        options=options,
        transforms=transforms,
        strict=strict,
    )
    (entities if entities is not None else default_entities).register(definition)
    return definition
