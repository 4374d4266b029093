"""Natural key derivation.

A key is built from the entity kind and the key-component attribute values
joined with ``-``, optionally scoped under a parent key:

    continent("eu")/country("eu-de")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from datastore_erm.core.exceptions import IncompleteKeyError, InvalidKeyError, ParentKeyError
from datastore_erm.core.types import KEY, Key

if TYPE_CHECKING:
    from datastore_erm.schema.definition import EntityDefinition

KEY_SEPARATOR = "-"


def key_name(values: list[Any]) -> str:
    """Join key-component values into a key name."""
    return KEY_SEPARATOR.join(str(value) for value in values)


def check_parent(definition: EntityDefinition, parent_key: Key | None) -> None:
    """Validate ``parent_key`` against the declared parent entity.

    A definition with a parent accepts a missing parent key (a root-level
    entity of that kind). A definition without one rejects any parent key.

    Raises:
        ParentKeyError: On a parent key of the wrong kind, or an unexpected one.
    """
    if parent_key is None:
        return
    if definition.parent is None:
        raise ParentKeyError(definition.name, f"entity declares no parent, got {parent_key}")
    if parent_key.kind != definition.parent.name:
        raise ParentKeyError(
            definition.name,
            f"expected a '{definition.parent.name}' key, got {parent_key}",
        )


def derive_key(
    definition: EntityDefinition,
    parent_key: Key | None,
    instance: Mapping[str, Any],
) -> Key | None:
    """Derive a deterministic key for ``instance``.

    Returns None when the definition declares no key attributes; the backend
    then assigns an identifier at persist time.

    Raises:
        IncompleteKeyError: If any key attribute is absent or None.
        ParentKeyError: If ``parent_key`` does not fit the declared parent.
    """
    check_parent(definition, parent_key)

    key_attributes = definition.key_attributes
    if not key_attributes:
        return None

    missing = [name for name in key_attributes if instance.get(name) is None]
    if missing:
        raise IncompleteKeyError(definition.name, missing)

    name = key_name([instance[attr] for attr in key_attributes])
    return Key(kind=definition.name, name=name, parent=parent_key)


def resolve_key(
    definition: EntityDefinition,
    parent_key: Key | None,
    instance: Mapping[str, Any],
) -> Key | None:
    """Key for a new entity: the explicit ``key`` entry if any, else the derived one.

    An explicit key must be of the entity's kind, sit under ``parent_key``
    when one is given, and equal the derived key when the definition has
    key attributes.

    Raises:
        InvalidKeyError: If the explicit key does not fit.
        IncompleteKeyError: If a key attribute is absent or None.
        ParentKeyError: If a parent key does not fit the declared parent.
    """
    explicit = instance.get(KEY)
    if explicit is None:
        return derive_key(definition, parent_key, instance)

    if not isinstance(explicit, Key):
        raise InvalidKeyError(definition.name, f"expected a Key, got {type(explicit).__name__}")
    if explicit.kind != definition.name:
        raise InvalidKeyError(definition.name, f"key {explicit} is of another kind")
    if parent_key is not None and explicit.parent != parent_key:
        raise InvalidKeyError(definition.name, f"key {explicit} is not a child of {parent_key}")

    derived = derive_key(definition, explicit.parent, instance)
    if derived is not None and derived != explicit:
        raise InvalidKeyError(definition.name, f"key {explicit} differs from derived {derived}")
    return explicit
