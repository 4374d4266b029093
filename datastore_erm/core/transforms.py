"""Transform registry - named (pre-persist, post-load) function pairs.

Two transforms ship built-in:
    serialize -> structured values <-> canonical JSON text
    text      -> str <-> LongText (unindexed large text)

Values longer than a backend's indexed property limit must be declared with
the ``text`` transform. This is not checked at runtime.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from datastore_erm.core.exceptions import (
    DeserializationError,
    DuplicateTransformError,
    SerializationError,
    UnknownTransformError,
)
from datastore_erm.core.types import LongText

SERIALIZE = "serialize"
TEXT = "text"

_ANY: TypeAdapter[Any] = TypeAdapter(Any)


@dataclass(frozen=True)
class Transform:
    """A pair of inverse functions applied on the way into and out of storage."""

    name: str
    pre: Callable[[Any], Any]
    post: Callable[[Any], Any]


def _check_serializable(value: Any, path: str) -> None:
    # Only values the JSON text reproduces exactly are accepted
    kind = type(value)
    if value is None or kind in (bool, int, str):
        return
    if kind is float:
        if not math.isfinite(value):
            raise SerializationError(f"non-finite float {value!r} at {path}")
        return
    if kind in (list, tuple):
        for i, item in enumerate(value):
            _check_serializable(item, f"{path}[{i}]")
        return
    if kind is dict:
        for k, item in value.items():
            if type(k) is not str:
                raise SerializationError(f"non-string key {k!r} at {path}")
            _check_serializable(item, f"{path}[{k!r}]")
        return
    raise SerializationError(f"unsupported type {kind.__name__} at {path}")


def serialize(value: Any) -> str:
    """Render a value as canonical JSON text.

    Accepts None, booleans, ints, finite floats, strings, and lists, tuples
    and string-keyed dicts of those. Tuples are rendered as JSON arrays and
    read back as lists.

    Raises:
        SerializationError: If the JSON text could not reproduce ``value``.
    """
    _check_serializable(value, "$")
    return _ANY.dump_json(value).decode("utf-8")


def deserialize(data: Any) -> Any:
    """Parse text produced by :func:`serialize`.

    Raises:
        DeserializationError: If ``data`` is not text or is not valid JSON.
    """
    if isinstance(data, LongText):
        data = data.value
    if not isinstance(data, (str, bytes)):
        raise DeserializationError(f"expected text, got {type(data).__name__}")
    try:
        return _ANY.validate_json(data)
    except ValidationError as e:
        raise DeserializationError(str(e)) from e


def to_text(value: Any) -> LongText:
    return LongText(value)


def from_text(stored: Any) -> Any:
    # Backends without a marker type hand plain strings back
    if isinstance(stored, LongText):
        return stored.value
    return stored


class TransformRegistry:
    """Name -> Transform lookup table.

    Transforms are registered once, typically at startup, and never replaced.

    Args:
        builtins: Register the ``serialize`` and ``text`` transforms.
    """

    def __init__(self, builtins: bool = True) -> None:
        self._transforms: dict[str, Transform] = {}
        if builtins:
            self.register(SERIALIZE, serialize, deserialize)
            self.register(TEXT, to_text, from_text)

    def register(
        self,
        name: str,
        pre: Callable[[Any], Any],
        post: Callable[[Any], Any],
    ) -> Transform:
        """Register a transform under ``name``.

        Raises:
            DuplicateTransformError: If ``name`` is already registered.
        """
        if name in self._transforms:
            raise DuplicateTransformError(name)
        transform = Transform(name=name, pre=pre, post=post)
        self._transforms[name] = transform
        return transform

    def get(self, name: str) -> Transform:
        """Look up a transform by name.

        Raises:
            UnknownTransformError: If no transform has that name.
        """
        try:
            return self._transforms[name]
        except KeyError:
            raise UnknownTransformError(name) from None

    lookup = get

    def has(self, name: str) -> bool:
        """Check if a transform name is registered."""
        return name in self._transforms

    @property
    def names(self) -> list[str]:
        """List all registered transform names, sorted alphabetically."""
        return sorted(self._transforms)

    def __contains__(self, name: object) -> bool:
        return name in self._transforms

    def __len__(self) -> int:
        return len(self._transforms)


default_transforms = TransformRegistry()
