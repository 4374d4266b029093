"""Record merge helpers.

Instances are handled internally as ordered attribute-name -> value dicts,
whatever shape the caller supplied (mapping, dataclass, pydantic model), so a
single merge algorithm serves all of them.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any

from datastore_erm.core.transforms import Transform


def to_mapping(record: Any) -> dict[str, Any]:
    """Convert a mapping, dataclass instance or pydantic model to a dict.

    Raises:
        TypeError: If ``record`` has none of those shapes.
    """
    if record is None:
        return {}
    if isinstance(record, Mapping):
        return dict(record)
    # Pydantic model
    if hasattr(record, "model_dump") and hasattr(type(record), "model_fields"):
        return dict(record.model_dump())
    # Dataclass instance (not the class itself)
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}
    raise TypeError(f"Cannot merge a {type(record).__name__}; expected a mapping or record")


def merge(base: Any, overlay: Any) -> dict[str, Any]:
    """Overlay ``overlay`` on ``base``; overlay wins for shared keys."""
    result = to_mapping(base)
    result.update(to_mapping(overlay))
    return result


def merge_with(
    fn: Callable[[Transform, Any], Any],
    transforms: Mapping[str, Transform],
    instance: Mapping[str, Any],
) -> dict[str, Any]:
    """Apply ``fn(transform, value)`` to every attribute that has a transform.

    Only attributes present in ``instance`` are touched; absent attributes
    stay absent.
    """
    result = dict(instance)
    for name, transform in transforms.items():
        if name in result:
            result[name] = fn(transform, result[name])
    return result
