"""Mapper protocol.

Repositories call map_one on every instance they return when a mapper is
configured.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

T = TypeVar("T", covariant=True)


class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, instance: Mapping[str, Any]) -> T:
        """Map a single entity instance to a target object."""
        ...
