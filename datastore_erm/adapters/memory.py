"""In-memory backend.

A process-local document store implementing the Backend protocol. Useful for
tests and for running the mapping layer without a hosted datastore.
"""

from __future__ import annotations

import copy
import itertools
import logging
import operator as op
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from datastore_erm.core.exceptions import EntityNotFoundError
from datastore_erm.core.types import KEY, KIND, Key
from datastore_erm.query.builder import FilterOperator, PropertyFilter, Query, SortDirection

if TYPE_CHECKING:
    from datastore_erm.core.config import ErmConfig

logger = logging.getLogger(__name__)

_COMPARATORS: dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQUAL: op.eq,
    FilterOperator.NOT_EQUAL: op.ne,
    FilterOperator.GREATER_THAN: op.gt,
    FilterOperator.GREATER_THAN_OR_EQUAL: op.ge,
    FilterOperator.LESS_THAN: op.lt,
    FilterOperator.LESS_THAN_OR_EQUAL: op.le,
    FilterOperator.IN: lambda actual, expected: actual in expected,
}


def _matches(properties: dict[str, Any], condition: PropertyFilter) -> bool:
    """Evaluate one filter; missing or incomparable values never match."""
    if condition.property not in properties:
        return False
    compare = _COMPARATORS[condition.operator]
    try:
        return bool(compare(properties[condition.property], condition.value))
    except TypeError:
        return False


def _sort_key(prop: str) -> Callable[[dict[str, Any]], tuple[bool, Any]]:
    # None sorts before every other value
    def key(record: dict[str, Any]) -> tuple[bool, Any]:
        value = record.get(prop)
        return (value is not None, value)

    return key


class InMemoryBackend:
    """Dict-backed implementation of the Backend protocol.

    Entities are copied on the way in and out, so callers never share state
    with the store.

    Args:
        id_start: First id handed out for entities stored without a key.
    """

    def __init__(self, id_start: int = 1) -> None:
        self._entities: dict[Key, dict[str, Any]] = {}
        self._ids = itertools.count(id_start)

    @classmethod
    def from_config(cls, config: ErmConfig) -> InMemoryBackend:
        """Create a backend from ``config.extra`` options."""
        return cls(**config.extra)

    def put(
        self,
        kind: str,
        key: Key | None,
        properties: dict[str, Any],
        parent: Key | None = None,
    ) -> Key:
        """Store an entity, replacing any entity under the same key."""
        if key is None:
            key = Key(kind=kind, id=next(self._ids), parent=parent)
        elif key.kind != kind:
            raise ValueError(f"Key kind '{key.kind}' does not match entity kind '{kind}'")
        stored = {k: v for k, v in properties.items() if k not in (KIND, KEY)}
        self._entities[key] = copy.deepcopy(stored)
        logger.debug("Put %s", key)
        return key

    def get(self, key: Key) -> dict[str, Any]:
        """Fetch an entity.

        Raises:
            EntityNotFoundError: If no entity is stored under ``key``.
        """
        try:
            properties = self._entities[key]
        except KeyError:
            raise EntityNotFoundError(key) from None
        return self._record(key, properties)

    def delete(self, *keys: Key) -> None:
        """Delete entities; missing keys are ignored."""
        for key in keys:
            if self._entities.pop(key, None) is not None:
                logger.debug("Deleted %s", key)

    def update(self, key: Key, properties: dict[str, Any]) -> Key:
        """Merge ``properties`` into the stored entity.

        Raises:
            EntityNotFoundError: If no entity is stored under ``key``.
        """
        if key not in self._entities:
            raise EntityNotFoundError(key)
        changes = {k: v for k, v in properties.items() if k not in (KIND, KEY)}
        self._entities[key].update(copy.deepcopy(changes))
        logger.debug("Updated %s: %s", key, sorted(changes))
        return key

    def query(self, query: Query) -> list[dict[str, Any]]:
        """Run a query: kind and ancestor scoping, filters, then sorts."""
        records = []
        for key, properties in self._entities.items():
            if query.kind is not None and key.kind != query.kind:
                continue
            if query.ancestor is not None and not (
                key == query.ancestor or query.ancestor.is_ancestor_of(key)
            ):
                continue
            if all(_matches(properties, condition) for condition in query.filters):
                records.append(self._record(key, properties))

        # Stable sorts applied last-to-first give multi-key ordering
        for order in reversed(query.sorts):
            records.sort(
                key=_sort_key(order.property),
                reverse=order.direction is SortDirection.DESCENDING,
            )
        logger.debug("Query %s matched %d entities", query, len(records))
        return records

    def __len__(self) -> int:
        return len(self._entities)

    @staticmethod
    def _record(key: Key, properties: dict[str, Any]) -> dict[str, Any]:
        return {KIND: key.kind, KEY: key, **copy.deepcopy(properties)}
