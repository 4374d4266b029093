"""Query builder DSL.

Builds immutable filter/sort specifications consumed by backends:

    q = (
        query("continents")
        .filter_by("iso-3166-alpha-2", "=", "eu")
        .sort_by("name", "desc")
    )
    str(q)  # SELECT * FROM continents WHERE iso-3166-alpha-2 = eu ORDER BY name DESC
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from datastore_erm.core.exceptions import InvalidFilterOperatorError, InvalidSortDirectionError
from datastore_erm.core.types import Key


class FilterOperator(Enum):
    """Property filter operators."""

    EQUAL = "="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    NOT_EQUAL = "!="
    IN = "in"


class SortDirection(Enum):
    """Sort directions."""

    ASCENDING = "asc"
    DESCENDING = "desc"


_OPERATOR_ALIASES: dict[str, FilterOperator] = {
    "==": FilterOperator.EQUAL,
    "eq": FilterOperator.EQUAL,
    "gt": FilterOperator.GREATER_THAN,
    "ge": FilterOperator.GREATER_THAN_OR_EQUAL,
    "lt": FilterOperator.LESS_THAN,
    "le": FilterOperator.LESS_THAN_OR_EQUAL,
    "ne": FilterOperator.NOT_EQUAL,
    "not": FilterOperator.NOT_EQUAL,
}

_DIRECTION_ALIASES: dict[str, SortDirection] = {
    "ascending": SortDirection.ASCENDING,
    "descending": SortDirection.DESCENDING,
}


def filter_operator(operator: FilterOperator | str) -> FilterOperator:
    """Resolve an operator symbol or alias to a FilterOperator.

    Raises:
        InvalidFilterOperatorError: If the operator is not supported.
    """
    if isinstance(operator, FilterOperator):
        return operator
    if isinstance(operator, str):
        symbol = operator.strip().lower()
        if symbol in _OPERATOR_ALIASES:
            return _OPERATOR_ALIASES[symbol]
        try:
            return FilterOperator(symbol)
        except ValueError:
            pass
    raise InvalidFilterOperatorError(operator)


def sort_direction(direction: SortDirection | str) -> SortDirection:
    """Resolve a direction name to a SortDirection.

    Raises:
        InvalidSortDirectionError: If the direction is not supported.
    """
    if isinstance(direction, SortDirection):
        return direction
    if isinstance(direction, str):
        name = direction.strip().lower()
        if name in _DIRECTION_ALIASES:
            return _DIRECTION_ALIASES[name]
        try:
            return SortDirection(name)
        except ValueError:
            pass
    raise InvalidSortDirectionError(direction)


@dataclass(frozen=True)
class PropertyFilter:
    """A single ``property operator value`` condition."""

    property: str
    operator: FilterOperator
    value: Any

    def __str__(self) -> str:
        return f"{self.property} {self.operator.value} {self.value}"


@dataclass(frozen=True)
class PropertySort:
    """A single sort order."""

    property: str
    direction: SortDirection = SortDirection.ASCENDING

    def __str__(self) -> str:
        if self.direction is SortDirection.DESCENDING:
            return f"{self.property} DESC"
        return self.property


@dataclass(frozen=True)
class Query:
    """Immutable filter/sort specification.

    A query without a kind matches entities of every kind. An ancestor
    restricts results to entities nested under that key.
    """

    kind: str | None = None
    ancestor: Key | None = None
    filters: tuple[PropertyFilter, ...] = ()
    sorts: tuple[PropertySort, ...] = ()

    def filter_by(self, property: str, operator: FilterOperator | str, value: Any) -> Query:
        """Return a new query with an additional property filter."""
        condition = PropertyFilter(property, filter_operator(operator), value)
        return replace(self, filters=(*self.filters, condition))

    def sort_by(
        self, property: str, direction: SortDirection | str = SortDirection.ASCENDING
    ) -> Query:
        """Return a new query with an additional sort order."""
        order = PropertySort(property, sort_direction(direction))
        return replace(self, sorts=(*self.sorts, order))

    def with_kind(self, kind: str) -> Query:
        """Return a copy of this query bound to ``kind``."""
        return replace(self, kind=kind)

    def __str__(self) -> str:
        parts = ["SELECT *"]
        if self.kind is not None:
            parts.append(f"FROM {self.kind}")
        conditions = [str(f) for f in self.filters]
        if self.ancestor is not None:
            conditions.append(f"__ancestor__ is {self.ancestor}")
        if conditions:
            parts.append("WHERE " + " AND ".join(conditions))
        if self.sorts:
            parts.append("ORDER BY " + ", ".join(str(s) for s in self.sorts))
        return " ".join(parts)


def query(kind: str | Key | None = None, ancestor: Key | None = None) -> Query:
    """Entry point for the query DSL.

    ``query(key)`` builds a kind-less ancestor query, ``query(kind, key)`` a
    kind query scoped under an ancestor.
    """
    if isinstance(kind, Key):
        return Query(ancestor=kind)
    return Query(kind=kind, ancestor=ancestor)


def where(property: str, operator: FilterOperator | str, value: Any) -> PropertyFilter:
    """Filter clause for :func:`select`."""
    return PropertyFilter(property, filter_operator(operator), value)


def order(property: str, direction: SortDirection | str = SortDirection.ASCENDING) -> PropertySort:
    """Sort clause for :func:`select`."""
    return PropertySort(property, sort_direction(direction))


def select(kind: str | None, *clauses: PropertyFilter | PropertySort) -> Query:
    """Build a query from ``where`` and ``order`` clauses in one call."""
    filters = tuple(c for c in clauses if isinstance(c, PropertyFilter))
    sorts = tuple(c for c in clauses if isinstance(c, PropertySort))
    if len(filters) + len(sorts) != len(clauses):
        raise TypeError("select() clauses must come from where() or order()")
    return Query(kind=kind, filters=filters, sorts=sorts)


def is_query(obj: Any) -> bool:
    """Return True if ``obj`` is a Query."""
    return isinstance(obj, Query)
