"""Query DSL - immutable filter/sort specifications."""

from __future__ import annotations

from datastore_erm.query.builder import (
    FilterOperator,
    PropertyFilter,
    PropertySort,
    Query,
    SortDirection,
    filter_operator,
    is_query,
    order,
    query,
    select,
    sort_direction,
    where,
)

__all__ = [
    "Query",
    "PropertyFilter",
    "PropertySort",
    "FilterOperator",
    "SortDirection",
    "filter_operator",
    "sort_direction",
    "query",
    "select",
    "where",
    "order",
    "is_query",
]
