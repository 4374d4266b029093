"""Repository layer - per-entity accessor suites."""

from __future__ import annotations

from datastore_erm.repository.base import EntityRepository

__all__ = [
    "EntityRepository",
]
