"""Shared test fixtures."""

from __future__ import annotations

import pytest

from datastore_erm.adapters.memory import InMemoryBackend
from datastore_erm.core.engine import Engine
from datastore_erm.core.registry import EntityRegistry
from datastore_erm.core.transforms import TransformRegistry
from datastore_erm.schema.compiler import compile_entity
from datastore_erm.schema.definition import EntityDefinition

CITATION_ATTRIBUTES = [
    "pmid",
    "abstract",
    "volume",
    "issue",
    "year",
    "month",
    "pages",
    "journal",
    "journal-abbrev",
    "authors",
]


@pytest.fixture
def transforms() -> TransformRegistry:
    """Fresh transform registry with the built-ins."""
    return TransformRegistry()


@pytest.fixture
def entities() -> EntityRegistry:
    """Empty entity registry."""
    return EntityRegistry()


@pytest.fixture
def backend() -> InMemoryBackend:
    """Empty in-memory backend."""
    return InMemoryBackend()


@pytest.fixture
def engine(backend: InMemoryBackend) -> Engine:
    """Engine over the in-memory backend with its own registries."""
    return Engine(backend)


@pytest.fixture
def citation(transforms: TransformRegistry) -> EntityDefinition:
    """The citation entity: long-text abstract, serialized authors."""
    return compile_entity(
        "citation",
        CITATION_ATTRIBUTES,
        options={
            "abstract": {"transform": "text", "default": ""},
            "authors": {"transform": "serialize"},
        },
        transforms=transforms,
    )


@pytest.fixture
def continent(transforms: TransformRegistry) -> EntityDefinition:
    """Root entity keyed by its ISO code."""
    return compile_entity(
        "continent",
        ["iso-3166-alpha-2", "name"],
        options={"iso-3166-alpha-2": {"key": True}},
        transforms=transforms,
    )


@pytest.fixture
def country(continent: EntityDefinition, transforms: TransformRegistry) -> EntityDefinition:
    """Child of continent, keyed by region and code."""
    return compile_entity(
        "country",
        ["region", "iso-3166-alpha-2", "name", "languages"],
        parent=continent,
        options={
            "region": {"key": True},
            "iso-3166-alpha-2": {"key": True},
            "languages": {"complex": True},
        },
        transforms=transforms,
    )
