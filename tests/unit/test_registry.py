"""Unit tests for EntityRegistry."""

from __future__ import annotations

import pytest

from datastore_erm.core.exceptions import DuplicateEntityError, UnknownEntityError
from datastore_erm.core.registry import EntityRegistry
from datastore_erm.core.types import LongText
from datastore_erm.schema.definition import EntityDefinition


class TestEntityRegistry:
    def test_register_and_get(
        self, entities: EntityRegistry, citation: EntityDefinition
    ) -> None:
        entities.register(citation)
        assert entities.get("citation") is citation
        assert entities.has("citation")
        assert "citation" in entities
        assert len(entities) == 1

    def test_unknown_kind(self, entities: EntityRegistry) -> None:
        with pytest.raises(UnknownEntityError, match="missing"):
            entities.get("missing")

    def test_duplicate_kind(self, entities: EntityRegistry, citation: EntityDefinition) -> None:
        entities.register(citation)
        with pytest.raises(DuplicateEntityError):
            entities.register(citation)

    def test_kinds_sorted(
        self,
        entities: EntityRegistry,
        citation: EntityDefinition,
        continent: EntityDefinition,
        country: EntityDefinition,
    ) -> None:
        for definition in (country, citation, continent):
            entities.register(definition)
        assert entities.kinds == ["citation", "continent", "country"]

    def test_dispatch_on_kind(
        self,
        entities: EntityRegistry,
        citation: EntityDefinition,
        country: EntityDefinition,
    ) -> None:
        entities.register(citation)
        entities.register(country)

        stored_citation = entities.preprocess({"kind": "citation", "abstract": "text"})
        stored_country = entities.preprocess({"kind": "country", "languages": ["de"]})
        assert stored_citation["abstract"] == LongText("text")
        assert stored_country["languages"] == '["de"]'
        assert entities.postprocess(stored_country)["languages"] == ["de"]

    def test_dispatch_without_kind(self, entities: EntityRegistry) -> None:
        with pytest.raises(UnknownEntityError):
            entities.preprocess({"name": "Joe"})
