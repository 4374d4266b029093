"""Unit tests for EntityDefinition behaviors: defaults, merge, transforms."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count

import pytest
from pydantic import BaseModel

from datastore_erm.core.exceptions import DeserializationError, UnknownAttributeError
from datastore_erm.core.transforms import TransformRegistry
from datastore_erm.core.types import LongText
from datastore_erm.schema.compiler import compile_entity
from datastore_erm.schema.definition import EntityDefinition

ENTRY = {"abstract": "Lorem ipsum", "authors": ["Joe", "Jim", "Bob"], "year": 2010}


class TestMakeDefault:
    def test_citation_defaults(self, citation: EntityDefinition) -> None:
        instance = citation.make_default()
        assert instance["kind"] == "citation"
        assert instance["abstract"] == ""
        for name in citation.attribute_names:
            if name != "abstract":
                assert instance[name] is None
        assert "key" not in instance

    def test_kind_first(self, citation: EntityDefinition) -> None:
        assert list(citation.make_default()) == ["kind", *citation.attribute_names]

    def test_blank_ignores_defaults(self, citation: EntityDefinition) -> None:
        blank = citation.make_blank()
        assert blank["abstract"] is None

    def test_mutable_defaults_not_shared(self, transforms: TransformRegistry) -> None:
        definition = compile_entity(
            "post", ["tags"], options={"tags": {"default": []}}, transforms=transforms
        )
        first = definition.make_default()
        first["tags"].append("x")
        assert definition.make_default()["tags"] == []

    def test_callable_default_evaluated_per_call(self, transforms: TransformRegistry) -> None:
        counter = count(1)
        definition = compile_entity(
            "ticket",
            ["number"],
            options={"number": {"default": lambda: next(counter)}},
            transforms=transforms,
        )
        assert definition.make_default()["number"] == 1
        assert definition.make_default()["number"] == 2


class TestMakeWith:
    def test_empty_overrides_equal_defaults(self, citation: EntityDefinition) -> None:
        assert citation.make_with({}) == citation.make_default()
        assert citation.make_with() == citation.make_default()

    def test_overlay_replaces_exactly_given_keys(self, citation: EntityDefinition) -> None:
        instance = citation.make_with(ENTRY)
        defaults = citation.make_default()
        for name, value in instance.items():
            if name in ENTRY:
                assert value == ENTRY[name]
            else:
                assert value == defaults[name]

    def test_unknown_keys_pass_through(self, citation: EntityDefinition) -> None:
        instance = citation.make_with({**ENTRY, "title": "A title"})
        assert instance["title"] == "A title"

    def test_strict_rejects_unknown_keys(self, transforms: TransformRegistry) -> None:
        definition = compile_entity("person", ["name"], transforms=transforms, strict=True)
        with pytest.raises(UnknownAttributeError, match="title"):
            definition.make_with({"name": "Joe", "title": "Dr"})

    def test_strict_allows_key_entry(self, transforms: TransformRegistry) -> None:
        definition = compile_entity("person", ["name"], transforms=transforms, strict=True)
        assert definition.make_with({"name": "Joe", "key": None})["name"] == "Joe"

    def test_kind_cannot_be_overridden(self, citation: EntityDefinition) -> None:
        assert citation.make_with({"kind": "book"})["kind"] == "citation"

    def test_overrides_not_mutated(self, citation: EntityDefinition) -> None:
        overrides = dict(ENTRY)
        citation.make_with(overrides)
        assert overrides == ENTRY

    def test_dataclass_overrides(self, transforms: TransformRegistry) -> None:
        @dataclass
        class Person:
            name: str
            age: int

        definition = compile_entity(
            "person", ["name", "age", "email"], transforms=transforms
        )
        instance = definition.make_with(Person(name="Joe", age=41))
        assert instance == {"kind": "person", "name": "Joe", "age": 41, "email": None}

    def test_pydantic_overrides(self, transforms: TransformRegistry) -> None:
        class Person(BaseModel):
            name: str
            age: int

        definition = compile_entity("person", ["name", "age"], transforms=transforms)
        assert definition.make_with(Person(name="Joe", age=41))["age"] == 41

    def test_rejects_unsupported_overrides(self, citation: EntityDefinition) -> None:
        with pytest.raises(TypeError):
            citation.make_with(42)


class TestProcessing:
    def test_preprocess_scenario(self, citation: EntityDefinition) -> None:
        stored = citation.preprocess(citation.make_with(ENTRY))
        assert stored["abstract"] == LongText("Lorem ipsum")
        assert stored["authors"] == '["Joe","Jim","Bob"]'
        assert stored["year"] == 2010
        assert stored["pmid"] is None

    def test_round_trip(self, citation: EntityDefinition) -> None:
        instance = citation.make_with({**ENTRY, "title": "A title"})
        assert citation.postprocess(citation.preprocess(instance)) == instance

    def test_round_trip_defaults(self, citation: EntityDefinition) -> None:
        instance = citation.make_default()
        assert citation.postprocess(citation.preprocess(instance)) == instance

    def test_preprocess_returns_new_dict(self, citation: EntityDefinition) -> None:
        instance = citation.make_with(ENTRY)
        citation.preprocess(instance)
        assert instance["authors"] == ["Joe", "Jim", "Bob"]

    def test_absent_attributes_stay_absent(self, citation: EntityDefinition) -> None:
        stored = citation.preprocess({"kind": "citation", "year": 2010})
        assert "authors" not in stored
        assert "abstract" not in stored

    def test_none_goes_through_transform(self, citation: EntityDefinition) -> None:
        stored = citation.preprocess(citation.make_default())
        assert stored["authors"] == "null"

    def test_postprocess_malformed(self, citation: EntityDefinition) -> None:
        with pytest.raises(DeserializationError):
            citation.postprocess({"kind": "citation", "authors": "[\"Joe\""})

    def test_untransformed_entity_passes_through(self, transforms: TransformRegistry) -> None:
        definition = compile_entity("person", ["name"], transforms=transforms)
        instance = definition.make_with({"name": "Joe"})
        assert definition.preprocess(instance) == instance
