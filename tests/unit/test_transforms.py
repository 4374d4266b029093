"""Unit tests for TransformRegistry and the built-in transforms."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from datastore_erm.core.exceptions import (
    DeserializationError,
    DuplicateTransformError,
    SerializationError,
    UnknownTransformError,
)
from datastore_erm.core.transforms import (
    SERIALIZE,
    TEXT,
    TransformRegistry,
    deserialize,
    serialize,
)
from datastore_erm.core.types import LongText


class TestTransformRegistry:
    def test_builtins_registered(self, transforms: TransformRegistry) -> None:
        assert transforms.has(SERIALIZE)
        assert transforms.has(TEXT)
        assert transforms.names == ["serialize", "text"]

    def test_empty_registry(self) -> None:
        registry = TransformRegistry(builtins=False)
        assert len(registry) == 0
        assert "serialize" not in registry

    def test_register_and_get(self, transforms: TransformRegistry) -> None:
        transform = transforms.register("upper", str.upper, str.lower)
        assert transforms.get("upper") is transform
        assert transform.pre("abc") == "ABC"
        assert transform.post("ABC") == "abc"

    def test_lookup_alias(self, transforms: TransformRegistry) -> None:
        assert transforms.lookup(TEXT) is transforms.get(TEXT)

    def test_unknown_transform(self, transforms: TransformRegistry) -> None:
        with pytest.raises(UnknownTransformError, match="does-not-exist"):
            transforms.get("does-not-exist")

    def test_duplicate_transform(self, transforms: TransformRegistry) -> None:
        with pytest.raises(DuplicateTransformError, match="text"):
            transforms.register(TEXT, str, str)

    def test_transform_is_immutable(self, transforms: TransformRegistry) -> None:
        transform = transforms.get(TEXT)
        with pytest.raises(AttributeError):
            transform.pre = str  # type: ignore[misc]


class TestSerializeTransform:
    @pytest.mark.parametrize(
        "value",
        [
            "Lorem ipsum",
            42,
            -3.5,
            True,
            None,
            ["Joe", "Jim", "Bob"],
            [{"name": "Joe", "tags": ["a", "b"]}, {"name": "Jim", "age": 41, "active": False}],
            {"nested": {"list": [1, [2, [3]]], "empty": {}}},
        ],
    )
    def test_round_trip(self, value: object) -> None:
        assert deserialize(serialize(value)) == value

    def test_pre_renders_text(self) -> None:
        assert serialize(["Joe", "Jim", "Bob"]) == '["Joe","Jim","Bob"]'

    def test_tuple_reads_back_as_list(self) -> None:
        assert deserialize(serialize((1, 2))) == [1, 2]

    @pytest.mark.parametrize(
        "value",
        [
            {1: "a"},
            {"nested": {(1, 2): "b"}},
            float("inf"),
            [1.0, float("nan")],
            {"at": date(2010, 1, 2)},
            [datetime(2010, 1, 2, 3, 4)],
            {"tags": {"a", "b"}},
            b"raw",
        ],
    )
    def test_rejects_values_json_cannot_reproduce(self, value: object) -> None:
        with pytest.raises(SerializationError):
            serialize(value)

    def test_rejection_names_location(self) -> None:
        with pytest.raises(SerializationError, match=r"non-string key 1 at \$\['authors'\]"):
            serialize({"authors": {1: "Joe"}})

    def test_malformed_input(self) -> None:
        with pytest.raises(DeserializationError):
            deserialize('["Joe", "Jim"')

    def test_non_text_input(self) -> None:
        with pytest.raises(DeserializationError, match="expected text"):
            deserialize(12)

    def test_accepts_long_text(self) -> None:
        assert deserialize(LongText('{"a": 1}')) == {"a": 1}


class TestTextTransform:
    def test_pre_wraps(self, transforms: TransformRegistry) -> None:
        wrapped = transforms.get(TEXT).pre("Lorem ipsum")
        assert isinstance(wrapped, LongText)
        assert wrapped.value == "Lorem ipsum"

    def test_round_trip(self, transforms: TransformRegistry) -> None:
        text = transforms.get(TEXT)
        assert text.post(text.pre("x" * 5000)) == "x" * 5000

    def test_post_passes_plain_strings(self, transforms: TransformRegistry) -> None:
        assert transforms.get(TEXT).post("plain") == "plain"
