"""Entity repository - the generated accessor suite.

One repository per compiled entity definition. Every operation performs at
most one backend round trip; transforms are applied on the way in
(``create``) and on the way out (every read).
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any, Generic, TypeVar

from datastore_erm.core.types import KEY, KIND, Key
from datastore_erm.query.builder import FilterOperator, Query, filter_operator
from datastore_erm.schema.definition import EntityDefinition
from datastore_erm.schema.merge import to_mapping
from datastore_erm.schema.protocol import Mapper

T = TypeVar("T")

logger = logging.getLogger(__name__)


class EntityRepository(Generic[T]):
    """Create/find/get/update/delete operations for one entity kind.

    Per-attribute finders are available by name: ``find_all_by_<attribute>``
    returns every match, ``find_by_<attribute>`` the first one. Hyphens in
    attribute names become underscores (``find_by_journal_abbrev``).

    Args:
        definition: The compiled entity definition.
        backend: Object implementing the Backend protocol.
        mapper: Optional mapper applied to every returned instance.
    """

    def __init__(
        self,
        definition: EntityDefinition,
        backend: Any,
        mapper: Mapper[T] | None = None,
    ) -> None:
        self._definition = definition
        self.backend = backend
        self.mapper = mapper

    @property
    def definition(self) -> EntityDefinition:
        return self._definition

    @property
    def kind(self) -> str:
        return self._definition.name

    def create(self, attributes: Any = None, parent: Key | None = None) -> Any:
        """Build, store and return a new entity.

        The instance is merged with the defaults, keyed by its explicit ``key``
        entry or its key attributes, preprocessed and stored. The result
        is the postprocessed stored form, which is what a later read returns.

        Raises:
            IncompleteKeyError: If a key attribute has no value.
            ParentKeyError: If ``parent`` does not fit the declared parent.
            InvalidKeyError: If an explicit ``key`` does not fit the entity.
        """
        definition = self._definition
        instance = definition.make_with(attributes)
        key = definition.resolve_key(parent, instance)
        if key is not None:
            instance[KEY] = key
            parent = key.parent

        stored = definition.preprocess(instance)
        properties = {k: v for k, v in stored.items() if k not in (KIND, KEY)}
        stored[KEY] = self.backend.put(definition.name, key, properties, parent=parent)
        logger.debug("Created %s", stored[KEY])
        return self._load(stored)

    def get(self, key: Key) -> Any:
        """Fetch an entity by key.

        Raises:
            EntityNotFoundError: If no entity is stored under ``key``.
        """
        return self._load(self.backend.get(key))

    def find_all_by(
        self,
        property: str,
        value: Any,
        operator: FilterOperator | str = FilterOperator.EQUAL,
    ) -> Iterator[Any]:
        """Find all entities whose ``property`` matches ``value``.

        A mapping ``value`` (such as another entity) is filtered on by its
        own ``property`` entry. Results are fetched in one round trip and
        postprocessed lazily; the iterator can be consumed once.
        """
        if isinstance(value, Mapping):
            value = value.get(property)
        q = Query(kind=self.kind).filter_by(property, filter_operator(operator), value)
        return self.query(q)

    def find_first_by(
        self,
        property: str,
        value: Any,
        operator: FilterOperator | str = FilterOperator.EQUAL,
    ) -> Any | None:
        """Find the first entity whose ``property`` matches ``value``, or None."""
        return next(self.find_all_by(property, value, operator), None)

    def find_all(self) -> Iterator[Any]:
        """Find every entity of this kind."""
        return self.query(Query(kind=self.kind))

    def query(self, query: Query) -> Iterator[Any]:
        """Run ``query`` restricted to this kind."""
        records = self.backend.query(query.with_kind(self.kind))
        return map(self._load, records)

    def update(self, key: Key, attributes: Any, *, transform: bool = False) -> Key:
        """Merge ``attributes`` into the stored entity.

        Attributes are handed to the backend as given. Pass ``transform=True``
        to preprocess them the way ``create`` does.

        Raises:
            EntityNotFoundError: If no entity is stored under ``key``.
        """
        properties = to_mapping(attributes)
        if transform:
            properties = self._definition.preprocess(properties)
        logger.debug("Updating %s", key)
        return self.backend.update(key, properties)

    def delete(self, *keys: Key) -> None:
        """Delete one or more entities by key."""
        logger.debug("Deleting %d %s entities", len(keys), self.kind)
        self.backend.delete(*keys)

    def _load(self, record: Mapping[str, Any]) -> Any:
        instance = self._definition.postprocess(record)
        if self.mapper is not None:
            return self.mapper.map_one(instance)
        return instance

    def _finder_property(self, suffix: str) -> str | None:
        for name in self._definition.attribute_names:
            if suffix in (name, name.replace("-", "_")):
                return name
        return None

    def __getattr__(self, name: str) -> Callable[..., Any]:
        definition = self.__dict__.get("_definition")
        if definition is not None:
            finders: tuple[tuple[str, Callable[..., Any]], ...] = (
                ("find_all_by_", self.find_all_by),
                ("find_by_", self.find_first_by),
            )
            for prefix, finder in finders:
                if name.startswith(prefix):
                    prop = self._finder_property(name[len(prefix) :])
                    if prop is not None:
                        return functools.partial(finder, prop)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
