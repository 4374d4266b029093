"""
Example 02: Ancestor Keys

This example declares continents and countries with natural keys, scopes
countries under their continent and maps results onto a dataclass.
"""

from dataclasses import dataclass, field

from datastore_erm import Engine, InMemoryBackend, ModelMapper, create_key, query


@dataclass
class Country:
    """Country model"""
    name: str
    languages: list = field(default_factory=list)


def main():
    engine = Engine(InMemoryBackend())

    engine.define(
        "continent",
        ["iso-3166-alpha-2", "name"],
        options={"iso-3166-alpha-2": {"key": True}},
    )
    engine.define(
        "country",
        ["iso-3166-alpha-2", "name", "languages"],
        parent="continent",
        options={"iso-3166-alpha-2": {"key": True}, "languages": {"complex": True}},
    )

    continents = engine.repository("continent")
    countries = engine.repository("country")

    eu = continents.create({"iso-3166-alpha-2": "eu", "name": "Europe"})["key"]
    countries.create({"iso-3166-alpha-2": "de", "name": "Germany", "languages": ["de"]}, eu)
    countries.create({"iso-3166-alpha-2": "be", "name": "Belgium", "languages": ["nl", "fr"]}, eu)

    print("=== Ancestor Keys ===\n")

    germany = countries.find_by_name("Germany")
    print(f"1. Derived key: {germany['key']}\n")

    print("2. Countries in Europe:")
    q = query(create_key("continent", "eu")).sort_by("name")
    print(f"   {q}")
    mapped = engine.repository("country", mapper=ModelMapper(Country))
    for country in mapped.query(q):
        print(f"   {country}")


if __name__ == "__main__":
    main()
