"""
Example 01: Citations

This example declares a citation entity with a long-text abstract and
serialized author list, then creates and queries citations.
"""

from datastore_erm import Engine, ErmConfig


def main():
    engine = Engine.from_config(ErmConfig(backend="memory"))

    citation = engine.define(
        "citation",
        ["pmid", "abstract", "volume", "issue", "year", "month", "pages",
         "journal", "journal-abbrev", "authors"],
        options={
            "abstract": {"transform": "text", "default": ""},
            "authors": {"transform": "serialize"},
        },
    )

    print("=== Citations ===\n")

    # Defaults and merging
    print("1. Defaults:")
    print(f"   {citation.make_default()}\n")

    entry = {"abstract": "Lorem ipsum...", "authors": ["Joe", "Jim", "Bob"], "year": 2010}
    print("2. Merged with an entry:")
    print(f"   {citation.make_with(entry)}\n")

    # Stored form
    print("3. Preprocessed (stored form):")
    print(f"   {citation.preprocess(citation.make_with(entry))}\n")

    # Create and read back
    citations = engine.repository("citation")
    created = citations.create(entry)
    print("4. Created:")
    print(f"   key = {created['key']}")
    print(f"   authors = {created['authors']}\n")

    citations.create({"pmid": 2, "year": 2012, "authors": ["Ann"]})
    print("5. Finders:")
    for found in citations.find_all_by("year", 2011, ">"):
        print(f"   year > 2011: pmid={found['pmid']} authors={found['authors']}")
    print(f"   find_by_year(2010): {citations.find_by_year(2010)['abstract']}")


if __name__ == "__main__":
    main()
