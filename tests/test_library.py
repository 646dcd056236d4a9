"""
Tests for the example library
"""
from december.library import CATALOG, ExampleLibrary
from december.library.catalog import ExampleEntry


def test_every_catalog_document_is_bundled(library):
    for entry in CATALOG:
        assert (library.directory / entry.filename).is_file(), entry.filename


def test_match_in_catalog_order(library):
    entries = library.match("Refactor the navbar component")

    assert [e.topic for e in entries] == ["refactoring", "UI implementation"]


def test_match_form_request(library):
    entries = library.match("Create a contact form with name, email, and message fields")

    assert [e.topic for e in entries] == ["forms"]


def test_match_is_capped(library):
    library.max_examples = 2

    entries = library.match("Refactor the login form component and its error state")

    assert len(entries) == 2
    assert entries[0].topic == "refactoring"


def test_no_match(library):
    assert library.match("Hello there") == []


def test_find_by_topic_name(library):
    entries = library.find(["Forms", "routing", "nonexistent", "forms"])

    assert [e.topic for e in entries] == ["forms", "routing"]


def test_load_and_format(library):
    documents = library.load(library.find(["forms"]))

    assert len(documents) == 1
    assert documents[0].content

    text = library.format_for_context(documents)
    assert text.startswith("## Examples")
    assert "### forms (forms.md)" in text


def test_missing_file_is_skipped(tmp_path):
    (tmp_path / "present.md").write_text("# Present\n", encoding="utf-8")
    catalog = (
        ExampleEntry("present", ("present",), "present.md"),
        ExampleEntry("missing", ("missing",), "missing.md"),
    )
    library = ExampleLibrary(tmp_path, catalog=catalog)

    documents = library.load(catalog)

    assert [d.topic for d in documents] == ["present"]
    assert documents[0].content == "# Present"


def test_format_empty(library):
    assert library.format_for_context([]) == ""
