"""Tests for tree / flatten index build."""

from locale_index.catalog import LocaleFile
from locale_index.flatten import flatten
from locale_index.tree import (
    LocaleEntry,
    LocaleGroup,
    build_index,
    build_snapshot,
    build_tree,
    iter_entries,
)


def make_file(filepath, locale, value):
    return LocaleFile(filepath=filepath, locale=locale, value=value, flatten=flatten(value))


class TestSnapshot:
    def test_tree_and_index_share_entries(self):
        files = [
            make_file("/l/en.json", "en", {"a": {"b": "hello", "c": "x"}}),
            make_file("/l/fr.json", "fr", {"a": {"b": "bonjour"}}),
        ]
        snap = build_snapshot(files, version=3)

        group = snap.tree.children["a"]
        assert isinstance(group, LocaleGroup)
        assert group.children["b"] is snap.index["a.b"]
        assert snap.version == 3

        snap.index["a.b"].locales["fr"].value = "salut"
        assert group.children["b"].get_value("fr") == "salut"

    def test_records_carry_origin(self):
        snap = build_snapshot([make_file("/l/en.json", "en", {"a": {"b": "hello"}})])
        record = snap.index["a.b"].locales["en"]
        assert record.keyname == "b"
        assert record.keypath == "a.b"
        assert record.filepath == "/l/en.json"
        assert record.shadow is False

    def test_same_locale_last_file_wins(self):
        files = [
            make_file("/l/en/a.json", "en", {"k": "first"}),
            make_file("/l/en/b.json", "en", {"k": "second"}),
        ]
        snap = build_snapshot(files)
        assert snap.index["k"].get_value("en") == "second"
        assert snap.tree.children["k"].locales["en"].filepath == "/l/en/b.json"

        snap = build_snapshot(list(reversed(files)))
        assert snap.index["k"].get_value("en") == "first"

    def test_locales_do_not_conflict(self):
        files = [
            make_file("/l/en.json", "en", {"k": "hi"}),
            make_file("/l/fr.json", "fr", {"k": "salut"}),
        ]
        entry = build_snapshot(files).index["k"]
        assert set(entry.locales) == {"en", "fr"}

    def test_empty_group_is_not_an_entry(self):
        snap = build_snapshot([make_file("/l/en.json", "en", {"a": {}})])
        assert snap.index == {}
        assert isinstance(snap.tree.children["a"], LocaleGroup)


class TestShapeConflicts:
    def test_first_group_wins(self):
        files = [
            make_file("/l/en.json", "en", {"a": {"b": "x"}}),
            make_file("/l/fr.json", "fr", {"a": "flat"}),
        ]
        index = build_index(files)
        tree = build_tree(files, index)
        assert isinstance(tree.children["a"], LocaleGroup)
        # the scalar is still reachable through the flat index
        assert index["a"].get_value("fr") == "flat"

    def test_first_entry_wins(self):
        files = [
            make_file("/l/en.json", "en", {"a": "flat"}),
            make_file("/l/fr.json", "fr", {"a": {"b": "x"}}),
        ]
        snap = build_snapshot(files)
        assert isinstance(snap.tree.children["a"], LocaleEntry)
        assert "a.b" in snap.index


def test_iter_entries_walks_leaves_in_order():
    snap = build_snapshot([make_file("/l/en.json", "en", {"a": {"b": "1", "c": {"d": "2"}}, "e": "3"})])
    assert [e.keypath for e in iter_entries(snap.tree)] == ["a.b", "a.c.d", "e"]
