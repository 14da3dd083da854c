"""Tests for identifier-or-filename selector resolution."""

import bson
import pytest
from bson import ObjectId

from gridfile.errors import InvalidSelectorError
from gridfile.registry.selectors import (
    Selector,
    SelectorKind,
    resolve_removal_selector,
    resolve_selector,
    try_parse_id,
)


class TestTryParseId:
    """Tests for try_parse_id()."""

    def test_object_id_passes_through(self):
        oid = ObjectId()
        assert try_parse_id(oid, bson) is oid

    def test_hex_string_is_parsed(self):
        oid = ObjectId()
        assert try_parse_id(str(oid), bson) == oid

    def test_plain_filename_is_not_an_id(self):
        assert try_parse_id("report.pdf", bson) is None

    def test_twelve_char_string_is_not_an_id(self):
        """Only the 24-char hex form of a string parses."""
        assert try_parse_id("abcdefghijkl", bson) is None

    def test_non_string_is_not_an_id(self):
        assert try_parse_id(42, bson) is None


class TestResolveSelector:
    """Tests for resolve_selector()."""

    def test_object_id(self):
        oid = ObjectId()
        selector = resolve_selector(oid, bson)
        assert selector == Selector(SelectorKind.ID, oid)
        assert selector.query == {"_id": oid}

    def test_hex_string_prefers_identifier(self):
        oid = ObjectId()
        selector = resolve_selector(str(oid), bson)
        assert selector.kind == SelectorKind.ID
        assert selector.value == oid

    def test_filename(self):
        selector = resolve_selector("a.txt", bson)
        assert selector.kind == SelectorKind.FILENAME
        assert selector.query == {"filename": "a.txt"}
        assert str(selector) == "a.txt"

    @pytest.mark.parametrize("value", [None, "", 42, 3.5, b"bytes", ["a.txt"], {"filename": "a.txt"}])
    def test_invalid_values(self, value):
        with pytest.raises(InvalidSelectorError, match="valid ObjectId or a filename"):
            resolve_selector(value, bson)


class TestResolveRemovalSelector:
    """Tests for resolve_removal_selector()."""

    def test_plain_filename(self):
        selector = resolve_removal_selector("a.txt", bson)
        assert selector == Selector(SelectorKind.FILENAME, "a.txt")

    def test_object_id(self):
        oid = ObjectId()
        assert resolve_removal_selector(oid, bson) == Selector(SelectorKind.ID, oid)

    def test_mapping_with_id(self):
        oid = ObjectId()
        selector = resolve_removal_selector({"_id": str(oid)}, bson)
        assert selector == Selector(SelectorKind.ID, oid)

    def test_mapping_with_filename(self):
        selector = resolve_removal_selector({"filename": "a.txt"}, bson)
        assert selector == Selector(SelectorKind.FILENAME, "a.txt")

    def test_mapping_id_wins_over_filename(self):
        oid = ObjectId()
        selector = resolve_removal_selector({"_id": oid, "filename": "a.txt"}, bson)
        assert selector.kind == SelectorKind.ID

    def test_mapping_filename_that_looks_like_id_stays_filename(self):
        name = str(ObjectId())
        selector = resolve_removal_selector({"filename": name}, bson)
        assert selector == Selector(SelectorKind.FILENAME, name)

    def test_mapping_with_bad_id(self):
        with pytest.raises(InvalidSelectorError):
            resolve_removal_selector({"_id": "not-an-id"}, bson)

    def test_empty_mapping(self):
        with pytest.raises(InvalidSelectorError):
            resolve_removal_selector({}, bson)

    @pytest.mark.parametrize("value", [None, 42, b"bytes", ["a.txt"], ""])
    def test_invalid_values(self, value):
        with pytest.raises(InvalidSelectorError):
            resolve_removal_selector(value, bson)
