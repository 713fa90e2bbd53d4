"""Tests for dungen.core.tags."""

import copy
import pickle

import pytest

from dungen.core import Tag, UNDEFINED_TAG, to_tags
from dungen.errors import DungenError, InvalidTagError


class TestTagConstruction:
    """Tests for creating tags."""

    def test_create_with_valid_name(self):
        """A plain name is kept as-is."""
        assert Tag("fire").name == "fire"

    def test_name_is_trimmed(self):
        """Surrounding whitespace is stripped."""
        assert Tag("  fire  ").name == "fire"

    def test_name_is_lowercased(self):
        """Names are lower-cased project-wide."""
        assert Tag("Wall").name == "wall"

    @pytest.mark.parametrize("invalid", [None, "", "   ", "\t\n"])
    def test_invalid_name_raises(self, invalid):
        """Empty, whitespace, and missing names are rejected."""
        with pytest.raises(InvalidTagError) as exc_info:
            Tag(invalid)
        assert "cannot be null, empty, or whitespace" in str(exc_info.value)
        assert exc_info.value.name == invalid

    def test_invalid_tag_error_is_dungen_error(self):
        """InvalidTagError belongs to the dungen error family."""
        with pytest.raises(DungenError):
            Tag("")

    def test_try_create_valid(self):
        """try_create returns a tag for a valid name."""
        tag = Tag.try_create("fire")
        assert tag == Tag("fire")

    @pytest.mark.parametrize("invalid", [None, "", "   "])
    def test_try_create_invalid_returns_none(self, invalid):
        """try_create returns None instead of raising."""
        assert Tag.try_create(invalid) is None


class TestTagValueSemantics:
    """Tests for equality, hashing, and immutability."""

    def test_equality_by_normalized_name(self):
        """Tags with the same normalized name are equal."""
        assert Tag("Fire") == Tag(" fire ")
        assert Tag("fire") != Tag("water")

    def test_hash_matches_equality(self):
        """Equal tags collapse in sets and dict keys."""
        assert len({Tag("Wall"), Tag("wall"), Tag(" WALL ")}) == 1
        assert {Tag("wall"): 1}[Tag("Wall")] == 1

    def test_not_equal_to_string(self):
        """Tags only compare equal to tags."""
        assert Tag("wall") != "wall"

    def test_is_immutable(self):
        """Assigning attributes fails."""
        tag = Tag("wall")
        with pytest.raises(AttributeError):
            tag.name = "floor"
        with pytest.raises(AttributeError):
            tag._name = "floor"

    def test_str_and_repr(self):
        """str() is the bare name; repr() shows the type."""
        assert str(Tag("Wall")) == "wall"
        assert repr(Tag("Wall")) == "Tag('wall')"

    def test_copy_and_pickle_round_trip(self):
        """Tags survive deepcopy and pickling."""
        tag = Tag("wall")
        assert copy.deepcopy(tag) == tag
        assert pickle.loads(pickle.dumps(tag)) == tag

    def test_undefined_sentinel(self):
        """The sentinel tag is named 'undefined'."""
        assert UNDEFINED_TAG == Tag("undefined")


class TestToTags:
    """Tests for the to_tags helper."""

    def test_mixes_strings_and_tags(self):
        """Strings are converted; tags pass through."""
        assert to_tags(["Wall", Tag("floor")]) == (Tag("wall"), Tag("floor"))

    def test_deduplicates_preserving_order(self):
        """The first occurrence wins."""
        assert to_tags(["b", "a", "B", "a"]) == (Tag("b"), Tag("a"))

    def test_invalid_entry_raises(self):
        """A bad name anywhere fails the whole conversion."""
        with pytest.raises(InvalidTagError):
            to_tags(["wall", "  "])
