#!/usr/bin/env python3
"""
Tests for the element collection and the string helpers.
"""

import json

import pytest

from anitoken import Element, ElementCategory, Elements
from anitoken.string_helper import (
    index_of_first_digit,
    is_dash_character,
    is_mostly_latin_string,
    string_to_int,
    substring_with_check,
    trim,
)


@pytest.fixture
def elements():
    collection = Elements()
    collection.add(ElementCategory.ANIME_TITLE, "Toradora!")
    collection.add(ElementCategory.LANGUAGE, "ENG")
    collection.add(ElementCategory.EPISODE_NUMBER, "01")
    collection.add(ElementCategory.LANGUAGE, "JAP")
    return collection


class TestElements:

    def test_unknown_category_rejected(self):
        """Elements never carry the UNKNOWN category."""
        with pytest.raises(ValueError):
            Element(ElementCategory.UNKNOWN, "x")

    def test_insertion_order(self, elements):
        """Iteration follows insertion order."""
        assert [e.category for e in elements] == [
            ElementCategory.ANIME_TITLE,
            ElementCategory.LANGUAGE,
            ElementCategory.EPISODE_NUMBER,
            ElementCategory.LANGUAGE,
        ]

    def test_get_and_get_all(self, elements):
        """Test first-value and all-values lookups."""
        assert elements.get(ElementCategory.LANGUAGE) == "ENG"
        assert elements.get_all(ElementCategory.LANGUAGE) == ["ENG", "JAP"]
        assert elements.get(ElementCategory.ANIME_YEAR) is None
        assert elements.get_all(ElementCategory.ANIME_YEAR) == []

    def test_empty(self, elements):
        """Test the per-category emptiness check."""
        assert not elements.empty(ElementCategory.ANIME_TITLE)
        assert elements.empty(ElementCategory.RELEASE_GROUP)

    def test_erase_first(self, elements):
        """Test that erase removes only the first element of a category."""
        assert elements.erase(ElementCategory.LANGUAGE) == 1
        assert elements.get_all(ElementCategory.LANGUAGE) == ["JAP"]
        assert elements.erase(ElementCategory.ANIME_YEAR) == -1

    def test_erase_at_removes_that_element(self, elements):
        """Removal by index leaves earlier elements of the same category alone."""
        removed = elements.erase_at(3)
        assert removed == Element(ElementCategory.LANGUAGE, "JAP")
        assert elements.get_all(ElementCategory.LANGUAGE) == ["ENG"]

    def test_remove_all(self, elements):
        """Test removing every element of a category."""
        elements.remove_all(ElementCategory.LANGUAGE)
        assert len(elements) == 2

    def test_to_dict_groups_repeated_values(self, elements):
        """Repeated categories become lists, single ones stay strings."""
        assert elements.to_dict() == {
            "anime_title": "Toradora!",
            "language": ["ENG", "JAP"],
            "episode_number": "01",
        }
        assert json.loads(elements.to_json())["language"] == ["ENG", "JAP"]


class TestStringHelpers:

    @pytest.mark.parametrize("text,expected", [
        ("07.5", 7),
        ("12v2", 12),
        ("abc", 0),
        ("", 0),
    ])
    def test_string_to_int(self, text, expected):
        """Only the leading run of digits is converted."""
        assert string_to_int(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("EP.1", 3),
        ("01", 0),
        ("Title", -1),
    ])
    def test_index_of_first_digit(self, text, expected):
        """Test locating the first digit of a word."""
        assert index_of_first_digit(text) == expected

    def test_dashes(self):
        """Test dash detection and dash trimming."""
        assert is_dash_character("-")
        assert is_dash_character("–")
        assert not is_dash_character("--")
        assert trim(" - Title - ", " -") == "Title"

    def test_mostly_latin(self):
        """Test the Latin-ratio check."""
        assert is_mostly_latin_string("Toradora!")
        assert not is_mostly_latin_string("とらドラ")
        assert not is_mostly_latin_string("")

    def test_substring_is_clamped(self):
        """Out-of-range substrings are clamped instead of raising."""
        assert substring_with_check("Title", 3, 10) == "le"
        assert substring_with_check("Title", 10, 2) == ""
