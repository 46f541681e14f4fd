#!/usr/bin/env python3
"""
Tests for extension and ignored string removal.
"""

import json

import pytest

from anitoken import ElementCategory, Elements, Options, PreTokenizer


@pytest.fixture
def pre_tokenizer():
    return PreTokenizer()


class TestExtensionRemoval:

    @pytest.mark.parametrize("filename,cleaned,extension", [
        ("Title - 01.mkv", "Title - 01", "mkv"),
        ("Title - 01.MP4", "Title - 01", "MP4"),
        ("Title.v2.webm", "Title.v2", "webm"),
        ("Title - 01.txt", "Title - 01.txt", None),
        ("Title - 01.mkv2", "Title - 01.mkv2", None),
        ("Title - 01", "Title - 01", None),
        ("Title 2.0", "Title 2.0", None),
    ])
    def test_known_extensions_only(self, pre_tokenizer, filename, cleaned, extension):
        """Test that only short, known extensions are removed."""
        result = pre_tokenizer.process(filename)
        assert result.cleaned == cleaned
        assert result.extension == extension

    def test_elements_are_recorded(self, pre_tokenizer):
        """Test that extension and name elements are added in order."""
        elements = Elements()
        pre_tokenizer.process("Title - 01.mkv", elements)

        assert elements.get(ElementCategory.FILE_EXTENSION) == "mkv"
        assert elements.get(ElementCategory.FILE_NAME) == "Title - 01"
        assert [e.category for e in elements] == [ElementCategory.FILE_EXTENSION, ElementCategory.FILE_NAME]

    def test_extension_only_filename(self, pre_tokenizer):
        """A bare extension leaves no file name."""
        elements = Elements()
        result = pre_tokenizer.process(".mkv", elements)

        assert result.cleaned == ""
        assert elements.get(ElementCategory.FILE_EXTENSION) == "mkv"
        assert elements.empty(ElementCategory.FILE_NAME)

    def test_extension_parsing_disabled(self):
        """Test that the extension is kept when extension parsing is off."""
        pre_tokenizer = PreTokenizer(Options(parse_file_extension=False))
        elements = Elements()
        result = pre_tokenizer.process("Title - 01.mkv", elements)

        assert result.cleaned == "Title - 01.mkv"
        assert elements.empty(ElementCategory.FILE_EXTENSION)
        assert elements.get(ElementCategory.FILE_NAME) == "Title - 01.mkv"


class TestIgnoredStrings:

    def test_every_occurrence_is_removed(self):
        """Test that every occurrence of an ignored string is removed."""
        pre_tokenizer = PreTokenizer(Options(ignored_strings=("[Ignored]",)))
        result = pre_tokenizer.process("[Ignored] Title [Ignored] - 01.mkv")

        assert result.cleaned == " Title  - 01"
        assert [(t.value, t.category) for t in result.removed_tokens] == [
            ("mkv", "file_extension"),
            ("[Ignored]", "ignored_string"),
        ]

    def test_match_is_case_sensitive(self):
        """Ignored strings match verbatim."""
        pre_tokenizer = PreTokenizer(Options(ignored_strings=("[IGNORED]",)))
        result = pre_tokenizer.process("[Ignored] Title.mkv")
        assert result.cleaned == "[Ignored] Title"

    def test_result_to_json(self):
        """Verify JSON structure contains original, cleaned, extension and removed_tokens."""
        pre_tokenizer = PreTokenizer(Options(ignored_strings=("[Ignored]",)))
        data = json.loads(pre_tokenizer.process("[Ignored] Title.mkv").to_json())

        assert data["original"] == "[Ignored] Title.mkv"
        assert data["cleaned"] == " Title"
        assert data["extension"] == "mkv"
        assert data["removed_tokens"][1] == {"value": "[Ignored]", "category": "ignored_string", "position": 0}
