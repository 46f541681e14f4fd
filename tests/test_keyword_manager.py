#!/usr/bin/env python3
"""
Tests for keyword lookup, peek phrases and dictionary loading.
"""

import pytest

from anitoken import DictionaryLoader, ElementCategory, Elements, KeywordManager, TokenRange
from anitoken.keyword_manager import get_keyword_manager


@pytest.fixture
def keyword_manager():
    return get_keyword_manager()


class TestFind:

    @pytest.mark.parametrize("word,category", [
        ("aac", ElementCategory.AUDIO_TERM),
        ("Blu-Ray", ElementCategory.SOURCE),
        ("x264", ElementCategory.VIDEO_TERM),
        ("Episode", ElementCategory.EPISODE_PREFIX),
        ("vol.", ElementCategory.VOLUME_PREFIX),
        ("Season", ElementCategory.ANIME_SEASON_PREFIX),
        ("vostfr", ElementCategory.LANGUAGE),
        ("v2", ElementCategory.RELEASE_VERSION),
    ])
    def test_case_insensitive_lookup(self, keyword_manager, word, category):
        """Test keyword lookup regardless of case."""
        keyword = keyword_manager.find(word)
        assert keyword is not None
        assert keyword.category == category

    def test_unknown_word(self, keyword_manager):
        """Unknown words are not keywords."""
        assert keyword_manager.find("Toradora") is None

    def test_category_mismatch(self, keyword_manager):
        """A lookup restricted to another category finds nothing."""
        assert keyword_manager.find("MOVIE", ElementCategory.AUDIO_TERM) is None
        assert keyword_manager.contains(ElementCategory.ANIME_TYPE, "Ova")

    def test_extensions_use_their_own_table(self, keyword_manager):
        """Extensions are looked up separately from keywords."""
        assert keyword_manager.find("mkv") is None
        assert keyword_manager.find("mkv", ElementCategory.FILE_EXTENSION).category == ElementCategory.FILE_EXTENSION
        # AVI is both a video term and an extension
        assert keyword_manager.find("avi").category == ElementCategory.VIDEO_TERM
        assert keyword_manager.contains(ElementCategory.FILE_EXTENSION, "avi")

    def test_invalid_extension(self, keyword_manager):
        """Audio and subtitle extensions are registered as invalid."""
        keyword = keyword_manager.find("aac", ElementCategory.FILE_EXTENSION)
        assert keyword is not None
        assert keyword.options.valid is False

    def test_keyword_options(self, keyword_manager):
        """Verify identifiable, searchable and valid flags from the dictionary."""
        assert keyword_manager.find("OVA").options.identifiable is False
        assert keyword_manager.find("SP").options.searchable is False
        assert keyword_manager.find("ED").options.valid is False
        assert keyword_manager.find("E", ElementCategory.EPISODE_PREFIX).options.valid is False

        flac = keyword_manager.find("FLAC")
        assert flac.options.identifiable and flac.options.searchable and flac.options.valid

    def test_first_registration_wins(self):
        """A word registered twice keeps its first category."""
        manager = KeywordManager({
            "keyword_groups": [
                {"category": "language", "words": ["ENG"]},
                {"category": "subtitles", "words": ["eng"]},
            ],
        })
        assert manager.find("Eng").category == ElementCategory.LANGUAGE

    def test_words_by_category(self, keyword_manager):
        """Test listing the words of one category."""
        assert set(keyword_manager.words(ElementCategory.VOLUME_PREFIX)) == {"VOL", "VOL.", "VOLUME"}


class TestPeek:

    def test_matched_text_is_recorded(self, keyword_manager):
        """Peek hits add elements with the text as written in the filename."""
        filename = "Title 1080P Dual Audio"
        elements = Elements()

        ranges = keyword_manager.peek(filename, TokenRange(0, len(filename)), elements)

        assert ranges == [TokenRange(6, 5), TokenRange(12, 10)]
        assert elements.get(ElementCategory.VIDEO_RESOLUTION) == "1080P"
        assert elements.get(ElementCategory.AUDIO_TERM) == "Dual Audio"

    def test_search_is_limited_to_range(self, keyword_manager):
        """Phrases outside the given range are not matched."""
        filename = "[720p] Title"
        elements = Elements()

        assert keyword_manager.peek(filename, TokenRange(6, 6), elements) == []
        assert len(elements) == 0

    def test_overlapping_entries_are_skipped(self):
        """A phrase overlapping an earlier hit is skipped."""
        manager = KeywordManager({
            "peek_entries": [
                {"category": "audio_term", "words": ["Dual Audio"]},
                {"category": "language", "words": ["Audio"]},
            ],
        })
        elements = Elements()

        ranges = manager.peek("Dual Audio", TokenRange(0, 10), elements)

        assert ranges == [TokenRange(0, 10)]
        assert elements.empty(ElementCategory.LANGUAGE)


class TestDictionaryLoading:

    def test_missing_dictionary(self, caplog):
        """A missing dictionary logs a warning and returns None."""
        assert DictionaryLoader.load_dictionary("missing.json", use_cache=False) is None
        assert "Failed to load dictionary" in caplog.text

    def test_bundled_dictionary_sections(self):
        """Test loading single sections of the bundled dictionary."""
        groups = DictionaryLoader.get_section("keyword_groups")
        assert groups
        assert all("category" in group and group["words"] for group in groups)
        assert DictionaryLoader.get_section("no_such_section") is None

    def test_cache(self):
        """Test that loads are cached until the cache is cleared."""
        DictionaryLoader.clear_cache()
        first = DictionaryLoader.load_dictionary()
        assert DictionaryLoader.load_dictionary() is first
        DictionaryLoader.clear_cache()
        assert DictionaryLoader.load_dictionary() is not first

    def test_empty_tables_without_dictionary(self, caplog, monkeypatch):
        """Without a dictionary the manager has empty tables."""
        monkeypatch.setattr(DictionaryLoader, "load_dictionary", classmethod(lambda cls, *a, **k: None))
        manager = KeywordManager()

        assert manager.find("FLAC") is None
        assert "keyword tables are empty" in caplog.text
