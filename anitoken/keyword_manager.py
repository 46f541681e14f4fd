#!/usr/bin/env python3
"""
Keyword manager: the read-only table of known release terms.

Keywords are loaded from ``dictionaries/keywords.json``. Each group names an
element category, optional flags and a list of words:

- identifiable: a match marks its token as an identifier
- searchable: the keyword pass may match it at all
- valid: the word may stand on its own (``E`` or ``ED`` only count when
  followed by a number)

The first registration of a word wins. File extensions live in their own
table so that ``AVI`` can be both a video term and an extension.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .dictionary_loader import DictionaryLoader
from .element import ElementCategory, Elements
from .string_helper import is_alphanumeric_char
from .token import TokenRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordOptions:
    identifiable: bool = True
    searchable: bool = True
    valid: bool = True


@dataclass(frozen=True)
class Keyword:
    category: ElementCategory
    options: KeywordOptions


class KeywordManager:
    """Case-insensitive keyword lookup plus peek-phrase detection."""

    def __init__(self, dictionary: Optional[Dict[str, Any]] = None):
        """
        Args:
            dictionary: Parsed keyword dictionary; the bundled one is loaded
                when omitted
        """
        self._keys: Dict[str, Keyword] = {}
        self._file_extensions: Dict[str, Keyword] = {}
        self._peek_entries: List[Tuple[ElementCategory, List[str]]] = []

        if dictionary is None:
            dictionary = DictionaryLoader.load_dictionary()
        if dictionary is None:
            logger.warning("No keyword dictionary available; keyword tables are empty")
            return

        for group in dictionary.get("keyword_groups", []):
            self._add_group(self._keys, ElementCategory(group["category"]), group)
        for group in dictionary.get("file_extensions", []):
            self._add_group(self._file_extensions, ElementCategory.FILE_EXTENSION, group)
        for entry in dictionary.get("peek_entries", []):
            self._peek_entries.append((ElementCategory(entry["category"]), list(entry.get("words", []))))

        logger.debug(
            "Keyword manager ready: %s keywords, %s extensions, %s peek groups",
            len(self._keys), len(self._file_extensions), len(self._peek_entries),
        )

    def _add_group(self, table: Dict[str, Keyword], category: ElementCategory, group: Dict[str, Any]) -> None:
        options = KeywordOptions(**group.get("options", {}))
        keyword = Keyword(category, options)
        for word in group.get("words", []):
            if not word:
                continue
            table.setdefault(self.normalize(word), keyword)

    @staticmethod
    def normalize(word: str) -> str:
        return word.upper()

    def find(self, word: str, category: ElementCategory = ElementCategory.UNKNOWN) -> Optional[Keyword]:
        """
        Look up a word.

        Args:
            word: Raw word; normalized before lookup
            category: Required category, or UNKNOWN for any

        Returns:
            The registered Keyword, or None if the word is unknown or was
            registered under a different category
        """
        table = self._file_extensions if category == ElementCategory.FILE_EXTENSION else self._keys
        keyword = table.get(self.normalize(word))
        if keyword is None:
            return None
        if category != ElementCategory.UNKNOWN and keyword.category != category:
            return None
        return keyword

    def contains(self, category: ElementCategory, word: str) -> bool:
        return self.find(word, category) is not None

    def peek(self, filename: str, token_range: TokenRange, elements: Elements) -> List[TokenRange]:
        """
        Find peek phrases inside a span of the filename.

        Matching is case-insensitive and whole-word. Each hit appends an
        element with the matched text; hits overlapping an earlier hit are
        skipped.

        Returns:
            Matched ranges sorted by offset
        """
        start = max(token_range.offset, 0)
        end = min(token_range.end, len(filename))
        found: List[TokenRange] = []

        for category, words in self._peek_entries:
            for word in words:
                offset = self._find_whole_word(filename, word.lower(), start, end)
                if offset < 0:
                    continue
                match = TokenRange(offset, len(word))
                if any(match.overlaps(other) for other in found):
                    continue
                found.append(match)
                elements.add(category, filename[match.offset:match.end])

        found.sort(key=lambda r: r.offset)
        return found

    @staticmethod
    def _find_whole_word(filename: str, needle: str, start: int, end: int) -> int:
        size = len(needle)
        if not size:
            return -1
        for position in range(start, end - size + 1):
            if filename[position:position + size].lower() != needle:
                continue
            after = position + size
            before_ok = position == 0 or not is_alphanumeric_char(filename[position - 1])
            after_ok = after >= len(filename) or not is_alphanumeric_char(filename[after])
            if before_ok and after_ok:
                return position
        return -1

    def words(self, category: Optional[ElementCategory] = None) -> Iterable[str]:
        """Registered words, optionally restricted to one category."""
        table = self._file_extensions if category == ElementCategory.FILE_EXTENSION else self._keys
        return [word for word, keyword in table.items() if category is None or keyword.category == category]


_default_manager: Optional[KeywordManager] = None


def get_keyword_manager() -> KeywordManager:
    """Shared manager built from the bundled dictionary."""
    global _default_manager
    if _default_manager is None:
        _default_manager = KeywordManager()
    return _default_manager
