#!/usr/bin/env python3
"""
Shared predicates and element assembly used by the parser passes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from .element import ElementCategory
from .string_helper import (
    DASHES_WITH_SPACE,
    is_hexadecimal_string,
    is_numeric_char,
    is_numeric_string,
    trim,
)
from .token import SearchResult, Token, TokenCategory, TokenFlag, find_next_token, find_prev_token

if TYPE_CHECKING:
    from .parser import Parser

ORDINALS: Dict[str, str] = {
    "1st": "1", "First": "1",
    "2nd": "2", "Second": "2",
    "3rd": "3", "Third": "3",
    "4th": "4", "Fourth": "4",
    "5th": "5", "Fifth": "5",
    "6th": "6", "Sixth": "6",
    "7th": "7", "Seventh": "7",
    "8th": "8", "Eighth": "8",
    "9th": "9", "Ninth": "9",
}

SEARCHABLE_CATEGORIES = frozenset({
    ElementCategory.ANIME_SEASON_PREFIX,
    ElementCategory.ANIME_TYPE,
    ElementCategory.AUDIO_TERM,
    ElementCategory.DEVICE_COMPATIBILITY,
    ElementCategory.EPISODE_PREFIX,
    ElementCategory.FILE_CHECKSUM,
    ElementCategory.LANGUAGE,
    ElementCategory.OTHER,
    ElementCategory.RELEASE_GROUP,
    ElementCategory.RELEASE_INFORMATION,
    ElementCategory.RELEASE_VERSION,
    ElementCategory.SOURCE,
    ElementCategory.SUBTITLES,
    ElementCategory.VIDEO_RESOLUTION,
    ElementCategory.VIDEO_TERM,
    ElementCategory.VOLUME_PREFIX,
})

# Categories that may occur more than once
REPEATABLE_CATEGORIES = frozenset({
    ElementCategory.ANIME_SEASON,
    ElementCategory.ANIME_TYPE,
    ElementCategory.AUDIO_TERM,
    ElementCategory.DEVICE_COMPATIBILITY,
    ElementCategory.EPISODE_NUMBER,
    ElementCategory.LANGUAGE,
    ElementCategory.OTHER,
    ElementCategory.RELEASE_INFORMATION,
    ElementCategory.SOURCE,
    ElementCategory.VIDEO_TERM,
})

_RESOLUTION_SEPARATORS = "xX×"
_MIN_WIDTH_SIZE = 3
_MIN_HEIGHT_SIZE = 3


def is_crc32(text: str) -> bool:
    return len(text) == 8 and is_hexadecimal_string(text)


def get_number_from_ordinal(text: str) -> str:
    """Map "2nd" or "Second" to "2"; anything else to an empty string."""
    return ORDINALS.get(text, "")


def is_resolution(text: str) -> bool:
    """
    Check for a video resolution such as "1920x1080" or "720p".

    Args:
        text: Candidate word

    Returns:
        True for WIDTHxHEIGHT (x, X or the multiplication sign) with at least
        three digits on each side, or for three or more digits followed by p/P
    """
    if not text:
        return False

    if len(text) >= _MIN_WIDTH_SIZE + 1 + _MIN_HEIGHT_SIZE:
        pos = next((i for i, c in enumerate(text) if c in _RESOLUTION_SEPARATORS), -1)
        if _MIN_WIDTH_SIZE <= pos <= len(text) - (_MIN_HEIGHT_SIZE + 1):
            return all(is_numeric_char(c) for i, c in enumerate(text) if i != pos)
    elif len(text) >= _MIN_HEIGHT_SIZE + 1:
        if text[-1] in "pP":
            return is_numeric_string(text[:-1])

    return False


def is_element_category_searchable(category: ElementCategory) -> bool:
    return category in SEARCHABLE_CATEGORIES


def is_element_category_singular(category: ElementCategory) -> bool:
    return category not in REPEATABLE_CATEGORIES


class ParserHelper:
    """Token-level helpers bound to a running parser."""

    def __init__(self, parser: "Parser"):
        self.parser = parser

    @property
    def tokens(self) -> List[Token]:
        return self.parser.tokens

    def is_token_isolated(self, position: int) -> bool:
        """True if the nearest non-delimiter tokens on both sides are brackets."""
        prev_token = find_prev_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
        if not prev_token.is_category(TokenCategory.BRACKET):
            return False
        next_token = find_next_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
        return next_token.is_category(TokenCategory.BRACKET)

    def check_and_set_anime_season_keyword(self, token: Token, position: int) -> bool:
        """
        Resolve a season keyword from its neighbours.

        "2nd Season" takes the number from the ordinal before the keyword,
        "Season 2" from the number after it. Both tokens are claimed.
        """
        def set_anime_season(first: Token, second: Token, content: str) -> None:
            self.parser.elements.add(ElementCategory.ANIME_SEASON, content)
            first.category = TokenCategory.IDENTIFIER
            second.category = TokenCategory.IDENTIFIER

        prev_token = find_prev_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
        if prev_token:
            number = get_number_from_ordinal(prev_token.token.content)
            if number:
                set_anime_season(prev_token.token, token, number)
                return True

        next_token = find_next_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
        if next_token and is_numeric_string(next_token.token.content):
            set_anime_season(token, next_token.token, next_token.token.content)
            return True

        return False

    def check_extent_keyword(self, category: ElementCategory, position: int, token: Token) -> bool:
        """
        Resolve a number following an episode or volume prefix ("Ep 01", "Vol. 4").

        Args:
            category: EPISODE_NUMBER or VOLUME_NUMBER
            position: Index of the prefix token
            token: The prefix token, claimed on success

        Returns:
            True if the next non-delimiter token starts with a digit
        """
        next_token = find_next_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
        if not next_token.is_category(TokenCategory.UNKNOWN):
            return False
        content = next_token.token.content
        if not is_numeric_char(content[:1]):
            return False

        number = self.parser.number
        if category == ElementCategory.EPISODE_NUMBER:
            if not number.match_episode_patterns(content, next_token.token):
                number.set_episode_number(content, next_token.token, False)
        elif category == ElementCategory.VOLUME_NUMBER:
            if not number.match_volume_patterns(content, next_token.token):
                number.set_volume_number(content, next_token.token, False)

        token.category = TokenCategory.IDENTIFIER
        return True

    def build_element(self, category: ElementCategory, keep_delimiters: bool, begin: int, end: int) -> None:
        """
        Concatenate tokens ``[begin, end)`` into an element value.

        Unknown tokens are claimed as identifiers. Without ``keep_delimiters``
        an interior delimiter becomes a space (commas and ampersands are kept
        as is) and delimiters at either edge are dropped. Leading and trailing
        dashes and spaces are trimmed; an empty value adds nothing.
        """
        span = self.tokens[begin:end]
        parts = []

        for i, token in enumerate(span):
            if token.category == TokenCategory.UNKNOWN:
                parts.append(token.content)
                token.category = TokenCategory.IDENTIFIER
            elif token.category == TokenCategory.BRACKET:
                parts.append(token.content)
            elif token.category == TokenCategory.DELIMITER:
                delimiter = token.content[:1]
                if keep_delimiters:
                    parts.append(delimiter)
                elif 0 < i < len(span) - 1:
                    parts.append(delimiter if delimiter in (",", "&") else " ")

        value = trim("".join(parts), DASHES_WITH_SPACE)
        if value:
            self.parser.elements.add(category, value)


def position_of(result: SearchResult, default: int) -> int:
    return result.position if result else default
