#!/usr/bin/env python3
"""
Episode and volume number resolution.

Candidates are the unknown tokens that contain a digit. Strategies are tried
from most to least specific and the first that succeeds wins:

1. explicit patterns: prefixes ("EP.1", "Vol.1"), "01 of 24", and the
   structural forms "01v2", "01-02", "S01E03", "ED1", "07.5", "4a", "#01",
   "1話"
2. equivalent numbers: "01 (176)"
3. separated numbers: "Title - 08"
4. isolated numbers: "[12]"
5. the last plausible number
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, List

from .element import ElementCategory
from .string_helper import (
    index_of_first_digit,
    is_dash_character,
    is_numeric_char,
    is_numeric_string,
    string_to_int,
    trim,
)
from .token import SearchResult, Token, TokenCategory, TokenFlag, find_next_token, find_prev_token

if TYPE_CHECKING:
    from .parser import Parser

logger = logging.getLogger(__name__)

ANIME_YEAR_MIN = 1900
ANIME_YEAR_MAX = 2050
EPISODE_NUMBER_MAX = ANIME_YEAR_MIN - 1
VOLUME_NUMBER_MAX = 20

_EPISODE_SINGLE = re.compile(r"(\d{1,3})[vV](\d)")
_EPISODE_MULTI = re.compile(r"(\d{1,3})(?:[vV](\d))?[-~&+](\d{1,3})(?:[vV](\d))?")
_SEASON_AND_EPISODE = re.compile(
    r"S?(\d{1,2})(?:-S?(\d{1,2}))?(?:x|[ ._\-x]?E)(\d{1,3})(?:-E?(\d{1,3}))?",
    re.IGNORECASE,
)
_FRACTIONAL_EPISODE = re.compile(r"\d+\.5")
_NUMBER_SIGN = re.compile(r"#(\d{1,3})(?:[-~&+](\d{1,3}))?(?:[vV](\d))?")
_JAPANESE_COUNTER = re.compile(r"(\d{1,3})話")
_VOLUME_SINGLE = re.compile(r"(\d{1,2})[vV](\d)")
_VOLUME_MULTI = re.compile(r"(\d{1,2})[-~&+](\d{1,2})(?:[vV](\d))?")

_PARTIAL_SUFFIXES = "abcABC"

# separator -> whether the number after it is an episode too
_NUMBER_SEPARATORS = (("&", True), ("of", False))


class ParserNumber:
    """Number resolver bound to a running parser."""

    def __init__(self, parser: "Parser"):
        self.parser = parser

    @property
    def tokens(self) -> List[Token]:
        return self.parser.tokens

    @property
    def elements(self):
        return self.parser.elements

    # Validation and setters

    @staticmethod
    def is_valid_episode_number(number: str) -> bool:
        return string_to_int(number) <= EPISODE_NUMBER_MAX

    @staticmethod
    def is_valid_volume_number(number: str) -> bool:
        return string_to_int(number) <= VOLUME_NUMBER_MAX

    def set_episode_number(self, number: str, token: Token, validate: bool) -> bool:
        """
        Record an episode number and claim its token.

        Once an episode keyword produced a number, a second number is treated
        as the alternative one: the larger of the two becomes
        EPISODE_NUMBER_ALT and an equal number is not added again.

        Returns:
            False if validation failed or the number was a duplicate
        """
        if validate and not self.is_valid_episode_number(number):
            return False

        token.category = TokenCategory.IDENTIFIER
        category = ElementCategory.EPISODE_NUMBER

        if self.parser.found_episode_keywords:
            current = self.elements.get(ElementCategory.EPISODE_NUMBER)
            if current is not None:
                comparison = string_to_int(number) - string_to_int(current)
                if comparison > 0:
                    category = ElementCategory.EPISODE_NUMBER_ALT
                elif comparison < 0:
                    self.elements.erase(ElementCategory.EPISODE_NUMBER)
                    self.elements.add(ElementCategory.EPISODE_NUMBER_ALT, current)
                else:
                    return False

        self.elements.add(category, number)
        return True

    def set_alternative_episode_number(self, number: str, token: Token) -> bool:
        self.elements.add(ElementCategory.EPISODE_NUMBER_ALT, number)
        token.category = TokenCategory.IDENTIFIER
        return True

    def set_volume_number(self, number: str, token: Token, validate: bool) -> bool:
        if validate and not self.is_valid_volume_number(number):
            return False

        self.elements.add(ElementCategory.VOLUME_NUMBER, number)
        token.category = TokenCategory.IDENTIFIER
        return True

    # Prefixes and separators

    def number_comes_after_prefix(self, category: ElementCategory, token: Token) -> bool:
        """Handle a prefix glued to its number, e.g. "EP.1", "Vol.1", "E05"."""
        number_begin = index_of_first_digit(token.content)
        if number_begin <= 0:
            return False
        prefix = token.content[:number_begin]
        if not self.parser.keyword_manager.contains(category, prefix):
            return False

        number = token.content[number_begin:]
        if category == ElementCategory.EPISODE_PREFIX:
            if not self.match_episode_patterns(number, token):
                self.set_episode_number(number, token, False)
            return True
        if category == ElementCategory.VOLUME_PREFIX:
            if not self.match_volume_patterns(number, token):
                self.set_volume_number(number, token, False)
            return True
        return False

    def number_comes_before_another_number(self, result: SearchResult) -> bool:
        """Handle "8 & 10" (both episodes) and "01 of 24" (first only)."""
        separator = find_next_token(self.tokens, result, TokenFlag.NOT_DELIMITER)
        if not separator:
            return False

        for text, both in _NUMBER_SEPARATORS:
            if separator.token.content.lower() != text:
                continue
            other = find_next_token(self.tokens, separator, TokenFlag.NOT_DELIMITER)
            if other and is_numeric_string(other.token.content):
                self.set_episode_number(result.token.content, result.token, False)
                if both:
                    self.set_episode_number(other.token.content, other.token, False)
                separator.token.category = TokenCategory.IDENTIFIER
                other.token.category = TokenCategory.IDENTIFIER
                return True

        return False

    # Structural patterns

    def match_episode_patterns(self, word: str, token: Token) -> bool:
        """
        Try every structural episode pattern against ``word``.

        Purely numeric words never match; the caller decides what a bare
        number means.
        """
        if is_numeric_string(word):
            return False

        word = trim(word, " -")
        if not word:
            return False

        numeric_front = is_numeric_char(word[0])
        numeric_back = is_numeric_char(word[-1])

        if numeric_front and numeric_back:
            if self._match_single_episode(word, token):
                return True
            if self._match_multi_episode(word, token):
                return True
        if numeric_back:
            if self._match_season_and_episode(word, token):
                return True
        if not numeric_front:
            if self._match_type_and_episode(word, token):
                return True
        if numeric_front and numeric_back:
            if self._match_fractional_episode(word, token):
                return True
        if numeric_front and not numeric_back:
            if self._match_partial_episode(word, token):
                return True
        if numeric_back:
            if self._match_number_sign(word, token):
                return True
        if numeric_front:
            if self._match_japanese_counter(word, token):
                return True

        return False

    def _match_single_episode(self, word: str, token: Token) -> bool:
        # "01v2"
        match = _EPISODE_SINGLE.fullmatch(word)
        if not match:
            return False
        self.set_episode_number(match.group(1), token, False)
        self.elements.add(ElementCategory.RELEASE_VERSION, match.group(2))
        return True

    def _match_multi_episode(self, word: str, token: Token) -> bool:
        # "01-02", "03-05v2"
        match = _EPISODE_MULTI.fullmatch(word)
        if not match:
            return False
        lower, upper = match.group(1), match.group(3)
        if string_to_int(lower) >= string_to_int(upper):
            return False
        if not self.set_episode_number(lower, token, True):
            return False
        self.set_episode_number(upper, token, False)
        if match.group(2):
            self.elements.add(ElementCategory.RELEASE_VERSION, match.group(2))
        if match.group(4):
            self.elements.add(ElementCategory.RELEASE_VERSION, match.group(4))
        return True

    def _match_season_and_episode(self, word: str, token: Token) -> bool:
        # "2x01", "S01E03", "S01-02xE001-150"
        match = _SEASON_AND_EPISODE.fullmatch(word)
        if not match or string_to_int(match.group(1)) == 0:
            return False
        self.elements.add(ElementCategory.ANIME_SEASON, match.group(1))
        if match.group(2):
            self.elements.add(ElementCategory.ANIME_SEASON, match.group(2))
        self.set_episode_number(match.group(3), token, False)
        if match.group(4):
            self.set_episode_number(match.group(4), token, False)
        return True

    def _match_type_and_episode(self, word: str, token: Token) -> bool:
        # "ED1", "OP4a", "OVA2"; the whole token is claimed
        number_begin = index_of_first_digit(word)
        if number_begin <= 0:
            return False
        prefix = word[:number_begin]
        if not self.parser.keyword_manager.contains(ElementCategory.ANIME_TYPE, prefix):
            return False

        self.elements.add(ElementCategory.ANIME_TYPE, prefix)
        number = word[number_begin:]
        return self.match_episode_patterns(number, token) or self.set_episode_number(number, token, True)

    def _match_fractional_episode(self, word: str, token: Token) -> bool:
        # "07.5"
        if not _FRACTIONAL_EPISODE.fullmatch(word):
            return False
        return self.set_episode_number(word, token, True)

    def _match_partial_episode(self, word: str, token: Token) -> bool:
        # "4a", "111C"
        suffix_begin = next((i for i, c in enumerate(word) if not is_numeric_char(c)), len(word))
        suffix = word[suffix_begin:]
        if len(suffix) != 1 or suffix not in _PARTIAL_SUFFIXES:
            return False
        return self.set_episode_number(word, token, True)

    def _match_number_sign(self, word: str, token: Token) -> bool:
        # "#01", "#02-03v2"
        match = _NUMBER_SIGN.fullmatch(word)
        if not match:
            return False
        if not self.set_episode_number(match.group(1), token, True):
            return False
        if match.group(2):
            self.set_episode_number(match.group(2), token, False)
        if match.group(3):
            self.elements.add(ElementCategory.RELEASE_VERSION, match.group(3))
        return True

    def _match_japanese_counter(self, word: str, token: Token) -> bool:
        # "第01話" loses its prefix to the keyword pass, leaving "01話"
        match = _JAPANESE_COUNTER.fullmatch(word)
        if not match:
            return False
        self.set_episode_number(match.group(1), token, False)
        return True

    def match_volume_patterns(self, word: str, token: Token) -> bool:
        if is_numeric_string(word):
            return False

        word = trim(word, " -")
        if not word or not (is_numeric_char(word[0]) and is_numeric_char(word[-1])):
            return False

        # "01v2"
        match = _VOLUME_SINGLE.fullmatch(word)
        if match:
            self.set_volume_number(match.group(1), token, False)
            self.elements.add(ElementCategory.RELEASE_VERSION, match.group(2))
            return True

        # "01-02", "03-05v2"
        match = _VOLUME_MULTI.fullmatch(word)
        if match:
            lower, upper = match.group(1), match.group(2)
            if string_to_int(lower) < string_to_int(upper) and self.set_volume_number(lower, token, True):
                self.set_volume_number(upper, token, False)
                if match.group(3):
                    self.elements.add(ElementCategory.RELEASE_VERSION, match.group(3))
                return True

        return False

    # Search strategies

    def search_for_episode_patterns(self, candidates: List[SearchResult]) -> bool:
        for result in candidates:
            token = result.token
            if not is_numeric_char(token.content[:1]):
                # "EP.1", "Vol.1"
                if self.number_comes_after_prefix(ElementCategory.EPISODE_PREFIX, token):
                    return True
                if self.number_comes_after_prefix(ElementCategory.VOLUME_PREFIX, token):
                    continue
            else:
                # "8 & 10", "01 of 24"
                if self.number_comes_before_another_number(result):
                    return True

            if self.match_episode_patterns(token.content, token):
                return True

        return False

    def search_for_equivalent_numbers(self, candidates: List[SearchResult]) -> bool:
        """
        Handle "01 (176)" and "29 (04)".

        The number outside the brackets is the episode number, the bracketed
        one the alternative number.
        """
        helper = self.parser.helper
        for result in candidates:
            if helper.is_token_isolated(result.position) or not self.is_valid_episode_number(result.token.content):
                continue

            next_token = find_next_token(self.tokens, result, TokenFlag.NOT_DELIMITER)
            if not next_token.is_category(TokenCategory.BRACKET):
                continue
            next_token = find_next_token(self.tokens, next_token, TokenFlag.ENCLOSED | TokenFlag.NOT_DELIMITER)
            if not next_token.is_category(TokenCategory.UNKNOWN):
                continue

            content = next_token.token.content
            if (not helper.is_token_isolated(next_token.position)
                    or not is_numeric_string(content)
                    or not self.is_valid_episode_number(content)):
                continue

            self.set_episode_number(result.token.content, result.token, False)
            self.set_alternative_episode_number(content, next_token.token)
            return True

        return False

    def _find_separating_dash(self, position: int):
        prev_token = find_prev_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
        if prev_token.is_category(TokenCategory.UNKNOWN) and is_dash_character(prev_token.token.content):
            return prev_token.token
        # "-" configured as a delimiter
        start = prev_token.position + 1 if prev_token else 0
        for token in self.tokens[start:position]:
            if is_dash_character(token.content):
                return token
        return None

    def search_for_separated_numbers(self, candidates: List[SearchResult]) -> bool:
        """Handle "Title - 08": a number after a standalone dash."""
        for result in candidates:
            dash = self._find_separating_dash(result.position)
            if dash is None:
                continue
            if self.set_episode_number(result.token.content, result.token, True):
                if dash.category == TokenCategory.UNKNOWN:
                    dash.category = TokenCategory.IDENTIFIER
                return True

        return False

    def search_for_isolated_numbers(self, candidates: List[SearchResult]) -> bool:
        """Handle "[12]": an enclosed number with brackets on both sides."""
        for result in candidates:
            if not result.token.enclosed or not self.parser.helper.is_token_isolated(result.position):
                continue
            if self.set_episode_number(result.token.content, result.token, True):
                return True
        return False

    def search_for_last_number(self, candidates: List[SearchResult]) -> bool:
        for result in reversed(candidates):
            position, token = result.position, result.token

            # The episode number comes after the title
            if position == 0:
                continue
            if token.enclosed:
                continue
            # First unenclosed, non-delimiter token
            if all(t.enclosed or t.category == TokenCategory.DELIMITER for t in self.tokens[:position]):
                continue

            prev_token = find_prev_token(self.tokens, position, TokenFlag.NOT_DELIMITER)
            if prev_token.is_category(TokenCategory.UNKNOWN):
                if prev_token.token.content.lower() in ("movie", "part"):
                    continue

            if self.set_episode_number(token.content, token, True):
                return True

        return False

    def search_for_episode_number(self) -> None:
        """Run the strategies in order; the first success wins."""
        candidates = [
            SearchResult(token, i)
            for i, token in enumerate(self.tokens)
            if token.category == TokenCategory.UNKNOWN and index_of_first_digit(token.content) != -1
        ]
        if not candidates:
            return

        self.parser.found_episode_keywords = not self.elements.empty(ElementCategory.EPISODE_NUMBER)

        if self.search_for_episode_patterns(candidates):
            logger.debug("Episode number from explicit pattern")
            return

        # Already set by an episode keyword
        if not self.elements.empty(ElementCategory.EPISODE_NUMBER):
            return

        candidates = [result for result in candidates if is_numeric_string(result.token.content)]

        for strategy in (
            self.search_for_equivalent_numbers,
            self.search_for_separated_numbers,
            self.search_for_isolated_numbers,
            self.search_for_last_number,
        ):
            if strategy(candidates):
                logger.debug("Episode number from %s", strategy.__name__)
                return
