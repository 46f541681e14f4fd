#!/usr/bin/env python3
"""
Multi-pass parser that classifies tokens and assembles elements.

Passes run in a fixed order, each one claiming the tokens it understands so
that later passes only see what is left:

keywords -> isolated numbers -> episode number -> anime title ->
release group -> episode title -> validation
"""

import logging
from typing import List, Optional

from .element import ElementCategory, Elements
from .keyword_manager import KeywordManager, get_keyword_manager
from .options import Options
from .parser_helper import (
    ParserHelper,
    is_crc32,
    is_element_category_searchable,
    is_element_category_singular,
    is_resolution,
    position_of,
)
from .parser_number import ANIME_YEAR_MAX, ANIME_YEAR_MIN, ParserNumber
from .string_helper import is_dash_character, is_mostly_latin_string, is_numeric_string, string_to_int, trim
from .token import (
    SearchResult,
    Token,
    TokenCategory,
    TokenFlag,
    find_prev_token,
    find_token,
)

logger = logging.getLogger(__name__)

_BARE_RESOLUTIONS = (480, 720, 1080)


class Parser:
    """Classifies the tokens of one filename into elements."""

    def __init__(
        self,
        tokens: List[Token],
        elements: Elements,
        options: Optional[Options] = None,
        keyword_manager: Optional[KeywordManager] = None,
    ):
        self.tokens = tokens
        self.elements = elements
        self.options = options or Options()
        self.keyword_manager = keyword_manager or get_keyword_manager()
        self.found_episode_keywords = False
        self.helper = ParserHelper(self)
        self.number = ParserNumber(self)

    def parse(self) -> bool:
        """
        Run every pass over the token sequence.

        Returns:
            True if an anime title was found
        """
        self.search_for_keywords()
        self.search_for_isolated_numbers()

        if self.options.parse_episode_number:
            self.number.search_for_episode_number()

        self.search_for_anime_title()

        if self.options.parse_release_group and self.elements.empty(ElementCategory.RELEASE_GROUP):
            self.search_for_release_group()

        if self.options.parse_episode_title and not self.elements.empty(ElementCategory.EPISODE_NUMBER):
            self.search_for_episode_title()

        self.validate_elements()
        return not self.elements.empty(ElementCategory.ANIME_TITLE)

    def search_for_keywords(self) -> None:
        for i, token in enumerate(self.tokens):
            if token.category != TokenCategory.UNKNOWN:
                continue

            word = trim(token.content, " -")
            if not word:
                continue
            # Numbers are only interesting as CRC32 candidates
            if len(word) != 8 and is_numeric_string(word):
                continue

            category = ElementCategory.UNKNOWN
            identifiable = True
            keyword = self.keyword_manager.find(word)

            if keyword is not None:
                category = keyword.category
                identifiable = keyword.options.identifiable

                if not self.options.parse_release_group and category == ElementCategory.RELEASE_GROUP:
                    continue
                if not is_element_category_searchable(category) or not keyword.options.searchable:
                    continue
                if is_element_category_singular(category) and not self.elements.empty(category):
                    continue

                if category == ElementCategory.ANIME_SEASON_PREFIX:
                    self.helper.check_and_set_anime_season_keyword(token, i)
                    continue
                if category == ElementCategory.EPISODE_PREFIX:
                    if keyword.options.valid:
                        self.helper.check_extent_keyword(ElementCategory.EPISODE_NUMBER, i, token)
                    continue
                if category == ElementCategory.RELEASE_VERSION:
                    word = word[1:]
                elif category == ElementCategory.VOLUME_PREFIX:
                    self.helper.check_extent_keyword(ElementCategory.VOLUME_NUMBER, i, token)
                    continue
            elif self.elements.empty(ElementCategory.FILE_CHECKSUM) and is_crc32(word):
                category = ElementCategory.FILE_CHECKSUM
            elif self.elements.empty(ElementCategory.VIDEO_RESOLUTION) and is_resolution(word):
                category = ElementCategory.VIDEO_RESOLUTION

            if category != ElementCategory.UNKNOWN:
                self.elements.add(category, word)
                if identifiable:
                    token.category = TokenCategory.IDENTIFIER

    def search_for_isolated_numbers(self) -> None:
        """Claim bracketed years and bare resolutions such as "(2006)" or "[720]"."""
        for i, token in enumerate(self.tokens):
            if (token.category != TokenCategory.UNKNOWN
                    or not is_numeric_string(token.content)
                    or not self.helper.is_token_isolated(i)):
                continue

            number = string_to_int(token.content)

            if ANIME_YEAR_MIN <= number <= ANIME_YEAR_MAX:
                if self.elements.empty(ElementCategory.ANIME_YEAR):
                    self.elements.add(ElementCategory.ANIME_YEAR, token.content)
                    token.category = TokenCategory.IDENTIFIER
                    continue

            # More likely a resolution without the "p" than an episode number
            if number in _BARE_RESOLUTIONS:
                if self.elements.empty(ElementCategory.VIDEO_RESOLUTION):
                    self.elements.add(ElementCategory.VIDEO_RESOLUTION, token.content)
                    token.category = TokenCategory.IDENTIFIER

    def _find_enclosed_title_start(self) -> SearchResult:
        # The first group is assumed to be the release group; groups of
        # mostly non-Latin text are skipped as well
        skipped_previous_group = False
        token_begin = find_token(self.tokens, TokenFlag.UNKNOWN, 0)

        while token_begin:
            if is_mostly_latin_string(token_begin.token.content) and skipped_previous_group:
                break
            token_begin = find_token(self.tokens, TokenFlag.BRACKET, token_begin)
            token_begin = find_token(self.tokens, TokenFlag.UNKNOWN, token_begin)
            skipped_previous_group = True

        return token_begin

    def search_for_anime_title(self) -> None:
        enclosed_title = False

        token_begin = find_token(self.tokens, TokenFlag.NOT_ENCLOSED | TokenFlag.UNKNOWN)
        if not token_begin:
            enclosed_title = True
            token_begin = self._find_enclosed_title_start()
        if not token_begin:
            return

        end_flags = TokenFlag.IDENTIFIER | (TokenFlag.BRACKET if enclosed_title else TokenFlag.NONE)
        token_end = find_token(self.tokens, end_flags, token_begin)
        end = position_of(token_end, len(self.tokens))

        if not enclosed_title:
            # Stop at an opening bracket that has no matching pair in the interval
            last_bracket = end
            bracket_open = False
            for i in range(token_begin.position, end):
                if self.tokens[i].category == TokenCategory.BRACKET:
                    last_bracket = i
                    bracket_open = not bracket_open
            if bracket_open:
                end = last_bracket

            # "Anime Title [Fansub]": drop trailing groups, but keep
            # parentheses such as "(TV)"
            token = find_prev_token(self.tokens, end, TokenFlag.NOT_DELIMITER)
            while token.is_category(TokenCategory.BRACKET) and token.token.content[0] != ")":
                token = find_prev_token(self.tokens, token, TokenFlag.BRACKET)
                if token:
                    end = token.position
                    token = find_prev_token(self.tokens, end, TokenFlag.NOT_DELIMITER)

        end = max(end, token_begin.position)
        self.helper.build_element(ElementCategory.ANIME_TITLE, False, token_begin.position, end)

    def search_for_release_group(self) -> None:
        """The first enclosed group that starts a bracket and runs to its end."""
        token_begin = find_token(self.tokens, TokenFlag.ENCLOSED | TokenFlag.UNKNOWN, 0)

        while token_begin:
            token_end = find_token(self.tokens, TokenFlag.BRACKET | TokenFlag.IDENTIFIER, token_begin)
            if token_end.is_category(TokenCategory.BRACKET):
                prev_token = find_prev_token(self.tokens, token_begin, TokenFlag.NOT_DELIMITER)
                if not prev_token or prev_token.is_category(TokenCategory.BRACKET):
                    self.helper.build_element(
                        ElementCategory.RELEASE_GROUP, True, token_begin.position, token_end.position
                    )
                    return

            token_begin = find_token(self.tokens, TokenFlag.ENCLOSED | TokenFlag.UNKNOWN, token_end)

    def search_for_episode_title(self) -> None:
        token_begin = find_token(self.tokens, TokenFlag.NOT_ENCLOSED | TokenFlag.UNKNOWN, 0)

        while token_begin:
            token_end = find_token(self.tokens, TokenFlag.BRACKET | TokenFlag.IDENTIFIER, token_begin)
            end = position_of(token_end, len(self.tokens))

            # A lone dash is not a title
            if end - token_begin.position <= 2 and is_dash_character(token_begin.token.content):
                token_begin = find_token(self.tokens, TokenFlag.NOT_ENCLOSED | TokenFlag.UNKNOWN, token_end)
                continue

            self.helper.build_element(ElementCategory.EPISODE_TITLE, False, token_begin.position, end)
            return

    def validate_elements(self) -> None:
        """
        Resolve an anime type that also appears in the episode title.

        If the episode title is exactly the type ("OVA") the title goes; if the
        title merely contains a known type keyword the type goes.
        """
        if self.elements.empty(ElementCategory.ANIME_TYPE) or self.elements.empty(ElementCategory.EPISODE_TITLE):
            return

        episode_title = self.elements.get(ElementCategory.EPISODE_TITLE)

        i = 0
        while i < len(self.elements):
            element = self.elements[i]
            if element.category == ElementCategory.ANIME_TYPE and element.value in episode_title:
                if len(episode_title) == len(element.value):
                    self.elements.remove_all(ElementCategory.EPISODE_TITLE)
                elif self.keyword_manager.contains(ElementCategory.ANIME_TYPE, element.value):
                    self.elements.erase_at(i)
                    continue
            i += 1
