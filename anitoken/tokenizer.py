#!/usr/bin/env python3
"""
Tokenizer module for splitting an anime filename into typed tokens.

Three nested passes, outermost first:
1. bracket segmentation: bracket characters become BRACKET tokens and the
   text between them remembers whether it was enclosed
2. peek phrases ("Dual Audio", "1080p", ...) are carved out as IDENTIFIER
   tokens before any delimiter splitting can break them apart
3. the remaining gaps are split on the configured delimiters

After each delimiter split a repair pass re-joins words that were split by
mistake ("A.I", "01+02").
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .element import Elements
from .keyword_manager import KeywordManager, get_keyword_manager
from .options import Options
from .string_helper import is_alphanumeric_char, is_numeric_string, substring_with_check
from .token import (
    SearchResult,
    Token,
    TokenCategory,
    TokenFlag,
    TokenRange,
    find_next_token,
    find_prev_token,
    remove_invalid_tokens,
)

logger = logging.getLogger(__name__)

BRACKET_PAIRS = (
    ("(", ")"),
    ("[", "]"),
    ("{", "}"),
    ("「", "」"),  # corner bracket
    ("『", "』"),  # white corner bracket
    ("【", "】"),  # black lenticular bracket
    ("（", "）"),  # fullwidth parenthesis
)

_OPEN_TO_CLOSE = {opening: closing for opening, closing in BRACKET_PAIRS}


@dataclass
class TokenizationResult:
    """Result of tokenizing a filename."""
    filename: str
    tokens: List[Token] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.tokens) > 0

    def to_json(self) -> str:
        """Convert result to JSON format."""
        return json.dumps({
            "filename": self.filename,
            "success": self.success,
            "tokens": [
                {
                    "category": token.category.value,
                    "content": token.content,
                    "enclosed": token.enclosed,
                }
                for token in self.tokens
            ],
        }, ensure_ascii=False)


class Tokenizer:
    """Bracket-aware tokenizer for a single filename."""

    def __init__(
        self,
        filename: str,
        elements: Elements,
        options: Optional[Options] = None,
        keyword_manager: Optional[KeywordManager] = None,
    ):
        self.filename = filename or ""
        self.elements = elements
        self.options = options or Options()
        self.keyword_manager = keyword_manager or get_keyword_manager()
        self.tokens: List[Token] = []

    def tokenize(self) -> TokenizationResult:
        """
        Tokenize the filename.

        Returns:
            TokenizationResult; ``success`` is False when no token was produced
        """
        self.tokens = []
        self._tokenize_by_brackets()
        logger.debug("Tokenized %r into %s tokens", self.filename, len(self.tokens))
        return TokenizationResult(filename=self.filename, tokens=self.tokens)

    def _add_token(self, category: TokenCategory, enclosed: bool, token_range: TokenRange) -> None:
        content = substring_with_check(self.filename, token_range.offset, token_range.size)
        self.tokens.append(Token(category, content, enclosed))

    def _find_first_bracket(self, start: int) -> int:
        for i in range(start, len(self.filename)):
            if self.filename[i] in _OPEN_TO_CLOSE:
                return i
        return -1

    def _tokenize_by_brackets(self) -> None:
        text = self.filename
        is_bracket_open = False
        matching_bracket = ""
        i = 0

        while i < len(text):
            if not is_bracket_open:
                found = self._find_first_bracket(i)
            else:
                found = text.find(matching_bracket, i)

            end = len(text) if found == -1 else found
            if end > i:
                self._tokenize_by_preidentified(is_bracket_open, TokenRange(i, end - i))

            if found == -1:
                break

            if not is_bracket_open:
                matching_bracket = _OPEN_TO_CLOSE[text[found]]
            self._add_token(TokenCategory.BRACKET, True, TokenRange(found, 1))
            is_bracket_open = not is_bracket_open
            i = found + 1

    def _tokenize_by_preidentified(self, enclosed: bool, token_range: TokenRange) -> None:
        preidentified = self.keyword_manager.peek(self.filename, token_range, self.elements)

        offset = token_range.offset
        for identified in preidentified:
            if identified.offset > offset:
                self._tokenize_by_delimiters(enclosed, TokenRange(offset, identified.offset - offset))
            self._add_token(TokenCategory.IDENTIFIER, enclosed, identified)
            offset = identified.end

        if offset < token_range.end:
            self._tokenize_by_delimiters(enclosed, TokenRange(offset, token_range.end - offset))

    def _get_delimiters(self, token_range: TokenRange) -> str:
        delimiters = []
        for c in self.filename[token_range.offset:token_range.end]:
            if is_alphanumeric_char(c):
                continue
            if c in self.options.allowed_delimiters and c not in delimiters:
                delimiters.append(c)
        return "".join(delimiters)

    def _tokenize_by_delimiters(self, enclosed: bool, token_range: TokenRange) -> None:
        delimiters = self._get_delimiters(token_range)

        if not delimiters:
            self._add_token(TokenCategory.UNKNOWN, enclosed, token_range)
            return

        start = token_range.offset
        for i in range(token_range.offset, token_range.end):
            if self.filename[i] not in delimiters:
                continue
            if i > start:
                self._add_token(TokenCategory.UNKNOWN, enclosed, TokenRange(start, i - start))
            self._add_token(TokenCategory.DELIMITER, enclosed, TokenRange(i, 1))
            start = i + 1
        if start < token_range.end:
            self._add_token(TokenCategory.UNKNOWN, enclosed, TokenRange(start, token_range.end - start))

        self._validate_delimiter_tokens()

    def _validate_delimiter_tokens(self) -> None:
        """Re-join tokens that the delimiter split should not have separated."""
        tokens = self.tokens

        def is_delimiter(result: SearchResult) -> bool:
            return result.is_category(TokenCategory.DELIMITER)

        def is_unknown(result: SearchResult) -> bool:
            return result.is_category(TokenCategory.UNKNOWN)

        def is_single_character(result: SearchResult) -> bool:
            return is_unknown(result) and len(result.token.content) == 1 and result.token.content != "-"

        for i, token in enumerate(tokens):
            if token.category != TokenCategory.DELIMITER:
                continue
            delimiter = token.content[0]

            prev_token = find_prev_token(tokens, i, TokenFlag.VALID)
            next_token = find_next_token(tokens, i, TokenFlag.VALID)

            # Single character tokens: group names, keywords, episode numbers
            if delimiter not in (" ", "_"):
                if is_single_character(prev_token):
                    token.append_to(prev_token.token)
                    while is_unknown(next_token):
                        next_token.token.append_to(prev_token.token)
                        next_token = find_next_token(tokens, i, TokenFlag.VALID)
                        if is_delimiter(next_token) and next_token.token.content[0] == delimiter:
                            next_token.token.append_to(prev_token.token)
                            next_token = find_next_token(tokens, next_token, TokenFlag.VALID)
                    continue

                if is_unknown(prev_token) and is_single_character(next_token):
                    token.append_to(prev_token.token)
                    next_token.token.append_to(prev_token.token)
                    continue

            # Adjacent delimiters
            if is_unknown(prev_token) and is_delimiter(next_token):
                next_delimiter = next_token.token.content[0]
                if delimiter != next_delimiter and delimiter != ",":
                    if next_delimiter in (" ", "_"):
                        token.append_to(prev_token.token)

            # Joined numbers, e.g. "01+02"
            elif delimiter in ("&", "+"):
                if is_unknown(prev_token) and is_unknown(next_token):
                    if is_numeric_string(prev_token.token.content) and is_numeric_string(next_token.token.content):
                        token.append_to(prev_token.token)
                        next_token.token.append_to(prev_token.token)

        remove_invalid_tokens(tokens)
