#!/usr/bin/env python3
"""
Token model and token query engine.

A filename is tokenized into individual Token records. Every later stage
locates tokens with the same directional search: start at a position, walk
forward or backward, and return the first token accepted by a TokenFlag
predicate.

Flags combine with ``|``:
- category flags (BRACKET, NOT_DELIMITER, UNKNOWN, VALID, ...) are OR-ed,
  a token passes if it satisfies any of them
- enclosure flags (ENCLOSED, NOT_ENCLOSED) must agree with the token
- no category flag means any category, no enclosure flag means either

Examples:
    find_token(tokens, TokenFlag.NOT_ENCLOSED | TokenFlag.UNKNOWN)
    find_next_token(tokens, pos, TokenFlag.BRACKET | TokenFlag.IDENTIFIER)
    find_prev_token(tokens, pos, TokenFlag.NOT_DELIMITER)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union


class TokenCategory(enum.Enum):
    """Lexical category of a token."""
    UNKNOWN = "unknown"
    BRACKET = "bracket"
    DELIMITER = "delimiter"
    IDENTIFIER = "identifier"
    INVALID = "invalid"


class TokenFlag(enum.Flag):
    """Search flags used to build token predicates."""
    NONE = 0

    BRACKET = enum.auto()
    NOT_BRACKET = enum.auto()
    DELIMITER = enum.auto()
    NOT_DELIMITER = enum.auto()
    IDENTIFIER = enum.auto()
    NOT_IDENTIFIER = enum.auto()
    UNKNOWN = enum.auto()
    NOT_UNKNOWN = enum.auto()
    VALID = enum.auto()
    NOT_VALID = enum.auto()

    ENCLOSED = enum.auto()
    NOT_ENCLOSED = enum.auto()


_MASK_ENCLOSED = TokenFlag.ENCLOSED | TokenFlag.NOT_ENCLOSED

# (positive flag, negative flag, category); VALID is the negation of INVALID
_CATEGORY_CHECKS = (
    (TokenFlag.BRACKET, TokenFlag.NOT_BRACKET, TokenCategory.BRACKET),
    (TokenFlag.DELIMITER, TokenFlag.NOT_DELIMITER, TokenCategory.DELIMITER),
    (TokenFlag.IDENTIFIER, TokenFlag.NOT_IDENTIFIER, TokenCategory.IDENTIFIER),
    (TokenFlag.UNKNOWN, TokenFlag.NOT_UNKNOWN, TokenCategory.UNKNOWN),
    (TokenFlag.NOT_VALID, TokenFlag.VALID, TokenCategory.INVALID),
)


@dataclass
class Token:
    """A classified substring of the filename."""
    category: TokenCategory
    content: str
    _enclosed: bool = False

    @property
    def enclosed(self) -> bool:
        """Whether the token sits between brackets; fixed at creation."""
        return self._enclosed

    def is_category(self, category: TokenCategory) -> bool:
        return self.category == category

    def append_to(self, other: "Token") -> None:
        """Merge this token's text into ``other`` and mark this one invalid."""
        other.content += self.content
        self.category = TokenCategory.INVALID


@dataclass(frozen=True)
class TokenRange:
    """Half-open span ``[offset, offset + size)`` over the filename."""
    offset: int
    size: int

    @property
    def end(self) -> int:
        return self.offset + self.size

    def overlaps(self, other: "TokenRange") -> bool:
        return self.offset < other.end and other.offset < self.end


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a token search.

    Either both ``token`` and ``position`` are set (found) or neither is
    (not found).
    """
    token: Optional[Token] = None
    position: Optional[int] = None

    def __post_init__(self):
        if (self.token is None) != (self.position is None):
            raise ValueError("SearchResult needs both token and position, or neither")

    @property
    def found(self) -> bool:
        return self.token is not None

    def __bool__(self) -> bool:
        return self.found

    def is_category(self, category: TokenCategory) -> bool:
        return self.token is not None and self.token.category == category

    @classmethod
    def not_found(cls) -> "SearchResult":
        return cls()


Position = Union[int, SearchResult]


def check_token_flags(token: Token, flags: TokenFlag) -> bool:
    """
    Validate a token against a set of search flags.

    Args:
        token: Token to check
        flags: Combined TokenFlag predicate

    Returns:
        True if the token satisfies the enclosure constraint (if any) and at
        least one category constraint (if any)
    """
    if flags & _MASK_ENCLOSED:
        wants_enclosed = bool(flags & TokenFlag.ENCLOSED)
        if wants_enclosed != token.enclosed:
            return False

    has_category_flag = False
    for positive, negative, category in _CATEGORY_CHECKS:
        if flags & positive:
            has_category_flag = True
            if token.category == category:
                return True
        elif flags & negative:
            has_category_flag = True
            if token.category != category:
                return True

    return not has_category_flag


def _find(tokens: Sequence[Token], start: int, step: int, flags: TokenFlag) -> SearchResult:
    i = start
    while 0 <= i < len(tokens):
        if check_token_flags(tokens[i], flags):
            return SearchResult(tokens[i], i)
        i += step
    return SearchResult.not_found()


def _position_of(position: Position) -> Optional[int]:
    if isinstance(position, SearchResult):
        return position.position
    return position


def find_token(tokens: Sequence[Token], flags: TokenFlag, start: Position = 0) -> SearchResult:
    """Search forward from ``start`` (inclusive) for a token matching ``flags``."""
    begin = _position_of(start)
    if begin is None:
        return SearchResult.not_found()
    return _find(tokens, max(begin, 0), 1, flags)


def find_next_token(tokens: Sequence[Token], position: Position, flags: TokenFlag) -> SearchResult:
    """Search forward, starting strictly after ``position``."""
    begin = _position_of(position)
    if begin is None:
        return SearchResult.not_found()
    return _find(tokens, max(begin + 1, 0), 1, flags)


def find_prev_token(tokens: Sequence[Token], position: Position, flags: TokenFlag) -> SearchResult:
    """Search backward, starting strictly before ``position``."""
    begin = _position_of(position)
    if begin is None:
        return SearchResult.not_found()
    return _find(tokens, min(begin - 1, len(tokens) - 1), -1, flags)


def remove_invalid_tokens(tokens: List[Token]) -> None:
    """Compact the sequence in place, dropping INVALID tokens."""
    tokens[:] = [token for token in tokens if token.category != TokenCategory.INVALID]
