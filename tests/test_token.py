#!/usr/bin/env python3
"""
Tests for the token model and the directional token search.
"""

import pytest

from anitoken import SearchResult, Token, TokenCategory, TokenFlag, TokenRange
from anitoken.token import (
    check_token_flags,
    find_next_token,
    find_prev_token,
    find_token,
    remove_invalid_tokens,
)


@pytest.fixture
def tokens():
    # [Group] Title<invalid>
    return [
        Token(TokenCategory.BRACKET, "[", True),
        Token(TokenCategory.UNKNOWN, "Group", True),
        Token(TokenCategory.BRACKET, "]", True),
        Token(TokenCategory.DELIMITER, " "),
        Token(TokenCategory.UNKNOWN, "Title"),
        Token(TokenCategory.INVALID, "x"),
    ]


class TestCheckTokenFlags:
    """Flag predicates: categories are OR-ed, enclosure must agree."""

    @pytest.mark.parametrize("flags,expected", [
        (TokenFlag.NONE, True),
        (TokenFlag.UNKNOWN, True),
        (TokenFlag.BRACKET, False),
        (TokenFlag.BRACKET | TokenFlag.UNKNOWN, True),
        (TokenFlag.NOT_DELIMITER, True),
        (TokenFlag.NOT_UNKNOWN, False),
        (TokenFlag.VALID, True),
        (TokenFlag.NOT_VALID, False),
        (TokenFlag.ENCLOSED, True),
        (TokenFlag.NOT_ENCLOSED, False),
        (TokenFlag.NOT_ENCLOSED | TokenFlag.UNKNOWN, False),
        (TokenFlag.ENCLOSED | TokenFlag.UNKNOWN, True),
        (TokenFlag.ENCLOSED | TokenFlag.IDENTIFIER, False),
    ])
    def test_enclosed_unknown_token(self, flags, expected):
        """Test flag combinations against an enclosed unknown token."""
        token = Token(TokenCategory.UNKNOWN, "Group", True)
        assert check_token_flags(token, flags) is expected

    def test_invalid_token_fails_valid(self):
        """Invalid tokens fail VALID and pass NOT_VALID."""
        token = Token(TokenCategory.INVALID, "x")
        assert not check_token_flags(token, TokenFlag.VALID)
        assert check_token_flags(token, TokenFlag.NOT_VALID)


class TestFindToken:

    def test_find_first_match(self, tokens):
        """Test the forward search from the start."""
        result = find_token(tokens, TokenFlag.UNKNOWN)
        assert result.position == 1
        assert result.token.content == "Group"

    def test_find_with_enclosure(self, tokens):
        """Test that enclosure flags narrow the search."""
        result = find_token(tokens, TokenFlag.NOT_ENCLOSED | TokenFlag.UNKNOWN)
        assert result.position == 4

    def test_start_is_inclusive(self, tokens):
        """The forward search includes its start position."""
        assert find_token(tokens, TokenFlag.BRACKET, 2).position == 2

    def test_no_flags_matches_start(self, tokens):
        """No flags accept any token."""
        assert find_token(tokens, TokenFlag.NONE).position == 0

    def test_not_found(self, tokens):
        """A failed search returns an empty result."""
        result = find_token(tokens, TokenFlag.BRACKET | TokenFlag.IDENTIFIER, 3)
        assert not result
        assert result.token is None
        assert result.position is None

    def test_start_from_search_result(self, tokens):
        """A search result can be the start position."""
        start = find_token(tokens, TokenFlag.UNKNOWN)
        assert find_token(tokens, TokenFlag.BRACKET, start).position == 2

    def test_start_from_not_found_result(self, tokens):
        """Starting from a failed search finds nothing."""
        assert not find_token(tokens, TokenFlag.NONE, SearchResult.not_found())

    def test_empty_sequence(self):
        """Searching no tokens finds nothing."""
        assert not find_token([], TokenFlag.NONE)


class TestDirectionalSearch:

    def test_next_is_exclusive(self, tokens):
        """The next-token search skips its start position."""
        assert find_next_token(tokens, 0, TokenFlag.BRACKET).position == 2

    def test_prev_is_exclusive(self, tokens):
        """The previous-token search skips its start position."""
        result = find_prev_token(tokens, 4, TokenFlag.NOT_DELIMITER)
        assert result.position == 2
        assert result.is_category(TokenCategory.BRACKET)

    def test_prev_from_first_position(self, tokens):
        """Nothing precedes the first token."""
        assert not find_prev_token(tokens, 0, TokenFlag.NONE)

    def test_next_from_last_position(self, tokens):
        """Nothing follows the last token."""
        assert not find_next_token(tokens, len(tokens) - 1, TokenFlag.NONE)

    def test_next_past_end(self, tokens):
        """A start past the end finds nothing."""
        assert not find_next_token(tokens, 100, TokenFlag.NONE)

    def test_prev_past_end_starts_at_last_token(self, tokens):
        """A backward search past the end starts at the last token."""
        result = find_prev_token(tokens, 100, TokenFlag.VALID)
        assert result.position == 4

    def test_not_found_position_stays_not_found(self, tokens):
        """Directional searches from a failed result find nothing."""
        assert not find_next_token(tokens, SearchResult.not_found(), TokenFlag.NONE)
        assert not find_prev_token(tokens, SearchResult.not_found(), TokenFlag.NONE)


class TestSearchResult:

    def test_half_set_result_is_rejected(self, tokens):
        """A result needs both token and position, or neither."""
        with pytest.raises(ValueError):
            SearchResult(token=tokens[0])
        with pytest.raises(ValueError):
            SearchResult(position=0)

    def test_is_category_on_not_found(self):
        """A failed result has no category."""
        assert not SearchResult.not_found().is_category(TokenCategory.UNKNOWN)


class TestToken:

    def test_enclosed_is_fixed(self):
        """The enclosed flag cannot be reassigned."""
        token = Token(TokenCategory.UNKNOWN, "Group", True)
        with pytest.raises(AttributeError):
            token.enclosed = False

    def test_category_can_change(self):
        """Token categories can be reassigned."""
        token = Token(TokenCategory.UNKNOWN, "Group")
        token.category = TokenCategory.IDENTIFIER
        assert token.is_category(TokenCategory.IDENTIFIER)

    def test_append_to_invalidates_source(self):
        """Test that a merged token becomes invalid."""
        first = Token(TokenCategory.UNKNOWN, "A")
        second = Token(TokenCategory.DELIMITER, ".")
        second.append_to(first)
        assert first.content == "A."
        assert second.category == TokenCategory.INVALID

    def test_remove_invalid_tokens(self, tokens):
        """Test compacting invalid tokens away."""
        remove_invalid_tokens(tokens)
        assert len(tokens) == 5
        assert all(t.category != TokenCategory.INVALID for t in tokens)


class TestTokenRange:

    def test_end(self):
        """Test the end offset of a range."""
        assert TokenRange(3, 4).end == 7

    @pytest.mark.parametrize("other,expected", [
        (TokenRange(0, 3), False),
        (TokenRange(0, 4), True),
        (TokenRange(5, 1), True),
        (TokenRange(7, 2), False),
    ])
    def test_overlaps(self, other, expected):
        """Test range overlap, with touching ranges not overlapping."""
        assert TokenRange(3, 4).overlaps(other) is expected
