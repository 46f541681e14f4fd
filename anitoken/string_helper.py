#!/usr/bin/env python3
"""
Character classification and string utilities shared by the tokenizer and
parser.

All helpers are total: they accept empty strings and out-of-range offsets
and never raise.
"""

from typing import Iterable

DASHES = "-\u2010\u2011\u2012\u2013\u2014\u2015"
DASHES_WITH_SPACE = " " + DASHES

_LATIN_LIMIT = "\u024f"


def is_alphanumeric_char(c: str) -> bool:
    """ASCII letters and digits only."""
    return ("0" <= c <= "9") or ("A" <= c <= "Z") or ("a" <= c <= "z")


def is_numeric_char(c: str) -> bool:
    return "0" <= c <= "9"


def is_hexadecimal_char(c: str) -> bool:
    return is_numeric_char(c) or ("A" <= c <= "F") or ("a" <= c <= "f")


def is_latin_char(c: str) -> bool:
    # Basic Latin through Latin Extended-B
    return c <= _LATIN_LIMIT


def is_numeric_string(text: str) -> bool:
    return bool(text) and all(is_numeric_char(c) for c in text)


def is_hexadecimal_string(text: str) -> bool:
    return bool(text) and all(is_hexadecimal_char(c) for c in text)


def is_mostly_latin_string(text: str) -> bool:
    """
    Check whether at least half of the characters are Latin.

    Args:
        text: Text to check

    Returns:
        True if the Latin ratio is >= 0.5, False for empty strings
    """
    if not text:
        return False
    latin = sum(1 for c in text if is_latin_char(c))
    return latin / len(text) >= 0.5


def is_dash_character(text: str) -> bool:
    return len(text) == 1 and text in DASHES


def index_of_first_digit(text: str) -> int:
    for i, c in enumerate(text or ""):
        if is_numeric_char(c):
            return i
    return -1


def string_to_int(text: str) -> int:
    """
    Convert the leading run of digits to an int.

    "07.5" -> 7, "12v2" -> 12, "abc" -> 0.
    """
    digits = []
    for c in text or "":
        if not is_numeric_char(c):
            break
        digits.append(c)
    return int("".join(digits)) if digits else 0


def substring_with_check(text: str, offset: int, size: int) -> str:
    """Substring with both ends clamped to the string bounds."""
    start = min(max(offset, 0), len(text))
    end = min(max(start + max(size, 0), start), len(text))
    return text[start:end]


def trim(text: str, chars: Iterable[str]) -> str:
    """Strip any of ``chars`` from both ends of ``text``."""
    return text.strip("".join(chars))
