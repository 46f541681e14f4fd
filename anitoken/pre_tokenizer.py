#!/usr/bin/env python3
"""
Pre-tokenization module for filename processing.
Handles removal of the file extension and of configured ignored strings
before the filename is tokenized.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .element import ElementCategory, Elements
from .keyword_manager import KeywordManager, get_keyword_manager
from .options import Options
from .string_helper import is_alphanumeric_char

logger = logging.getLogger(__name__)

MAX_EXTENSION_LENGTH = 4


@dataclass
class RemovedToken:
    """Represents a piece of text that was removed from the filename."""
    value: str
    category: str
    position: int


@dataclass
class PreTokenizationResult:
    """Result of pre-tokenization processing on a filename."""
    original: str
    cleaned: str
    extension: Optional[str] = None
    removed_tokens: List[RemovedToken] = field(default_factory=list)

    def to_json(self) -> str:
        """Convert result to JSON format."""
        json_data = {
            "original": self.original,
            "cleaned": self.cleaned,
            "extension": self.extension,
            "removed_tokens": [
                {
                    "value": token.value,
                    "category": token.category,
                    "position": token.position,
                }
                for token in self.removed_tokens
            ],
        }
        return json.dumps(json_data, ensure_ascii=False)


class PreTokenizer:
    """Strips the extension and ignored strings from a filename."""

    def __init__(self, options: Optional[Options] = None, keyword_manager: Optional[KeywordManager] = None):
        self.options = options or Options()
        self.keyword_manager = keyword_manager or get_keyword_manager()

    def process(self, filename: str, elements: Optional[Elements] = None) -> PreTokenizationResult:
        """
        Clean a filename ahead of tokenization.

        Args:
            filename: Raw filename
            elements: Optional collection that receives the FILE_EXTENSION
                and FILE_NAME elements

        Returns:
            PreTokenizationResult with the cleaned filename
        """
        result = PreTokenizationResult(original=filename or "", cleaned=filename or "")

        # Step 1: Known file extension
        if self.options.parse_file_extension:
            result = self._remove_extension(result)
            if result.extension is not None and elements is not None:
                elements.add(ElementCategory.FILE_EXTENSION, result.extension)

        # Step 2: Ignored strings, verbatim
        result = self._remove_ignored_strings(result)

        if result.cleaned and elements is not None:
            elements.add(ElementCategory.FILE_NAME, result.cleaned)

        return result

    def _remove_extension(self, result: PreTokenizationResult) -> PreTokenizationResult:
        name, dot, extension = result.cleaned.rpartition(".")
        if not dot:
            return result
        if len(extension) > MAX_EXTENSION_LENGTH:
            return result
        if not extension or not all(is_alphanumeric_char(c) for c in extension):
            return result
        if not self.keyword_manager.contains(ElementCategory.FILE_EXTENSION, extension):
            logger.debug("Not a known extension: %s", extension)
            return result

        result.removed_tokens.append(RemovedToken(extension, "file_extension", len(name) + 1))
        result.cleaned = name
        result.extension = extension
        return result

    def _remove_ignored_strings(self, result: PreTokenizationResult) -> PreTokenizationResult:
        cleaned = result.cleaned
        for ignored in self.options.ignored_strings:
            position = cleaned.find(ignored)
            if position < 0:
                continue
            result.removed_tokens.append(RemovedToken(ignored, "ignored_string", position))
            cleaned = cleaned.replace(ignored, "")
        result.cleaned = cleaned
        return result
