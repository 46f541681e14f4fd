#!/usr/bin/env python3
"""
Dictionary loader utility for centralized dictionary loading and caching.

Provides a single point of access for loading the bundled keyword
dictionaries with error handling and caching to avoid redundant file reads.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY = "keywords.json"


class DictionaryLoader:
    """Centralized dictionary loader with caching support."""

    _cache: Dict[str, Any] = {}

    @staticmethod
    def get_dictionary_path(dictionary_name: str = DEFAULT_DICTIONARY) -> Path:
        """
        Get the absolute path to a bundled dictionary file.

        Args:
            dictionary_name: Name of the dictionary file

        Returns:
            Absolute path inside the package ``dictionaries`` folder
        """
        return Path(__file__).resolve().parent / "dictionaries" / dictionary_name

    @classmethod
    def load_dictionary(
        cls,
        dictionary_name: str = DEFAULT_DICTIONARY,
        use_cache: bool = True
    ) -> Optional[Any]:
        """
        Load a dictionary from the dictionaries folder.

        Args:
            dictionary_name: Name of the dictionary file to load
            use_cache: Whether to use cached version if available

        Returns:
            Parsed JSON contents, or None if loading fails
        """
        if use_cache and dictionary_name in cls._cache:
            return cls._cache[dictionary_name]

        dictionary_path = cls.get_dictionary_path(dictionary_name)

        try:
            with open(dictionary_path, 'r', encoding='utf-8') as f:
                dictionary = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load dictionary %s: %s", dictionary_path, exc)
            return None

        if use_cache:
            cls._cache[dictionary_name] = dictionary
        logger.debug("Loaded dictionary %s", dictionary_path)
        return dictionary

    @classmethod
    def get_section(
        cls,
        section_name: str,
        dictionary_name: str = DEFAULT_DICTIONARY,
        use_cache: bool = True
    ) -> Any:
        """
        Load a specific section from a dictionary.

        Args:
            section_name: Top-level key to retrieve (e.g. 'peek_entries')
            dictionary_name: Name of the dictionary file
            use_cache: Whether to use cached version if available

        Returns:
            The requested section, or None if the dictionary or key is missing
        """
        dictionary = cls.load_dictionary(dictionary_name, use_cache)
        if not isinstance(dictionary, dict):
            return None

        return dictionary.get(section_name)

    @classmethod
    def clear_cache(cls, dictionary_name: Optional[str] = None) -> None:
        """
        Clear the dictionary cache.

        Args:
            dictionary_name: Specific dictionary to clear, or None to clear all
        """
        if dictionary_name:
            cls._cache.pop(dictionary_name, None)
        else:
            cls._cache.clear()
