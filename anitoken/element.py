#!/usr/bin/env python3
"""
Element model: the typed (category, value) results of parsing a filename.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union


class ElementCategory(enum.Enum):
    """Semantic kinds of parsed metadata."""
    ANIME_SEASON = "anime_season"
    ANIME_SEASON_PREFIX = "anime_season_prefix"
    ANIME_TITLE = "anime_title"
    ANIME_TYPE = "anime_type"
    ANIME_YEAR = "anime_year"
    AUDIO_TERM = "audio_term"
    DEVICE_COMPATIBILITY = "device_compatibility"
    EPISODE_NUMBER = "episode_number"
    EPISODE_NUMBER_ALT = "episode_number_alt"
    EPISODE_PREFIX = "episode_prefix"
    EPISODE_TITLE = "episode_title"
    FILE_CHECKSUM = "file_checksum"
    FILE_EXTENSION = "file_extension"
    FILE_NAME = "file_name"
    LANGUAGE = "language"
    OTHER = "other"
    RELEASE_GROUP = "release_group"
    RELEASE_INFORMATION = "release_information"
    RELEASE_VERSION = "release_version"
    SOURCE = "source"
    SUBTITLES = "subtitles"
    VIDEO_RESOLUTION = "video_resolution"
    VIDEO_TERM = "video_term"
    VOLUME_NUMBER = "volume_number"
    VOLUME_PREFIX = "volume_prefix"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Element:
    """A single parsed metadata value."""
    category: ElementCategory
    value: str

    def __post_init__(self):
        if self.category == ElementCategory.UNKNOWN:
            raise ValueError("Element category must not be UNKNOWN")


class Elements:
    """
    Ordered, append-only collection of parsed elements.

    Some categories may repeat (language, video term, ...); singular ones are
    kept singular by the parser, not by this container.
    """

    def __init__(self, elements: Optional[List[Element]] = None):
        self._items: List[Element] = list(elements or [])

    def __iter__(self) -> Iterator[Element]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Element:
        return self._items[index]

    def __repr__(self) -> str:
        return f"Elements({self._items!r})"

    def add(self, category: ElementCategory, value: str) -> Element:
        element = Element(category, value)
        self._items.append(element)
        return element

    def empty(self, category: ElementCategory) -> bool:
        return all(element.category != category for element in self._items)

    def get(self, category: ElementCategory) -> Optional[str]:
        """Value of the first element of ``category``, or None."""
        for element in self._items:
            if element.category == category:
                return element.value
        return None

    def get_all(self, category: ElementCategory) -> List[str]:
        return [element.value for element in self._items if element.category == category]

    def erase(self, category: ElementCategory) -> int:
        """
        Remove the first element of ``category``.

        Returns:
            Index the element was removed from, or -1 if none matched
        """
        for index, element in enumerate(self._items):
            if element.category == category:
                del self._items[index]
                return index
        return -1

    def erase_at(self, index: int) -> Element:
        """Remove and return the element at ``index``."""
        return self._items.pop(index)

    def remove_all(self, category: ElementCategory) -> None:
        self._items = [element for element in self._items if element.category != category]

    def to_list(self) -> List[Element]:
        return list(self._items)

    def to_dict(self) -> Dict[str, Union[str, List[str]]]:
        """
        Group values by category name.

        A category seen once maps to its string value, a repeated category
        maps to the list of its values in order.
        """
        grouped: Dict[str, Union[str, List[str]]] = {}
        for element in self._items:
            key = element.category.value
            if key not in grouped:
                grouped[key] = element.value
            elif isinstance(grouped[key], list):
                grouped[key].append(element.value)
            else:
                grouped[key] = [grouped[key], element.value]
        return grouped

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
