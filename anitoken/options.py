#!/usr/bin/env python3
"""
Parser options and layered configuration loading.

Configuration precedence (lowest to highest):
1. Built-in defaults
2. JSON config file
3. Explicit overrides (e.g. command line flags)
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Hyphen is not a default delimiter: "A-1" and "01-02" stay single tokens
DEFAULT_ALLOWED_DELIMITERS = " _.&+,|"


@dataclass(frozen=True)
class Options:
    """Feature toggles and the delimiter set used while parsing."""
    parse_episode_number: bool = True
    parse_episode_title: bool = True
    parse_file_extension: bool = True
    parse_release_group: bool = True
    allowed_delimiters: str = DEFAULT_ALLOWED_DELIMITERS
    ignored_strings: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Options":
        """
        Build options from a plain mapping.

        Unknown keys are ignored with a warning. Toggles must be real
        booleans, the delimiter set is a string or list of characters, and
        ignored strings are a list.

        Raises:
            ValueError: If a toggle is not a boolean, or if
                ``allowed_delimiters`` or ``ignored_strings`` has the wrong
                shape
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}

        for key, value in (data or {}).items():
            if key not in known:
                logger.warning("Ignoring unknown option '%s'", key)
                continue
            values[key] = value

        for key in ("parse_episode_number", "parse_episode_title", "parse_file_extension", "parse_release_group"):
            if key in values and not isinstance(values[key], bool):
                raise ValueError(f"{key} must be true or false, got {values[key]!r}")

        if "allowed_delimiters" in values:
            delimiters = values["allowed_delimiters"]
            if isinstance(delimiters, (list, tuple)):
                delimiters = "".join(str(d) for d in delimiters)
            if not isinstance(delimiters, str):
                raise ValueError(f"allowed_delimiters must be a string or list, got {type(delimiters).__name__}")
            values["allowed_delimiters"] = delimiters

        if "ignored_strings" in values:
            ignored = values["ignored_strings"]
            if ignored is None:
                ignored = ()
            elif isinstance(ignored, str):
                ignored = (ignored,)
            elif not isinstance(ignored, (list, tuple)):
                raise ValueError(f"ignored_strings must be a list of strings, got {type(ignored).__name__}")
            values["ignored_strings"] = tuple(str(s) for s in ignored if s)

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["ignored_strings"] = list(self.ignored_strings)
        return data


def load_options(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Options:
    """
    Load options from defaults, an optional JSON file and explicit overrides.

    A missing or unreadable config file is logged and skipped so that parsing
    can still run on defaults.

    Args:
        config_path: Optional path to a JSON object with option keys
        overrides: Optional mapping applied last

    Returns:
        Merged Options
    """
    merged: Dict[str, Any] = Options().to_dict()

    if config_path:
        path = Path(config_path)
        try:
            file_config = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read config %s (%s); using defaults", path, exc)
            file_config = {}
        if not isinstance(file_config, dict):
            logger.warning("Config %s is not a JSON object; ignoring it", path)
            file_config = {}
        merged.update(file_config)

    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})

    return Options.from_dict(merged)
