#!/usr/bin/env python3
"""Validate the keyword dictionary against its JSON Schema and custom rules."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jsonschema import Draft7Validator

ROOT = Path(__file__).resolve().parent.parent
SCHEMA_DIR = ROOT / "schemas"
DICTIONARY_DIR = ROOT / "anitoken" / "dictionaries"

MAX_EXTENSION_LENGTH = 4


def load_json(path: Path):
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def validate_with_schema(data, schema_path: Path, label: str) -> List[str]:
    validator = Draft7Validator(load_json(schema_path))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))

    messages = []
    for error in errors:
        location = " > ".join(str(p) for p in error.absolute_path) or "root"
        messages.append(f"{label}: {location}: {error.message}")
    return messages


def check_keyword_groups(groups) -> List[str]:
    """Words registered twice are shadowed, since the first registration wins."""
    errors: List[str] = []
    seen: Dict[str, str] = {}
    for idx, group in enumerate(groups or []):
        category = group.get("category", "")
        if category == "file_extension":
            errors.append(f"keyword_groups[{idx}]: file extensions belong in 'file_extensions'")
        for word in group.get("words") or []:
            key = word.upper()
            if key in seen:
                errors.append(
                    f"keyword_groups[{idx}]: '{word}' ({category}) is shadowed by an earlier '{seen[key]}' entry"
                )
            else:
                seen[key] = category
    return errors


def check_file_extensions(groups) -> List[str]:
    errors: List[str] = []
    seen = set()
    for idx, group in enumerate(groups or []):
        for word in group.get("words") or []:
            if len(word) > MAX_EXTENSION_LENGTH or not word.isascii() or not word.isalnum():
                errors.append(
                    f"file_extensions[{idx}]: '{word}' can never match (at most "
                    f"{MAX_EXTENSION_LENGTH} ASCII letters or digits)"
                )
            key = word.upper()
            if key in seen:
                errors.append(f"file_extensions[{idx}]: duplicate extension '{word}'")
            seen.add(key)
    return errors


def check_peek_entries(entries) -> List[str]:
    """Peek matching ignores case, so a second spelling of a word never matches."""
    errors: List[str] = []
    seen = set()
    for idx, entry in enumerate(entries or []):
        for word in entry.get("words") or []:
            if word != word.strip():
                errors.append(f"peek_entries[{idx}]: '{word}' has leading or trailing whitespace")
            key = word.lower()
            if key in seen:
                errors.append(f"peek_entries[{idx}]: '{word}' can never match, an earlier entry matches it first")
            seen.add(key)
    return errors


def validate_dictionary(data, schema_path: Path = SCHEMA_DIR / "keywords.schema.json") -> List[str]:
    failures = validate_with_schema(data, schema_path, "keywords")
    if failures:
        return failures

    failures.extend(check_keyword_groups(data.get("keyword_groups")))
    failures.extend(check_file_extensions(data.get("file_extensions")))
    failures.extend(check_peek_entries(data.get("peek_entries")))
    return failures


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--dictionary",
        type=Path,
        default=DICTIONARY_DIR / "keywords.json",
        help="Keyword dictionary to validate",
    )
    args = parser.parse_args(argv)

    try:
        data = load_json(args.dictionary)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Could not read {args.dictionary}: {exc}")
        return 1

    failures = validate_dictionary(data)
    if failures:
        print("Dictionary validation failed:")
        for failure in failures:
            print(f" - {failure}")
        return 1

    print("All dictionaries validated successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
