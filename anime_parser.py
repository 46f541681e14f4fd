#!/usr/bin/env python3
"""
Anime filename parser - metadata extraction from fansub release filenames.

This module serves dual purposes:
1. Library: AnimeFilenameParser class and a pure parse() function
2. Command line: parse filenames and print one JSON object per line, or
   write an Excel report

Usage as library:
    from anime_parser import AnimeFilenameParser
    parser = AnimeFilenameParser()
    result = parser.parse("[TaigaSubs]_Toradora!_(2008)_-_01v2_-_Tiger_and_Dragon_[1280x720_H.264_FLAC][1234ABCD].mkv")
    result.get(ElementCategory.ANIME_TITLE)  # "Toradora!"

Usage from the command line:
    anitoken "[Group] Title - 01 [720p].mkv"
    anitoken --input filenames.txt --excel report.xlsx
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from openpyxl import load_workbook

from anitoken import (
    Element,
    ElementCategory,
    Elements,
    KeywordManager,
    Options,
    Parser,
    PreTokenizationResult,
    PreTokenizer,
    Token,
    TokenizationResult,
    Tokenizer,
    get_keyword_manager,
    load_options,
)
from anitoken.excel_writer import build_elements_sheet, write_excel_workbook

logger = logging.getLogger(__name__)


# ============================================================================
# CORE PARSING - AnimeFilenameParser Class
# ============================================================================

@dataclass
class ParseResult:
    """Elements extracted from one filename."""
    filename: str
    elements: Elements = field(default_factory=Elements)
    tokens: List[Token] = field(default_factory=list)
    success: bool = False

    def get(self, category: ElementCategory) -> Optional[str]:
        return self.elements.get(category)

    def get_all(self, category: ElementCategory) -> List[str]:
        return self.elements.get_all(category)

    def to_dict(self) -> Dict[str, Any]:
        return self.elements.to_dict()

    def to_json(self) -> str:
        """Convert result to JSON format."""
        return json.dumps(self.to_dict(), ensure_ascii=False)


class AnimeFilenameParser:
    """Parser for extracting metadata from anime filenames."""

    def __init__(self, options: Optional[Options] = None, keyword_manager: Optional[KeywordManager] = None):
        """
        Initialize the filename parser.

        Args:
            options: Parser options; defaults are used when omitted
            keyword_manager: Keyword tables; the bundled dictionary is used
                when omitted
        """
        self.options = options or Options()
        self.keyword_manager = keyword_manager or get_keyword_manager()
        self.pre_tokenizer = PreTokenizer(self.options, self.keyword_manager)

    def pre_tokenize(self, filename: Union[str, Path], elements: Elements) -> PreTokenizationResult:
        """Remove the extension and ignored strings, recording FILE_EXTENSION and FILE_NAME."""
        return self.pre_tokenizer.process(str(filename), elements)

    def tokenize(self, pre_result: PreTokenizationResult, elements: Elements) -> TokenizationResult:
        """Split the cleaned filename into tokens; peek phrases add elements directly."""
        tokenizer = Tokenizer(pre_result.cleaned, elements, self.options, self.keyword_manager)
        return tokenizer.tokenize()

    def parse(self, filename: Union[str, Path]) -> ParseResult:
        """
        Full parsing pipeline.

        Pipeline order:
        1. Pre-tokenize (extension, ignored strings)
        2. Tokenize (brackets, peek phrases, delimiters)
        3. Parse (keywords, numbers, title, release group, episode title)

        Args:
            filename: A single filename; directories are not stripped

        Returns:
            ParseResult; ``success`` is True iff an anime title was found
        """
        elements = Elements()
        result = ParseResult(filename=str(filename), elements=elements)

        # Step 1: Pre-tokenization
        pre_result = self.pre_tokenize(filename, elements)
        if not pre_result.cleaned:
            logger.debug("Nothing left to parse in %r", result.filename)
            return result

        # Step 2: Tokenization
        token_result = self.tokenize(pre_result, elements)
        result.tokens = token_result.tokens
        if not token_result.success:
            return result

        # Step 3: Parsing
        parser = Parser(token_result.tokens, elements, self.options, self.keyword_manager)
        result.success = parser.parse()
        logger.debug("Parsed %r: %s", result.filename, elements.to_dict())
        return result


def parse(filename: str, options: Optional[Options] = None) -> List[Element]:
    """
    Parse a filename into its elements.

    Args:
        filename: Filename to parse
        options: Optional parser options

    Returns:
        Elements in the order they were found; empty for an empty filename
    """
    return AnimeFilenameParser(options).parse(filename).elements.to_list()


# ============================================================================
# COMMAND LINE
# ============================================================================

def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Extract metadata from anime filenames'
    )
    parser.add_argument(
        'filenames',
        nargs='*',
        help='Filenames to parse'
    )
    parser.add_argument(
        '--input',
        help='File containing filenames (one per line), or an Excel file with an "input" column'
    )
    parser.add_argument(
        '--excel',
        help='Write an Excel report to this path'
    )
    parser.add_argument(
        '--config',
        help='JSON file with parser options'
    )
    parser.add_argument(
        '--delimiters',
        help='Characters treated as delimiters (overrides config)'
    )
    parser.add_argument(
        '--ignore',
        action='append',
        help='String to remove before parsing (repeatable)'
    )
    parser.add_argument(
        '--no-episode-number',
        action='store_true',
        help='Do not search for episode numbers'
    )
    parser.add_argument(
        '--no-episode-title',
        action='store_true',
        help='Do not search for an episode title'
    )
    parser.add_argument(
        '--no-file-extension',
        action='store_true',
        help='Keep the file extension as part of the name'
    )
    parser.add_argument(
        '--no-release-group',
        action='store_true',
        help='Do not search for a release group'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def read_input_file(filepath: Union[str, Path]) -> List[str]:
    """
    Read filenames from a text file (one per line) or an Excel workbook.

    Excel input uses the first column whose header is "input".
    """
    filepath = Path(filepath)
    filenames: List[str] = []

    if filepath.suffix == '.xlsx':
        wb = load_workbook(filepath, read_only=True)
        try:
            ws = wb.active
            headers = [str(cell.value).strip().lower() if cell.value is not None else "" for cell in ws[1]]
            if 'input' not in headers:
                raise ValueError("Could not find 'input' column in Excel file")
            input_col_idx = headers.index('input')
            for row in ws.iter_rows(min_row=2, values_only=True):
                if row and row[input_col_idx]:
                    filenames.append(str(row[input_col_idx]))
        finally:
            wb.close()
    else:
        with filepath.open('r', encoding='utf-8', errors='replace') as f:
            for line in f:
                line = line.strip()
                if line:
                    filenames.append(line)

    return filenames


def options_from_arguments(args: argparse.Namespace) -> Options:
    """Merge defaults, the optional config file and command line flags."""
    overrides: Dict[str, Any] = {
        'allowed_delimiters': args.delimiters,
        'ignored_strings': args.ignore,
    }
    if args.no_episode_number:
        overrides['parse_episode_number'] = False
    if args.no_episode_title:
        overrides['parse_episode_title'] = False
    if args.no_file_extension:
        overrides['parse_file_extension'] = False
    if args.no_release_group:
        overrides['parse_release_group'] = False
    return load_options(args.config, overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        options = options_from_arguments(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    filenames = list(args.filenames)
    if args.input:
        try:
            filenames.extend(read_input_file(args.input))
        except (OSError, ValueError) as exc:
            logger.error("Could not read %s: %s", args.input, exc)
            return 1

    if not filenames:
        logger.error("No filenames given")
        return 2

    parser = AnimeFilenameParser(options)
    results = [parser.parse(filename) for filename in filenames]

    for result in results:
        print(result.to_json())

    if args.excel:
        sheet = build_elements_sheet((r.filename, r.elements, r.success) for r in results)
        path = write_excel_workbook(args.excel, [sheet])
        logger.info("Wrote report to %s", path)

    failures = sum(1 for r in results if not r.success)
    if failures:
        logger.warning("%s of %s filenames had no anime title", failures, len(results))
    return 0


if __name__ == '__main__':
    sys.exit(main())
