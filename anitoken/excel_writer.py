#!/usr/bin/env python3
"""
Excel reports of parsed filenames.

One row per filename, one column per element category. Repeated categories
are joined with " | ". Rows that failed to yield an anime title are
highlighted.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from .element import ElementCategory

HighlightPredicate = Callable[[Sequence[Any]], bool]

MAX_COLUMN_WIDTH = 50
VALUE_SEPARATOR = " | "

# Report column order; FILE_NAME is covered by the "filename" column
REPORT_CATEGORIES: List[ElementCategory] = [
    category for category in ElementCategory
    if category not in (ElementCategory.UNKNOWN, ElementCategory.FILE_NAME)
]


@dataclass(frozen=True)
class ExcelSheetData:
    """
    Describes a sheet to be written to the workbook.

    Attributes:
        name: Sheet/tab name.
        headers: Ordered list of column headers.
        rows: Row values ordered to match headers.
        highlight_row: Optional predicate; matching rows get a yellow fill.
    """

    name: str
    headers: Sequence[str]
    rows: Sequence[Sequence[Any]]
    highlight_row: Optional[HighlightPredicate] = None


def build_elements_sheet(
    parsed: Iterable[tuple],
    name: str = "Parsed",
) -> ExcelSheetData:
    """
    Build a report sheet from parse results.

    Args:
        parsed: Iterable of ``(filename, elements, success)`` tuples
        name: Sheet name

    Returns:
        ExcelSheetData with a header row of category names
    """
    headers = ["filename", "success"] + [category.value for category in REPORT_CATEGORIES]
    rows = []
    for filename, elements, success in parsed:
        row: List[Any] = [filename, bool(success)]
        for category in REPORT_CATEGORIES:
            row.append(VALUE_SEPARATOR.join(elements.get_all(category)))
        rows.append(row)

    return ExcelSheetData(
        name=name,
        headers=headers,
        rows=rows,
        highlight_row=lambda row: not row[1],
    )


def _write_sheet(ws, sheet: ExcelSheetData) -> None:
    ws.title = sheet.name
    ws.append(list(sheet.headers))
    for cell in ws[1]:
        cell.font = Font(bold=True)

    fill = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
    for row in sheet.rows:
        ws.append(list(row))
        if sheet.highlight_row is not None and sheet.highlight_row(row):
            for cell in ws[ws.max_row]:
                cell.fill = fill

    widths = [len(str(header)) for header in sheet.headers]
    for row in sheet.rows:
        for idx, value in enumerate(row[:len(widths)]):
            if value is not None:
                widths[idx] = max(widths[idx], len(str(value)))
    for idx, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, MAX_COLUMN_WIDTH)

    if sheet.rows:
        ref = f"A1:{get_column_letter(len(sheet.headers))}{len(sheet.rows) + 1}"
        table = Table(displayName="".join(c for c in sheet.name if c.isalnum()) + "Table", ref=ref)
        table.tableStyleInfo = TableStyleInfo(name="TableStyleMedium9", showRowStripes=True)
        ws.add_table(table)


def write_excel_workbook(output_path: Path | str, sheets: Sequence[ExcelSheetData]) -> Path:
    """
    Write a workbook consisting of the provided sheets.

    Raises:
        ValueError: If no sheet is given
    """
    if not sheets:
        raise ValueError("At least one sheet must be provided to write a workbook.")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    _write_sheet(wb.active, sheets[0])
    for sheet in sheets[1:]:
        _write_sheet(wb.create_sheet(), sheet)

    wb.save(output_path)
    return output_path
