#!/usr/bin/env python3
"""
Tests for Excel reports of parsed filenames.
"""

from __future__ import annotations

import pytest
from openpyxl import load_workbook

from anitoken import ElementCategory, Elements
from anitoken.excel_writer import ExcelSheetData, build_elements_sheet, write_excel_workbook


def make_elements(**values):
    elements = Elements()
    for key, value in values.items():
        for item in value if isinstance(value, list) else [value]:
            elements.add(ElementCategory(key), item)
    return elements


def test_elements_sheet_rows():
    """Test headers, joined repeated values and the failure highlight."""
    sheet = build_elements_sheet([
        ("a.mkv", make_elements(anime_title="A", language=["ENG", "JAP"]), True),
        ("b.mkv", make_elements(), False),
    ])

    assert sheet.headers[:3] == ["filename", "success", "anime_season"]
    assert "file_name" not in sheet.headers
    assert "unknown" not in sheet.headers

    title_col = sheet.headers.index("anime_title")
    language_col = sheet.headers.index("language")
    assert sheet.rows[0][title_col] == "A"
    assert sheet.rows[0][language_col] == "ENG | JAP"
    assert sheet.rows[1][title_col] == ""
    assert sheet.highlight_row(sheet.rows[1]) is True
    assert sheet.highlight_row(sheet.rows[0]) is False


def test_excel_writer_highlights_failed_rows(tmp_path):
    """Failed rows are filled yellow in the written workbook."""
    output_path = tmp_path / "report.xlsx"
    sheet = build_elements_sheet([
        ("a.mkv", make_elements(anime_title="A"), True),
        ("b.mkv", make_elements(), False),
    ])

    write_excel_workbook(output_path, [sheet])

    wb = load_workbook(output_path)
    try:
        ws = wb["Parsed"]
        assert ws.cell(row=1, column=1).value == "filename"
        assert ws.cell(row=1, column=1).font.bold is True
        assert ws.cell(row=2, column=1).value == "a.mkv"
        assert ws.cell(row=2, column=1).fill.fill_type is None
        assert ws.cell(row=3, column=1).fill.fill_type == "solid"
        assert "ParsedTable" in ws.tables
    finally:
        wb.close()


def test_excel_writer_multiple_sheets(tmp_path):
    """Test that every sheet is written, creating parent folders."""
    output_path = tmp_path / "nested" / "out.xlsx"
    sheets = [
        ExcelSheetData(name="First", headers=["a"], rows=[[1]]),
        ExcelSheetData(name="Second", headers=["b"], rows=[]),
    ]

    assert write_excel_workbook(output_path, sheets) == output_path

    wb = load_workbook(output_path)
    try:
        assert wb.sheetnames == ["First", "Second"]
        assert wb["Second"].cell(row=1, column=1).value == "b"
    finally:
        wb.close()


def test_excel_writer_requires_a_sheet(tmp_path):
    """Writing a workbook without sheets raises ValueError."""
    with pytest.raises(ValueError):
        write_excel_workbook(tmp_path / "out.xlsx", [])
