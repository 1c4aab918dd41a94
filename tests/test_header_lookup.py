"""按表头名称查找单元格的单元测试"""

import datetime

import pytest

from xelhua.exceptions import HeaderNotFoundError, XelhuaError
from xelhua.excel import (
    create_workbook,
    get_cell,
    get_cell_at,
    get_cell_by_header,
    get_row,
    get_sheet,
    write,
)
from xelhua.excel.base import header_text


def _sheet_with_header(*names):
    sheet = get_sheet(create_workbook(), "Data")
    header = get_row(sheet, 0)
    for col, name in enumerate(names):
        write(get_cell(header, col), name)
    return sheet, header


def test_lookup_returns_cell_in_matching_column():
    sheet, header = _sheet_with_header("Name", "Age", "Active")
    data = get_row(sheet, 1)

    cell = get_cell_by_header(data, "Age", header)

    assert cell is get_cell_at(sheet, 1, 1)
    assert cell.column == 2


def test_lookup_first_match_wins():
    sheet, header = _sheet_with_header("Age", "Age")
    cell = get_cell_by_header(get_row(sheet, 1), "Age", header)
    assert cell.column == 1


def test_missing_header_raises():
    sheet, header = _sheet_with_header("Name", "Age", "Active")

    with pytest.raises(HeaderNotFoundError) as exc_info:
        get_cell_by_header(get_row(sheet, 1), "Missing", header)

    assert exc_info.value.name == "Missing"
    assert isinstance(exc_info.value, XelhuaError)
    assert "Missing" in str(exc_info.value)


def test_unreadable_header_cell_is_skipped():
    """无法转换的表头单元格被跳过，后面的列仍然可以匹配"""
    sheet, header = _sheet_with_header("Name")
    broken = get_cell(header, 1)
    broken.value = "Age"
    broken.data_type = "n"
    write(get_cell(header, 2), "Age")

    cell = get_cell_by_header(get_row(sheet, 1), "Age", header)

    assert cell.column == 3


def test_header_text_conversions():
    """不同类型表头单元格的列名"""
    sheet, header = _sheet_with_header(2024, True, False, "Name")
    blank = get_cell(header, 4)
    date = get_cell(header, 5)
    write(date, datetime.date(2023, 3, 15))

    assert header_text(get_cell(header, 0)) == "2024.0"
    assert header_text(get_cell(header, 1)) == "true"
    assert header_text(get_cell(header, 2)) == "false"
    assert header_text(get_cell(header, 3)) == "Name"
    assert header_text(blank) == ""
    assert header_text(date) == "45000.0"


def test_numeric_header_matches_decimal_name():
    sheet, header = _sheet_with_header("Name", 2024)
    cell = get_cell_by_header(get_row(sheet, 3), "2024.0", header)
    assert cell.coordinate == "B4"


def test_formula_header_matches_formula_text():
    """公式表头按公式文本匹配"""
    sheet, header = _sheet_with_header("Name")
    get_cell(header, 1).value = "=A1&B1"

    assert header_text(get_cell(header, 1)) == "=A1&B1"
    cell = get_cell_by_header(get_row(sheet, 1), "=A1&B1", header)
    assert cell.column == 2
