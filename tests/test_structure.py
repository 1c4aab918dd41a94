"""合并单元格、列宽行高和自动列宽的单元测试"""

import pytest

from xelhua.excel import (
    auto_width,
    create_workbook,
    get_cell,
    get_cell_at,
    get_height,
    get_row,
    get_sheet,
    get_width,
    merge_cells,
    set_default_height,
    set_default_width,
    set_height,
    set_height_at,
    set_width,
    write,
)


@pytest.fixture
def sheet():
    return get_sheet(create_workbook(), "Data")


def _merged(sheet):
    return {str(r) for r in sheet.merged_cells.ranges}


class TestMerge:
    """测试合并单元格"""

    def test_merge_region(self, sheet):
        merge_cells(sheet, 1, 2, 1, 1)
        assert "B2:B3" in _merged(sheet)

    def test_write_into_merged_cell_goes_to_anchor(self, sheet):
        """写入被合并覆盖的单元格时写到左上角"""
        merge_cells(sheet, 0, 0, 0, 2)

        write(get_cell_at(sheet, 0, 1), "merged")

        assert sheet["A1"].value == "merged"


class TestWidthAndHeight:
    """测试列宽和行高"""

    def test_set_width(self, sheet):
        set_width(sheet, 0, 10)

        assert get_width(sheet, 0) == 2560
        assert sheet.column_dimensions["A"].width == 10

    def test_set_width_by_cell(self, sheet):
        cell = get_cell_at(sheet, 3, 2)
        set_width(sheet, cell, 12.5)

        assert get_width(sheet, 2) == 3200
        assert get_width(sheet, cell) == 3200

    def test_unset_width_uses_sheet_default(self, sheet):
        assert get_width(sheet, 5) == 8 * 256

        set_default_width(sheet, 12)
        assert get_width(sheet, 5) == 12 * 256

    def test_set_height(self, sheet):
        row = get_row(sheet, 0)
        set_height(row, 20)

        assert get_height(row) == 400
        assert sheet.row_dimensions[1].height == 20

    def test_set_height_by_cell_and_index(self, sheet):
        cell = get_cell_at(sheet, 2, 0)
        set_height(cell, 12.5)
        set_height_at(sheet, 4, 30)

        assert get_height(get_row(sheet, 2)) == 250
        assert get_height(get_row(sheet, 4)) == 600

    def test_default_height(self, sheet):
        row = get_row(sheet, 7)
        assert get_height(row) == 300

        set_default_height(sheet, 18)
        assert sheet.sheet_format.defaultRowHeight == 18
        assert get_height(row) == 360


class TestAutoWidth:
    """测试自动列宽"""

    def test_auto_width_single_column(self, sheet):
        write(get_cell_at(sheet, 0, 0), "Name")
        write(get_cell_at(sheet, 1, 0), "A much longer value")

        auto_width(sheet, 0)

        assert get_width(sheet, 0) == (19 + 2) * 256

    def test_auto_width_respects_minimum(self, sheet):
        write(get_cell_at(sheet, 0, 0), "ID")
        auto_width(sheet, 0)
        assert get_width(sheet, 0) == 8 * 256

    def test_auto_width_counts_wide_characters(self, sheet):
        write(get_cell_at(sheet, 0, 0), "一二三四五")
        auto_width(sheet, get_cell_at(sheet, 0, 0))
        assert get_width(sheet, 0) == 12 * 256

    def test_auto_width_sheet_uses_first_row_columns(self, sheet):
        """省略列号时只调整第一行中出现的列"""
        header = get_row(sheet, 0)
        write(get_cell(header, 0), "Name")
        write(get_cell(header, 1), "一二三四五")
        write(get_cell_at(sheet, 1, 2), "not in header row")

        auto_width(sheet)

        assert get_width(sheet, 0) == 8 * 256
        assert get_width(sheet, 1) == 12 * 256
        assert "C" not in sheet.column_dimensions
