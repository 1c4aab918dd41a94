"""
Excel 处理模块

工作簿的打开、保存，工作表/行/单元格的获取或创建，强类型读写，
以及单元格样式和字体的构建。
"""

from .base import (
    CellType,
    apply_style,
    auto_width,
    create_sheet,
    create_workbook,
    get_cell,
    get_cell_at,
    get_cell_by_header,
    get_cell_or_none,
    get_cell_type,
    get_height,
    get_row,
    get_row_or_none,
    get_sheet,
    get_sheet_or_none,
    get_width,
    load_xls,
    load_xlsx,
    merge_cells,
    open_workbook,
    read_boolean,
    read_comment,
    read_date,
    read_datetime,
    read_numeric,
    read_string,
    save,
    set_default_height,
    set_default_width,
    set_height,
    set_height_at,
    set_width,
    write,
)
from .colors import IndexedColors
from .font_builder import FontBuilder
from .frame import sheet_to_dataframe
from .legacy import LegacyWorkbook
from .row import Row
from .style_builder import CellStyleBuilder

__all__ = [
    "CellStyleBuilder",
    "CellType",
    "FontBuilder",
    "IndexedColors",
    "LegacyWorkbook",
    "Row",
    "apply_style",
    "auto_width",
    "create_sheet",
    "create_workbook",
    "get_cell",
    "get_cell_at",
    "get_cell_by_header",
    "get_cell_or_none",
    "get_cell_type",
    "get_height",
    "get_row",
    "get_row_or_none",
    "get_sheet",
    "get_sheet_or_none",
    "get_width",
    "load_xls",
    "load_xlsx",
    "merge_cells",
    "open_workbook",
    "read_boolean",
    "read_comment",
    "read_date",
    "read_datetime",
    "read_numeric",
    "read_string",
    "save",
    "set_default_height",
    "set_default_width",
    "set_height",
    "set_height_at",
    "set_width",
    "sheet_to_dataframe",
    "write",
]
