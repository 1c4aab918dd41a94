"""
旧版 .xls 格式桥接

openpyxl 只支持基于 zip 的 .xlsx 格式。旧版二进制格式通过 xlrd 读取、
xlwt 写出，中间统一使用 openpyxl 的对象模型（LegacyWorkbook），
因此上层的取值、写值和样式代码无需区分格式。
"""

import datetime
import logging
from typing import BinaryIO, Dict, Optional

import xlrd
import xlwt
from openpyxl import Workbook
from openpyxl.cell import Cell, MergedCell
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from xlrd.compdoc import CompDocError
from xlwt.ExcelFormulaParser import FormulaParseException

from ..exceptions import DocumentError
from .colors import color_index

logger = logging.getLogger(__name__)

# .xls 的行列上限
MAX_ROWS = 65536
MAX_COLUMNS = 256

# openpyxl 填充类型 -> BIFF 图案编号
FILL_PATTERNS = {
    "solid": 1,
    "mediumGray": 2,
    "darkGray": 3,
    "lightGray": 4,
    "darkHorizontal": 5,
    "darkVertical": 6,
    "darkDown": 7,
    "darkUp": 8,
    "darkGrid": 9,
    "darkTrellis": 10,
    "lightHorizontal": 11,
    "lightVertical": 12,
    "lightDown": 13,
    "lightUp": 14,
    "lightGrid": 15,
    "lightTrellis": 16,
    "gray125": 17,
    "gray0625": 18,
}

BORDER_STYLES = {
    "thin": xlwt.Borders.THIN,
    "medium": xlwt.Borders.MEDIUM,
    "dashed": xlwt.Borders.DASHED,
    "dotted": xlwt.Borders.DOTTED,
    "thick": xlwt.Borders.THICK,
    "double": xlwt.Borders.DOUBLE,
    "hair": xlwt.Borders.HAIR,
    "mediumDashed": xlwt.Borders.MEDIUM_DASHED,
    "dashDot": xlwt.Borders.THIN_DASH_DOTTED,
    "mediumDashDot": xlwt.Borders.MEDIUM_DASH_DOTTED,
    "dashDotDot": xlwt.Borders.THIN_DASH_DOT_DOTTED,
    "mediumDashDotDot": xlwt.Borders.MEDIUM_DASH_DOT_DOTTED,
    "slantDashDot": xlwt.Borders.SLANTED_MEDIUM_DASH_DOTTED,
}

HORIZONTAL_ALIGNMENTS = {
    "general": xlwt.Alignment.HORZ_GENERAL,
    "left": xlwt.Alignment.HORZ_LEFT,
    "center": xlwt.Alignment.HORZ_CENTER,
    "right": xlwt.Alignment.HORZ_RIGHT,
    "fill": xlwt.Alignment.HORZ_FILLED,
    "justify": xlwt.Alignment.HORZ_JUSTIFIED,
    "centerContinuous": xlwt.Alignment.HORZ_CENTER_ACROSS_SEL,
    "distributed": xlwt.Alignment.HORZ_DISTRIBUTED,
}

VERTICAL_ALIGNMENTS = {
    "top": xlwt.Alignment.VERT_TOP,
    "center": xlwt.Alignment.VERT_CENTER,
    "bottom": xlwt.Alignment.VERT_BOTTOM,
    "justify": xlwt.Alignment.VERT_JUSTIFIED,
    "distributed": xlwt.Alignment.VERT_DISTRIBUTED,
}


class LegacyWorkbook(Workbook):
    """旧版二进制格式（.xls）的工作簿，保存时经由 xlwt 序列化"""

    def save(self, filename):
        """
        保存为 .xls

        Args:
            filename: 文件路径或可写的二进制流
        """
        if hasattr(filename, "write"):
            write_legacy_workbook(self, filename)
        else:
            with open(filename, "wb") as stream:
                write_legacy_workbook(self, stream)


def read_legacy_workbook(stream: BinaryIO) -> LegacyWorkbook:
    """
    从二进制流读取 .xls 内容

    Args:
        stream: 可读的二进制流

    Returns:
        LegacyWorkbook: 工作簿

    Raises:
        DocumentError: 内容不是有效的 .xls
    """
    content = stream.read()
    try:
        book = xlrd.open_workbook(file_contents=content, formatting_info=True)
    except (xlrd.XLRDError, CompDocError) as e:
        raise DocumentError("无法解析 xls 内容", str(e)) from e

    workbook = LegacyWorkbook()
    workbook.remove(workbook.active)
    for xl_sheet in book.sheets():
        sheet = workbook.create_sheet(xl_sheet.name)
        for rowx in range(xl_sheet.nrows):
            for colx in range(xl_sheet.row_len(rowx)):
                _read_cell(book, xl_sheet, rowx, colx, sheet)

        for rlo, rhi, clo, chi in xl_sheet.merged_cells:
            if rhi - rlo > 1 or chi - clo > 1:
                sheet.merge_cells(
                    start_row=rlo + 1,
                    start_column=clo + 1,
                    end_row=rhi,
                    end_column=chi,
                )

        for colx, info in xl_sheet.colinfo_map.items():
            sheet.column_dimensions[get_column_letter(colx + 1)].width = (
                info.width / 256
            )
        for rowx, info in xl_sheet.rowinfo_map.items():
            # height_mismatch 标记行高是手动设置的
            if info.height_mismatch:
                sheet.row_dimensions[rowx + 1].height = info.height / 20

    logger.debug(f"已读取 xls 工作簿，共 {book.nsheets} 个工作表")
    return workbook


def _read_cell(book, xl_sheet, rowx: int, colx: int, sheet: Worksheet):
    """把 xlrd 单元格复制到 openpyxl 工作表"""
    ctype = xl_sheet.cell_type(rowx, colx)
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return

    value = xl_sheet.cell_value(rowx, colx)
    cell = sheet.cell(row=rowx + 1, column=colx + 1)

    if ctype in (xlrd.XL_CELL_NUMBER, xlrd.XL_CELL_DATE):
        xf = book.xf_list[xl_sheet.cell_xf_index(rowx, colx)]
        fmt = book.format_map[xf.format_key].format_str
        # 先设置格式，避免 openpyxl 为日期值套用默认格式
        if fmt and fmt != "General":
            cell.number_format = fmt

    if ctype == xlrd.XL_CELL_TEXT:
        cell.value = value
        cell.data_type = "s"
    elif ctype == xlrd.XL_CELL_DATE:
        try:
            cell.value = xlrd.xldate.xldate_as_datetime(value, book.datemode)
        except xlrd.xldate.XLDateError as e:
            logger.warning(f"日期值超出范围，按数值保留 {cell.coordinate}: {e}")
            cell.value = value
    elif ctype == xlrd.XL_CELL_BOOLEAN:
        cell.value = bool(value)
    else:
        cell.value = value


def write_legacy_workbook(workbook: Workbook, stream: BinaryIO):
    """
    把工作簿写成 .xls

    Args:
        workbook: openpyxl 工作簿
        stream: 可写的二进制流

    Raises:
        DocumentError: 工作表超出 .xls 的行列上限
    """
    book = xlwt.Workbook(encoding="utf-8")
    styles: Dict[Optional[int], xlwt.XFStyle] = {None: xlwt.XFStyle()}

    for sheet in workbook.worksheets:
        xl_sheet = book.add_sheet(sheet.title, cell_overwrite_ok=True)

        for (row, col), cell in sorted(sheet._cells.items()):
            if isinstance(cell, MergedCell):
                continue
            if row > MAX_ROWS or col > MAX_COLUMNS:
                raise DocumentError(
                    f"单元格 {cell.coordinate} 超出 xls 格式的行列上限",
                    f"最多 {MAX_ROWS} 行、{MAX_COLUMNS} 列",
                )
            style_key = cell.style_id if cell.has_style else None
            if style_key not in styles:
                styles[style_key] = _xf_style(cell)
            xl_sheet.write(row - 1, col - 1, _legacy_value(cell), styles[style_key])

        for merged_range in sheet.merged_cells.ranges:
            min_col, min_row, max_col, max_row = merged_range.bounds
            xl_sheet.merge(min_row - 1, max_row - 1, min_col - 1, max_col - 1)

        for letter, dimension in sheet.column_dimensions.items():
            if not dimension.width:
                continue
            index = column_index_from_string(letter)
            for col in range((dimension.min or index), (dimension.max or index) + 1):
                xl_sheet.col(col - 1).width = int(dimension.width * 256)

        for row_num, dimension in sheet.row_dimensions.items():
            if dimension.height is None:
                continue
            xl_row = xl_sheet.row(row_num - 1)
            xl_row.height = int(dimension.height * 20)
            xl_row.height_mismatch = True

        sheet_format = sheet.sheet_format
        if sheet_format.baseColWidth:
            xl_sheet.col_default_width = int(sheet_format.baseColWidth)
        if sheet_format.customHeight and sheet_format.defaultRowHeight:
            xl_sheet.row_default_height = int(sheet_format.defaultRowHeight * 20)
            xl_sheet.row_default_height_mismatch = 1

    book.save(stream)
    logger.debug(f"已写出 xls 工作簿，共 {len(workbook.worksheets)} 个工作表")


def _legacy_value(cell: Cell):
    """把 openpyxl 单元格值转换为 xlwt 可写的值"""
    value = cell.value
    if value is None:
        return None
    if cell.data_type == "f" and isinstance(value, str):
        try:
            return xlwt.Formula(value.lstrip("="))
        except FormulaParseException as e:  # xlwt 的公式解析器只支持部分语法
            logger.warning(f"公式无法写入 xls，按文本保存 {cell.coordinate}: {e}")
            return value
    if isinstance(value, datetime.timedelta):
        return value.total_seconds() / 86400
    if isinstance(value, datetime.datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    if isinstance(value, (str, bool, int, float, datetime.date, datetime.time)):
        return value
    return str(value)


def _xf_style(cell: Cell) -> xlwt.XFStyle:
    """根据 openpyxl 单元格样式构造 xlwt 样式"""
    style = xlwt.XFStyle()
    if cell.number_format and cell.number_format != "General":
        style.num_format_str = cell.number_format

    font = cell.font
    xl_font = xlwt.Font()
    if font.name:
        xl_font.name = font.name
    if font.sz:
        xl_font.height = int(font.sz * 20)
    xl_font.bold = bool(font.b)
    xl_font.italic = bool(font.i)
    xl_font.struck_out = bool(font.strike)
    if font.u in ("double", "doubleAccounting"):
        xl_font.underline = xlwt.Font.UNDERLINE_DOUBLE
    elif font.u:
        xl_font.underline = xlwt.Font.UNDERLINE_SINGLE
    font_color = color_index(font.color)
    if font_color is not None:
        xl_font.colour_index = font_color
    style.font = xl_font

    fill = cell.fill
    pattern_number = FILL_PATTERNS.get(getattr(fill, "fill_type", None))
    if pattern_number:
        pattern = xlwt.Pattern()
        pattern.pattern = pattern_number
        fore = color_index(fill.fgColor)
        back = color_index(fill.bgColor)
        if fore is not None:
            pattern.pattern_fore_colour = fore
        if back is not None:
            pattern.pattern_back_colour = back
        style.pattern = pattern

    borders = xlwt.Borders()
    for edge in ("left", "right", "top", "bottom"):
        side = getattr(cell.border, edge)
        if side is None or side.style is None:
            continue
        setattr(borders, edge, BORDER_STYLES.get(side.style, xlwt.Borders.THIN))
        edge_color = color_index(side.color)
        if edge_color is not None:
            setattr(borders, f"{edge}_colour", edge_color)
    style.borders = borders

    alignment = xlwt.Alignment()
    if cell.alignment.horizontal in HORIZONTAL_ALIGNMENTS:
        alignment.horz = HORIZONTAL_ALIGNMENTS[cell.alignment.horizontal]
    if cell.alignment.vertical in VERTICAL_ALIGNMENTS:
        alignment.vert = VERTICAL_ALIGNMENTS[cell.alignment.vertical]
    if cell.alignment.wrap_text:
        alignment.wrap = xlwt.Alignment.WRAP_AT_RIGHT
    style.alignment = alignment

    return style
