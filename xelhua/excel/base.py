"""
Excel 基础操作

在 openpyxl 对象模型之上提供"获取或创建"式的访问函数、强类型读写、
结构操作（合并、宽高、自动列宽）以及保存。

行号与列号一律从 0 开始，内部转换为 openpyxl 的 1 起始坐标。
"""

import datetime
import logging
import os
import unicodedata
import zipfile
from enum import Enum
from typing import BinaryIO, Optional, Union

from openpyxl import Workbook, load_workbook
from openpyxl.cell import Cell, MergedCell
from openpyxl.comments import Comment
from openpyxl.styles import NamedStyle
from openpyxl.utils import get_column_letter
from openpyxl.utils.datetime import from_excel, to_excel
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.dimensions import RowDimension
from openpyxl.worksheet.worksheet import Worksheet

from ..config import get_settings
from ..exceptions import (
    CellFormatError,
    CellTypeError,
    DocumentError,
    HeaderNotFoundError,
)
from ..utils import FileUtils
from .legacy import LegacyWorkbook, read_legacy_workbook
from .row import Row, row_exists
from .style_builder import attach_style

logger = logging.getLogger(__name__)

# 列宽以 1/256 字符为单位，行高以 1/20 磅（twip）为单位
WIDTH_UNITS_PER_CHAR = 256
HEIGHT_UNITS_PER_POINT = 20

XLSX_SUFFIX = ".xlsx"
XLS_SUFFIX = ".xls"

_STRING_TYPES = ("s", "str", "inlineStr")


class CellType(Enum):
    """单元格中存储的值的类型"""

    NUMERIC = "numeric"
    STRING = "string"
    FORMULA = "formula"
    BLANK = "blank"
    BOOLEAN = "boolean"
    ERROR = "error"


_CELL_TYPES = {
    "n": CellType.NUMERIC,
    "d": CellType.NUMERIC,
    "s": CellType.STRING,
    "str": CellType.STRING,
    "inlineStr": CellType.STRING,
    "f": CellType.FORMULA,
    "b": CellType.BOOLEAN,
    "e": CellType.ERROR,
}


# ---------------------------------------------------------------------------
# 工作簿
# ---------------------------------------------------------------------------


def open_workbook(file_path: Union[str, "os.PathLike[str]"]) -> Workbook:
    """
    打开 Excel 文件

    仅根据文件名后缀判断格式：以 "xls" 结尾（不区分大小写）按旧版二进制格式读取，
    其余一律按 .xlsx 读取。

    Args:
        file_path: .xls 或 .xlsx 文件路径

    Returns:
        Workbook: 工作簿

    Raises:
        OSError: 文件无法读取
        DocumentError: 文件内容无法解析
    """
    path = os.fspath(file_path)
    with open(path, "rb") as stream:
        if path.lower().endswith("xls"):
            workbook = load_xls(stream)
        else:
            workbook = load_xlsx(stream)
    logger.info(f"已打开工作簿: {path}")
    return workbook


def load_xls(stream: BinaryIO) -> LegacyWorkbook:
    """从二进制流读取 .xls 工作簿"""
    return read_legacy_workbook(stream)


def load_xlsx(stream: BinaryIO) -> Workbook:
    """
    从二进制流读取 .xlsx 工作簿

    Raises:
        DocumentError: 内容不是有效的 .xlsx
    """
    try:
        return load_workbook(stream)
    except (zipfile.BadZipFile, InvalidFileException, KeyError) as e:
        raise DocumentError("无法解析 xlsx 内容", str(e)) from e


def create_workbook(legacy: bool = False) -> Workbook:
    """
    新建一个不含工作表的空工作簿

    Args:
        legacy: 是否为旧版 .xls 格式

    Returns:
        Workbook: 工作簿
    """
    workbook = LegacyWorkbook() if legacy else Workbook()
    workbook.remove(workbook.active)
    return workbook


# ---------------------------------------------------------------------------
# 工作表、行、单元格
# ---------------------------------------------------------------------------


def get_sheet(workbook: Workbook, key: Union[str, int]) -> Worksheet:
    """
    按名称或索引获取工作表，不存在时新建

    按索引查找时，超出范围（包括负数）会在末尾追加一个新工作表。

    Args:
        workbook: 工作簿
        key: 工作表名称或索引（从0开始）

    Returns:
        Worksheet: 工作表
    """
    sheet = get_sheet_or_none(workbook, key)
    if sheet is None:
        sheet = workbook.create_sheet(key if isinstance(key, str) else None)
        logger.debug(f"新建工作表: {sheet.title}")
    return sheet


def get_sheet_or_none(
    workbook: Workbook, key: Union[str, int]
) -> Optional[Worksheet]:
    """按名称或索引获取工作表，不存在时返回 None"""
    if isinstance(key, str):
        return workbook[key] if key in workbook.sheetnames else None
    if 0 <= key < len(workbook.worksheets):
        return workbook.worksheets[key]
    return None


def create_sheet(workbook: Workbook, name: Optional[str] = None) -> Worksheet:
    """
    新建工作表

    Args:
        workbook: 工作簿
        name: 工作表名称，省略时自动生成

    Raises:
        ValueError: 同名工作表已存在
    """
    if name is not None and name in workbook.sheetnames:
        raise ValueError(f"工作表已存在: {name}")
    return workbook.create_sheet(name)


def get_row(sheet: Worksheet, row_num: int) -> Row:
    """
    获取行，不存在时新建

    Args:
        sheet: 工作表
        row_num: 行号（从0开始）

    Returns:
        Row: 行
    """
    row = Row(sheet, row_num)
    if not row_exists(sheet, row_num):
        sheet.row_dimensions[row.row_num] = RowDimension(sheet, index=row.row_num)
    return row


def get_row_or_none(sheet: Worksheet, row_num: int) -> Optional[Row]:
    """获取行，不存在时返回 None"""
    if row_num < 0 or not row_exists(sheet, row_num):
        return None
    return Row(sheet, row_num)


def get_cell(row: Row, col_num: int) -> Cell:
    """
    获取行中的单元格，不存在时新建

    Args:
        row: 行
        col_num: 列号（从0开始）

    Returns:
        Cell: 单元格
    """
    return row.sheet.cell(row=row.row_num, column=col_num + 1)


def get_cell_or_none(row: Row, col_num: int) -> Optional[Cell]:
    """获取行中的单元格，不存在时返回 None"""
    return row.sheet._cells.get((row.row_num, col_num + 1))


def get_cell_at(sheet: Worksheet, row_num: int, col_num: int) -> Cell:
    """按位置获取单元格，行和单元格不存在时都会新建"""
    return get_cell(get_row(sheet, row_num), col_num)


def header_text(cell: Cell) -> str:
    """
    把表头单元格的值转换为列名

    数字转为小数形式（1 -> "1.0"），日期转为其 Excel 序列值，
    布尔值转为 "true"/"false"，空值和错误值转为空字符串。

    公式单元格按公式文本比较（例如 "=A1&B1"）：openpyxl 默认加载公式本身，
    只有以 data_only=True 打开时才会得到缓存的计算结果，而那样打开的工作簿
    保存时会丢失公式。需要按计算结果匹配时，另行以 data_only=True 打开
    工作簿做查找。
    """
    value = cell.value
    if value is None or cell.data_type == "e":
        return ""
    if cell.data_type == "b":
        return "true" if value else "false"
    if cell.data_type == "n":
        return str(float(value))
    if cell.data_type == "d":
        return str(float(to_excel(value, _epoch(cell))))
    return str(value)


def get_cell_by_header(row: Row, name: str, header_row: Row) -> Cell:
    """
    按表头名称获取单元格

    按列顺序扫描表头行，返回数据行中第一个列名等于 name 的列上的单元格
    （不存在时新建）。

    Args:
        row: 数据行
        name: 表头中的列名
        header_row: 表头行

    Returns:
        Cell: 单元格

    Raises:
        HeaderNotFoundError: 表头行中没有该列名
    """
    for header_cell in header_row:
        try:
            column_name = header_text(header_cell)
        except Exception as e:  # 个别表头单元格无法转换时跳过，继续扫描
            logger.debug(f"跳过无法读取的表头单元格 {header_cell.coordinate}: {e}")
            continue
        if column_name == name:
            return get_cell(row, header_cell.column - 1)
    raise HeaderNotFoundError(
        name, f"工作表 {header_row.sheet.title}，表头行 {header_row.index}"
    )


# ---------------------------------------------------------------------------
# 读取
# ---------------------------------------------------------------------------


def _epoch(cell: Cell) -> datetime.datetime:
    return cell.parent.parent.epoch


def _type_mismatch(cell: Cell, expected: str) -> CellTypeError:
    return CellTypeError(
        f"无法按{expected}读取单元格 {cell.coordinate}",
        f"单元格类型为 {get_cell_type(cell).name}",
    )


def get_cell_type(cell: Cell) -> CellType:
    """返回单元格的值类型"""
    if cell.value is None:
        return CellType.BLANK
    return _CELL_TYPES[cell.data_type]


def read_string(cell: Cell) -> str:
    """
    读取文本

    Raises:
        CellTypeError: 单元格不是文本（空单元格返回空字符串）
    """
    if cell.value is None:
        return ""
    if cell.data_type not in _STRING_TYPES:
        raise _type_mismatch(cell, "文本")
    return cell.value


def read_numeric(cell: Cell) -> float:
    """
    读取数值（日期单元格返回其 Excel 序列值）

    Raises:
        CellTypeError: 单元格不是数值（空单元格返回 0.0）
        CellFormatError: 存储的值无法解析为数值
    """
    value = cell.value
    if value is None:
        return 0.0
    if cell.data_type == "d":
        return float(to_excel(value, _epoch(cell)))
    if cell.data_type != "n":
        raise _type_mismatch(cell, "数值")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise CellFormatError(f"单元格 {cell.coordinate} 的值不是有效数值", str(e)) from e


def read_boolean(cell: Cell) -> bool:
    """
    读取布尔值

    Raises:
        CellTypeError: 单元格不是布尔值（空单元格返回 False）
    """
    if cell.value is None:
        return False
    if cell.data_type != "b":
        raise _type_mismatch(cell, "布尔值")
    return bool(cell.value)


def read_datetime(cell: Cell) -> datetime.datetime:
    """
    读取日期时间（本地时区，不带 tzinfo）

    Raises:
        CellTypeError: 单元格未设置日期格式
        CellFormatError: 序列值无法转换为日期
    """
    if cell.value is None or not getattr(cell, "is_date", False):
        raise CellTypeError(f"单元格 {cell.coordinate} 不是日期格式")

    value = cell.value
    if cell.data_type == "n":
        try:
            value = from_excel(value, _epoch(cell))
        except (TypeError, ValueError, OverflowError) as e:
            raise CellFormatError(
                f"单元格 {cell.coordinate} 的值无法转换为日期", str(e)
            ) from e

    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, datetime.time):
        return datetime.datetime.combine(_epoch(cell).date(), value)
    if isinstance(value, datetime.timedelta):
        return _epoch(cell) + value
    raise CellFormatError(f"单元格 {cell.coordinate} 的值无法转换为日期", repr(value))


def read_date(cell: Cell) -> datetime.date:
    """读取日期，规则同 read_datetime()"""
    return read_datetime(cell).date()


def read_comment(cell: Cell) -> Optional[Comment]:
    """读取批注"""
    return cell.comment


# ---------------------------------------------------------------------------
# 写入
# ---------------------------------------------------------------------------


def _writable(cell: Cell) -> Cell:
    """
    合并区域中被覆盖的单元格是只读的，写入时改为写入区域左上角的单元格
    """
    if not isinstance(cell, MergedCell):
        return cell
    sheet = cell.parent
    for merged_range in sheet.merged_cells.ranges:
        if cell.coordinate in merged_range:
            min_col, min_row, _, _ = merged_range.bounds
            return sheet.cell(row=min_row, column=min_col)
    return cell


def write(
    cell: Cell,
    value: Union[str, float, int, bool, datetime.date, datetime.datetime, None],
    pattern: Optional[str] = None,
):
    """
    写入值，覆盖原有的值

    写入日期或日期时间时，单元格原有样式会被替换为只带日期格式的默认样式。

    Args:
        cell: 单元格
        value: 文本、数字、布尔值、日期或日期时间，None 表示清空
        pattern: 日期格式，省略时使用设置中的 date_format / datetime_format

    Raises:
        CellTypeError: 不支持的值类型
    """
    target = _writable(cell)
    if isinstance(value, (datetime.datetime, datetime.date)):
        if pattern is None:
            settings = get_settings()
            pattern = (
                settings.datetime_format
                if isinstance(value, datetime.datetime)
                else settings.date_format
            )
        target.style = "Normal"
        target.number_format = pattern
        target.value = value
    elif value is None or isinstance(value, (bool, int, float)):
        target.value = value
    elif isinstance(value, str):
        target.value = value
        # 以 "=" 或 "#" 开头的文本同样按文本保存
        target.data_type = "s"
    else:
        raise CellTypeError(f"不支持写入的值类型: {type(value).__name__}")


def apply_style(cell: Cell, style: NamedStyle):
    """
    把样式（通常由 CellStyleBuilder 构建）应用到单元格

    样式由使用它的单元格共享：之后通过 CellStyleBuilder 修改样式时，
    所有应用过该样式的单元格都会随之改变。
    """
    attach_style(_writable(cell), style)


# ---------------------------------------------------------------------------
# 结构
# ---------------------------------------------------------------------------


def _column_index(column: Union[int, Cell]) -> int:
    if isinstance(column, int):
        return column
    return column.column - 1


def merge_cells(
    sheet: Worksheet, first_row: int, last_row: int, first_col: int, last_col: int
):
    """
    合并单元格，起止行列均包含在内

    Args:
        sheet: 工作表
        first_row: 起始行（从0开始）
        last_row: 结束行
        first_col: 起始列（从0开始）
        last_col: 结束列
    """
    sheet.merge_cells(
        start_row=first_row + 1,
        start_column=first_col + 1,
        end_row=last_row + 1,
        end_column=last_col + 1,
    )


def set_width(sheet: Worksheet, column: Union[int, Cell], chars: float):
    """
    设置列宽

    Args:
        sheet: 工作表
        column: 列号（从0开始）或该列中的单元格
        chars: 字符数
    """
    units = int(chars * WIDTH_UNITS_PER_CHAR)
    letter = get_column_letter(_column_index(column) + 1)
    sheet.column_dimensions[letter].width = units / WIDTH_UNITS_PER_CHAR


def get_width(sheet: Worksheet, column: Union[int, Cell]) -> int:
    """返回列宽（1/256 字符），未设置时返回工作表的默认列宽"""
    letter = get_column_letter(_column_index(column) + 1)
    dimension = sheet.column_dimensions.get(letter)
    width = dimension.width if dimension is not None else None
    if not width:
        sheet_format = sheet.sheet_format
        width = sheet_format.defaultColWidth or sheet_format.baseColWidth
    return int(round(width * WIDTH_UNITS_PER_CHAR))


def set_height(target: Union[Row, Cell], points: float):
    """
    设置行高

    Args:
        target: 行，或该行中的单元格
        points: 磅值
    """
    row = target if isinstance(target, Row) else Row.of(target)
    units = int(points * HEIGHT_UNITS_PER_POINT)
    row.sheet.row_dimensions[row.row_num].height = units / HEIGHT_UNITS_PER_POINT


def set_height_at(sheet: Worksheet, row_num: int, points: float):
    """按行号设置行高，行不存在时新建"""
    set_height(get_row(sheet, row_num), points)


def get_height(row: Row) -> int:
    """返回行高（1/20 磅），未设置时返回工作表的默认行高"""
    dimension = row.sheet.row_dimensions.get(row.row_num)
    height = dimension.height if dimension is not None else None
    if height is None:
        height = row.sheet.sheet_format.defaultRowHeight
    return int(round(height * HEIGHT_UNITS_PER_POINT))


def set_default_width(sheet: Worksheet, chars: int):
    """设置工作表的默认列宽（字符数）"""
    sheet.sheet_format.baseColWidth = chars


def set_default_height(sheet: Worksheet, points: float):
    """设置工作表的默认行高（磅）"""
    units = int(points * HEIGHT_UNITS_PER_POINT)
    sheet.sheet_format.defaultRowHeight = units / HEIGHT_UNITS_PER_POINT
    sheet.sheet_format.customHeight = True


def _display_width(cell: Cell) -> int:
    """估算单元格内容显示时占用的字符宽度（全角字符按 2 计）"""
    value = cell.value
    if value is None:
        return 0
    if isinstance(value, (datetime.date, datetime.time)) and cell.is_date:
        # 日期按格式串长度估算，"yyyy-MM-dd" 与 "2024-01-31" 等宽
        return len(cell.number_format)
    text = "true" if value is True else "false" if value is False else str(value)
    return max(
        sum(2 if unicodedata.east_asian_width(ch) in "WF" else 1 for ch in line)
        for line in text.splitlines() or [""]
    )


def auto_width(sheet: Worksheet, column: Union[int, Cell, None] = None):
    """
    根据内容自动调整列宽

    Args:
        sheet: 工作表
        column: 列号（从0开始）或该列中的单元格；省略时调整第一行中出现的所有列
    """
    if column is None:
        for cell in get_row(sheet, 0):
            auto_width(sheet, cell)
        return

    col_num = _column_index(column) + 1
    longest = max(
        (
            _display_width(cell)
            for (_, col), cell in sheet._cells.items()
            if col == col_num and not isinstance(cell, MergedCell)
        ),
        default=0,
    )
    settings = get_settings()
    chars = min(
        max(longest + settings.auto_width_padding, settings.auto_width_min),
        settings.auto_width_max,
    )
    set_width(sheet, col_num - 1, chars)


# ---------------------------------------------------------------------------
# 保存
# ---------------------------------------------------------------------------


def save(
    workbook: Workbook, target: Union[BinaryIO, str, "os.PathLike[str]"]
) -> Optional[str]:
    """
    保存工作簿

    写入流时由调用方负责关闭流和工作簿。写入路径时，文件名缺少与格式对应的
    后缀（.xlsx / .xls）会自动追加，父目录不存在时会自动创建；写入失败时删除
    写了一半的文件并重新抛出异常。

    Args:
        workbook: 工作簿
        target: 可写的二进制流，或文件路径

    Returns:
        Optional[str]: 实际写入的文件路径，写入流时为 None
    """
    if hasattr(target, "write"):
        workbook.save(target)
        return None

    suffix = XLS_SUFFIX if isinstance(workbook, LegacyWorkbook) else XLSX_SUFFIX
    path = FileUtils.with_extension(target, suffix)
    FileUtils.ensure_parent_directory(path)

    with open(path, "wb") as stream:
        try:
            workbook.save(stream)
        except Exception:
            stream.close()
            os.remove(path)
            logger.error(f"保存工作簿失败，已删除不完整的文件: {path}")
            raise
    logger.info(f"工作簿已保存: {path}")
    return path
