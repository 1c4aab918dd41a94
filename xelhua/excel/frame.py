"""
表格导出

把工作表中表头行以下的数据读取为 pandas DataFrame。
"""

import logging

import pandas as pd
from openpyxl.worksheet.worksheet import Worksheet

from .base import get_cell_or_none, get_row_or_none, header_text

logger = logging.getLogger(__name__)


def sheet_to_dataframe(sheet: Worksheet, header_row: int = 0) -> pd.DataFrame:
    """
    把工作表读取为 DataFrame

    列名取自表头行（转换规则与按表头名称查找单元格相同），数据取自表头行
    之后的各行；表头为空的列以 "列N" 命名。读取不会在工作表中新建任何行或单元格。

    Args:
        sheet: 工作表
        header_row: 表头所在行号（从0开始）

    Returns:
        pd.DataFrame: 数据
    """
    header = get_row_or_none(sheet, header_row)
    if header is None:
        logger.warning(f"工作表 {sheet.title} 中没有第 {header_row} 行表头")
        return pd.DataFrame()

    columns = {}
    for cell in header:
        name = header_text(cell) or f"列{cell.column}"
        columns[cell.column - 1] = name

    rows = []
    for row_num in range(header_row + 1, sheet.max_row):
        row = get_row_or_none(sheet, row_num)
        if row is None:
            continue
        values = []
        for col_num in columns:
            cell = get_cell_or_none(row, col_num)
            values.append(cell.value if cell is not None else None)
        rows.append(values)

    logger.debug(f"工作表 {sheet.title} 读取了 {len(rows)} 行数据")
    return pd.DataFrame(rows, columns=list(columns.values()))
