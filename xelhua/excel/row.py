"""
行视图

openpyxl 没有独立的行对象，单元格直接挂在工作表上。Row 以
(工作表, 0 起始行号) 表示一行，并按列顺序遍历该行中已存在的单元格。
"""

from typing import Iterator, List

from openpyxl.cell import Cell
from openpyxl.worksheet.dimensions import RowDimension
from openpyxl.worksheet.worksheet import Worksheet


class Row:
    """工作表中的一行"""

    __slots__ = ("sheet", "index")

    def __init__(self, sheet: Worksheet, index: int):
        """
        Args:
            sheet: 所属工作表
            index: 行号（从0开始）
        """
        if index < 0:
            raise ValueError(f"行号必须是非负整数: {index}")
        self.sheet = sheet
        self.index = index

    @classmethod
    def of(cls, cell: Cell) -> "Row":
        """返回单元格所在的行"""
        return cls(cell.parent, cell.row - 1)

    @property
    def row_num(self) -> int:
        """openpyxl 使用的行号（从1开始）"""
        return self.index + 1

    @property
    def dimension(self) -> RowDimension:
        """行尺寸（高度等），访问时会在工作表中登记该行"""
        return self.sheet.row_dimensions[self.row_num]

    def cells(self) -> List[Cell]:
        """该行已存在的单元格，按列顺序排列"""
        found = [
            (col, cell)
            for (row, col), cell in self.sheet._cells.items()
            if row == self.row_num
        ]
        return [cell for _, cell in sorted(found, key=lambda item: item[0])]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells())

    def __len__(self) -> int:
        return len(self.cells())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self.sheet is other.sheet and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.sheet), self.index))

    def __repr__(self) -> str:
        return f"<Row {self.sheet.title!r}[{self.index}]>"


def row_exists(sheet: Worksheet, index: int) -> bool:
    """
    判断行是否存在：该行有单元格，或已登记行尺寸

    Args:
        sheet: 工作表
        index: 行号（从0开始）
    """
    row_num = index + 1
    if row_num in sheet.row_dimensions:
        return True
    return any(row == row_num for row, _ in sheet._cells)
