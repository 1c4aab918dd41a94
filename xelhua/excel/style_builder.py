"""
单元格样式构建器

包装工作簿命名样式表中的一个 NamedStyle，链式设置填充、对齐、边框和字体。

openpyxl 在把样式赋给单元格时会复制样式的各项索引，之后修改 NamedStyle
不会影响已经使用它的单元格。因此通过 attach_style() 应用的样式会记录其
使用者，构建器每次修改样式后把新样式重新应用到这些单元格上，
使同一样式的所有单元格保持一致。
"""

from copy import copy
from typing import Dict, Optional, Set

from openpyxl import Workbook
from openpyxl.cell import Cell
from openpyxl.styles import NamedStyle, PatternFill, Side
from openpyxl.styles.colors import Color
from openpyxl.styles.fonts import Font

from .colors import ColorLike, to_color

_USERS_ATTR = "_xelhua_style_users"


def _style_users(workbook: Workbook) -> Dict[str, Set[Cell]]:
    """工作簿中 样式名称 -> 使用该样式的单元格"""
    users = getattr(workbook, _USERS_ATTR, None)
    if users is None:
        users = {}
        setattr(workbook, _USERS_ATTR, users)
    return users


def attach_style(cell: Cell, style: NamedStyle):
    """
    把命名样式应用到单元格，并登记该单元格为样式的使用者

    Args:
        cell: 单元格
        style: 命名样式（尚未登记到工作簿时会自动登记）
    """
    cell.style = style
    users = _style_users(cell.parent.parent)
    for cells in users.values():
        cells.discard(cell)
    users.setdefault(style.name, set()).add(cell)


def _is_user(cell: Cell, style_name: str) -> bool:
    """单元格仍在工作表中，且当前样式就是 style_name"""
    sheet = cell.parent
    return (
        sheet._cells.get((cell.row, cell.column)) is cell and cell.style == style_name
    )


def restyle_users(workbook: Workbook, style: NamedStyle):
    """
    把样式重新应用到登记过的使用者上

    之后被改为其他样式（例如写入日期）或已从工作表删除的单元格不再登记。
    """
    cells = _style_users(workbook).get(style.name)
    if not cells:
        return
    for cell in list(cells):
        if _is_user(cell, style.name):
            cell.style = style
        else:
            cells.discard(cell)


def _unique_style_name(workbook: Workbook) -> str:
    """生成工作簿中尚未使用的样式名称"""
    names = set(workbook.named_styles)
    index = len(names)
    while f"Style {index}" in names:
        index += 1
    return f"Style {index}"


class CellStyleBuilder:
    """单元格样式构建器"""

    def __init__(self, style: NamedStyle, workbook: Optional[Workbook] = None):
        """
        Args:
            style: 要修改的命名样式
            workbook: 样式所在的工作簿，省略时取样式登记时绑定的工作簿
        """
        self._style = style
        self._workbook = workbook if workbook is not None else getattr(style, "_wb", None)

    @classmethod
    def create(cls, workbook: Workbook, name: Optional[str] = None) -> "CellStyleBuilder":
        """
        在工作簿中新建一个样式

        Args:
            workbook: 工作簿
            name: 样式名称，省略时自动生成

        Returns:
            CellStyleBuilder: 构建器
        """
        style = NamedStyle(name=name or _unique_style_name(workbook))
        workbook.add_named_style(style)
        return cls(style, workbook)

    @classmethod
    def at(cls, workbook: Workbook, index: int) -> "CellStyleBuilder":
        """
        按索引获取工作簿中已有的样式，修改会作用到使用该样式的单元格

        Args:
            workbook: 工作簿
            index: 样式在命名样式表中的索引
        """
        return cls(workbook._named_styles[index], workbook)

    @classmethod
    def of_cell(cls, cell: Cell) -> "CellStyleBuilder":
        """
        获取单元格当前的样式，修改会作用到该单元格

        单元格通过 attach_style() 使用某个样式时，返回该样式本身，修改会同时作用到
        共用该样式的其他单元格。否则以单元格当前的外观新建一个样式并应用到单元格上。

        Args:
            cell: 单元格
        """
        workbook = cell.parent.parent
        name = cell.style
        if cell in _style_users(workbook).get(name, ()):
            index = workbook.named_styles.index(name)
            return cls(workbook._named_styles[index], workbook)

        builder = cls.create(workbook)
        style = builder._style
        style.font = copy(cell.font)
        style.fill = copy(cell.fill)
        style.border = copy(cell.border)
        style.alignment = copy(cell.alignment)
        style.protection = copy(cell.protection)
        style.number_format = cell.number_format
        attach_style(cell, style)
        return builder

    def _changed(self) -> "CellStyleBuilder":
        if self._workbook is not None:
            restyle_users(self._workbook, self._style)
        return self

    def background(
        self,
        color: ColorLike,
        fill_pattern: str = "solid",
        background: Optional[ColorLike] = None,
    ) -> "CellStyleBuilder":
        """
        背景填充

        Args:
            color: 前景色（纯色填充时即为背景色）
            fill_pattern: 填充图案，默认纯色
            background: 图案的背景色，省略时保持不变

        Returns:
            CellStyleBuilder: 构建器
        """
        current = self._style.fill
        if background is not None:
            bg_color = to_color(background)
        elif isinstance(current, PatternFill):
            bg_color = copy(current.bgColor)
        else:
            bg_color = Color()
        self._style.fill = PatternFill(
            fill_type=fill_pattern, fgColor=to_color(color), bgColor=bg_color
        )
        return self._changed()

    def align(
        self, horizontal: Optional[str] = None, vertical: Optional[str] = None
    ) -> "CellStyleBuilder":
        """
        对齐方式

        Args:
            horizontal: 水平对齐（left、center、right 等）
            vertical: 垂直对齐（top、center、bottom 等）

        Returns:
            CellStyleBuilder: 构建器
        """
        alignment = copy(self._style.alignment)
        if horizontal is not None:
            alignment.horizontal = horizontal
        if vertical is not None:
            alignment.vertical = vertical
        self._style.alignment = alignment
        return self._changed()

    def _edge(
        self, edge: str, style: Optional[str], color: Optional[ColorLike]
    ) -> "CellStyleBuilder":
        border = copy(self._style.border)
        side = getattr(border, edge) or Side()
        if style is not None:
            side.style = style
        if color is not None:
            side.color = to_color(color)
        setattr(border, edge, side)
        self._style.border = border
        return self._changed()

    def border_top(
        self, style: Optional[str] = None, color: Optional[ColorLike] = None
    ) -> "CellStyleBuilder":
        """上边框的线型和/或颜色"""
        return self._edge("top", style, color)

    def border_left(
        self, style: Optional[str] = None, color: Optional[ColorLike] = None
    ) -> "CellStyleBuilder":
        """左边框的线型和/或颜色"""
        return self._edge("left", style, color)

    def border_right(
        self, style: Optional[str] = None, color: Optional[ColorLike] = None
    ) -> "CellStyleBuilder":
        """右边框的线型和/或颜色"""
        return self._edge("right", style, color)

    def border_bottom(
        self, style: Optional[str] = None, color: Optional[ColorLike] = None
    ) -> "CellStyleBuilder":
        """下边框的线型和/或颜色"""
        return self._edge("bottom", style, color)

    def font(self, font: Font) -> "CellStyleBuilder":
        """
        字体，通常由 FontBuilder 构建

        Args:
            font: 字体

        Returns:
            CellStyleBuilder: 构建器
        """
        self._style.font = copy(font)
        return self._changed()

    def number_format(self, pattern: str) -> "CellStyleBuilder":
        """数字格式，例如 "0.00" 或 "yyyy-MM-dd" """
        self._style.number_format = pattern
        return self._changed()

    def get(self) -> NamedStyle:
        """
        完成构建

        Returns:
            NamedStyle: 样式
        """
        return self._style
