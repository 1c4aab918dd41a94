"""
字体构建器
"""

from copy import copy
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles.fonts import DEFAULT_FONT, Font
from openpyxl.utils.indexed_list import IndexedList

from .colors import ColorLike, to_color


class FontBuilder:
    """字体构建器"""

    def __init__(self, font: Optional[Font] = None):
        """
        Args:
            font: 要修改的字体，省略时以工作簿默认字体为起点新建
        """
        self._font = font if font is not None else copy(DEFAULT_FONT)
        self._workbook: Optional[Workbook] = None
        self._index: Optional[int] = None

    @classmethod
    def at(cls, workbook: Workbook, index: int) -> "FontBuilder":
        """
        获取工作簿字体表中的字体，修改会作用到所有使用该字体的单元格和样式

        Args:
            workbook: 工作簿
            index: 字体索引
        """
        fonts = workbook._fonts
        # 字体表中的条目可能是 openpyxl 的模块级默认字体，替换为副本后再修改
        font = copy(fonts[index])
        list.__setitem__(fonts, index, font)
        workbook._fonts = IndexedList(fonts)

        builder = cls(font)
        builder._workbook = workbook
        builder._index = index
        return builder

    def _changed(self) -> "FontBuilder":
        workbook = self._workbook
        if workbook is None:
            return self
        # 字体表按值去重，条目被修改后重建索引
        workbook._fonts = IndexedList(workbook._fonts)
        for style in workbook._named_styles:
            if style.as_tuple().fontId == self._index:
                style.font = copy(self._font)
        return self

    def name(self, font_name: str) -> "FontBuilder":
        """字体名称"""
        self._font.name = font_name
        return self._changed()

    def color(self, color: ColorLike) -> "FontBuilder":
        """颜色"""
        self._font.color = to_color(color)
        return self._changed()

    def bold(self, bold: bool = True) -> "FontBuilder":
        """粗体"""
        self._font.b = bold
        return self._changed()

    def italic(self, italic: bool = True) -> "FontBuilder":
        """斜体"""
        self._font.i = italic
        return self._changed()

    def strikeout(self, strikeout: bool = True) -> "FontBuilder":
        """删除线"""
        self._font.strike = strikeout
        return self._changed()

    def underline(self, underline: bool = True) -> "FontBuilder":
        """单下划线"""
        self._font.u = "single" if underline else None
        return self._changed()

    def height(self, points: float) -> "FontBuilder":
        """
        字号

        Args:
            points: 磅值，按 1/20 磅取整
        """
        self._font.sz = int(points * 20) / 20
        return self._changed()

    def get(self) -> Font:
        """
        完成构建

        Returns:
            Font: 字体
        """
        return self._font
