"""单元格样式构建器和字体构建器的单元测试"""

import datetime

from openpyxl.styles import Font
from openpyxl.styles.fonts import DEFAULT_FONT

from xelhua.excel import (
    CellStyleBuilder,
    FontBuilder,
    IndexedColors,
    apply_style,
    create_workbook,
    get_cell_at,
    get_sheet,
    write,
)


def _workbook_and_cell():
    wb = create_workbook()
    return wb, get_cell_at(get_sheet(wb, "Data"), 3, 3)


class TestCellStyleBuilder:
    """测试单元格样式构建器"""

    def test_methods_return_builder(self):
        """设置方法均返回构建器本身"""
        wb, _ = _workbook_and_cell()
        builder = CellStyleBuilder.create(wb)

        assert builder.background(IndexedColors.YELLOW) is builder
        assert builder.align(horizontal="center") is builder
        assert builder.border_top("thin") is builder
        assert builder.border_left("thin") is builder
        assert builder.border_right("thin") is builder
        assert builder.border_bottom("thin") is builder
        assert builder.font(FontBuilder().get()) is builder
        assert builder.number_format("0.00") is builder

    def test_create_registers_named_style(self):
        wb, _ = _workbook_and_cell()
        style = CellStyleBuilder.create(wb, "Header").get()

        assert style.name == "Header"
        assert "Header" in wb.named_styles

        unnamed = CellStyleBuilder.create(wb).get()
        assert unnamed.name in wb.named_styles
        assert unnamed.name != "Header"

    def test_apply_style_to_cell(self):
        """构建样式并应用到单元格"""
        wb, cell = _workbook_and_cell()
        font = FontBuilder().height(16).color(IndexedColors.RED).bold().get()
        style = (
            CellStyleBuilder.create(wb)
            .align(horizontal="center")
            .background(IndexedColors.YELLOW)
            .font(font)
            .get()
        )

        apply_style(cell, style)

        assert cell.style == style.name
        assert cell.alignment.horizontal == "center"
        assert cell.fill.fill_type == "solid"
        assert cell.fill.fgColor.indexed == IndexedColors.YELLOW
        assert cell.font.b is True
        assert cell.font.sz == 16
        assert cell.font.color.indexed == IndexedColors.RED

    def test_order_of_calls_does_not_matter(self):
        """设置不同属性的顺序不影响结果"""
        wb, _ = _workbook_and_cell()
        font = FontBuilder().italic().get()

        first = (
            CellStyleBuilder.create(wb)
            .background(IndexedColors.YELLOW)
            .align(horizontal="center", vertical="top")
            .border_top("thin")
            .border_top(color=IndexedColors.RED)
            .font(font)
            .get()
        )
        second = (
            CellStyleBuilder.create(wb)
            .font(font)
            .border_top("thin")
            .border_top(color=IndexedColors.RED)
            .align(horizontal="center", vertical="top")
            .background(IndexedColors.YELLOW)
            .get()
        )

        assert first.fill == second.fill
        assert first.alignment == second.alignment
        assert first.border == second.border
        assert first.font == second.font

    def test_border_edges(self):
        """各边框独立设置线型和颜色"""
        wb, _ = _workbook_and_cell()
        style = (
            CellStyleBuilder.create(wb)
            .border_top("thin", IndexedColors.RED)
            .border_bottom("double")
            .border_left(color=IndexedColors.BLUE)
            .get()
        )

        assert style.border.top.style == "thin"
        assert style.border.top.color.indexed == IndexedColors.RED
        assert style.border.bottom.style == "double"
        assert style.border.left.color.indexed == IndexedColors.BLUE
        assert style.border.left.style is None
        assert style.border.right.style is None

    def test_background_with_pattern(self):
        """带图案的填充，省略背景色时保留原有背景色"""
        wb, _ = _workbook_and_cell()
        builder = CellStyleBuilder.create(wb).background(
            IndexedColors.RED, "darkGrid", IndexedColors.BLUE
        )
        fill = builder.get().fill
        assert fill.fill_type == "darkGrid"
        assert fill.fgColor.indexed == IndexedColors.RED
        assert fill.bgColor.indexed == IndexedColors.BLUE

        fill = builder.background(IndexedColors.YELLOW).get().fill
        assert fill.fill_type == "solid"
        assert fill.fgColor.indexed == IndexedColors.YELLOW
        assert fill.bgColor.indexed == IndexedColors.BLUE

    def test_rgb_color(self):
        wb, _ = _workbook_and_cell()
        style = CellStyleBuilder.create(wb).background("FF00FF00").get()
        assert style.fill.fgColor.rgb == "FF00FF00"

    def test_of_cell_edits_the_cell(self):
        """修改单元格当前的样式会作用到该单元格，原有外观保留"""
        wb, cell = _workbook_and_cell()
        cell.font = Font(bold=True)
        cell.number_format = "0.00"

        style = CellStyleBuilder.of_cell(cell).align(horizontal="right").get()

        assert style.name in wb.named_styles
        assert cell.style == style.name
        assert cell.alignment.horizontal == "right"
        assert cell.font.b is True
        assert cell.number_format == "0.00"

    def test_of_cell_returns_shared_style(self):
        """单元格使用共享样式时，修改会作用到共用该样式的所有单元格"""
        wb, first = _workbook_and_cell()
        second = get_cell_at(first.parent, 0, 0)
        style = CellStyleBuilder.create(wb, "Shared").get()
        apply_style(first, style)
        apply_style(second, style)

        builder = CellStyleBuilder.of_cell(first)
        builder.border_bottom("thin")

        assert builder.get() is style
        assert second.border.bottom.style == "thin"
        assert first.border.bottom.style == "thin"

    def test_changing_style_restyles_cells_using_it(self):
        """修改已应用的样式，所有使用它的单元格随之改变"""
        wb, first = _workbook_and_cell()
        second = get_cell_at(first.parent, 0, 0)
        builder = CellStyleBuilder.create(wb).background(IndexedColors.YELLOW)
        apply_style(first, builder.get())
        apply_style(second, builder.get())

        builder.background(IndexedColors.RED).align(horizontal="center")

        for cell in (first, second):
            assert cell.fill.fgColor.indexed == IndexedColors.RED
            assert cell.alignment.horizontal == "center"

    def test_cells_switched_to_other_style_are_not_restyled(self):
        """改用其他样式或写入日期后，原样式的修改不再作用到该单元格"""
        wb, first = _workbook_and_cell()
        second = get_cell_at(first.parent, 0, 0)
        shared = CellStyleBuilder.create(wb).background(IndexedColors.YELLOW)
        other = CellStyleBuilder.create(wb).background(IndexedColors.BLUE)
        apply_style(first, shared.get())
        apply_style(second, shared.get())

        apply_style(first, other.get())
        write(second, datetime.date(2024, 1, 31))
        shared.background(IndexedColors.RED)

        assert first.fill.fgColor.indexed == IndexedColors.BLUE
        assert second.fill.fill_type is None
        assert second.number_format == "yyyy-MM-dd"

    def test_at_returns_existing_style(self):
        wb, _ = _workbook_and_cell()
        assert CellStyleBuilder.at(wb, 0).get().name == "Normal"

        created = CellStyleBuilder.create(wb, "Mine").get()
        index = wb.named_styles.index("Mine")
        assert CellStyleBuilder.at(wb, index).get() is created


class TestFontBuilder:
    """测试字体构建器"""

    def test_defaults(self):
        font = FontBuilder().get()
        assert font.name == "Calibri"
        assert font.sz == 11

    def test_flags(self):
        font = (
            FontBuilder()
            .name("Arial")
            .italic()
            .strikeout()
            .underline()
            .bold()
            .bold(False)
            .get()
        )

        assert font.name == "Arial"
        assert font.i is True
        assert font.strike is True
        assert font.u == "single"
        assert font.b is False

        assert FontBuilder(font).underline(False).get().u is None

    def test_height_rounds_to_twips(self):
        assert FontBuilder().height(10.52).get().sz == 10.5

    def test_at_edits_registered_font(self):
        """修改字体表中的字体，所有使用它的单元格随之改变"""
        wb, cell = _workbook_and_cell()
        other = get_cell_at(cell.parent, 0, 0)
        cell.font = Font(name="Arial")
        other.font = Font(name="Arial")

        FontBuilder.at(wb, cell._style.fontId).bold().height(14)

        for target in (cell, other):
            assert target.font.name == "Arial"
            assert target.font.b is True
            assert target.font.sz == 14

    def test_at_default_font_updates_normal_style(self):
        """修改默认字体会作用到默认样式，但不影响其他工作簿"""
        wb, cell = _workbook_and_cell()

        FontBuilder.at(wb, 0).bold()

        assert cell.font.b is True
        assert CellStyleBuilder.at(wb, 0).get().font.b is True
        assert not DEFAULT_FONT.b
        assert not FontBuilder().get().b
        _, fresh = _workbook_and_cell()
        assert not fresh.font.b
