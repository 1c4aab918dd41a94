"""
颜色

旧版 Excel 调色板（索引颜色）以及与 openpyxl Color 之间的转换。
"""

from enum import IntEnum
from typing import Optional, Union

from openpyxl.styles.colors import COLOR_INDEX, Color


class IndexedColors(IntEnum):
    """Excel 调色板中的索引颜色"""

    BLACK = 8
    WHITE = 9
    RED = 10
    BRIGHT_GREEN = 11
    BLUE = 12
    YELLOW = 13
    PINK = 14
    TURQUOISE = 15
    DARK_RED = 16
    GREEN = 17
    DARK_BLUE = 18
    DARK_YELLOW = 19
    VIOLET = 20
    TEAL = 21
    GREY_25_PERCENT = 22
    GREY_50_PERCENT = 23
    CORNFLOWER_BLUE = 24
    MAROON = 25
    LEMON_CHIFFON = 26
    LIGHT_TURQUOISE1 = 27
    ORCHID = 28
    CORAL = 29
    ROYAL_BLUE = 30
    LIGHT_CORNFLOWER_BLUE = 31
    SKY_BLUE = 40
    LIGHT_TURQUOISE = 41
    LIGHT_GREEN = 42
    LIGHT_YELLOW = 43
    PALE_BLUE = 44
    ROSE = 45
    LAVENDER = 46
    TAN = 47
    LIGHT_BLUE = 48
    AQUA = 49
    LIME = 50
    GOLD = 51
    LIGHT_ORANGE = 52
    ORANGE = 53
    BLUE_GREY = 54
    GREY_40_PERCENT = 55
    DARK_TEAL = 56
    SEA_GREEN = 57
    DARK_GREEN = 58
    OLIVE_GREEN = 59
    BROWN = 60
    PLUM = 61
    INDIGO = 62
    GREY_80_PERCENT = 63
    AUTOMATIC = 64


ColorLike = Union[IndexedColors, int, str, Color]


def to_color(value: ColorLike) -> Color:
    """
    转换为 openpyxl 的 Color

    Args:
        value: 索引颜色、调色板索引、aRGB 十六进制字符串或 Color

    Returns:
        Color: openpyxl 颜色对象
    """
    if isinstance(value, Color):
        return value
    if isinstance(value, int):
        return Color(indexed=int(value))
    return Color(rgb=value)


def color_index(color: Optional[Color]) -> Optional[int]:
    """
    获取颜色在调色板中的索引，无法映射（主题色、调色板外的 RGB）时返回 None

    Args:
        color: openpyxl 颜色对象

    Returns:
        Optional[int]: 调色板索引
    """
    if color is None:
        return None
    if color.type == "indexed":
        return color.indexed
    if color.type == "rgb" and isinstance(color.rgb, str):
        rgb = color.rgb.upper()
        if len(rgb) == 6:
            rgb = "00" + rgb
        # 调色板以 00RRGGBB 存储，忽略 alpha 通道比较；0-7 与 8-15 重复，从 8 开始
        for index in range(8, 64):
            if COLOR_INDEX[index][2:].upper() == rgb[2:]:
                return index
    return None
