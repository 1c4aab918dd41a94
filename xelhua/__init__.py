"""
xelhua

基于 openpyxl 的 Excel 便捷操作库：获取或创建工作表/行/单元格、
强类型读写、样式与字体构建器，并通过 xlrd/xlwt 兼容旧版 .xls 格式。
"""

__version__ = "1.1.0"
__author__ = "Elex"
__license__ = "Apache-2.0"

from .exceptions import (
    CellFormatError,
    CellTypeError,
    ConfigError,
    DocumentError,
    HeaderNotFoundError,
    XelhuaError,
)

__all__ = [
    "CellFormatError",
    "CellTypeError",
    "ConfigError",
    "DocumentError",
    "HeaderNotFoundError",
    "XelhuaError",
    "__version__",
]
