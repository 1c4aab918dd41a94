"""
文件操作工具

提供保存工作簿时用到的路径处理函数。
"""

import logging
import os
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class FileUtils:
    """文件操作工具类"""

    @staticmethod
    def ensure_parent_directory(file_path: PathLike) -> str:
        """
        确保文件所在的目录存在，如果不存在则创建

        Args:
            file_path: 文件路径

        Returns:
            str: 父目录路径（文件位于当前目录时为空字符串）
        """
        directory = os.path.dirname(os.fspath(file_path))
        if directory and not os.path.isdir(directory):
            os.makedirs(directory, exist_ok=True)
            logger.info(f"创建目录: {directory}")
        return directory

    @staticmethod
    def with_extension(file_path: PathLike, suffix: str) -> str:
        """
        文件名不以指定后缀结尾时追加该后缀

        Args:
            file_path: 文件路径
            suffix: 后缀（包含点号，例如 ".xlsx"）

        Returns:
            str: 带后缀的文件路径
        """
        path = os.fspath(file_path)
        if path.endswith(suffix):
            return path
        return path + suffix
