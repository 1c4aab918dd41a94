"""
日志工具

提供日志配置和管理的工具函数。库本身只通过 logging.getLogger(__name__)
记录日志，不会在导入时添加任何处理器；需要落盘时由调用方显式调用
LoggerUtils.setup_logging()。setup_logging() 只在包日志器 "xelhua" 上安装处理器，
不会改动根日志器和其他库的日志配置。
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

PACKAGE_LOGGER = "xelhua"

logger = logging.getLogger(__name__)


class LoggerUtils:
    """日志工具类"""

    @staticmethod
    def _get_log_directory(log_dir: str) -> str:
        """
        获取日志目录路径，优先使用当前工作目录，否则使用用户主目录

        Args:
            log_dir: 日志目录名称

        Returns:
            str: 日志目录的绝对路径
        """
        preferred_log_dir = os.path.join(os.getcwd(), log_dir)

        # 测试是否有写入权限
        try:
            os.makedirs(preferred_log_dir, exist_ok=True)
            test_file = os.path.join(preferred_log_dir, ".write_test")
            with open(test_file, "w") as f:
                f.write("test")
            os.remove(test_file)
            return preferred_log_dir
        except OSError:
            home_dir = os.path.expanduser("~")
            fallback_log_dir = os.path.join(home_dir, ".xelhua", log_dir)
            os.makedirs(fallback_log_dir, exist_ok=True)
            return fallback_log_dir

    @staticmethod
    def setup_logging(
        log_level: Optional[str] = None,
        log_dir: str = "logs",
        log_file: str = "xelhua.log",
        quiet_console: bool = True,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
    ):
        """
        设置日志配置

        Args:
            log_level: 日志级别，None 时使用设置中的 log_level
            log_dir: 日志目录名称（相对路径）
            log_file: 日志文件名
            quiet_console: 是否静默控制台输出（只显示 WARNING 及以上）
            max_bytes: 单个日志文件最大字节数（默认10MB）
            backup_count: 保留的备份文件数量（默认5个）
        """
        if log_level is None:
            from xelhua.config import get_settings

            log_level = get_settings().log_level

        actual_log_dir = LoggerUtils._get_log_directory(log_dir)

        # 文件使用详细格式，控制台使用简洁格式
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_formatter = logging.Formatter("%(levelname)s: %(message)s")

        # 清除之前安装的处理器
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()

        level = getattr(logging, log_level.upper(), logging.INFO)
        package_logger.setLevel(level)

        log_file_path = os.path.join(actual_log_dir, log_file)
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(level)
        package_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        if quiet_console:
            console_handler.setFormatter(console_formatter)
            console_handler.setLevel(logging.WARNING)
        else:
            console_handler.setFormatter(file_formatter)
            console_handler.setLevel(level)
        package_logger.addHandler(console_handler)

        logger.info(
            f"日志系统已初始化：目录={actual_log_dir}, 级别={log_level}, 最大={max_bytes/1024/1024:.1f}MB, 备份={backup_count}"
        )

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        """
        获取指定名称的日志器

        Args:
            name: 日志器名称

        Returns:
            logging.Logger: 日志器实例
        """
        return logging.getLogger(name)

    @staticmethod
    def set_temp_log_level(
        level: str, target_handlers: Optional[List[logging.Handler]] = None
    ):
        """
        临时设置日志级别，用于静默某些操作

        Args:
            level: 日志级别
            target_handlers: 目标处理器列表，None表示包日志器本身
        """
        log_level = getattr(logging, level.upper(), logging.INFO)
        package_logger = logging.getLogger(PACKAGE_LOGGER)

        if target_handlers is None:
            package_logger.setLevel(log_level)
        else:
            for handler in package_logger.handlers:
                if handler in target_handlers:
                    handler.setLevel(log_level)

    @staticmethod
    def log_package_info():
        """记录表格引擎相关包的版本信息"""
        import openpyxl
        import pandas
        import xlrd
        import xlwt

        logger.info("=== 包版本信息 ===")
        logger.info(f"openpyxl: {openpyxl.__version__}")
        logger.info(f"xlrd: {xlrd.__VERSION__}")
        logger.info(f"xlwt: {xlwt.__VERSION__}")
        logger.info(f"pandas: {pandas.__version__}")
