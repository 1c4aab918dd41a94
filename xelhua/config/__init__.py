"""
配置管理模块

处理库的默认值配置和环境变量覆盖。
"""

from .settings import Config, Settings, get_settings, reset_settings

__all__ = ["Config", "Settings", "get_settings", "reset_settings"]
