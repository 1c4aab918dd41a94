"""
库设置

管理日期格式、自动列宽等可调整的默认值。
配置来源优先级：环境变量 > 配置文件 > 内置默认值。
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from typing import Dict, Optional, Any

from dotenv import load_dotenv

from ..exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "xelhua.json"

# 环境变量名 -> 设置项
ENV_OVERRIDES = {
    "XELHUA_DATE_FORMAT": "date_format",
    "XELHUA_DATETIME_FORMAT": "datetime_format",
    "XELHUA_LOG_LEVEL": "log_level",
    "XELHUA_AUTO_WIDTH_PADDING": "auto_width_padding",
}


@dataclass
class Settings:
    """库设置数据类"""

    date_format: str = "yyyy-MM-dd"
    datetime_format: str = "yyyy-MM-dd HH:mm:ss"
    auto_width_padding: int = 2  # 自动列宽时在最长内容之外追加的字符数
    auto_width_min: int = 8
    auto_width_max: int = 255  # Excel 列宽上限（字符）
    log_level: str = "INFO"

    def to_dict(self) -> Dict:
        """转换为字典"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "Settings":
        """从字典创建设置，忽略未知的键"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"忽略未知的设置项: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})


class Config:
    """配置管理器"""

    def __init__(
        self, config_file: str = DEFAULT_CONFIG_FILE, load_env_file: bool = True
    ):
        """
        初始化配置管理器

        Args:
            config_file: 配置文件路径
            load_env_file: 是否先把 .env 文件加载到环境变量（不覆盖已有的环境变量）
        """
        self.config_file = config_file
        self.settings = self._load_settings()
        self.apply_environment(load_env_file)

    def _load_settings(self) -> Settings:
        """
        加载设置

        Returns:
            Settings: 设置对象
        """
        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                    settings = Settings.from_dict(data)
                    logger.info(f"成功加载配置文件: {self.config_file}")
                    return settings
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"加载配置文件失败: {e}，使用默认设置")
        else:
            logger.debug("配置文件不存在，使用默认设置")

        return Settings()

    def apply_environment(self, load_env_file: bool = True):
        """
        用环境变量覆盖设置

        Args:
            load_env_file: 是否先加载 .env 文件，已有的环境变量不会被覆盖

        Raises:
            ConfigError: 环境变量的值无法转换为设置项的类型
        """
        if load_env_file:
            load_dotenv(override=False)
        for env_key, attr in ENV_OVERRIDES.items():
            raw = os.getenv(env_key)
            if raw is None or raw == "":
                continue

            current = getattr(self.settings, attr)
            if isinstance(current, int):
                try:
                    value: Any = int(raw)
                except ValueError as e:
                    raise ConfigError(f"环境变量 {env_key} 必须是整数", str(e)) from e
            else:
                value = raw

            setattr(self.settings, attr, value)
            logger.debug(f"环境变量 {env_key} 覆盖设置 {attr}={value}")

    def save_settings(self) -> bool:
        """
        保存设置

        Returns:
            bool: 是否保存成功
        """
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings.to_dict(), f, ensure_ascii=False, indent=2)
            logger.info(f"配置已保存到: {self.config_file}")
            return True
        except OSError as e:
            logger.error(f"保存配置文件失败: {e}")
            return False

    def get_setting(self, key: str) -> Optional[Any]:
        """
        获取设置值

        Args:
            key: 设置键名

        Returns:
            设置值，如果不存在则返回 None
        """
        return getattr(self.settings, key, None)

    def set_setting(self, key: str, value) -> bool:
        """
        设置配置值

        Args:
            key: 设置键名
            value: 设置值

        Returns:
            bool: 是否设置成功
        """
        if hasattr(self.settings, key):
            setattr(self.settings, key, value)
            return True
        else:
            logger.warning(f"未知的设置项: {key}")
            return False

    def reset_to_defaults(self):
        """重置为默认设置"""
        self.settings = Settings()
        logger.info("配置已重置为默认值")


_config: Optional[Config] = None


def get_settings() -> Settings:
    """
    获取进程级共享的设置（首次调用时加载）

    配置文件路径可通过环境变量 XELHUA_CONFIG 指定。共享设置只读取已有的
    环境变量，不加载 .env 文件；需要 .env 时显式创建 Config。
    """
    global _config
    if _config is None:
        _config = Config(
            os.getenv("XELHUA_CONFIG", DEFAULT_CONFIG_FILE), load_env_file=False
        )
    return _config.settings


def reset_settings():
    """丢弃已缓存的设置，下次 get_settings() 时重新加载"""
    global _config
    _config = None
