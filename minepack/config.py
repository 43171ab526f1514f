"""
配置模块

加载 Minepack 的全局设置（API 地址、并发数、超时等）。
配置文件支持 toml / json / yaml 三种格式，按扩展名选择解析器。
"""

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import click
import toml
import yaml
from loguru import logger

from minepack.exceptions import ConfigParseError, ConfigValidationError

DEFAULT_API_URL = "https://api.modrinth.com/v2"
CONFIG_SUFFIXES = (".toml", ".json", ".yaml", ".yml")


@dataclass(frozen=True)
class Settings:
    """运行时设置"""

    api_base_url: str = DEFAULT_API_URL
    user_agent: str = "minepack (https://github.com/minepack/minepack)"
    request_timeout: float = 30.0
    max_concurrent: int = 8
    search_limit: int = 5
    max_retries: int = 3
    retry_delay: float = 1.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """从字典创建设置，忽略未知字段"""
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            key = key.replace("-", "_")
            if key not in known:
                logger.warning(f"忽略未知配置项: {key}")
                continue
            values[key] = value

        settings = cls(**values)
        settings.validate()
        return settings

    def validate(self) -> None:
        """验证设置取值"""
        if not isinstance(self.api_base_url, str) or not self.api_base_url.startswith(
            ("http://", "https://")
        ):
            raise ConfigValidationError(
                f"api_base_url 必须是 http(s) 地址: {self.api_base_url!r}"
            )
        for name in ("max_concurrent", "search_limit"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigValidationError(f"{name} 必须是正整数: {value!r}")
        if not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise ConfigValidationError(f"max_retries 必须是非负整数: {self.max_retries!r}")
        for name in ("request_timeout", "retry_delay"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigValidationError(f"{name} 必须是非负数: {value!r}")


def load_config(config_path: str) -> dict:
    """加载配置文件"""
    path = Path(config_path)

    if not path.exists():
        raise ConfigParseError(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            data = toml.load(config_path)
        elif suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        else:
            raise ConfigParseError(f"不支持的配置文件格式: {suffix}")
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(
            f"配置文件解析失败: {e}", context={"path": config_path}
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"配置文件顶层必须是表/对象: {config_path}")
    return data


def default_config_path() -> Optional[Path]:
    """在应用配置目录中查找第一个存在的配置文件"""
    app_dir = Path(click.get_app_dir("minepack"))
    for suffix in CONFIG_SUFFIXES:
        candidate = app_dir / f"config{suffix}"
        if candidate.exists():
            return candidate
    return None


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    加载设置

    查找顺序: 参数 > MINEPACK_CONFIG 环境变量 > 应用配置目录。
    MINEPACK_API_URL 环境变量会覆盖 api_base_url。
    """
    if config_path is None:
        config_path = os.environ.get("MINEPACK_CONFIG")
    if config_path is None:
        found = default_config_path()
        config_path = str(found) if found else None

    if config_path:
        logger.debug(f"加载配置文件: {config_path}")
        settings = Settings.from_dict(load_config(config_path))
    else:
        settings = Settings()

    api_url = os.environ.get("MINEPACK_API_URL")
    if api_url:
        settings = replace(settings, api_base_url=api_url)
        settings.validate()

    return settings
