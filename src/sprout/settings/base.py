"""
模块名称：settings.base

本模块定义 sprout 的运行配置与加载流程，集中处理环境变量、默认值与配置文件。
主要功能包括：
- Settings：统一的运行时配置模型
- get_settings/reset_settings：进程级缓存实例
- configure_logging：按配置初始化日志
- YAML 配置的读写

设计背景：序列化默认行为与日志输出都需要从单点读取配置。
注意事项：`get_settings` 结果被缓存，修改环境变量后需调用 `reset_settings`。
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Unpack

from sprout.constants import ENV_PREFIX
from sprout.log.logger import VALID_LOG_LEVELS, LogConfig, configure, logger


class Settings(BaseSettings):
    """sprout 运行配置集合。

    契约：
    - 输入：环境变量（`SPROUT_` 前缀）、构造参数
    - 输出：可读写的配置对象
    - 副作用：无
    - 失败语义：无效配置抛出 `ValidationError`
    """

    invoke_fns: bool = False
    """`to_json` 未显式传入 `invoke_fns` 时，是否调用零参函数并内联其结果。"""

    log_level: str = "ERROR"
    log_file: Path | None = None
    log_env: Literal["", "container", "container_json", "container_csv"] = ""
    log_format: str | None = None
    log_rotation: str | None = None
    """轮转大小，形如 `"10 MB"`。"""

    model_config = SettingsConfigDict(validate_assignment=True, extra="ignore", env_prefix=ENV_PREFIX)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """统一为大写并校验日志级别。"""
        value = str(value).upper()
        if value not in VALID_LOG_LEVELS:
            msg = f"Invalid log level {value!r}. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            raise ValueError(msg)
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """返回进程级缓存的 `Settings`。

    契约：首次调用时从环境变量构建；之后返回同一实例。
    副作用：使用 `lru_cache` 缓存结果。
    """
    return Settings()


def reset_settings() -> None:
    """清空 `get_settings` 缓存，下次调用重新读取环境变量。"""
    get_settings.cache_clear()


def save_settings_to_yaml(settings: Settings, file_path: str | Path) -> None:
    """将 Settings 序列化为 YAML 文件。"""
    with Path(file_path).open("w", encoding="utf-8") as f:
        settings_dict = settings.model_dump(mode="json")
        yaml.safe_dump(settings_dict, f)


def load_settings_from_yaml(file_path: str | Path) -> Settings:
    """从 YAML 文件加载 Settings。

    关键路径：
    1) 读取并安全解析 YAML
    2) 转换为小写键并校验键名
    3) 构建 Settings（构造参数优先于环境变量）

    异常流：未知键会抛 KeyError；文件不存在抛 FileNotFoundError。
    """
    file_path_ = Path(file_path)
    with file_path_.open(encoding="utf-8") as f:
        settings_dict = yaml.safe_load(f) or {}
    settings_dict = {str(k).lower(): v for k, v in settings_dict.items()}

    for key in settings_dict:
        if key not in Settings.model_fields:
            msg = f"Key {key} not found in settings"
            raise KeyError(msg)
    logger.debug("Loading settings from %s", file_path_, keys=sorted(settings_dict))

    return Settings(**settings_dict)


def configure_logging(settings: Settings | None = None, **overrides: Unpack[LogConfig]) -> None:
    """按 `Settings` 的日志字段配置 structlog。

    契约：`settings` 缺省时使用 `get_settings()`；`overrides` 中非 `None` 的值优先于配置字段。
    副作用：重新配置全局 structlog，`log_file` 存在时向 root logger 挂载轮转文件处理器。
    """
    settings = settings or get_settings()
    options: dict = {
        "log_level": settings.log_level,
        "log_file": settings.log_file,
        "log_env": settings.log_env,
        "log_format": settings.log_format,
        "log_rotation": settings.log_rotation,
    }
    options.update({key: value for key, value in overrides.items() if value is not None})
    configure(**options)
