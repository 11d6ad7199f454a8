"""日志配置模块。

本模块基于 structlog 构建日志体系，支持按环境切换渲染格式与文件轮转。
主要功能包括：
- 动态配置日志级别与输出格式
- 开发模式下记录调用位置
- 可选写入轮转日志文件

注意事项：未显式传入的参数按 `SPROUT_LOG_*` 环境变量补齐；
从 `Settings` 统一下发配置见 `sprout.settings.configure_logging`。
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import IO, Any, TypedDict

import structlog
from platformdirs import user_cache_dir
from typing_extensions import NotRequired

from sprout.constants import DEV, ENV_PREFIX

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_LEVEL_MAP = {name: getattr(logging, name) for name in VALID_LOG_LEVELS}

DEFAULT_LOG_LEVEL = "ERROR"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5
FALLBACK_LOG_NAME = "sprout.log"

_CALLSITE_PARAMETERS = [
    structlog.processors.CallsiteParameter.FILENAME,
    structlog.processors.CallsiteParameter.FUNC_NAME,
    structlog.processors.CallsiteParameter.LINENO,
]


class LogConfig(TypedDict):
    """`configure` 接受的关键字参数集合。"""

    log_level: NotRequired[str | None]
    log_file: NotRequired[Path | None]
    disable: NotRequired[bool]
    log_env: NotRequired[str]
    log_format: NotRequired[str | None]
    log_rotation: NotRequired[str | None]
    cache: NotRequired[bool]
    output_file: NotRequired[IO[str]]


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def remove_exception_in_production(_logger: Any, _method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """在非开发模式移除异常详情。"""
    if not DEV:
        for key in ("exception", "exc_info"):
            event_dict.pop(key, None)
    return event_dict


def _parse_rotation(log_rotation: str | None) -> int:
    """解析 `"<N> MB"` 形式的轮转大小，无法解析时返回默认 10MB。"""
    match (log_rotation or "").split():
        case [size, unit] if unit.upper() == "MB" and size.isdigit() and int(size) > 0:
            return int(size) * 1024 * 1024
        case _:
            return DEFAULT_MAX_BYTES


def _select_renderer(log_env: str, log_format: str | None) -> Any:
    """按部署环境选择最终渲染器。"""
    match log_env.lower():
        case "container" | "container_json":
            return structlog.processors.JSONRenderer()
        case "container_csv":
            key_order = ["timestamp", "level", "event"]
            if DEV:
                key_order += ["filename", "func_name", "lineno"]
            return structlog.processors.KeyValueRenderer(key_order=key_order, drop_missing=True)
    if (_env("PRETTY_LOGS", "true") or "").lower() != "true":
        return structlog.processors.JSONRenderer()
    if log_format:
        return structlog.processors.KeyValueRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def _build_processors(log_env: str, log_format: str | None) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if DEV:
        processors.append(structlog.processors.CallsiteParameterAdder(parameters=_CALLSITE_PARAMETERS))
    processors.append(remove_exception_in_production)
    processors.append(_select_renderer(log_env, log_format))
    return processors


def _attach_file_handler(log_file: Path, log_rotation: str | None, level: int) -> logging.handlers.RotatingFileHandler:
    """把轮转文件处理器挂到 root logger 上并返回该处理器。

    失败语义：目标目录不存在时改写到用户缓存目录下的 `sprout.log`。
    """
    if not log_file.parent.exists():
        cache_dir = Path(user_cache_dir("sprout"))
        cache_dir.mkdir(parents=True, exist_ok=True)
        log_file = cache_dir / FALLBACK_LOG_NAME

    # 注意：structlog 无内建轮转，由 stdlib 处理器完成
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=_parse_rotation(log_rotation),
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.root.addHandler(handler)
    logging.root.setLevel(level)
    return handler


def configure(
    *,
    log_level: str | None = None,
    log_file: Path | None = None,
    disable: bool | None = False,
    log_env: str | None = None,
    log_format: str | None = None,
    log_rotation: str | None = None,
    cache: bool | None = None,
    output_file: IO[str] | None = None,
) -> None:
    """配置日志系统。

    关键路径（三步）：
    1) 参数优先，其次 `SPROUT_LOG_*` 环境变量，最后默认值；
    2) 组装 structlog 处理器链并选择输出目标（stderr、指定流或轮转文件）；
    3) 重新获取模块级 `logger`。
    注意：级别未变且未指定输出流时直接返回，避免重复配置。
    """
    env_level = (_env("LOG_LEVEL") or "").upper()
    if log_level is None:
        log_level = env_level if env_level in VALID_LOG_LEVELS else DEFAULT_LOG_LEVEL
    numeric_level = LOG_LEVEL_MAP.get(log_level.upper(), logging.ERROR)

    current = structlog.get_config().get("wrapper_class") if structlog.is_configured() else None
    if getattr(current, "min_level", None) == numeric_level and output_file is None and not disable:
        return

    if log_file is None and (env_log_file := _env("LOG_FILE")):
        log_file = Path(env_log_file)
    log_env = _env("LOG_ENV", "") if log_env is None else log_env
    log_format = _env("LOG_FORMAT") if log_format is None else log_format

    # 注意：禁用即把过滤级别抬到 CRITICAL
    effective_level = logging.CRITICAL if disable else numeric_level
    wrapper_class = structlog.make_filtering_bound_logger(effective_level)
    wrapper_class.min_level = effective_level

    if log_file:
        _attach_file_handler(log_file, log_rotation, numeric_level)
        logger_factory = structlog.stdlib.LoggerFactory()
    else:
        # 默认输出到 stderr，避免与 CLI 的 stdout 结果混在一起
        logger_factory = structlog.PrintLoggerFactory(file=output_file if output_file is not None else sys.stderr)

    structlog.configure(
        processors=_build_processors(log_env or "", log_format),
        wrapper_class=wrapper_class,
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True if cache is None else cache,
    )

    global logger  # noqa: PLW0603
    logger = structlog.get_logger()
    logger.debug("Logger set up with log level: %s", log_level)


# 初始化 logger（后续会在 configure 中重新配置）
logger: structlog.BoundLogger = structlog.get_logger()
configure(log_level="CRITICAL", cache=False)
