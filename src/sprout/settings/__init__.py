"""
模块名称：设置入口

本模块导出运行时设置模型与加载工具，保持 `sprout.settings` 的稳定导入路径。
注意事项：实际实现位于 `base.py`。
"""

from .base import (
    Settings,
    configure_logging,
    get_settings,
    load_settings_from_yaml,
    reset_settings,
    save_settings_to_yaml,
)

__all__ = [
    "Settings",
    "configure_logging",
    "get_settings",
    "load_settings_from_yaml",
    "reset_settings",
    "save_settings_to_yaml",
]
