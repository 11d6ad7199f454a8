"""
模块名称：CLI 目标加载工具

本模块根据 `位置:属性` 形式的目标字符串加载运行时值，主要用于 `sprout stringify`。
主要功能包括：
- 解析目标字符串
- 动态执行脚本文件或导入模块
- 按点号路径读取属性

设计背景：夹具值往往定义在独立脚本中，CLI 需要在不安装脚本的前提下取到它们。
注意事项：脚本执行会触发用户代码副作用。
"""

import importlib
import importlib.util
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any

DEFAULT_ATTRIBUTE = "value"


@contextmanager
def temporary_sys_path(path: str):
    """临时将路径加入 `sys.path`。

    契约：进入上下文时插入，退出时移除（若原本不存在）。
    副作用：修改 `sys.path`。
    """
    if path not in sys.path:
        sys.path.insert(0, path)
        try:
            yield
        finally:
            sys.path.remove(path)
    else:
        yield


def parse_target(target: str) -> tuple[str, str]:
    """拆分目标字符串为 `(位置, 属性路径)`。

    契约：缺省属性为 `value`；`C:\\x.py` 这类仅含盘符冒号的路径整体视为位置。
    """
    location, sep, attribute = target.rpartition(":")
    if not sep or not location or not attribute or any(ch in attribute for ch in "/\\"):
        return target, DEFAULT_ATTRIBUTE
    return location, attribute


def _load_module_from_script(script_path: Path) -> Any:
    """从脚本文件加载模块对象。

    契约：返回已执行的模块对象；模块名使用脚本名。
    失败语义：无法创建 spec 时抛 `ImportError`；脚本执行异常原样上抛。
    副作用：执行脚本代码并写入 `sys.modules`。
    """
    module_name = script_path.stem
    spec = importlib.util.spec_from_file_location(module_name, script_path)
    if spec is None or spec.loader is None:
        msg = f"Could not create module spec for '{script_path}'"
        raise ImportError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module

    try:
        with temporary_sys_path(str(script_path.parent)):
            spec.loader.exec_module(module)
    except Exception:
        if module_name in sys.modules:
            del sys.modules[module_name]
        raise

    return module


def load_module(location: str) -> Any:
    """按位置加载模块：`.py` 结尾或已存在的路径按脚本执行，否则按模块名导入。"""
    path = Path(location)
    if location.endswith(".py") or path.is_file():
        if not path.is_file():
            msg = f"Script '{location}' does not exist"
            raise FileNotFoundError(msg)
        return _load_module_from_script(path.resolve())
    return importlib.import_module(location)


def resolve_attribute(module: Any, attribute: str) -> Any:
    """按点号路径逐级读取属性。

    失败语义：任一级缺失时抛 `AttributeError`，消息包含完整路径。
    """
    value = module
    for part in attribute.split("."):
        try:
            value = getattr(value, part)
        except AttributeError as e:
            msg = f"'{getattr(module, '__name__', module)}' has no attribute '{attribute}'"
            raise AttributeError(msg) from e
    return value


def load_target(target: str) -> Any:
    """加载目标字符串指向的值。"""
    location, attribute = parse_target(target)
    return resolve_attribute(load_module(location), attribute)
