"""模块名称：序列化工具包入口

本模块作为结构化序列化的导出入口，统一暴露 `to_json` 及其辅助类型。

关键组件：
- `to_json`：统一序列化入口
- `classify` / `ValueKind`：值类别判定
- `UNDEFINED`：未定义值哨兵

注意事项：实际实现位于 `serialization.py`。
"""

from .registry import VisitedRegistry
from .serialization import UNDEFINED, ValueKind, classify, function_arity, to_json

__all__ = ["UNDEFINED", "ValueKind", "VisitedRegistry", "classify", "function_arity", "to_json"]
