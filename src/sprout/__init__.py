"""sprout：编译器夹具测试的共享运行时。

对外暴露结构化序列化入口与 Stringify 渲染工具。
"""

from sprout.render import create_hook_wrapper, stringify
from sprout.schema import Element
from sprout.serialization import UNDEFINED, to_json

__all__ = ["UNDEFINED", "Element", "create_hook_wrapper", "stringify", "to_json"]
