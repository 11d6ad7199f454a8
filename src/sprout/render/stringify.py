"""
模块名称：Stringify 组件

本模块把任意 props 序列化为单个文本元素，供夹具比对渲染输出。主要功能包括：
- `stringify`：读取 `shouldInvokeFns` 开关并包装 `to_json` 结果
- `create_hook_wrapper`：把 hook 风格函数包装为输出其返回值的组件

设计背景：夹具里的组件只需要稳定的文本快照，渲染层不应影响序列化语义。
注意事项：`shouldInvokeFns` 本身也是 props 的一部分，会出现在输出中。
"""

from collections.abc import Callable, Mapping
from typing import Any

from sprout.schema.element import Element
from sprout.serialization import to_json

INVOKE_FNS_KEYS = ("shouldInvokeFns", "should_invoke_fns")


def should_invoke_fns(props: Any) -> bool:
    """读取 props 上的调用开关，缺省为 False。

    契约：映射按键读取，其他对象按属性读取；`None` 返回 False。
    """
    if props is None:
        return False
    for key in INVOKE_FNS_KEYS:
        if isinstance(props, Mapping):
            if key in props:
                return bool(props[key])
        elif hasattr(props, key):
            return bool(getattr(props, key))
    return False


def stringify(props: Any) -> Element:
    """将 props 整体序列化并包装为单个文本元素。

    契约：输出 `Element(tag="div", children=[to_json(props, ...)])`。
    失败语义：被调用函数的异常原样上抛。
    """
    return Element(children=[to_json(props, should_invoke_fns(props))])


def create_hook_wrapper(use_hook: Callable[[Any], Any]) -> Callable[[Any], Element]:
    """把 hook 风格函数包装为组件。

    契约：返回的组件调用 `use_hook(props)`，并以开启函数调用的方式渲染其返回值。
    """

    def Component(props: Any) -> Element:  # noqa: N802
        result = use_hook(props)
        return stringify({"result": result, "shouldInvokeFns": True})

    return Component
