"""
模块名称：已访问对象登记表

本模块提供按对象身份分配递增编号的登记表，供结构化序列化检测循环与共享引用。

设计背景：`id()` 只在对象存活期间唯一，遍历中途产生的临时对象（如被调用函数的返回值）
可能被回收后复用同一 `id`，因此登记表同时持有对象的强引用。
注意事项：每次顶层序列化调用新建一个实例，禁止跨调用或跨线程共享。
"""

from typing import Any


class VisitedRegistry:
    """按对象身份（而非相等性）登记复合值。

    契约：`register` 返回的编号从 0 开始连续递增，等于登记前的 `len(self)`。
    """

    def __init__(self) -> None:
        self._ids: dict[int, int] = {}
        self._refs: list[Any] = []

    def __len__(self) -> int:
        return len(self._refs)

    def __contains__(self, obj: Any) -> bool:
        return id(obj) in self._ids

    def lookup(self, obj: Any) -> int | None:
        """返回已登记对象的编号，未登记返回 `None`。"""
        return self._ids.get(id(obj))

    def register(self, obj: Any) -> int:
        """登记对象并返回新编号；重复登记同一对象会抛 `ValueError`。"""
        if id(obj) in self._ids:
            msg = f"Object {type(obj).__name__} at {id(obj):#x} is already registered"
            raise ValueError(msg)
        ref_id = len(self._refs)
        self._ids[id(obj)] = ref_id
        self._refs.append(obj)
        return ref_id
