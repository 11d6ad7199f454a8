"""模块名称：结构化序列化器

本模块将任意运行时值转换为确定性的紧凑 JSON 文本，供编译器夹具测试比对输出快照。
主要功能包括：按值类别分派编码、按对象身份检测循环与共享引用、可选调用零参函数并内联结果。

关键组件：
- `to_json`：统一序列化入口
- `classify`：值类别判定（封闭集合 `ValueKind`）
- `function_arity`：可调用对象的必填参数个数
- `UNDEFINED`：宿主“未定义”值的哨兵

设计背景：夹具输出需要跨运行逐字节稳定，同时能呈现函数、非 dict 映射、集合与自引用结构。
注意事项：
- 复合值在进入子节点之前登记编号（先序），根对象编号为 0；
- 函数不参与登记，`{"kind": ...}` 包装与条目对是合成结构，同样不占用编号；
- 被调用函数抛出的异常原样上抛，不返回部分结果。
"""

import dataclasses
import inspect
from collections import deque
from collections.abc import Callable, Mapping, Sequence, Set
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any
from uuid import UUID

import orjson
from pydantic import BaseModel

from sprout.log.logger import logger
from sprout.serialization.constants import (
    CYCLIC_REF_PLACEHOLDER,
    FUNCTION_KIND,
    FUNCTION_PLACEHOLDER,
    MAP_KIND,
    MAX_NATIVE_INT,
    MIN_NATIVE_INT,
    SET_KIND,
)
from sprout.serialization.registry import VisitedRegistry
from sprout.settings import get_settings


class _UndefinedSentinel:
    """宿主“未定义”值的哨兵类型，`__repr__` 输出固定文本。"""

    def __repr__(self):
        return "UNDEFINED"

    def __bool__(self):
        return False


# 注意：使用对象身份判断，不应与字符串或 None 比较。
UNDEFINED = _UndefinedSentinel()


class ValueKind(Enum):
    """值类别的封闭集合，每个运行时值恰好属于其中一类。"""

    UNDEFINED = "undefined"
    PRIMITIVE = "primitive"
    FUNCTION = "function"
    MAP = "map"
    SET = "set"
    SEQUENCE = "sequence"
    RECORD = "record"


# 可转换为 JSON 字面量的宿主标量类型
_HOST_SCALAR_TYPES = (bytes, bytearray, datetime, date, time, Decimal, UUID, PurePath, complex)


def _unwrap_enum(value: Any) -> Any:
    while isinstance(value, Enum):
        value = value.value
    return value


def classify(value: Any) -> ValueKind:
    """判定值所属类别。

    契约：对任意输入返回一个 `ValueKind`，不抛异常；`Enum` 成员按其 `value` 判定。
    关键路径：1) 哨兵与基础类型 2) 宿主标量 3) 可调用对象 4) 映射/集合/序列 5) 其余对象视为记录。
    决策：可调用判定先于容器判定
    问题：带 `__call__` 的容器子类归属不明确
    方案：与宿主语义一致，凡可调用即视为函数
    代价：可调用容器不会展开内容
    重评：当需要展开可调用容器时引入显式注册表
    """
    value = _unwrap_enum(value)
    match value:
        case _UndefinedSentinel():
            return ValueKind.UNDEFINED
        case None | bool() | int() | float() | str():
            return ValueKind.PRIMITIVE
        case _ if isinstance(value, _HOST_SCALAR_TYPES):
            return ValueKind.PRIMITIVE
        case _ if callable(value):
            return ValueKind.FUNCTION
        case dict():
            return ValueKind.RECORD
        case Mapping():
            return ValueKind.MAP
        case Set():
            return ValueKind.SET
        case list() | tuple() | deque() | Sequence():
            return ValueKind.SEQUENCE
        case _:
            return ValueKind.RECORD


def function_arity(fn: Callable) -> int | None:
    """返回可调用对象的必填参数个数。

    契约：统计无默认值的参数，不含 `*args`/`**kwargs`；绑定方法不含 `self`。
    失败语义：无法获取签名时记录 `debug` 日志并返回 `None`，调用方不得调用该函数。
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        logger.debug(f"Cannot inspect signature of {fn!r}: {e!s}")
        return None
    return sum(
        1
        for param in signature.parameters.values()
        if param.default is param.empty and param.kind not in {param.VAR_POSITIONAL, param.VAR_KEYWORD}
    )


def _dumps(value: Any) -> str:
    """用 `orjson` 输出单个 JSON 字面量。"""
    return orjson.dumps(value).decode("utf-8")


def _as_element(encoded: Any) -> str:
    """数组元素位置上的未定义值编码为 `null`。"""
    return "null" if encoded is UNDEFINED else encoded


def _tagged(kind: str, field: str, body: str) -> str:
    """输出 `{"kind": ..., field: body}` 形式的标签记录。"""
    return f'{{"kind":{_dumps(kind)},{_dumps(field)}:{body}}}'


def _safe_text(text: str) -> str:
    """将孤立代理字符转为 `\\uXXXX` 转义文本，保证结果可按 UTF-8 编码。"""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return text.encode("utf-8", errors="backslashreplace").decode("utf-8")
    return text


def _record_key(key: Any) -> str:
    """将记录键转为文本，规则与 JSON 字面量一致。"""
    key = _unwrap_enum(key)
    match key:
        case str():
            return _safe_text(str(key))
        case bool():
            return "true" if key else "false"
        case None:
            return "null"
        case _:
            return _safe_text(str(key))


def _record_items(value: Any) -> list[tuple[Any, Any]]:
    """列出记录的键值对，顺序即输出顺序。"""
    match value:
        case dict():
            return list(value.items())
        case BaseModel():
            items = [(name, getattr(value, name)) for name in type(value).model_fields]
            items.extend((value.model_extra or {}).items())
            return items
        case _ if dataclasses.is_dataclass(value):
            return [(field.name, getattr(value, field.name)) for field in dataclasses.fields(value)]
        case _:
            return _public_attributes(value)


def _public_attributes(value: Any) -> list[tuple[Any, Any]]:
    attributes: dict[str, Any] = {}
    for cls in reversed(type(value).__mro__):
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in {"__dict__", "__weakref__"} and hasattr(value, name):
                attributes[name] = getattr(value, name)
    attributes.update(getattr(value, "__dict__", {}))
    return [(name, item) for name, item in attributes.items() if not name.startswith("_")]


def _primitive_value(value: Any) -> Any:
    match value:
        case None:
            return None
        case bool():
            return bool(value)
        case int():
            number = int(value)
            # 注意：超出 64 位范围的整数无法作为数字字面量输出
            return number if MIN_NATIVE_INT <= number <= MAX_NATIVE_INT else str(number)
        case float():
            return float(value)
        case str():
            return _safe_text(str(value))
        case bytes() | bytearray():
            return bytes(value).decode("utf-8", errors="ignore")
        case datetime() | date() | time():
            return value.isoformat()
        case Decimal():
            return float(value)
        case _:
            return _safe_text(str(value))


def _is_empty_immutable(value: Any) -> bool:
    """空 `tuple`/`frozenset` 在 CPython 中共享同一对象，且不可能成环，不参与登记。"""
    return isinstance(value, tuple | frozenset) and not value


def _encode_function(fn: Callable, registry: VisitedRegistry, *, invoke_fns: bool) -> str:
    arity = function_arity(fn)
    if not invoke_fns or arity != 0:
        # 注意：签名不可读的函数按 0 个参数展示，但绝不调用
        return _dumps(FUNCTION_PLACEHOLDER.format(params=arity or 0))

    try:
        result = fn()
    except Exception:
        logger.debug(f"Invoked function {fn!r} raised, aborting serialization")
        raise

    encoded = _encode(result, registry, invoke_fns=invoke_fns)
    if encoded is UNDEFINED:
        return f'{{"kind":{_dumps(FUNCTION_KIND)}}}'
    return _tagged(FUNCTION_KIND, "result", encoded)


def _encode(value: Any, registry: VisitedRegistry, *, invoke_fns: bool) -> Any:
    """将值直接编码为 JSON 文本，未定义值返回 `UNDEFINED`。

    注意：容器的子节点在本函数内直接递归，每层嵌套只占用一个栈帧。
    """
    value = _unwrap_enum(value)
    kind = classify(value)

    match kind:
        case ValueKind.UNDEFINED:
            return UNDEFINED
        case ValueKind.PRIMITIVE:
            return _dumps(_primitive_value(value))
        case ValueKind.FUNCTION:
            return _encode_function(value, registry, invoke_fns=invoke_fns)

    # 复合值：先查登记表，命中即输出引用标记且不再下探
    if not _is_empty_immutable(value):
        ref_id = registry.lookup(value)
        if ref_id is not None:
            return _dumps(CYCLIC_REF_PLACEHOLDER.format(ref_id=ref_id))
        registry.register(value)

    parts: list[str] = []
    match kind:
        case ValueKind.MAP:
            for key, item in list(value.items()):
                encoded_key = _as_element(_encode(key, registry, invoke_fns=invoke_fns))
                parts.append(f"[{encoded_key},{_as_element(_encode(item, registry, invoke_fns=invoke_fns))}]")
            return _tagged(MAP_KIND, "value", f"[{','.join(parts)}]")
        case ValueKind.SET | ValueKind.SEQUENCE:
            for item in list(value):
                parts.append(_as_element(_encode(item, registry, invoke_fns=invoke_fns)))
            array = f"[{','.join(parts)}]"
            return _tagged(SET_KIND, "value", array) if kind is ValueKind.SET else array
        case _:
            fields: dict[str, str] = {}
            for key, item in _record_items(value):
                encoded = _encode(item, registry, invoke_fns=invoke_fns)
                # 注意：未定义的字段直接省略
                if encoded is not UNDEFINED:
                    fields[_record_key(key)] = encoded
            return "{" + ",".join(f"{_dumps(key)}:{encoded}" for key, encoded in fields.items()) + "}"


def to_json(value: Any, invoke_fns: bool | None = None) -> str:
    """统一序列化入口，输出紧凑 JSON 文本。

    契约：对任意输入返回 `str`；`invoke_fns=None` 时读取 `Settings.invoke_fns`。
    副作用：`invoke_fns=True` 时会调用图中所有零参函数。
    失败语义：被调用函数的异常原样上抛，本次调用不返回任何部分输出。
    关键路径（三步）：1) 新建本次调用专用的 `VisitedRegistry` 2) 深度优先遍历 3) 遍历中直接拼接文本，标量字面量交给 `orjson`。
    性能瓶颈：嵌套深度受解释器递归上限约束，每层嵌套占用一个栈帧。
    注意：共享引用按对象身份判定。编译期常量折叠出的同值非空 `tuple` 可能是同一对象，
    第二次出现时输出引用标记；空 `tuple`/`frozenset` 不参与登记。
    决策：登记表随调用创建、随调用丢弃
    问题：共享登记表会让并发调用互相污染编号
    方案：作为参数在递归中显式传递
    代价：每次调用都重新分配
    重评：无
    """
    if invoke_fns is None:
        invoke_fns = get_settings().invoke_fns
    registry = VisitedRegistry()
    return _as_element(_encode(value, registry, invoke_fns=invoke_fns))
