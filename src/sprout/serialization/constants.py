"""
模块名称：序列化输出标记

本模块集中定义结构化序列化输出中的占位文本与类型标签，保证各处输出格式一致。
注意事项：这些文本是对外可观察的输出契约，修改会导致所有快照失效。
"""

FUNCTION_KIND = "Function"
MAP_KIND = "Map"
SET_KIND = "Set"

FUNCTION_PLACEHOLDER = "[[ function params={params} ]]"
CYCLIC_REF_PLACEHOLDER = "[[ cyclic ref *{ref_id} ]]"

# orjson 可直接编码的整数范围
MIN_NATIVE_INT = -(2**63)
MAX_NATIVE_INT = 2**64 - 1
