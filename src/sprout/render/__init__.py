"""
模块名称：渲染入口

本模块导出把序列化结果包装为渲染元素的组件工具。
"""

from .stringify import create_hook_wrapper, should_invoke_fns, stringify

__all__ = ["create_hook_wrapper", "should_invoke_fns", "stringify"]
