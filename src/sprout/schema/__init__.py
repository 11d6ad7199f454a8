"""Schema 模块入口。"""

from sprout.schema.element import Element

__all__ = ["Element"]
