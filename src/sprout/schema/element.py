"""渲染元素 schema。

本模块定义夹具组件的渲染结果模型：一个标签加若干文本子节点。
"""

from pydantic import BaseModel, Field


class Element(BaseModel):
    """单个渲染元素。

    契约：
    - `tag` 默认为 `div`
    - `children` 为按顺序排列的文本节点
    - 失败语义：字段类型不匹配时由 `Pydantic` 抛 `ValidationError`
    """

    tag: str = "div"
    children: list[str] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """拼接所有文本子节点。"""
        return "".join(self.children)

    def __str__(self) -> str:
        return f"<{self.tag}>{self.text}</{self.tag}>"
