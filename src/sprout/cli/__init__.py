"""
模块名称：CLI 包入口

本模块提供 CLI 子命令的懒加载入口，避免导入 `sprout` 时引入 `typer` 等命令行依赖。

关键组件：
- `__getattr__`：按需导入 `sprout.cli.commands.stringify_command`

注意事项：仅暴露 `stringify_command`，其他属性访问会抛 `AttributeError`。
"""

__all__ = ["stringify_command"]


def __getattr__(name: str):
    """按需返回 CLI 命令入口。

    契约：仅支持 `stringify_command`；其他属性访问抛 `AttributeError`。
    副作用：首次访问时会触发 `sprout.cli.commands` 导入。
    """
    if name == "stringify_command":
        from sprout.cli.commands import stringify_command

        return stringify_command
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
