"""
模块名称：sprout CLI 命令实现

本模块提供 `sprout stringify` 子命令：加载脚本或模块中的值并输出其结构化序列化文本。
主要功能包括：
- 解析目标并加载运行时值
- 可选加载 `.env` 与调整日志级别
- 输出序列化文本或渲染元素

设计背景：编写夹具时需要快速查看某个值的快照文本，而不必启动完整的测试运行器。
注意事项：`--invoke-fns` 会调用目标值中的所有零参函数。
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from dotenv import load_dotenv

from sprout.cli.script_loader import load_target

VALID_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


def create_verbose_printer(*, verbose: bool):
    """创建仅在 verbose 模式输出的打印函数。

    契约：返回的函数仅在 `verbose=True` 时向 stderr 输出字符串。
    """

    def verbose_print(message: str) -> None:
        if verbose:
            typer.echo(message, file=sys.stderr)

    return verbose_print


def stringify_command(
    target: str = typer.Argument(
        ...,
        help="Value to serialize, as 'path/to/script.py:name' or 'package.module:name' (name defaults to 'value').",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to the .env file containing environment variables",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level. One of: debug, info, warning, error, critical (defaults to SPROUT_LOG_LEVEL)",
    ),
    *,
    invoke_fns: bool = typer.Option(
        False,  # noqa: FBT003
        "--invoke-fns",
        help="Invoke zero-parameter functions and inline their results (also enabled by SPROUT_INVOKE_FNS)",
    ),
    render: bool = typer.Option(
        False,  # noqa: FBT003
        "--render",
        help="Print the rendered Stringify element instead of the bare text",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show diagnostic output"),  # noqa: FBT003
) -> None:
    """输出目标值的结构化序列化文本。

    契约：成功时向 stdout 输出一行文本；失败时以退出码 1 结束。
    失败语义：加载失败、属性缺失或被调用函数抛异常时抛 `typer.Exit(1)`。
    副作用：执行目标脚本，可能读取 `.env` 并写入进程环境变量。

    关键路径（三步）：
    1) 校验参数、加载 `.env` 并按设置配置日志
    2) 加载目标值
    3) 序列化并输出
    """
    from sprout.render import stringify
    from sprout.serialization import to_json
    from sprout.settings import configure_logging, get_settings, reset_settings

    verbose_print = create_verbose_printer(verbose=verbose)

    if log_level is not None and log_level.lower() not in VALID_LOG_LEVELS:
        verbose_print(f"Error: Invalid log level '{log_level}'. Must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}")
        raise typer.Exit(1)

    if env_file:
        if not env_file.exists():
            verbose_print(f"Error: Environment file '{env_file}' does not exist.")
            raise typer.Exit(1)
        verbose_print(f"Loading environment variables from: {env_file}")
        load_dotenv(env_file)
        # 注意：环境变量变更后需重新读取设置
        reset_settings()

    # 注意：命令行级别优先，其余日志字段取自设置
    configure_logging(get_settings(), log_level=log_level)

    try:
        value = load_target(target)
    except Exception as e:
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(1) from e
    verbose_print(f"✓ Loaded {target} ({type(value).__name__})")

    # 注意：命令行开关只能开启调用，未指定时沿用设置
    invoke_fns = invoke_fns or get_settings().invoke_fns

    try:
        if render:
            output = str(stringify({"value": value, "shouldInvokeFns": invoke_fns}))
        else:
            output = to_json(value, invoke_fns)
    except Exception as e:
        typer.echo(f"✗ Serialization failed: {e!r}", err=True)
        raise typer.Exit(1) from e

    typer.echo(output)
