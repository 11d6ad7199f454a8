"""sprout 命令行入口。"""

import typer

from sprout.cli.commands import stringify_command

app = typer.Typer(
    name="sprout",
    help="Structural value serializer for compiler fixture tests.",
    add_completion=False,
    no_args_is_help=True,
)
app.command(name="stringify", help="Print the structural JSON encoding of a value.")(stringify_command)


@app.callback()
def main_callback() -> None:
    """sprout 命令集合。"""


def main() -> None:
    app()


if __name__ == "__main__":
    main()
