from __future__ import annotations

import os
from pathlib import Path

import typer

from modrel import __version__
from modrel.cli.commands.changelog_cmd import changelog
from modrel.cli.commands.plan_cmd import plan
from modrel.cli.commands.publish_cmd import publish
from modrel.cli.context import CONFIG_ENV_VAR
from modrel.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(changelog)
app.command()(plan)
app.command()(publish)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="modrel.toml to use (paths in it are relative to its directory)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if config is not None:
        try:
            path = config.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --config: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not path.is_file():
            typer.echo(f"error: --config '{path}' does not exist", err=True)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

        os.environ[CONFIG_ENV_VAR] = str(path)


def main() -> None:
    app()
