from __future__ import annotations

import os
from pathlib import Path

import typer

from relnotes import __version__
from relnotes.cli.commands.cache import cache_app
from relnotes.cli.commands.show import show
from relnotes.core.config import CACHE_DIR_ENV, CONFIG_ENV
from relnotes.core.errors import ErrorCode

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    invoke_without_command=True,
)

# Commands
app.command()(show)

# Sub-apps
app.add_typer(cache_app, name="cache")


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help="Cache directory"),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' does not exist", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[CONFIG_ENV] = str(path)

    if cache_dir is not None:
        os.environ[CACHE_DIR_ENV] = str(cache_dir.expanduser())


def main() -> None:
    app()
