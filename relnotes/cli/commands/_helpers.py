"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from relnotes.core.errors import ErrorCode
from relnotes.core.result import Err, Result

if TYPE_CHECKING:
    from relnotes.cli.context import CLIContext


def exit_on_error[T, E](
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.IO_ERROR,
) -> T:
    """Return the Ok value, or print the error and exit with error_code.

    This helper reduces boilerplate for the common pattern:
        match result:
            case Err(e):
                ctx.console.error(str(e))
                raise typer.Exit(code=int(ErrorCode.IO_ERROR))
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        ctx.console.error(str(result.error))
        raise typer.Exit(code=int(error_code))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)
