"""Show command - print release notes for a product."""

from __future__ import annotations

import typer

from relnotes.cli.commands._helpers import exit_on_error, exit_with_code
from relnotes.cli.context import build_context, build_reader
from relnotes.core.errors import ErrorCode
from relnotes.notes.model import Product


def show(
    product: str = typer.Argument(..., help="Product name, e.g. SLES"),
    lang: str | None = typer.Option(None, "--lang", "-l", help="Preferred language (e.g. de_DE)"),
    format_: str | None = typer.Option(None, "--format", "-f", help="Content format (txt, rtf)"),
    index: str | None = typer.Option(None, "--index", "-i", help="Repository index path or URL"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Do not read or write the cache"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print the release notes"),
) -> None:
    """Print release notes for PRODUCT."""
    ctx = build_context(verbose=not quiet)

    location = index or ctx.config.paths.index
    if location is None:
        ctx.console.error("No repository index configured")
        ctx.console.info("Pass --index or set [paths] index in config.toml")
        exit_with_code(int(ErrorCode.USER_ERROR))

    reader = exit_on_error(
        build_reader(ctx, index=location, use_cache=not no_cache),
        ctx,
        ErrorCode.IO_ERROR,
    )

    user_lang = lang or ctx.config.notes.language
    notes = reader.release_notes_for(
        Product(product),
        user_lang=user_lang,
        format=format_ or ctx.config.notes.format,
    )
    if notes is None:
        ctx.console.error(f"No release notes for {product}")
        exit_with_code(int(ErrorCode.NOT_FOUND))

    if notes.is_fallback:
        ctx.console.info(f"Showing '{notes.lang}' release notes ('{user_lang}' not available)")
    ctx.console.print(notes.content)
