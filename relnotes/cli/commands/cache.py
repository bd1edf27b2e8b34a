"""Cache commands - inspect and clear cached release notes and archives."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from relnotes.cli.commands._helpers import exit_on_error
from relnotes.cli.context import build_context
from relnotes.notes.store import FileReleaseNotesStore
from relnotes.packages.download import Downloader
from relnotes.packages.http import RealHttpClient

cache_app = typer.Typer(no_args_is_help=True, help="Inspect or clear the release notes cache")

_console = Console()


@cache_app.command("list")
def list_entries() -> None:
    """List cached release notes."""
    ctx = build_context()
    store = FileReleaseNotesStore(ctx.cache.store_file)
    entries = exit_on_error(store.entries(), ctx)

    if not entries:
        _console.print("[dim]Cache is empty[/dim]")
        return

    table = Table("product", "version", "requested", "found", "format", "size")
    for notes in sorted(entries, key=lambda n: (n.product_name, n.version, n.user_lang)):
        table.add_row(
            notes.product_name,
            notes.version,
            notes.user_lang,
            notes.lang,
            notes.format,
            str(len(notes.content)),
        )
    _console.print(table)
    _console.print(f"[dim]{ctx.cache.store_file}[/dim]")


@cache_app.command("clear")
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Execute (default is dry-run)"),
) -> None:
    """Clear cached release notes and downloaded archives. Dry-run by default."""
    ctx = build_context()
    store = FileReleaseNotesStore(ctx.cache.store_file)
    downloader = Downloader(RealHttpClient(), ctx.cache.downloads)

    if not yes:
        entries = exit_on_error(store.entries(), ctx)
        _console.print("\n[yellow]DRY-RUN[/yellow]\n")
        _console.print(f"  {len(entries)} cached release notes in {store.path}", style="dim")
        _console.print(f"  downloaded archives in {downloader.cache_dir}", style="dim")
        _console.print("\n[dim]Use -y to execute[/dim]")
        return

    removed = exit_on_error(store.clear(), ctx)
    archives = downloader.clear_cache()
    ctx.console.success(f"Removed {removed} cached release notes and {archives} archives")
