from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

import typer

from relnotes.core.config import CONFIG_ENV, Config, apply_env_overrides, load_config_or_default
from relnotes.core.errors import ErrorCode
from relnotes.core.result import Err, Ok, Result
from relnotes.notes.reader import ReleaseNotesReader
from relnotes.notes.resolver import CandidateResolver
from relnotes.notes.store import FileReleaseNotesStore, MemoryReleaseNotesStore, ReleaseNotesStore
from relnotes.output.console import ConsoleProtocol, RichConsole
from relnotes.packages.download import Downloader
from relnotes.packages.http import HttpClient, RealHttpClient, is_url
from relnotes.packages.index import load_index
from relnotes.packages.model import CatalogError
from relnotes.platform.paths import user_cache_dir, user_config_dir


@dataclass(frozen=True, slots=True)
class CachePaths:
    root: Path
    store_file: Path
    downloads: Path

    @classmethod
    def from_config(cls, config: Config) -> CachePaths:
        root = Path(config.paths.cache).expanduser() if config.paths.cache else user_cache_dir()
        return cls(root=root, store_file=root / "release-notes.json", downloads=root / "downloads")


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    cache: CachePaths


def config_path() -> Path:
    env = os.environ.get(CONFIG_ENV, "").strip()
    if env:
        return Path(env).expanduser()
    return user_config_dir() / "config.toml"


def resolve_index(config: Config, base: Path) -> Config:
    """Anchor a relative [paths] index at the config file directory."""
    index = config.paths.index
    if index is None or is_url(index) or Path(index).expanduser().is_absolute():
        return config
    return replace(config, paths=replace(config.paths, index=str(base / index)))


def build_context(*, verbose: bool = True) -> CLIContext:
    path = config_path()
    config_result = load_config_or_default(path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    config = apply_env_overrides(resolve_index(config_result.value, path.parent))
    return CLIContext(
        config=config,
        console=RichConsole(verbose=verbose),
        cache=CachePaths.from_config(config),
    )


def build_reader(
    ctx: CLIContext,
    *,
    index: str,
    use_cache: bool = True,
    http: HttpClient | None = None,
) -> Result[ReleaseNotesReader, CatalogError]:
    """Compose a reader over the repository index at `index`."""
    client = http or RealHttpClient()
    repo = load_index(index, http=client, downloader=Downloader(client, ctx.cache.downloads))
    if isinstance(repo, Err):
        return repo

    store: ReleaseNotesStore = (
        FileReleaseNotesStore(ctx.cache.store_file) if use_cache else MemoryReleaseNotesStore()
    )
    resolver = CandidateResolver(repo.value, repo.value, capability=ctx.config.notes.capability)
    return Ok(
        ReleaseNotesReader(
            resolver=resolver,
            catalog=repo.value,
            store=store,
            console=ctx.console,
        )
    )
