"""Typed configuration loading and access.

This module provides dataclasses for the config.toml structure:

    [notes]
    language = "en_US"
    format = "txt"
    capability = "release-notes()"

    [paths]
    index = "repo/index.json"
    cache = "~/.cache/relnotes"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "NotesConfig",
    "PathsConfig",
    "load_config",
    "load_config_or_default",
    "apply_env_overrides",
    "DEFAULT_LANGUAGE",
    "DEFAULT_FORMAT",
    "RELEASE_NOTES_CAPABILITY",
    "CONFIG_ENV",
    "CACHE_DIR_ENV",
]

DEFAULT_LANGUAGE = "en_US"
DEFAULT_FORMAT = "txt"

# Capability advertised by packages shipping release notes
RELEASE_NOTES_CAPABILITY = "release-notes()"

CONFIG_ENV = "RELNOTES_CONFIG"
CACHE_DIR_ENV = "RELNOTES_CACHE_DIR"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class NotesConfig:
    """Release notes lookup defaults."""

    language: str = DEFAULT_LANGUAGE
    format: str = DEFAULT_FORMAT
    capability: str = RELEASE_NOTES_CAPABILITY


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Repository index and cache locations.

    Values may contain ~ and are expanded by the caller. A relative index is
    relative to the config file directory. A None cache means the platform
    default cache directory.
    """

    index: str | None = None
    cache: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    notes: NotesConfig = field(default_factory=NotesConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        notes: StrDict = get_table(data, "notes") or {}
        paths: StrDict = get_table(data, "paths") or {}

        return cls(
            notes=NotesConfig(
                language=get_str(notes, "language") or DEFAULT_LANGUAGE,
                format=get_str(notes, "format") or DEFAULT_FORMAT,
                capability=get_str(notes, "capability") or RELEASE_NOTES_CAPABILITY,
            ),
            paths=PathsConfig(
                index=get_str(paths, "index"),
                cache=get_str(paths, "cache"),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config, falling back to defaults when the file does not exist.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)


def apply_env_overrides(config: Config, environ: Mapping[str, str] | None = None) -> Config:
    """Apply RELNOTES_* environment overrides on top of a loaded config."""
    env = os.environ if environ is None else environ
    cache = env.get(CACHE_DIR_ENV, "").strip()
    if cache:
        return replace(config, paths=replace(config.paths, cache=cache))
    return config
