"""Release notes cache stores.

This module provides:
- ReleaseNotesStore: Protocol used by the reader (injectable)
- MemoryReleaseNotesStore: process-local store
- FileReleaseNotesStore: persistent store in a single JSON file

Entries are keyed by (product, requested language, format, version) and
are only ever added or overwritten. A version bump produces a new key, so
stale entries are never served and never need to be deleted.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from relnotes.core.result import Err, Ok, Result
from relnotes.core.structured import as_str_dict, get_list
from relnotes.notes.model import CacheKey, ReleaseNotes
from relnotes.platform.files import atomic_write_text

__all__ = [
    "ReleaseNotesStore",
    "MemoryReleaseNotesStore",
    "FileReleaseNotesStore",
    "StoreError",
]

_FIELDS = ("product_name", "content", "user_lang", "lang", "format", "version")


@dataclass(frozen=True, slots=True)
class StoreError:
    """Store read or write failure.

    Attributes:
        path: Backing file, if any
        message: Human-readable error message
    """

    path: Path | None
    message: str

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


@runtime_checkable
class ReleaseNotesStore(Protocol):
    """Cache of already retrieved release notes."""

    def retrieve(
        self, product_name: str, user_lang: str, format: str, version: str
    ) -> Result[ReleaseNotes | None, StoreError]:
        """Return cached notes, Ok(None) on a miss."""
        ...

    def store(self, notes: ReleaseNotes) -> Result[None, StoreError]:
        """Add or overwrite the entry for notes.key."""
        ...


class MemoryReleaseNotesStore:
    """Store keeping entries for the lifetime of the process."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, ReleaseNotes] = {}

    def retrieve(
        self, product_name: str, user_lang: str, format: str, version: str
    ) -> Result[ReleaseNotes | None, StoreError]:
        return Ok(self._entries.get(CacheKey(product_name, user_lang, format, version)))

    def store(self, notes: ReleaseNotes) -> Result[None, StoreError]:
        self._entries[notes.key] = notes
        return Ok(None)

    def entries(self) -> Result[list[ReleaseNotes], StoreError]:
        return Ok(list(self._entries.values()))

    def clear(self) -> Result[int, StoreError]:
        count = len(self._entries)
        self._entries.clear()
        return Ok(count)


def _notes_from_obj(obj: object) -> ReleaseNotes | None:
    table = as_str_dict(obj)
    if table is None:
        return None
    values = [table.get(name) for name in _FIELDS]
    if not all(isinstance(v, str) for v in values):
        return None
    return ReleaseNotes(**{name: str(table[name]) for name in _FIELDS})


class FileReleaseNotesStore:
    """Store persisted as one JSON file.

    The file is rewritten atomically on each store(). A corrupted file is
    treated as empty, like a fresh cache. Read errors other than a missing
    file are reported as StoreError.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Result[dict[CacheKey, ReleaseNotes], StoreError]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Ok({})
        except (OSError, UnicodeDecodeError) as e:
            return Err(StoreError(path=self._path, message=f"Cannot read cache: {e}"))

        try:
            data_obj: object = json.loads(text)
        except json.JSONDecodeError:
            # Corrupted cache file, start fresh
            return Ok({})

        data = as_str_dict(data_obj)
        items = get_list(data, "entries") if data is not None else None
        entries: dict[CacheKey, ReleaseNotes] = {}
        for item in items or []:
            notes = _notes_from_obj(item)
            if notes is not None:
                entries[notes.key] = notes
        return Ok(entries)

    def _save(self, entries: dict[CacheKey, ReleaseNotes]) -> Result[None, StoreError]:
        data = {"entries": [asdict(notes) for notes in entries.values()]}
        try:
            atomic_write_text(self._path, json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            return Err(StoreError(path=self._path, message=f"Cannot write cache: {e}"))
        return Ok(None)

    def retrieve(
        self, product_name: str, user_lang: str, format: str, version: str
    ) -> Result[ReleaseNotes | None, StoreError]:
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        return Ok(loaded.value.get(CacheKey(product_name, user_lang, format, version)))

    def store(self, notes: ReleaseNotes) -> Result[None, StoreError]:
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        entries = loaded.value
        entries[notes.key] = notes
        return self._save(entries)

    def entries(self) -> Result[list[ReleaseNotes], StoreError]:
        return self._load().map(lambda entries: list(entries.values()))

    def clear(self) -> Result[int, StoreError]:
        """Remove every entry.

        Returns:
            Ok with the number of entries removed
        """
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            return Err(StoreError(path=self._path, message=f"Cannot remove cache: {e}"))
        return Ok(len(loaded.value))
