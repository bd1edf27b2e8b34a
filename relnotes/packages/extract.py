"""Package payload extraction.

Supports .tar.gz/.tgz, .tar.xz/.txz, plain .tar and .zip archives. Only
regular files are written; absolute paths, ".." components and symlinks
are skipped so an archive can never write outside the target directory.
"""

from __future__ import annotations

import contextlib
import lzma
import os
import shutil
import stat
import tarfile
import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import IO

from relnotes.core.result import Err, Ok, Result

__all__ = ["ArchiveExtractor", "ExtractResult", "ExtractError", "is_supported_archive"]

_TAR_MODES: tuple[tuple[tuple[str, ...], str], ...] = (
    ((".tar.gz", ".tgz"), "r:gz"),
    ((".tar.xz", ".txz"), "r:xz"),
    ((".tar",), "r:"),
)


def is_supported_archive(name: str) -> bool:
    lowered = name.lower()
    return lowered.endswith(".zip") or any(lowered.endswith(s) for s, _ in _TAR_MODES)


@dataclass(frozen=True, slots=True)
class ExtractError:
    """Extraction error details."""

    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive}"


@dataclass(frozen=True, slots=True)
class ExtractResult:
    """Result of an extraction.

    Attributes:
        target_dir: Directory the payload was written to
        files_count: Number of files written
    """

    target_dir: Path
    files_count: int


# (relative member name, permission bits, opener)
type _Member = tuple[str, int, contextlib.AbstractContextManager[IO[bytes]]]


class ArchiveExtractor:
    """Extracts package archives into an existing or new directory.

    Unlike a tool installer, the target directory is never wiped first: it
    is owned by the caller (typically a scoped temporary directory).
    """

    def extract(self, archive: Path, target_dir: Path) -> Result[ExtractResult, ExtractError]:
        """Extract archive into target_dir.

        Args:
            archive: Path to archive file
            target_dir: Directory to extract to (created if missing)

        Returns:
            Ok with ExtractResult, or Err with ExtractError
        """
        if not archive.exists():
            return Err(ExtractError(archive=archive, message="Archive not found"))
        if not is_supported_archive(archive.name):
            return Err(ExtractError(archive=archive, message="Unsupported archive format"))

        name = archive.name.lower()
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            if name.endswith(".zip"):
                with zipfile.ZipFile(archive, "r") as zf:
                    count = self._write_members(self._zip_members(zf), target_dir)
            else:
                mode = next((m for suffixes, m in _TAR_MODES if name.endswith(suffixes)), None)
                if mode is None:
                    return Err(
                        ExtractError(archive=archive, message="Unsupported archive format")
                    )
                with tarfile.open(archive, mode) as tar:
                    members = self._tar_members(tar)
                    count = self._write_members(members, target_dir)
        except zipfile.BadZipFile as e:
            return Err(ExtractError(archive=archive, message=f"Invalid zip file: {e}"))
        except tarfile.TarError as e:
            return Err(ExtractError(archive=archive, message=f"Tar extraction failed: {e}"))
        except (EOFError, zlib.error, lzma.LZMAError) as e:
            # Truncated or corrupted compressed stream, noticed while reading members
            return Err(ExtractError(archive=archive, message=f"Corrupted archive: {e}"))
        except OSError as e:
            return Err(ExtractError(archive=archive, message=f"IO error: {e}"))

        return Ok(ExtractResult(target_dir=target_dir, files_count=count))

    def _tar_members(self, tar: tarfile.TarFile) -> Iterator[_Member]:
        for member in tar.getmembers():
            # Directories, symlinks, hardlinks, devices and fifos are skipped
            if not member.isreg():
                continue
            src = tar.extractfile(member)
            if src is None:
                continue
            yield member.name, member.mode & 0o777, src

    def _zip_members(self, zf: zipfile.ZipFile) -> Iterator[_Member]:
        for info in zf.infolist():
            if info.is_dir():
                continue
            unix_attrs = info.external_attr >> 16
            if (unix_attrs & 0o170000) == stat.S_IFLNK:
                continue
            yield info.filename, unix_attrs & 0o777, zf.open(info)

    def _write_members(self, members: Iterator[_Member], target_dir: Path) -> int:
        root = target_dir.resolve()
        count = 0
        for member_name, mode, opener in members:
            with opener as src:
                rel_path = self._safe_relative_path(member_name)
                if rel_path is None:
                    continue
                full_path = target_dir / rel_path
                if not self._is_within_root(root, full_path):
                    continue

                full_path.parent.mkdir(parents=True, exist_ok=True)
                with open(full_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)

            if mode:
                with contextlib.suppress(OSError):
                    os.chmod(full_path, mode | stat.S_IRUSR)
            count += 1
        return count

    def _safe_relative_path(self, member_name: str) -> Path | None:
        """Return a sanitized relative extraction path, or None if unsafe."""
        normalized = member_name.replace("\\", "/")
        if normalized.startswith("/"):
            return None

        kept = PurePosixPath(normalized).parts
        if not kept or any(part in {"", ".", ".."} for part in kept):
            return None
        if kept[0].endswith(":"):
            return None

        return Path(*kept)

    def _is_within_root(self, root: Path, target: Path) -> bool:
        try:
            return target.resolve().is_relative_to(root)
        except OSError:
            return False
