"""Archive builders shared by package and CLI tests."""

from __future__ import annotations

import io
import tarfile
import zipfile
from pathlib import Path


def create_tar_gz(path: Path, files: dict[str, bytes], *, prefix: str = "") -> Path:
    """Create a .tar.gz archive with the given files."""
    with tarfile.open(path, "w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=f"{prefix}/{name}" if prefix else name)
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return path


def create_zip(path: Path, files: dict[str, bytes], *, prefix: str = "") -> Path:
    """Create a .zip archive with the given files."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in files.items():
            zf.writestr(f"{prefix}/{name}" if prefix else name, content)
    return path


def tar_gz_bytes(files: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def create_tar_xz(path: Path, files: dict[str, bytes]) -> Path:
    """Create a .tar.xz archive with the given files."""
    with tarfile.open(path, "w:xz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return path


def truncate(path: Path, keep: float = 0.5) -> Path:
    """Cut a file short, like an interrupted download."""
    data = path.read_bytes()
    path.write_bytes(data[: int(len(data) * keep)])
    return path
