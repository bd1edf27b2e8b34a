"""Archive downloader with caching support.

Remote package archives are cached by URL so that a package whose release
notes were already read is not fetched again, even across store misses
(for example after a language change).
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from relnotes.core.result import Err, Ok, Result
from relnotes.packages.http import HttpError

if TYPE_CHECKING:
    from relnotes.packages.http import HttpClient

__all__ = ["Downloader", "DownloadResult"]


@dataclass(frozen=True, slots=True)
class DownloadResult:
    """Result of a download operation.

    Attributes:
        path: Path to the downloaded file
        from_cache: True if file was served from cache
        size: File size in bytes
    """

    path: Path
    from_cache: bool
    size: int


class Downloader:
    """Archive downloader with a URL-keyed file cache.

    Usage:
        downloader = Downloader(http_client, cache_dir)
        result = downloader.download(url)
        if is_ok(result):
            print(f"Downloaded to: {result.value.path}")
    """

    def __init__(self, http: HttpClient, cache_dir: Path) -> None:
        self._http = http
        self._cache_dir = cache_dir

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def cache_key(self, url: str) -> str:
        """Generate cache key for URL.

        Uses URL hash + filename so names stay recognizable while the
        extension still selects the archive format on extraction.
        Example: ".../sles-release-notes-15.1.tar.gz" -> "a1b2c3d4_sles-release-notes-15.1.tar.gz"
        """
        parsed = urlparse(url)
        filename = Path(parsed.path).name or "download"
        url_hash = hashlib.sha256(url.encode()).hexdigest()[:8]
        return f"{url_hash}_{filename}"

    def _cache_path(self, url: str) -> Path:
        return self._cache_dir / self.cache_key(url)

    def clear_cache(self) -> int:
        """Remove all cached archives.

        Returns:
            Number of files removed
        """
        count = 0
        if self._cache_dir.exists():
            for file in self._cache_dir.iterdir():
                if file.is_file():
                    file.unlink()
                    count += 1
        return count

    def download(self, url: str) -> Result[DownloadResult, HttpError]:
        """Download file from URL, serving from cache when possible.

        Args:
            url: URL to download

        Returns:
            Ok with DownloadResult, or Err with HttpError
        """
        cache_path = self._cache_path(url)

        if cache_path.exists():
            size = cache_path.stat().st_size
            return Ok(DownloadResult(path=cache_path, from_cache=True, size=size))

        self._cache_dir.mkdir(parents=True, exist_ok=True)

        result = self._http.download(url, cache_path)

        if isinstance(result, Err):
            # Never leave a partial archive behind as a cache hit
            if cache_path.exists():
                cache_path.unlink()
            return result

        size = cache_path.stat().st_size
        return Ok(DownloadResult(path=cache_path, from_cache=False, size=size))
