"""HTTP client abstraction for remote repository indexes and archives.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from relnotes import __version__
from relnotes.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "is_url",
]


def is_url(location: str) -> bool:
    """Return True if location is an http(s) URL rather than a local path."""
    return location.startswith(("http://", "https://"))


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations."""

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch URL and return as text."""
        ...

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to file.

        Args:
            url: URL to download
            dest: Destination path
            progress: Optional callback(downloaded, total) for progress

        Returns:
            Ok with dest path, or Err with HttpError
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 30.0, user_agent: str = f"relnotes/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _open(self, url: str) -> Any:
        req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
        return urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context)

    def _error(self, url: str, exc: Exception) -> HttpError:
        match exc:
            case urllib.error.HTTPError(code=code, reason=reason):
                return HttpError(url=url, status=code, message=str(reason))
            case urllib.error.URLError(reason=reason):
                return HttpError(url=url, status=0, message=str(reason))
            case TimeoutError():
                return HttpError(url=url, status=0, message="Request timed out")
            case _:
                return HttpError(url=url, status=0, message=str(exc))

    def get_text(self, url: str) -> Result[str, HttpError]:
        try:
            with self._open(url) as response:
                body: bytes = response.read()
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e))

        try:
            return Ok(body.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        try:
            with self._open(url) as response:
                total = int(response.headers.get("Content-Length", 0))
                downloaded = 0
                chunk_size = 8192

                dest.parent.mkdir(parents=True, exist_ok=True)

                with open(dest, "wb") as f:
                    while True:
                        chunk = response.read(chunk_size)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress:
                            progress(downloaded, total)

                return Ok(dest)
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_download("https://repo.example.com/notes.tar.gz", archive_bytes)
    """

    def __init__(self) -> None:
        self._text_responses: dict[str, str | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._text_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def get_text(self, url: str) -> Result[str, HttpError]:
        self.calls.append(("get_text", url))

        if url not in self._text_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._text_responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Mock download - writes predefined content to dest."""
        self.calls.append(("download", url))

        if url not in self._download_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._download_responses[url]
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)

        if progress:
            progress(len(response), len(response))

        return Ok(dest)
