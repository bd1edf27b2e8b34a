"""Localized release notes lookup in an extracted package.

Release notes files are named RELEASE-NOTES.<lang>.<format> and may live at
any depth below the extraction root. Languages are tried in fallback order
(see fallback_chain); the first language with a readable file wins.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "FALLBACK_LANGUAGES",
    "LocatedDocument",
    "LocalizedDocumentLocator",
    "fallback_chain",
]

FALLBACK_LANGUAGES = ("en_US", "en")

_PREFIX = "RELEASE-NOTES."


def fallback_chain(user_lang: str, fallbacks: Iterable[str] = FALLBACK_LANGUAGES) -> list[str]:
    """Languages to try for user_lang, most preferred first.

    "de_DE" -> ["de_DE", "de", "en_US", "en"]
    """
    langs = [user_lang]
    if "_" in user_lang:
        langs.append(user_lang.split("_", 1)[0])
    langs.extend(fallbacks)
    return [lang for lang in dict.fromkeys(langs) if lang]


@dataclass(frozen=True, slots=True)
class LocatedDocument:
    """A release notes file found in an extracted package."""

    path: Path
    content: str
    lang: str


class LocalizedDocumentLocator:
    """Priority-ordered release notes lookup.

    Within one language, candidates are ordered by relative path so the
    result does not depend on filesystem traversal order.
    """

    def __init__(self, fallbacks: Iterable[str] = FALLBACK_LANGUAGES) -> None:
        self._fallbacks = tuple(fallbacks)

    def locate(self, root: Path, user_lang: str, format: str) -> LocatedDocument | None:
        """Find the best release notes file below root.

        Args:
            root: Extraction root
            user_lang: Requested language ("de_DE", "en", ...)
            format: Format token, the file extension ("txt", "rtf", ...)

        Returns:
            The located document, or None if no language matched
        """
        by_lang = self._scan(root, format)
        for lang in fallback_chain(user_lang, self._fallbacks):
            for path in by_lang.get(lang, []):
                try:
                    content = path.read_bytes().decode("utf-8", errors="replace")
                except OSError:
                    continue
                return LocatedDocument(path=path, content=content, lang=lang)
        return None

    def _scan(self, root: Path, format: str) -> dict[str, list[Path]]:
        """Map language tag -> release notes files for format, sorted by relative path."""
        suffix = f".{format}"
        found: dict[str, list[Path]] = {}
        if not root.is_dir():
            return found

        try:
            paths = sorted(root.rglob(f"{_PREFIX}*"), key=lambda p: p.relative_to(root).as_posix())
        except OSError:
            return found

        for path in paths:
            name = path.name
            if not name.endswith(suffix) or len(name) <= len(_PREFIX) + len(suffix):
                continue
            if not path.is_file():
                continue
            found.setdefault(name[len(_PREFIX) : -len(suffix)], []).append(path)
        return found
