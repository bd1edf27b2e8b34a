"""Release notes value types."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Product", "ReleaseNotes", "CacheKey"]


@dataclass(frozen=True, slots=True)
class Product:
    """A product whose release notes are requested, identified by name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class CacheKey:
    """Identity of a cached release notes document.

    The source version is part of the key: a new package version never
    sees entries stored for an older one.
    """

    product_name: str
    user_lang: str
    format: str
    version: str


@dataclass(frozen=True, slots=True)
class ReleaseNotes:
    """Release notes for a product, as found in a release notes package.

    Attributes:
        product_name: Product the notes belong to
        content: Document content, returned as-is
        user_lang: Language that was requested
        lang: Language actually found (may be a fallback)
        format: Content format token, e.g. "txt" or "rtf"
        version: Version of the package the notes were read from
    """

    product_name: str
    content: str
    user_lang: str
    lang: str
    format: str
    version: str

    @property
    def key(self) -> CacheKey:
        return CacheKey(
            product_name=self.product_name,
            user_lang=self.user_lang,
            format=self.format,
            version=self.version,
        )

    @property
    def is_fallback(self) -> bool:
        """True if the notes are not in the requested language."""
        return self.lang != self.user_lang
