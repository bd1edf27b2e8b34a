"""Release notes reader.

Reads release notes for a product: resolves the package that holds them,
serves them from the store when that package version was already read,
and otherwise extracts the package to a private temporary directory and
looks up the best language variant.

Release notes are best-effort content. Every failure (no package, backend
error, extraction error, missing document) yields None, and store failures
never prevent notes from being returned.
"""

from __future__ import annotations

from relnotes.core.config import DEFAULT_FORMAT, DEFAULT_LANGUAGE
from relnotes.core.result import Err
from relnotes.notes.errors import NoReleaseNotesPackage, describe_resolve_error
from relnotes.notes.locator import LocalizedDocumentLocator
from relnotes.notes.model import Product, ReleaseNotes
from relnotes.notes.resolver import CandidateResolver
from relnotes.notes.store import ReleaseNotesStore
from relnotes.output.console import ConsoleProtocol, NullConsole
from relnotes.packages.model import PackageCandidate
from relnotes.packages.source import PackageCatalog
from relnotes.platform.files import scoped_temp_dir

__all__ = ["ReleaseNotesReader"]


class ReleaseNotesReader:
    """Reads release notes for products, caching them in a store.

    Usage:
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(repo, repo),
            catalog=repo,
            store=FileReleaseNotesStore(cache_dir / "release-notes.json"),
        )
        notes = reader.release_notes_for(Product("SLES"), user_lang="de_DE")
    """

    def __init__(
        self,
        *,
        resolver: CandidateResolver,
        catalog: PackageCatalog,
        store: ReleaseNotesStore,
        locator: LocalizedDocumentLocator | None = None,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._resolver = resolver
        self._catalog = catalog
        self._store = store
        self._locator = locator or LocalizedDocumentLocator()
        self._console: ConsoleProtocol = console or NullConsole()

    def release_notes_for(
        self,
        product: Product,
        *,
        user_lang: str = DEFAULT_LANGUAGE,
        format: str = DEFAULT_FORMAT,
    ) -> ReleaseNotes | None:
        """Get release notes for a product.

        When notes for "xx_XX" are not found, "xx", then "en_US" and "en"
        are tried.

        Args:
            product: Product
            user_lang: Preferred language
            format: Content format ("txt", "rtf", ...)

        Returns:
            Release notes, or None if no package or no document was found
        """
        resolved = self._resolver.resolve(product)
        if isinstance(resolved, Err):
            message = describe_resolve_error(resolved.error)
            if isinstance(resolved.error, NoReleaseNotesPackage):
                self._console.info(message)
            else:
                self._console.warning(message)
            return None
        package = resolved.value

        cached = self._store.retrieve(product.name, user_lang, format, package.version)
        if isinstance(cached, Err):
            self._console.warning(f"Release notes cache unreadable, ignoring it ({cached.error})")
        elif cached.value is not None:
            self._console.info(f"Release notes for {product.name} were found in the cache")
            return cached.value

        notes = self._build_release_notes(product, package, user_lang, format)
        if notes is None:
            return None

        self._console.info(f"Release notes for {product.name} were found")
        stored = self._store.store(notes)
        if isinstance(stored, Err):
            self._console.warning(
                f"Could not cache release notes for {product.name} ({stored.error})"
            )
        return notes

    def _build_release_notes(
        self,
        product: Product,
        package: PackageCandidate,
        user_lang: str,
        format: str,
    ) -> ReleaseNotes | None:
        """Extract package and read the best matching document."""
        try:
            with scoped_temp_dir() as workdir:
                extracted = self._catalog.extract(package, workdir)
                if isinstance(extracted, Err):
                    self._console.warning(
                        f"Could not extract {package.name}-{package.version}: {extracted.error}"
                    )
                    return None
                located = self._locator.locate(extracted.value, user_lang, format)
        except OSError as e:
            self._console.warning(f"Could not prepare {package.name} for reading: {e}")
            return None

        if located is None:
            self._console.warning(
                f"No release notes for {product.name} were found in {package.name}"
            )
            return None

        return ReleaseNotes(
            product_name=product.name,
            content=located.content,
            user_lang=user_lang,
            lang=located.lang,
            format=format,
            version=package.version,
        )
