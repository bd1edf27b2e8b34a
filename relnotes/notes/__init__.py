"""Release notes resolution, lookup and caching."""

from relnotes.notes.errors import (
    NoEligibleInstance,
    NoReleaseNotesPackage,
    QueryFailed,
    ResolveError,
    describe_resolve_error,
)
from relnotes.notes.locator import (
    FALLBACK_LANGUAGES,
    LocalizedDocumentLocator,
    LocatedDocument,
    fallback_chain,
)
from relnotes.notes.model import CacheKey, Product, ReleaseNotes
from relnotes.notes.reader import ReleaseNotesReader
from relnotes.notes.resolver import CandidateResolver, ProvidesMatcher, provides_matcher
from relnotes.notes.store import (
    FileReleaseNotesStore,
    MemoryReleaseNotesStore,
    ReleaseNotesStore,
    StoreError,
)

__all__ = [
    # Model
    "CacheKey",
    "Product",
    "ReleaseNotes",
    # Resolution
    "CandidateResolver",
    "ProvidesMatcher",
    "provides_matcher",
    "ResolveError",
    "NoEligibleInstance",
    "NoReleaseNotesPackage",
    "QueryFailed",
    "describe_resolve_error",
    # Lookup
    "FALLBACK_LANGUAGES",
    "LocalizedDocumentLocator",
    "LocatedDocument",
    "fallback_chain",
    # Store
    "FileReleaseNotesStore",
    "MemoryReleaseNotesStore",
    "ReleaseNotesStore",
    "StoreError",
    # Reader
    "ReleaseNotesReader",
]
