"""Package metadata, catalog backends and payload extraction.

This package provides:
- Package value types and version ordering (model.py, version.py)
- Query and catalog protocols plus an in-memory source (source.py)
- A JSON repository index backend (index.py)
- HTTP, download cache and archive extraction (http.py, download.py, extract.py)
"""

from relnotes.packages.download import Downloader, DownloadResult
from relnotes.packages.extract import ArchiveExtractor, ExtractError, ExtractResult
from relnotes.packages.http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from relnotes.packages.index import IndexEntry, IndexRepository, load_index, parse_index
from relnotes.packages.model import (
    ELIGIBLE_STATUSES,
    CatalogError,
    DependencyRecord,
    PackageCandidate,
    PackageStatus,
)
from relnotes.packages.source import MockPackageSource, PackageCatalog, PackageDependencyQuery
from relnotes.packages.version import Version

__all__ = [
    # Model
    "CatalogError",
    "DependencyRecord",
    "ELIGIBLE_STATUSES",
    "PackageCandidate",
    "PackageStatus",
    "Version",
    # Protocols and sources
    "PackageCatalog",
    "PackageDependencyQuery",
    "MockPackageSource",
    "IndexEntry",
    "IndexRepository",
    "load_index",
    "parse_index",
    # Transport
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "Downloader",
    "DownloadResult",
    # Extraction
    "ArchiveExtractor",
    "ExtractError",
    "ExtractResult",
]
