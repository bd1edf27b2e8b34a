"""Repository index backend.

A repository index is a JSON document describing package instances:

    {
      "packages": [
        {
          "name": "sles-release-notes",
          "version": "15.1.20190618",
          "status": "available",
          "provides": ["release-notes() = SLES"],
          "archive": "sles-release-notes-15.1.20190618.tar.gz"
        }
      ]
    }

IndexRepository implements both PackageDependencyQuery and PackageCatalog
over it. Archives are local paths or http(s) URLs; relative locations are
resolved against the index location.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urljoin

from relnotes.core.result import Err, Ok, Result
from relnotes.core.structured import as_str_dict, get_list, get_str, get_str_list
from relnotes.packages.download import Downloader
from relnotes.packages.extract import ArchiveExtractor
from relnotes.packages.http import HttpClient, is_url
from relnotes.packages.model import CatalogError, DependencyRecord, PackageCandidate, PackageStatus
from relnotes.packages.source import capability_name

__all__ = ["IndexEntry", "IndexRepository", "parse_index", "load_index"]


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One package instance listed in the index."""

    candidate: PackageCandidate
    provides: tuple[str, ...] = ()
    requires: tuple[str, ...] = ()

    @property
    def dependencies(self) -> list[DependencyRecord]:
        return [DependencyRecord(provides=p) for p in self.provides] + [
            DependencyRecord(requires=r) for r in self.requires
        ]


def parse_index(text: str, source: str) -> Result[list[IndexEntry], CatalogError]:
    """Parse index JSON text.

    Args:
        text: JSON document
        source: Index location, used in error messages

    Returns:
        Ok with entries in index order, or Err with CatalogError
    """
    try:
        data_obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(CatalogError(package=source, message=f"Invalid index JSON: {e}"))

    data = as_str_dict(data_obj)
    packages = get_list(data, "packages") if data is not None else None
    if packages is None:
        return Err(CatalogError(package=source, message="Index must contain a 'packages' list"))

    entries: list[IndexEntry] = []
    for i, item in enumerate(packages):
        table = as_str_dict(item)
        name = get_str(table, "name") if table is not None else None
        version = get_str(table, "version") if table is not None else None
        if table is None or name is None or version is None:
            return Err(
                CatalogError(package=source, message=f"Index entry #{i} needs a name and version")
            )
        entries.append(
            IndexEntry(
                candidate=PackageCandidate(
                    name=name,
                    version=version,
                    status=PackageStatus.parse(get_str(table, "status")),
                    archive=get_str(table, "archive"),
                ),
                provides=tuple(get_str_list(table, "provides")),
                requires=tuple(get_str_list(table, "requires")),
            )
        )
    return Ok(entries)


def load_index(
    location: str,
    *,
    http: HttpClient,
    downloader: Downloader,
    extractor: ArchiveExtractor | None = None,
) -> Result[IndexRepository, CatalogError]:
    """Load an index from a local path or an http(s) URL."""
    if is_url(location):
        fetched = http.get_text(location)
        if isinstance(fetched, Err):
            return Err(CatalogError(package=location, message=str(fetched.error)))
        text = fetched.value
        base = location
    else:
        path = Path(location).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Err(CatalogError(package=location, message=f"Cannot read index: {e}"))
        base = str(path.resolve().parent)

    parsed = parse_index(text, location)
    if isinstance(parsed, Err):
        return parsed
    return Ok(IndexRepository(parsed.value, base=base, downloader=downloader, extractor=extractor))


class IndexRepository:
    """Package query and catalog over a parsed repository index."""

    def __init__(
        self,
        entries: list[IndexEntry],
        *,
        base: str,
        downloader: Downloader | None = None,
        extractor: ArchiveExtractor | None = None,
    ) -> None:
        """Initialize repository.

        Args:
            entries: Index entries, in index order
            base: Directory or URL relative archive locations resolve against
            downloader: Required for remote archives
            extractor: Archive extractor (default: ArchiveExtractor())
        """
        self._entries = list(entries)
        self._base = base
        self._downloader = downloader
        self._extractor = extractor or ArchiveExtractor()

    @property
    def entries(self) -> list[IndexEntry]:
        return list(self._entries)

    def query_provides(self, capability: str) -> Result[list[str], CatalogError]:
        return Ok(
            [
                e.candidate.name
                for e in self._entries
                if any(capability_name(p) == capability for p in e.provides)
            ]
        )

    def dependencies_of(self, package_name: str) -> Result[list[DependencyRecord], CatalogError]:
        # Instances of one package are expected to declare the same provides;
        # the first listed instance answers.
        for entry in self._entries:
            if entry.candidate.name == package_name:
                return Ok(entry.dependencies)
        return Err(CatalogError(package=package_name, message="Package not in index"))

    def find(self, package_name: str) -> Result[list[PackageCandidate], CatalogError]:
        return Ok([e.candidate for e in self._entries if e.candidate.name == package_name])

    def extract(self, candidate: PackageCandidate, target_dir: Path) -> Result[Path, CatalogError]:
        archive = self._fetch_archive(candidate)
        if isinstance(archive, Err):
            return archive

        extracted = self._extractor.extract(archive.value, target_dir)
        if isinstance(extracted, Err):
            return Err(CatalogError(package=candidate.name, message=str(extracted.error)))
        return Ok(extracted.value.target_dir)

    def _fetch_archive(self, candidate: PackageCandidate) -> Result[Path, CatalogError]:
        """Return a local path to the candidate's archive, downloading if remote."""
        if candidate.archive is None:
            return Err(CatalogError(package=candidate.name, message="No archive in index entry"))

        if is_url(candidate.archive):
            url = candidate.archive
        elif is_url(self._base):
            url = urljoin(self._base, candidate.archive)
        else:
            local = Path(candidate.archive).expanduser()
            return Ok(local if local.is_absolute() else Path(self._base) / local)

        if self._downloader is None:
            return Err(CatalogError(package=candidate.name, message=f"Cannot download {url}"))
        downloaded = self._downloader.download(url)
        if isinstance(downloaded, Err):
            return Err(CatalogError(package=candidate.name, message=str(downloaded.error)))
        return Ok(downloaded.value.path)
