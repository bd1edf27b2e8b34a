"""Package query and catalog interfaces.

This module provides:
- PackageDependencyQuery: capability and dependency lookups
- PackageCatalog: instance lookup and payload extraction
- MockPackageSource: in-memory implementation of both, for tests and demos

Backends answer with Result values; the release notes pipeline treats any
Err as "no release notes" rather than a fatal condition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from relnotes.core.result import Err, Ok, Result
from relnotes.packages.model import CatalogError, DependencyRecord, PackageCandidate, PackageStatus

__all__ = [
    "PackageDependencyQuery",
    "PackageCatalog",
    "MockPackageSource",
    "capability_name",
]


def capability_name(provides: str) -> str:
    """Return the capability part of a provides entry.

    "release-notes() = SLES" -> "release-notes()"
    """
    return provides.split("=", 1)[0].strip()


@runtime_checkable
class PackageDependencyQuery(Protocol):
    """Answers which packages provide a capability and what they declare."""

    def query_provides(self, capability: str) -> Result[list[str], CatalogError]:
        """Return names of packages advertising capability (may repeat)."""
        ...

    def dependencies_of(self, package_name: str) -> Result[list[DependencyRecord], CatalogError]:
        """Return the declared dependency records of a package."""
        ...


@runtime_checkable
class PackageCatalog(Protocol):
    """Known package instances and their payloads."""

    def find(self, package_name: str) -> Result[list[PackageCandidate], CatalogError]:
        """Return every known instance of package_name."""
        ...

    def extract(self, candidate: PackageCandidate, target_dir: Path) -> Result[Path, CatalogError]:
        """Extract the payload of candidate into target_dir."""
        ...


@dataclass
class _MockPackage:
    candidate: PackageCandidate
    provides: list[str]
    files: dict[str, str]


def _empty_packages() -> list[_MockPackage]:
    return []


def _empty_calls() -> list[tuple[str, str]]:
    return []


@dataclass
class MockPackageSource:
    """In-memory package source implementing query and catalog protocols.

    Usage:
        source = MockPackageSource()
        source.add_package(
            "sles-release-notes",
            "15.1",
            provides=["release-notes() = SLES"],
            files={"usr/share/doc/RELEASE-NOTES.en_US.txt": "Notes"},
        )
        source.count("extract")  # -> number of extractions so far
    """

    packages: list[_MockPackage] = field(default_factory=_empty_packages)
    calls: list[tuple[str, str]] = field(default_factory=_empty_calls)
    failures: dict[str, CatalogError] = field(default_factory=dict)

    def add_package(
        self,
        name: str,
        version: str,
        *,
        status: PackageStatus = PackageStatus.AVAILABLE,
        provides: list[str] | None = None,
        files: dict[str, str] | None = None,
    ) -> PackageCandidate:
        candidate = PackageCandidate(name=name, version=version, status=status)
        self.packages.append(_MockPackage(candidate, list(provides or []), dict(files or {})))
        return candidate

    def fail(self, operation: str, message: str = "backend failure (mock)") -> None:
        """Make every later call to operation return Err."""
        self.failures[operation] = CatalogError(package=operation, message=message)

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    def _record(self, operation: str, arg: str) -> CatalogError | None:
        self.calls.append((operation, arg))
        return self.failures.get(operation)

    def query_provides(self, capability: str) -> Result[list[str], CatalogError]:
        if error := self._record("query_provides", capability):
            return Err(error)
        return Ok(
            [
                p.candidate.name
                for p in self.packages
                if any(capability_name(entry) == capability for entry in p.provides)
            ]
        )

    def dependencies_of(self, package_name: str) -> Result[list[DependencyRecord], CatalogError]:
        if error := self._record("dependencies_of", package_name):
            return Err(error)
        for package in self.packages:
            if package.candidate.name == package_name:
                return Ok([DependencyRecord(provides=entry) for entry in package.provides])
        return Err(CatalogError(package=package_name, message="Unknown package"))

    def find(self, package_name: str) -> Result[list[PackageCandidate], CatalogError]:
        if error := self._record("find", package_name):
            return Err(error)
        return Ok([p.candidate for p in self.packages if p.candidate.name == package_name])

    def extract(self, candidate: PackageCandidate, target_dir: Path) -> Result[Path, CatalogError]:
        if error := self._record("extract", f"{candidate.name}-{candidate.version}"):
            return Err(error)
        for package in self.packages:
            if package.candidate == candidate:
                for rel, content in package.files.items():
                    path = target_dir / rel
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(content, encoding="utf-8")
                return Ok(target_dir)
        return Err(CatalogError(package=candidate.name, message="Unknown package instance"))
