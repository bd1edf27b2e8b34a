"""Package metadata value types shared by query and catalog backends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from relnotes.packages.version import Version

__all__ = [
    "PackageStatus",
    "PackageCandidate",
    "DependencyRecord",
    "CatalogError",
    "ELIGIBLE_STATUSES",
]


class PackageStatus(Enum):
    """Status of one known instance of a package."""

    AVAILABLE = "available"
    SELECTED = "selected"
    INSTALLED = "installed"
    REMOVED = "removed"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> PackageStatus:
        """Map a status string to a PackageStatus, unknown values to OTHER."""
        if value is None:
            return cls.OTHER
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER

    def __str__(self) -> str:
        return self.value


# Only these instances may be downloaded to read their release notes
ELIGIBLE_STATUSES = frozenset({PackageStatus.AVAILABLE, PackageStatus.SELECTED})


@dataclass(frozen=True, slots=True)
class PackageCandidate:
    """A versioned, status-tagged instance of a package.

    Attributes:
        name: Package name
        version: Version string as published by the repository
        status: Instance status
        archive: Where the payload lives (path or URL), backend specific
    """

    name: str
    version: str
    status: PackageStatus = PackageStatus.AVAILABLE
    archive: str | None = None

    @property
    def is_eligible(self) -> bool:
        return self.status in ELIGIBLE_STATUSES

    @property
    def parsed_version(self) -> Version:
        return Version.parse(self.version)

    def __str__(self) -> str:
        return f"{self.name}-{self.version} ({self.status})"


@dataclass(frozen=True, slots=True)
class DependencyRecord:
    """One declared dependency entry of a package.

    Entries are free text, e.g. provides="release-notes() = SLES".
    """

    provides: str | None = None
    requires: str | None = None


@dataclass(frozen=True, slots=True)
class CatalogError:
    """Failure reported by a package query or catalog backend.

    Attributes:
        package: Package name or capability the operation was about
        message: Human-readable error message
    """

    package: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.package}"
