"""Release notes package resolution.

Release notes for a product ship in a dedicated package which provides
"release-notes()" for that product. For instance, a package which provides
"release-notes() = SLES" holds the release notes for the SLES product.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from relnotes.core.config import RELEASE_NOTES_CAPABILITY
from relnotes.core.result import Err, Ok, Result
from relnotes.notes.errors import (
    NoEligibleInstance,
    NoReleaseNotesPackage,
    QueryFailed,
    ResolveError,
)
from relnotes.notes.model import Product
from relnotes.packages.model import CatalogError, DependencyRecord, PackageCandidate
from relnotes.packages.source import PackageCatalog, PackageDependencyQuery

__all__ = ["CandidateResolver", "ProvidesMatcher", "provides_matcher"]

# (dependency record, product name) -> does the record provide notes for the product?
type ProvidesMatcher = Callable[[DependencyRecord, str], bool]


def provides_matcher(capability: str = RELEASE_NOTES_CAPABILITY) -> ProvidesMatcher:
    """Build a matcher for "<capability> = <product>" provides entries.

    Whitespace around "=" and at both ends is tolerated. The product name
    must match exactly, so "SLES" does not match "release-notes() = SLES_SAP".
    """
    prefix = re.escape(capability)

    def matches(record: DependencyRecord, product_name: str) -> bool:
        if record.provides is None:
            return False
        pattern = rf"\s*{prefix}\s*=\s*{re.escape(product_name)}\s*"
        return re.fullmatch(pattern, record.provides) is not None

    return matches


class CandidateResolver:
    """Finds the package instance holding release notes for a product.

    Usage:
        resolver = CandidateResolver(query, catalog)
        match resolver.resolve(Product("SLES")):
            case Ok(candidate):
                ...
            case Err(NoReleaseNotesPackage()):
                ...
    """

    def __init__(
        self,
        query: PackageDependencyQuery,
        catalog: PackageCatalog,
        *,
        capability: str = RELEASE_NOTES_CAPABILITY,
        matcher: ProvidesMatcher | None = None,
    ) -> None:
        self._query = query
        self._catalog = catalog
        self._capability = capability
        self._matcher = matcher or provides_matcher(capability)

    def resolve(self, product: Product) -> Result[PackageCandidate, ResolveError]:
        """Return the latest available/selected release notes package instance.

        Args:
            product: Product to look up

        Returns:
            Ok with the candidate, or Err describing why none was found
        """
        found = self._package_name_for(product)
        if isinstance(found, Err):
            return Err(QueryFailed(product=product.name, error=found.error))
        package_name = found.value
        if package_name is None:
            return Err(NoReleaseNotesPackage(product=product.name))

        instances = self._catalog.find(package_name)
        if isinstance(instances, Err):
            return Err(QueryFailed(product=product.name, error=instances.error))

        eligible = [c for c in instances.value if c.is_eligible]
        if not eligible:
            return Err(NoEligibleInstance(product=product.name, package=package_name))
        return Ok(max(eligible, key=lambda c: c.parsed_version))

    def _package_name_for(self, product: Product) -> Result[str | None, CatalogError]:
        """Name of the first package providing notes for product.

        Dependency queries are expensive: packages are checked one at a time
        in query order and the scan stops at the first match.
        """
        provided = self._query.query_provides(self._capability)
        if isinstance(provided, Err):
            return provided

        for name in dict.fromkeys(provided.value):
            deps = self._query.dependencies_of(name)
            if isinstance(deps, Err):
                return deps
            if any(self._matcher(dep, product.name) for dep in deps.value):
                return Ok(name)
        return Ok(None)
