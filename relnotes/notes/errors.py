from __future__ import annotations

from dataclasses import dataclass

from relnotes.packages.model import CatalogError


@dataclass(frozen=True, slots=True)
class NoReleaseNotesPackage:
    product: str


@dataclass(frozen=True, slots=True)
class NoEligibleInstance:
    product: str
    package: str


@dataclass(frozen=True, slots=True)
class QueryFailed:
    product: str
    error: CatalogError


ResolveError = NoReleaseNotesPackage | NoEligibleInstance | QueryFailed


def describe_resolve_error(error: ResolveError) -> str:
    """Human-readable description of a resolution failure."""
    match error:
        case NoReleaseNotesPackage(product=product):
            return f"No package containing release notes for {product} was found"
        case NoEligibleInstance(product=product, package=package):
            return f"No available or selected instance of {package} (release notes for {product})"
        case QueryFailed(product=product, error=err):
            return f"Package query failed while looking up release notes for {product}: {err}"
