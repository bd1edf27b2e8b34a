"""Tests for notes/resolver.py - release notes package resolution."""

from relnotes.core.result import Err, Ok
from relnotes.notes.errors import NoEligibleInstance, NoReleaseNotesPackage, QueryFailed
from relnotes.notes.model import Product
from relnotes.notes.resolver import CandidateResolver, provides_matcher
from relnotes.packages.model import DependencyRecord, PackageStatus
from relnotes.packages.source import MockPackageSource

SLES = Product("SLES")


def _resolver(source: MockPackageSource) -> CandidateResolver:
    return CandidateResolver(source, source)


class TestProvidesMatcher:
    def test_whitespace_tolerant(self) -> None:
        matches = provides_matcher()
        for provides in (
            "release-notes() = SLES",
            "release-notes()=SLES",
            "release-notes()   =   SLES  ",
        ):
            assert matches(DependencyRecord(provides=provides), "SLES"), provides

    def test_exact_product(self) -> None:
        """SLES must not pick up release notes of SLES_SAP."""
        matches = provides_matcher()
        assert not matches(DependencyRecord(provides="release-notes() = SLES_SAP"), "SLES")
        assert not matches(DependencyRecord(provides="release-notes() = SLED"), "SLES")

    def test_ignores_requires(self) -> None:
        matches = provides_matcher()
        assert not matches(DependencyRecord(requires="release-notes() = SLES"), "SLES")

    def test_product_name_is_literal(self) -> None:
        """Regex metacharacters in product names are matched literally."""
        matches = provides_matcher()
        assert matches(DependencyRecord(provides="release-notes() = SLE.HPC"), "SLE.HPC")
        assert not matches(DependencyRecord(provides="release-notes() = SLExHPC"), "SLE.HPC")


class TestResolve:
    def test_picks_highest_numeric_version(self) -> None:
        """10.0 wins over 2.0 (not lexical ordering)."""
        source = MockPackageSource()
        source.add_package("sles-release-notes", "2.0", provides=["release-notes() = SLES"])
        source.add_package("sles-release-notes", "10.0", provides=["release-notes() = SLES"])

        result = _resolver(source).resolve(SLES)

        assert isinstance(result, Ok)
        assert result.value.version == "10.0"

    def test_status_filtering(self) -> None:
        """Installed or other instances are never picked, even if newer."""
        source = MockPackageSource()
        provides = ["release-notes() = SLES"]
        name = "sles-release-notes"
        source.add_package(name, "15.0", status=PackageStatus.SELECTED, provides=provides)
        source.add_package(name, "15.9", status=PackageStatus.INSTALLED, provides=provides)
        source.add_package(name, "16.0", status=PackageStatus.OTHER, provides=provides)

        result = _resolver(source).resolve(SLES)

        assert isinstance(result, Ok)
        assert result.value.version == "15.0"
        assert result.value.status is PackageStatus.SELECTED

    def test_no_provider(self) -> None:
        source = MockPackageSource()
        source.add_package("kernel-default", "5.3", provides=["kernel"])

        result = _resolver(source).resolve(SLES)

        assert result == Err(NoReleaseNotesPackage(product="SLES"))
        assert source.count("find") == 0

    def test_provider_for_another_product(self) -> None:
        source = MockPackageSource()
        source.add_package("sled-release-notes", "15.1", provides=["release-notes() = SLED"])

        assert _resolver(source).resolve(SLES) == Err(NoReleaseNotesPackage(product="SLES"))

    def test_no_eligible_instance(self) -> None:
        source = MockPackageSource()
        source.add_package(
            "sles-release-notes",
            "15.1",
            status=PackageStatus.REMOVED,
            provides=["release-notes() = SLES"],
        )

        result = _resolver(source).resolve(SLES)

        assert result == Err(NoEligibleInstance(product="SLES", package="sles-release-notes"))

    def test_stops_at_first_matching_package(self) -> None:
        """Dependencies of later packages are never queried."""
        source = MockPackageSource()
        source.add_package("sled-release-notes", "1", provides=["release-notes() = SLED"])
        source.add_package("sles-release-notes", "1", provides=["release-notes() = SLES"])
        source.add_package("sles-release-notes", "2", provides=["release-notes() = SLES"])
        source.add_package("other-sles-notes", "9", provides=["release-notes() = SLES"])

        result = _resolver(source).resolve(SLES)

        assert isinstance(result, Ok)
        assert result.value.name == "sles-release-notes"
        queried = [arg for op, arg in source.calls if op == "dependencies_of"]
        # Duplicate names from the provides query are checked once
        assert queried == ["sled-release-notes", "sles-release-notes"]

    def test_query_failure(self) -> None:
        source = MockPackageSource()
        source.add_package("sles-release-notes", "1", provides=["release-notes() = SLES"])
        source.fail("dependencies_of")

        result = _resolver(source).resolve(SLES)

        assert isinstance(result, Err)
        assert isinstance(result.error, QueryFailed)
        assert result.error.product == "SLES"

    def test_catalog_failure(self) -> None:
        source = MockPackageSource()
        source.add_package("sles-release-notes", "1", provides=["release-notes() = SLES"])
        source.fail("find")

        result = _resolver(source).resolve(SLES)

        assert isinstance(result, Err)
        assert isinstance(result.error, QueryFailed)

    def test_custom_capability_and_matcher(self) -> None:
        source = MockPackageSource()
        source.add_package("notes-pkg", "1", provides=["product-notes(SLES)"])

        def matcher(record: DependencyRecord, product_name: str) -> bool:
            return record.provides == f"product-notes({product_name})"

        resolver = CandidateResolver(
            source, source, capability="product-notes(SLES)", matcher=matcher
        )

        assert isinstance(resolver.resolve(SLES), Ok)
