"""Tests for packages/model.py."""

import pytest

from relnotes.packages.model import (
    CatalogError,
    PackageCandidate,
    PackageStatus,
)


class TestPackageStatus:
    @pytest.mark.parametrize(
        ("raw", "status"),
        [
            ("available", PackageStatus.AVAILABLE),
            ("Selected", PackageStatus.SELECTED),
            (" installed ", PackageStatus.INSTALLED),
            ("removed", PackageStatus.REMOVED),
            ("taboo", PackageStatus.OTHER),
            (None, PackageStatus.OTHER),
        ],
    )
    def test_parse(self, raw: str | None, status: PackageStatus) -> None:
        assert PackageStatus.parse(raw) is status


class TestPackageCandidate:
    def test_eligibility(self) -> None:
        """Only available and selected instances are eligible."""
        assert PackageCandidate("notes", "1", PackageStatus.AVAILABLE).is_eligible
        assert PackageCandidate("notes", "1", PackageStatus.SELECTED).is_eligible
        assert not PackageCandidate("notes", "1", PackageStatus.INSTALLED).is_eligible
        assert not PackageCandidate("notes", "1", PackageStatus.OTHER).is_eligible

    def test_parsed_version_orders_candidates(self) -> None:
        old = PackageCandidate("notes", "2.0")
        new = PackageCandidate("notes", "10.0")
        assert max([old, new], key=lambda c: c.parsed_version) is new

    def test_str(self) -> None:
        candidate = PackageCandidate("notes", "1.2", PackageStatus.SELECTED)
        assert str(candidate) == "notes-1.2 (selected)"

    def test_is_frozen(self) -> None:
        candidate = PackageCandidate("notes", "1")
        with pytest.raises(AttributeError):
            candidate.version = "2"  # type: ignore[misc]


def test_catalog_error_str() -> None:
    assert str(CatalogError(package="sles-release-notes", message="Unknown package")) == (
        "Unknown package: sles-release-notes"
    )
