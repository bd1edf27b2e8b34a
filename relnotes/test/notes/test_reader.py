"""Tests for notes/reader.py - the release notes pipeline."""

import json
import os
from pathlib import Path

import pytest

from relnotes.core.result import Err, Ok, Result
from relnotes.notes.model import Product, ReleaseNotes
from relnotes.notes.reader import ReleaseNotesReader
from relnotes.notes.resolver import CandidateResolver
from relnotes.notes.store import MemoryReleaseNotesStore, StoreError
from relnotes.output.console import MockConsole
from relnotes.packages.download import Downloader
from relnotes.packages.http import MockHttpClient
from relnotes.packages.index import load_index
from relnotes.packages.model import CatalogError, PackageCandidate, PackageStatus
from relnotes.packages.source import MockPackageSource
from relnotes.test.packages.archives import create_tar_xz, truncate

SLES = Product("SLES")
PROVIDES = ["release-notes() = SLES"]
DOC_DIR = "usr/share/doc/release-notes/SLES"


def _source(version: str = "15.1", files: dict[str, str] | None = None) -> MockPackageSource:
    source = MockPackageSource()
    source.add_package(
        "sles-release-notes",
        version,
        provides=PROVIDES,
        files=files
        if files is not None
        else {
            f"{DOC_DIR}/RELEASE-NOTES.en_US.txt": f"SLES {version} notes",
            f"{DOC_DIR}/RELEASE-NOTES.de.txt": f"SLES {version} Hinweise",
        },
    )
    return source


def _reader(
    source: MockPackageSource,
    store: MemoryReleaseNotesStore | None = None,
    console: MockConsole | None = None,
) -> ReleaseNotesReader:
    return ReleaseNotesReader(
        resolver=CandidateResolver(source, source),
        catalog=source,
        store=store or MemoryReleaseNotesStore(),
        console=console,
    )


class TestReleaseNotesFor:
    def test_reads_notes(self) -> None:
        notes = _reader(_source()).release_notes_for(SLES)

        assert notes == ReleaseNotes(
            product_name="SLES",
            content="SLES 15.1 notes",
            user_lang="en_US",
            lang="en_US",
            format="txt",
            version="15.1",
        )

    def test_language_fallback(self) -> None:
        """de_DE resolves to the de document."""
        notes = _reader(_source()).release_notes_for(SLES, user_lang="de_DE")

        assert notes is not None
        assert notes.lang == "de"
        assert notes.user_lang == "de_DE"
        assert notes.content == "SLES 15.1 Hinweise"

    def test_no_package_skips_extraction(self) -> None:
        source = MockPackageSource()
        source.add_package("kernel-default", "5.3", provides=["kernel"])
        console = MockConsole()

        assert _reader(source, console=console).release_notes_for(SLES) is None
        assert source.count("extract") == 0
        assert console.find("No package containing release notes for SLES")

    def test_no_document_caches_nothing(self) -> None:
        source = _source(files={"README": "no notes here"})
        store = MemoryReleaseNotesStore()
        console = MockConsole()

        assert _reader(source, store, console).release_notes_for(SLES) is None
        assert store.entries() == Ok([])
        assert console.find("No release notes for SLES were found in sles-release-notes")

    def test_format_selects_document(self) -> None:
        source = _source(files={f"{DOC_DIR}/RELEASE-NOTES.en_US.rtf": "{\\rtf1 notes}"})

        reader = _reader(source)

        assert reader.release_notes_for(SLES) is None
        rtf = reader.release_notes_for(SLES, format="rtf")
        assert rtf is not None and rtf.format == "rtf"


class TestCaching:
    def test_second_call_served_from_cache(self) -> None:
        source = _source()
        console = MockConsole()
        reader = _reader(source, console=console)

        first = reader.release_notes_for(SLES, user_lang="de_DE")
        second = reader.release_notes_for(SLES, user_lang="de_DE")

        assert first is not None
        assert second == first
        assert source.count("extract") == 1
        assert console.find("were found in the cache")

    def test_other_language_is_a_miss(self) -> None:
        source = _source()
        reader = _reader(source)

        reader.release_notes_for(SLES, user_lang="de_DE")
        reader.release_notes_for(SLES, user_lang="en_US")

        assert source.count("extract") == 2

    def test_new_version_is_not_served_old_notes(self) -> None:
        source = _source("15.1")
        store = MemoryReleaseNotesStore()
        reader = _reader(source, store)
        old = reader.release_notes_for(SLES)

        source.add_package(
            "sles-release-notes",
            "15.2",
            provides=PROVIDES,
            files={f"{DOC_DIR}/RELEASE-NOTES.en_US.txt": "SLES 15.2 notes"},
        )
        new = reader.release_notes_for(SLES)

        assert old is not None and old.content == "SLES 15.1 notes"
        assert new is not None and new.content == "SLES 15.2 notes"
        assert new.version == "15.2"
        assert source.count("extract") == 2
        entries = store.entries().unwrap()
        assert entries is not None and len(entries) == 2

    def test_uses_cache_entry_without_extraction(self) -> None:
        source = _source()
        store = MemoryReleaseNotesStore()
        cached = ReleaseNotes("SLES", "cached", "en_US", "en", "txt", "15.1")
        store.store(cached)

        assert _reader(source, store).release_notes_for(SLES) is cached
        assert source.count("extract") == 0


class _BrokenStore:
    def __init__(self, *, read: bool, write: bool) -> None:
        self.read = read
        self.write = write
        self.stored: list[ReleaseNotes] = []

    def retrieve(
        self, product_name: str, user_lang: str, format: str, version: str
    ) -> Result[ReleaseNotes | None, StoreError]:
        if self.read:
            return Err(StoreError(path=None, message="cache disk gone"))
        return Ok(None)

    def store(self, notes: ReleaseNotes) -> Result[None, StoreError]:
        if self.write:
            return Err(StoreError(path=None, message="read-only filesystem"))
        self.stored.append(notes)
        return Ok(None)


class TestDegradation:
    def test_store_read_failure_is_a_miss(self) -> None:
        source = _source()
        store = _BrokenStore(read=True, write=False)
        console = MockConsole()
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(source, source), catalog=source, store=store, console=console
        )

        notes = reader.release_notes_for(SLES)

        assert notes is not None
        assert store.stored == [notes]
        assert console.find("cache disk gone")

    def test_store_write_failure_still_returns_notes(self) -> None:
        source = _source()
        console = MockConsole()
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(source, source),
            catalog=source,
            store=_BrokenStore(read=False, write=True),
            console=console,
        )

        notes = reader.release_notes_for(SLES)

        assert notes is not None and notes.content == "SLES 15.1 notes"
        assert console.find("Could not cache release notes for SLES")

    def test_extraction_failure(self) -> None:
        source = _source()
        source.fail("extract", "mirror unreachable")
        store = MemoryReleaseNotesStore()
        console = MockConsole()

        assert _reader(source, store, console).release_notes_for(SLES) is None
        assert store.entries() == Ok([])
        assert console.find("mirror unreachable")

    def test_truncated_archive_in_repository(self, tmp_path: Path) -> None:
        """A half-downloaded archive yields no notes and caches nothing."""
        archive = create_tar_xz(
            tmp_path / "sles-release-notes-15.1.tar.xz",
            {f"{DOC_DIR}/RELEASE-NOTES.en_US.txt": os.urandom(200_000)},
        )
        truncate(archive)
        index = tmp_path / "index.json"
        entry = {
            "name": "sles-release-notes",
            "version": "15.1",
            "status": "available",
            "provides": PROVIDES,
            "archive": archive.name,
        }
        index.write_text(json.dumps({"packages": [entry]}), encoding="utf-8")
        http = MockHttpClient()
        repo = load_index(str(index), http=http, downloader=Downloader(http, tmp_path / "dl"))
        store = MemoryReleaseNotesStore()
        console = MockConsole()
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(repo.unwrap(), repo.unwrap()),
            catalog=repo.unwrap(),
            store=store,
            console=console,
        )

        assert reader.release_notes_for(SLES) is None
        assert store.entries() == Ok([])
        assert console.find("Could not extract sles-release-notes-15.1")

    def test_extraction_is_not_retried_automatically(self) -> None:
        source = _source()
        source.fail("extract")

        _reader(source).release_notes_for(SLES)

        assert source.count("extract") == 1

    def test_query_failure(self) -> None:
        source = _source()
        source.fail("query_provides", "solver not initialized")
        console = MockConsole()

        assert _reader(source, console=console).release_notes_for(SLES) is None
        assert console.has_warning()

    def test_no_eligible_instance(self) -> None:
        source = MockPackageSource()
        source.add_package(
            "sles-release-notes", "15.1", status=PackageStatus.INSTALLED, provides=PROVIDES
        )

        assert _reader(source).release_notes_for(SLES) is None
        assert source.count("extract") == 0

    def test_silent_without_console(self) -> None:
        """The reader works without an explicit console."""
        source = MockPackageSource()
        assert _reader(source).release_notes_for(SLES) is None


class _RecordingCatalog:
    """Catalog wrapper remembering the extraction directory."""

    def __init__(self, inner: MockPackageSource, *, explode: bool = False) -> None:
        self.inner = inner
        self.explode = explode
        self.workdirs: list[Path] = []

    def find(self, package_name: str) -> Result[list[PackageCandidate], CatalogError]:
        return self.inner.find(package_name)

    def extract(self, candidate: PackageCandidate, target_dir: Path) -> Result[Path, CatalogError]:
        self.workdirs.append(target_dir)
        if self.explode:
            raise RuntimeError("unexpected backend crash")
        return self.inner.extract(candidate, target_dir)


class TestExtractionDirectory:
    def test_removed_after_success(self) -> None:
        source = _source()
        catalog = _RecordingCatalog(source)
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(source, catalog),
            catalog=catalog,
            store=MemoryReleaseNotesStore(),
        )

        assert reader.release_notes_for(SLES) is not None
        [workdir] = catalog.workdirs
        assert not workdir.exists()

    def test_removed_when_nothing_found(self) -> None:
        source = _source(files={"README": "x"})
        catalog = _RecordingCatalog(source)
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(source, catalog),
            catalog=catalog,
            store=MemoryReleaseNotesStore(),
        )

        assert reader.release_notes_for(SLES) is None
        assert not catalog.workdirs[0].exists()

    def test_removed_when_catalog_raises(self) -> None:
        source = _source()
        catalog = _RecordingCatalog(source, explode=True)
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(source, catalog),
            catalog=catalog,
            store=MemoryReleaseNotesStore(),
        )

        with pytest.raises(RuntimeError):
            reader.release_notes_for(SLES)
        assert not catalog.workdirs[0].exists()

    def test_each_call_gets_a_fresh_directory(self) -> None:
        source = _source()
        catalog = _RecordingCatalog(source)
        reader = ReleaseNotesReader(
            resolver=CandidateResolver(source, catalog),
            catalog=catalog,
            store=MemoryReleaseNotesStore(),
        )

        reader.release_notes_for(SLES, user_lang="de")
        reader.release_notes_for(SLES, user_lang="en_US")

        assert len(set(catalog.workdirs)) == 2
