from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from docvault.archive.builder import (
    CONVERSATION_ENTRY,
    CONVERSATION_INTRO,
    PROJECT_SHEET_ENTRY,
    ArchiveBuilder,
    archive_filename,
)
from docvault.archive.models import ArchiveNotes, DocumentRef

ReadZip = Callable[[bytes], dict[str, bytes]]

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 0, tzinfo=timezone.utc)


def _loader(contents: dict[str, bytes]) -> Callable[[str], bytes]:
    def load(url: str) -> bytes:
        if url not in contents:
            raise FileNotFoundError(url)
        return contents[url]

    return load


def _builder(contents: dict[str, bytes]) -> ArchiveBuilder:
    return ArchiveBuilder(load_document=_loader(contents), clock=lambda: FIXED_NOW)


class TestBuild:
    def test_packs_documents_in_input_order(self, read_zip: ReadZip) -> None:
        builder = _builder({"u1": b"one", "u2": b"two", "u3": b"three"})
        docs = [
            DocumentRef("b.pdf", "u1"),
            DocumentRef("a.docx", "u2"),
            DocumentRef("c.csv", "u3"),
        ]

        bundle = builder.build(docs, "proj-1")

        entries = read_zip(bundle.content)
        assert list(entries) == ["b.pdf", "a.docx", "c.csv"]
        assert entries["a.docx"] == b"two"
        assert bundle.success_count == 3
        assert bundle.failure_count == 0
        assert bundle.filename == "project-proj-1-20240517T093000Z.zip"
        assert bundle.size == len(bundle.content)

    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_images_never_included(self, read_zip: ReadZip, position: int) -> None:
        loaded: list[str] = []

        def load(url: str) -> bytes:
            loaded.append(url)
            return url.encode()

        docs = [DocumentRef("a.pdf", "u-a"), DocumentRef("b.txt", "u-b")]
        docs.insert(position, DocumentRef("photo.JPEG", "u-img"))

        bundle = ArchiveBuilder(load_document=load).build(docs, "proj-1")

        assert sorted(read_zip(bundle.content)) == ["a.pdf", "b.txt"]
        assert "u-img" not in loaded
        assert bundle.success_count == 2

    def test_failed_load_is_counted_and_skipped(self, read_zip: ReadZip) -> None:
        builder = _builder({"u1": b"one", "u3": b"three"})
        docs = [
            DocumentRef("first.pdf", "u1"),
            DocumentRef("missing.pdf", "u2"),
            DocumentRef("third.pdf", "u3"),
        ]

        bundle = builder.build(docs, "proj-1")

        assert list(read_zip(bundle.content)) == ["first.pdf", "third.pdf"]
        assert bundle.success_count == 2
        assert bundle.failure_count == 1
        assert bundle.failed_filenames == ["missing.pdf"]

    def test_all_loads_failing_still_yields_valid_archive(self, read_zip: ReadZip) -> None:
        bundle = _builder({}).build([DocumentRef("a.pdf", "u1")], "proj-1")

        assert read_zip(bundle.content) == {}
        assert bundle.failure_count == 1

    def test_empty_input_gives_empty_archive(self, read_zip: ReadZip) -> None:
        bundle = _builder({}).build([], "proj-1")

        assert read_zip(bundle.content) == {}
        assert bundle.success_count == 0
        assert bundle.failure_count == 0
        assert len(bundle.hash) == 64

    def test_sanitizes_and_deduplicates_entry_names(self, read_zip: ReadZip) -> None:
        builder = _builder({"u1": b"1", "u2": b"2", "u3": b"3"})
        docs = [
            DocumentRef("Q1: results?.pdf", "u1"),
            DocumentRef("report.pdf", "u2"),
            DocumentRef("report.pdf", "u3"),
        ]

        entries = read_zip(builder.build(docs, "proj-1").content)

        assert entries == {"Q1_ results_.pdf": b"1", "report.pdf": b"2", "report (2).pdf": b"3"}


class TestNotes:
    def test_adds_notes_with_intro(self, read_zip: ReadZip) -> None:
        notes = ArchiveNotes(conversation="Hello from the founder", project_sheet="Sheet body é")

        entries = read_zip(_builder({}).build([], "proj-1", notes).content)

        assert set(entries) == {CONVERSATION_ENTRY, PROJECT_SHEET_ENTRY}
        conversation = entries[CONVERSATION_ENTRY].decode("utf-8")
        assert conversation.startswith(CONVERSATION_INTRO)
        assert conversation.endswith("Hello from the founder")
        assert entries[PROJECT_SHEET_ENTRY].decode("utf-8").endswith("Sheet body é")

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_blank_notes_are_omitted(self, read_zip: ReadZip, text: str | None) -> None:
        notes = ArchiveNotes(conversation=text, project_sheet="kept")

        entries = read_zip(_builder({}).build([], "proj-1", notes).content)

        assert list(entries) == [PROJECT_SHEET_ENTRY]

    def test_notes_do_not_count_as_documents(self) -> None:
        notes = ArchiveNotes(conversation="c", project_sheet="s")

        bundle = _builder({"u1": b"1"}).build([DocumentRef("a.pdf", "u1")], "proj-1", notes)

        assert bundle.success_count == 1


class TestArchiveFilename:
    def test_sanitizes_project_id(self) -> None:
        assert archive_filename("a/b", FIXED_NOW) == "project-a_b-20240517T093000Z.zip"
