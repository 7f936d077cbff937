import io
import zipfile
from collections.abc import Callable

import httpx
import pytest

from docvault.fetcher.content_fetcher import ContentFetcher
from docvault.service.archive_service import ArchiveService
from docvault.storage.memory_store import InMemoryObjectStore

Handler = Callable[[httpx.Request], httpx.Response]


def _build_zip(entries: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            if name.endswith("/"):
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, data)
    return buf.getvalue()


def _read_zip(content: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


@pytest.fixture()
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    """Build a ZIP in memory; names ending in '/' become directory entries."""
    return _build_zip


@pytest.fixture()
def read_zip() -> Callable[[bytes], dict[str, bytes]]:
    return _read_zip


@pytest.fixture()
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore(base_url="https://bucket.s3.eu-north-1.amazonaws.com")


@pytest.fixture()
def make_service(
    memory_store: InMemoryObjectStore,
) -> Callable[[Handler], ArchiveService]:
    """ArchiveService over the memory store with HTTP answered by ``handler``."""

    def _make(handler: Handler) -> ArchiveService:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return ArchiveService(fetcher=ContentFetcher(client), store=memory_store)

    return _make


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Bytes that look like a small PDF; nothing here parses them."""
    return b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << >>\n%%EOF\n"
