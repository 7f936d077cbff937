"""Public entry points of the document archive pipeline."""

import hashlib
from datetime import datetime, timezone
from urllib.parse import quote

from docvault.archive.builder import ArchiveBuilder
from docvault.archive.exceptions import ArchiveOpenError
from docvault.archive.inspector import is_zip
from docvault.archive.inspector import unpack_archive as expand_archive
from docvault.archive.models import ArchiveNotes, DocumentRef, ExtractedFile
from docvault.fetcher.content_fetcher import ContentFetcher
from docvault.logging.logger import Log
from docvault.service.models import ArchiveResult, ImportResult, StoredObject
from docvault.storage.base import DEFAULT_SIGNED_URL_TTL_SECONDS, BaseObjectStore
from docvault.storage.exceptions import StorageError
from docvault.storage.keys import archive_key, document_key

ZIP_CONTENT_TYPE = "application/zip"


class ArchiveService:
    """Fetches, expands, re-packages and signs project documents."""

    def __init__(
        self,
        *,
        fetcher: ContentFetcher,
        store: BaseObjectStore,
        signed_url_ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS,
        builder: ArchiveBuilder | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._signed_url_ttl_seconds = signed_url_ttl_seconds
        self._builder = builder or ArchiveBuilder(load_document=self.load_document)

    def fetch_and_store(
        self,
        url: str,
        project_id: str,
        filename: str | None = None,
    ) -> ImportResult:
        """Download ``url`` into the project's storage, expanding ZIP uploads.

        Raises:
            FetchError: if the source cannot be downloaded.
            StorageError: if the original payload cannot be uploaded.
        """
        fetched = self._fetcher.fetch(url, project_id, filename)

        extracted: list[ExtractedFile] | None = None
        if is_zip(fetched.mime_type, fetched.filename):
            try:
                extracted = self.unpack_archive(fetched.content, project_id)
            except ArchiveOpenError as exc:
                Log.warning(
                    f"Archive could not be opened, storing as a single file: {exc}",
                    filename=fetched.filename,
                )

        stored = self._store_document(
            project_id,
            content=fetched.content,
            content_hash=fetched.hash,
            filename=fetched.filename,
            mime_type=fetched.mime_type,
            source_url=url,
        )
        result = ImportResult(stored=stored, is_archive=extracted is not None)

        for item in extracted or []:
            try:
                result.extracted_files.append(
                    self._store_document(
                        project_id,
                        content=item.content,
                        content_hash=hashlib.sha256(item.content).hexdigest(),
                        filename=item.filename,
                        mime_type=item.mime_type,
                        source_url=url,
                    )
                )
            except StorageError as exc:
                result.failed_entries.append(item.filename)
                Log.warning(
                    f"Failed to store extracted file: {exc}",
                    project_id=project_id,
                    filename=item.filename,
                )

        Log.info(
            f"Imported {stored.filename}",
            project_id=project_id,
            extracted=len(result.extracted_files),
            failed=len(result.failed_entries),
        )
        return result

    def unpack_archive(self, content: bytes, project_id: str) -> list[ExtractedFile]:
        """Expand a ZIP buffer.

        Raises:
            ArchiveOpenError: if ``content`` is not a readable archive.
        """
        return expand_archive(content, project_id)

    def build_project_archive(
        self,
        documents: list[DocumentRef],
        project_id: str,
        notes: ArchiveNotes | None = None,
    ) -> ArchiveResult:
        """Bundle stored documents plus notes into one ZIP and upload it.

        Raises:
            ArchiveBuildError: if the archive writer fails.
            StorageError: if the finished archive cannot be uploaded.
        """
        bundle = self._builder.build(documents, project_id, notes)
        key = archive_key(project_id, bundle.hash, bundle.filename)
        url = self._store.put(
            key,
            bundle.content,
            ZIP_CONTENT_TYPE,
            self._metadata(project_id),
        )
        if bundle.failure_count:
            Log.warning(
                f"Archive built with {bundle.failure_count} missing documents",
                project_id=project_id,
                failed=bundle.failed_filenames,
            )
        return ArchiveResult(
            stored=StoredObject(
                key=key,
                url=url,
                filename=bundle.filename,
                hash=bundle.hash,
                mime_type=ZIP_CONTENT_TYPE,
                size=bundle.size,
            ),
            success_count=bundle.success_count,
            failure_count=bundle.failure_count,
            failed_filenames=list(bundle.failed_filenames),
        )

    def load_document(self, url: str) -> bytes:
        """Read a stored document's bytes back from the bucket by its URL."""
        return self._store.get(self._store.key_for_url(url))

    def sign_url(self, url: str, ttl_seconds: int | None = None) -> str:
        """Sign one stored URL.

        Raises:
            InvalidUrlFormatError: if ``url`` cannot be parsed into a key.
        """
        ttl = ttl_seconds if ttl_seconds is not None else self._signed_url_ttl_seconds
        return self._store.signed_url(self._store.key_for_url(url), ttl)

    def sign_document_urls(self, urls: list[str], ttl_seconds: int | None = None) -> list[str]:
        """Sign every URL; entries that cannot be signed are returned unsigned."""
        signed: list[str] = []
        for url in urls:
            try:
                signed.append(self.sign_url(url, ttl_seconds))
            except StorageError as exc:
                Log.warning(f"Returning unsigned URL: {exc}", url=url)
                signed.append(url)
        return signed

    def _store_document(
        self,
        project_id: str,
        *,
        content: bytes,
        content_hash: str,
        filename: str,
        mime_type: str,
        source_url: str,
    ) -> StoredObject:
        key = document_key(project_id, content_hash, filename)
        url = self._store.put(key, content, mime_type, self._metadata(project_id, source_url))
        return StoredObject(
            key=key,
            url=url,
            filename=filename,
            hash=content_hash,
            mime_type=mime_type,
            size=len(content),
        )

    @staticmethod
    def _metadata(project_id: str, source_url: str | None = None) -> dict[str, str]:
        metadata = {
            "project-id": quote(project_id, safe=""),
            "uploaded-at": datetime.now(timezone.utc).isoformat(),
        }
        if source_url:
            metadata["original-url"] = quote(source_url, safe=":/?&=")
        return metadata
