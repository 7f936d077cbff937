"""Re-packages a project's stored documents into one export ZIP."""

import hashlib
import io
import zipfile
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import PurePosixPath

from docvault.archive.exceptions import ArchiveBuildError
from docvault.archive.mime import is_image
from docvault.archive.models import ArchiveBundle, ArchiveNotes, DocumentRef
from docvault.logging.logger import Log
from docvault.storage.keys import sanitize_filename

CONVERSATION_ENTRY = "conversation.txt"
PROJECT_SHEET_ENTRY = "project-sheet.txt"

CONVERSATION_INTRO = "Conversation history exchanged about this project, exported for analysis."
PROJECT_SHEET_INTRO = "Project sheet summarizing this project, exported for analysis."


def archive_filename(project_id: str, now: datetime) -> str:
    return f"project-{sanitize_filename(project_id)}-{now.strftime('%Y%m%dT%H%M%SZ')}.zip"


class ArchiveBuilder:
    """Builds export archives from stored documents.

    ``load_document`` receives a document URL and returns its bytes; any
    exception it raises counts that document as failed.
    """

    def __init__(
        self,
        load_document: Callable[[str], bytes],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._load_document = load_document
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def build(
        self,
        documents: list[DocumentRef],
        project_id: str,
        notes: ArchiveNotes | None = None,
    ) -> ArchiveBundle:
        """Build an archive; per-document failures are counted, not raised.

        Raises:
            ArchiveBuildError: if the archive writer cannot be opened or closed.
        """
        kept = [doc for doc in documents if not is_image(doc.filename)]
        if len(kept) != len(documents):
            Log.info(
                f"Excluded {len(documents) - len(kept)} image files from archive",
                project_id=project_id,
            )

        buffer = io.BytesIO()
        try:
            writer = zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED)
        except (OSError, ValueError) as exc:
            raise ArchiveBuildError(f"Cannot open archive writer: {exc}") from exc

        failed: list[str] = []
        used_names: set[str] = set()
        try:
            for document in kept:
                try:
                    content = self._load_document(document.url)
                except Exception as exc:
                    failed.append(document.filename)
                    Log.warning(
                        f"Failed to load document for archive: {exc}",
                        project_id=project_id,
                        filename=document.filename,
                    )
                    continue
                entry_name = _unique_name(
                    sanitize_filename(document.filename) or "document", used_names
                )
                writer.writestr(entry_name, content)
                Log.debug("Added archive entry", entry=entry_name, size=len(content))

            if notes is not None:
                self._add_note(
                    writer, used_names, CONVERSATION_ENTRY, CONVERSATION_INTRO, notes.conversation
                )
                self._add_note(
                    writer, used_names, PROJECT_SHEET_ENTRY, PROJECT_SHEET_INTRO, notes.project_sheet
                )
        finally:
            try:
                writer.close()
            except (OSError, ValueError) as exc:
                raise ArchiveBuildError(f"Cannot finalize archive: {exc}") from exc

        content = buffer.getvalue()
        bundle = ArchiveBundle(
            content=content,
            filename=archive_filename(project_id, self._clock()),
            hash=hashlib.sha256(content).hexdigest(),
            success_count=len(kept) - len(failed),
            failure_count=len(failed),
            failed_filenames=failed,
        )
        Log.info(
            f"Built archive {bundle.filename}",
            project_id=project_id,
            size=bundle.size,
            succeeded=bundle.success_count,
            failed=bundle.failure_count,
        )
        return bundle

    @staticmethod
    def _add_note(
        writer: zipfile.ZipFile,
        used_names: set[str],
        entry_name: str,
        intro: str,
        text: str | None,
    ) -> None:
        if not text or not text.strip():
            return
        name = _unique_name(entry_name, used_names)
        try:
            writer.writestr(name, f"{intro}\n\n{text}".encode("utf-8"))
        except (OSError, ValueError, UnicodeError) as exc:
            Log.warning(f"Failed to add text attachment: {exc}", entry=name)


def _unique_name(name: str, used: set[str]) -> str:
    """'a.pdf' -> 'a (2).pdf' when 'a.pdf' is already in the archive."""
    candidate = name
    path = PurePosixPath(name)
    counter = 2
    while candidate in used:
        candidate = f"{path.stem} ({counter}){path.suffix}"
        counter += 1
    used.add(candidate)
    return candidate
