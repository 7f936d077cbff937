"""ZIP detection and expansion for uploaded documents."""

import io
import zipfile
import zlib
from collections.abc import Iterator
from pathlib import PurePosixPath

from docvault.archive.exceptions import ArchiveEntryReadError, ArchiveOpenError
from docvault.archive.mime import ZIP_MIME_TYPES, is_image, mime_type_for, strip_mime_parameters
from docvault.archive.models import ExtractedFile
from docvault.logging.logger import Log

SYSTEM_PATH_PREFIXES = ("__MACOSX",)
SYSTEM_FILENAMES = frozenset({"thumbs.db", "desktop.ini"})


def is_zip(mime_type: str | None, filename: str | None) -> bool:
    """A payload is a ZIP if its MIME type says so or its name ends in .zip."""
    if mime_type and strip_mime_parameters(mime_type) in ZIP_MIME_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(".zip")


def should_skip_entry(entry_name: str) -> bool:
    """Hidden files, OS artifacts and images never leave the archive."""
    path = PurePosixPath(entry_name.replace("\\", "/"))
    if entry_name.startswith(SYSTEM_PATH_PREFIXES):
        return True
    if any(part.startswith(".") for part in path.parts):
        return True
    if path.name.lower() in SYSTEM_FILENAMES:
        return True
    return is_image(path.name)


def iter_archive_entries(content: bytes) -> Iterator[ExtractedFile]:
    """Yield kept archive entries one at a time, in archive order.

    Raises:
        ArchiveOpenError: if ``content`` is not a readable ZIP archive.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as exc:
        raise ArchiveOpenError(f"Cannot open archive: {exc}") from exc

    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            if should_skip_entry(info.filename):
                Log.debug("Skipping archive entry", entry=info.filename)
                continue
            try:
                data = _read_entry(archive, info)
            except ArchiveEntryReadError as exc:
                Log.warning(f"Skipping unreadable archive entry: {exc}", entry=exc.entry_name)
                continue
            name = PurePosixPath(info.filename.replace("\\", "/")).name
            yield ExtractedFile(filename=name, content=data, mime_type=mime_type_for(name))


def unpack_archive(content: bytes, project_id: str) -> list[ExtractedFile]:
    """Expand a ZIP buffer into the files worth storing for ``project_id``.

    Raises:
        ArchiveOpenError: if ``content`` is not a readable ZIP archive.
    """
    extracted = list(iter_archive_entries(content))
    Log.info(
        f"Extracted {len(extracted)} files from archive",
        project_id=project_id,
        archive_bytes=len(content),
    )
    return extracted


def _read_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
    try:
        with archive.open(info) as stream:
            return stream.read()
    except (
        zipfile.BadZipFile,
        zlib.error,
        RuntimeError,
        NotImplementedError,
        EOFError,
        OSError,
    ) as exc:
        raise ArchiveEntryReadError(
            f"{info.filename}: {exc}", entry_name=info.filename
        ) from exc
