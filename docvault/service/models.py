from dataclasses import dataclass, field


@dataclass(frozen=True)
class StoredObject:
    """An object written to the bucket under a content-addressed key."""

    key: str
    url: str
    filename: str
    hash: str
    mime_type: str
    size: int


@dataclass
class ImportResult:
    """Outcome of importing one source URL.

    ``stored`` is the original payload; for ZIP uploads ``extracted_files``
    holds every expanded entry that was stored.
    """

    stored: StoredObject
    is_archive: bool = False
    extracted_files: list[StoredObject] = field(default_factory=list)
    failed_entries: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ArchiveResult:
    stored: StoredObject
    success_count: int
    failure_count: int
    failed_filenames: list[str] = field(default_factory=list)
