from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractedFile:
    """A file pulled out of a ZIP upload. Lives only until it is stored."""

    filename: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class DocumentRef:
    """A stored document to include in an export archive."""

    filename: str
    url: str


@dataclass(frozen=True)
class ArchiveNotes:
    """Free-text blocks embedded in an export archive as plain-text entries."""

    conversation: str | None = None
    project_sheet: str | None = None


@dataclass
class ArchiveBundle:
    """Finalized export archive, not yet uploaded."""

    content: bytes
    filename: str
    hash: str
    success_count: int = 0
    failure_count: int = 0
    failed_filenames: list[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.content)
