class ArchivePipelineError(Exception):
    """Base exception for the document archive pipeline."""


class FetchError(ArchivePipelineError):
    """Raised when a source file cannot be retrieved over HTTP."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ArchiveOpenError(ArchivePipelineError):
    """Raised when a buffer claimed to be a ZIP cannot be opened as one."""


class ArchiveEntryReadError(ArchivePipelineError):
    """Raised when a single entry of an otherwise valid archive cannot be read."""

    def __init__(self, message: str, *, entry_name: str) -> None:
        super().__init__(message)
        self.entry_name = entry_name


class ArchiveBuildError(ArchivePipelineError):
    """Raised when the archive writer itself fails."""
