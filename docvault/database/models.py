from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class JobKind(str, Enum):
    IMPORT_DOCUMENT = "import_document"
    BUILD_ARCHIVE = "build_archive"


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


class DocumentStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSED = "processed"
    ERROR = "error"


@dataclass
class JobRecord:
    """Represents a row from the archive_jobs table."""

    id: int
    project_id: str
    kind: JobKind
    status: JobStatus
    attempts: int
    source_url: str | None = None
    filename: str | None = None
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ProjectRecord:
    """Represents a row from the projects table."""

    id: str
    project_unique_id: str
    project_name: str
    conversation: str | None = None
    project_sheet: str | None = None
    zip_url: str | None = None


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: int
    project_id: str
    file_name: str
    url: str
    hash: str
    mime_type: str
    size: int
    status: DocumentStatus
    uploaded_at: datetime | None = None
