from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from docvault.database.models import DocumentRecord, JobRecord, ProjectRecord
from docvault.service.models import ArchiveResult, ImportResult


@dataclass(slots=True)
class PipelineContext:
    job: JobRecord
    project: ProjectRecord | None = None
    import_result: ImportResult | None = None
    documents: list[DocumentRecord] = field(default_factory=list)
    archive_result: ArchiveResult | None = None
    inserted_documents: int = 0
    duplicate_documents: int = 0
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
