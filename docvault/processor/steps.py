from docvault.archive.models import ArchiveNotes, DocumentRef
from docvault.database.models import DocumentStatus, ProjectRecord
from docvault.database.repositories.documents_repository import DocumentsRepository
from docvault.database.repositories.projects_repository import ProjectsRepository
from docvault.logging.logger import Log
from docvault.processor.exceptions import MissingJobFieldError
from docvault.processor.pipeline import PipelineContext, PipelineStep
from docvault.service.archive_service import ArchiveService

ARCHIVABLE_STATUSES = (DocumentStatus.UPLOADED, DocumentStatus.PROCESSED)


def _require_project(context: PipelineContext) -> ProjectRecord:
    if context.project is None:
        raise ValueError("PipelineContext.project must be set before this step")
    return context.project


class LoadProjectStep(PipelineStep):
    def __init__(self, projects_repo: ProjectsRepository) -> None:
        self._projects_repo = projects_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        project = self._projects_repo.find_by_id(context.job.project_id)
        context.project = project
        Log.info(
            f"Loaded project {project.project_unique_id} for job {context.job.id}"
        )
        return context


class ImportDocumentStep(PipelineStep):
    def __init__(self, service: ArchiveService) -> None:
        self._service = service

    def run(self, context: PipelineContext) -> PipelineContext:
        project = _require_project(context)
        if not context.job.source_url:
            raise MissingJobFieldError(f"Job {context.job.id} has no source_url")
        context.import_result = self._service.fetch_and_store(
            context.job.source_url,
            project.project_unique_id,
            context.job.filename,
        )
        return context


class PersistDocumentsStep(PipelineStep):
    """Record imported files; ZIP uploads are represented by their contents."""

    def __init__(self, documents_repo: DocumentsRepository) -> None:
        self._documents_repo = documents_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        project = _require_project(context)
        result = context.import_result
        if result is None:
            raise ValueError("PipelineContext.import_result must be set before persist")

        stored_files = result.extracted_files if result.is_archive else [result.stored]
        for stored in stored_files:
            if self._documents_repo.insert_if_absent(project.id, stored):
                context.inserted_documents += 1
            else:
                context.duplicate_documents += 1
                Log.info(
                    "Document already recorded for project, skipping",
                    filename=stored.filename,
                    hash=stored.hash,
                )
        Log.info(
            f"Recorded {context.inserted_documents} documents for job {context.job.id}",
            duplicates=context.duplicate_documents,
        )
        return context


class LoadProjectDocumentsStep(PipelineStep):
    def __init__(self, documents_repo: DocumentsRepository) -> None:
        self._documents_repo = documents_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        project = _require_project(context)
        context.documents = self._documents_repo.list_for_project(
            project.id, ARCHIVABLE_STATUSES
        )
        Log.info(
            f"Loaded {len(context.documents)} documents for project "
            f"{project.project_unique_id}"
        )
        return context


class BuildArchiveStep(PipelineStep):
    def __init__(self, service: ArchiveService) -> None:
        self._service = service

    def run(self, context: PipelineContext) -> PipelineContext:
        project = _require_project(context)
        context.archive_result = self._service.build_project_archive(
            [DocumentRef(filename=doc.file_name, url=doc.url) for doc in context.documents],
            project.project_unique_id,
            ArchiveNotes(conversation=project.conversation, project_sheet=project.project_sheet),
        )
        return context


class PersistZipUrlStep(PipelineStep):
    def __init__(self, projects_repo: ProjectsRepository) -> None:
        self._projects_repo = projects_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        project = _require_project(context)
        if context.archive_result is None:
            raise ValueError("PipelineContext.archive_result must be set before persist")
        self._projects_repo.update_zip_url(project.id, context.archive_result.stored.url)
        Log.info(
            f"Saved archive URL for project {project.project_unique_id}",
            url=context.archive_result.stored.url,
        )
        return context
