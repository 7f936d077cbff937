import httpx

from docvault.config.settings import Settings
from docvault.database.models import JobKind, JobRecord
from docvault.database.repositories.documents_repository import DocumentsRepository
from docvault.database.repositories.projects_repository import ProjectsRepository
from docvault.fetcher.content_fetcher import ContentFetcher
from docvault.logging.logger import Log
from docvault.processor.exceptions import UnsupportedJobKindError
from docvault.processor.pipeline import PipelineContext, PipelineStep
from docvault.processor.steps import (
    BuildArchiveStep,
    ImportDocumentStep,
    LoadProjectDocumentsStep,
    LoadProjectStep,
    PersistDocumentsStep,
    PersistZipUrlStep,
)
from docvault.service.archive_service import ArchiveService
from docvault.storage.base import BaseObjectStore
from docvault.storage.factory import ObjectStoreFactory


class Processor:
    """Runs the step pipeline registered for a job's kind.

    import_document: load project -> fetch/expand/store -> record documents.
    build_archive: load project -> load documents -> build/store ZIP -> save URL.
    """

    def __init__(self, pipelines: dict[JobKind, list[PipelineStep]]) -> None:
        self._pipelines = pipelines

    def process(self, job: JobRecord) -> PipelineContext:
        """Run every step for ``job``; the first failing step aborts and re-raises."""
        steps = self._pipelines.get(job.kind)
        if steps is None:
            raise UnsupportedJobKindError(f"No pipeline registered for job kind '{job.kind}'")

        Log.info(f"Processing {job.kind.value} job {job.id} for project {job.project_id}")
        context = PipelineContext(job=job)
        for step in steps:
            try:
                context = step.run(context)
            except Exception as exc:
                context.error_message = str(exc)
                Log.error(f"Step {type(step).__name__} failed for job {job.id}: {exc}")
                raise
        return context


def build_processor(
    settings: Settings,
    store: BaseObjectStore | None = None,
    http_client: httpx.Client | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    client = http_client or httpx.Client(timeout=settings.http_timeout_seconds)
    service = ArchiveService(
        fetcher=ContentFetcher(client),
        store=store or ObjectStoreFactory.create(settings),
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
    )
    projects_repo = ProjectsRepository()
    documents_repo = DocumentsRepository()
    return Processor(
        pipelines={
            JobKind.IMPORT_DOCUMENT: [
                LoadProjectStep(projects_repo),
                ImportDocumentStep(service),
                PersistDocumentsStep(documents_repo),
            ],
            JobKind.BUILD_ARCHIVE: [
                LoadProjectStep(projects_repo),
                LoadProjectDocumentsStep(documents_repo),
                BuildArchiveStep(service),
                PersistZipUrlStep(projects_repo),
            ],
        }
    )
