from docvault.config.settings import Settings
from docvault.database.connection import close_pool, init_pool
from docvault.database.repositories.job_repository import JobRepository
from docvault.logging.logger import Log
from docvault.processor.processor import build_processor
from docvault.worker.job_runner import JobRunner
from docvault.worker.worker import Worker


def main() -> None:
    """Entry point: settings -> logging -> pool -> processor -> worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting docvault worker ({settings.app_env})", storage=settings.storage_backend)
    init_pool(settings)

    try:
        processor = build_processor(settings)
        job_repo = JobRepository(settings.max_job_attempts)
        job_runner = JobRunner(processor, job_repo, settings)
        worker = Worker(job_repo, job_runner, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
