import time

from docvault.config.settings import Settings
from docvault.database.connection import get_connection
from docvault.database.models import JobRecord
from docvault.database.repositories.job_repository import JobRepository
from docvault.logging.logger import Log
from docvault.worker.job_runner import JobRunner


class Worker:
    """Poll loop: claim -> dispatch, sleeping while the queue is empty."""

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> int:
        """Main poll loop. Runs until interrupted.

        If max_jobs is set, stop after processing that many jobs. Returns the
        number of jobs dispatched.
        """
        Log.info("Worker started, polling for archive jobs")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                job = self._try_claim_job()
                if job is None:
                    Log.debug("No jobs available, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
                    continue
                self._dispatch(job)
                jobs_done += 1
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")
        return jobs_done

    def _dispatch(self, job: JobRecord) -> None:
        """Run one job; a failure while recording its outcome must not stop the loop."""
        try:
            self._job_runner.run(job)
        except Exception as exc:
            Log.error(f"Job {job.id} could not be finalized, it stays locked: {exc}")

    def _try_claim_job(self) -> JobRecord | None:
        """Attempt to claim the next pending job. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
