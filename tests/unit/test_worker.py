from unittest.mock import MagicMock, patch

from docvault.database.models import JobKind, JobRecord, JobStatus
from docvault.worker.worker import Worker


def _make_worker() -> tuple[Worker, MagicMock, MagicMock]:
    """Create a Worker with mocked dependencies."""
    mock_repo = MagicMock()
    mock_runner = MagicMock()
    settings = MagicMock(job_poll_interval_seconds=1)
    worker = Worker(mock_repo, mock_runner, settings)
    return worker, mock_repo, mock_runner


def _make_job(job_id: int = 1) -> JobRecord:
    return JobRecord(
        id=job_id,
        project_id="proj-uuid",
        kind=JobKind.IMPORT_DOCUMENT,
        status=JobStatus.PROCESSING,
        attempts=0,
        source_url="https://files.test/a.pdf",
    )


class TestWorkerDispatch:
    def test_dispatches_job_to_runner(self) -> None:
        worker, _repo, mock_runner = _make_worker()
        job = _make_job()

        with patch.object(worker, "_try_claim_job", side_effect=[job, KeyboardInterrupt]):
            worker.run()

        mock_runner.run.assert_called_once_with(job)

    def test_dispatches_multiple_jobs(self) -> None:
        worker, _repo, mock_runner = _make_worker()

        with patch.object(
            worker, "_try_claim_job", side_effect=[_make_job(1), _make_job(2), KeyboardInterrupt]
        ):
            worker.run()

        assert mock_runner.run.call_count == 2

    def test_stops_after_max_jobs(self) -> None:
        worker, _repo, mock_runner = _make_worker()

        with patch.object(worker, "_try_claim_job", side_effect=[_make_job(1), _make_job(2)]):
            processed = worker.run(max_jobs=2)

        assert processed == 2
        assert mock_runner.run.call_count == 2


class TestWorkerJobErrors:
    def test_keeps_polling_when_a_job_cannot_be_finalized(self) -> None:
        worker, _repo, mock_runner = _make_worker()
        mock_runner.run.side_effect = [RuntimeError("connection lost"), None]

        with patch.object(worker, "_try_claim_job", side_effect=[_make_job(1), _make_job(2)]):
            processed = worker.run(max_jobs=2)

        assert processed == 2
        assert mock_runner.run.call_count == 2


class TestWorkerSleep:
    def test_sleeps_when_no_job(self) -> None:
        worker, _repo, _runner = _make_worker()

        with (
            patch.object(worker, "_try_claim_job", side_effect=[None, KeyboardInterrupt]),
            patch("docvault.worker.worker.time.sleep") as mock_sleep,
        ):
            worker.run()

        mock_sleep.assert_called_once_with(1)


class TestWorkerClaim:
    def test_database_error_is_treated_as_empty_queue(self) -> None:
        worker, mock_repo, _runner = _make_worker()
        mock_repo.claim_next_job.side_effect = Exception("connection lost")

        with patch("docvault.worker.worker.get_connection") as mock_get_connection:
            mock_get_connection.return_value.__enter__.return_value = MagicMock()
            assert worker._try_claim_job() is None


class TestWorkerShutdown:
    def test_handles_keyboard_interrupt(self) -> None:
        worker, _repo, _runner = _make_worker()

        with patch.object(worker, "_try_claim_job", side_effect=KeyboardInterrupt):
            worker.run()  # Should not raise
