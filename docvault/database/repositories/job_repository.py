from typing import Any

import psycopg
from psycopg.rows import dict_row

from docvault.database.connection import get_connection
from docvault.database.models import JobKind, JobRecord, JobStatus


class JobRepository:
    """Database operations for the archive_jobs table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Claim the next pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, project_id, kind, source_url, filename, attempts
                FROM archive_jobs
                WHERE status = 'pending'
                  AND attempts < %s
                ORDER BY created_at, id
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()

        if row is None:
            conn.commit()
            return None

        conn.execute(
            """
            UPDATE archive_jobs
            SET status = 'processing', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()

        return JobRecord(
            id=row["id"],
            project_id=str(row["project_id"]),
            kind=JobKind(row["kind"]),
            status=JobStatus.PROCESSING,
            attempts=row["attempts"],
            source_url=row["source_url"],
            filename=row["filename"],
        )

    def mark_done(self, job_id: int) -> None:
        """Mark a job as done."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE archive_jobs
                SET status = 'done', error_message = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE archive_jobs
                SET status = 'failed', error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def increment_attempts(self, job_id: int, error: str | None = None) -> None:
        """Increment attempt count and return job to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE archive_jobs
                SET attempts = attempts + 1, status = 'pending', error_message = %s,
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def find_by_id(self, job_id: int) -> JobRecord | None:
        """Find a job by ID. Useful for tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, project_id, kind, source_url, filename, status, attempts,
                           error_message, locked_at, created_at, updated_at
                    FROM archive_jobs
                    WHERE id = %s
                    """,
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return JobRecord(
            id=row["id"],
            project_id=str(row["project_id"]),
            kind=JobKind(row["kind"]),
            status=JobStatus(row["status"]),
            attempts=row["attempts"],
            source_url=row["source_url"],
            filename=row["filename"],
            error_message=row["error_message"],
            locked_at=row["locked_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
