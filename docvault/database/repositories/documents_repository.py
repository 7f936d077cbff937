from collections.abc import Iterable

from psycopg.rows import dict_row

from docvault.database.connection import get_connection
from docvault.database.models import DocumentRecord, DocumentStatus
from docvault.service.models import StoredObject


class DocumentsRepository:
    """Database operations for the documents table."""

    def insert_if_absent(
        self,
        project_id: str,
        stored: StoredObject,
        status: DocumentStatus = DocumentStatus.UPLOADED,
    ) -> bool:
        """Record a stored document unless the project already has its hash.

        Returns:
            True if a row was inserted, False for a duplicate.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO documents
                        (project_id, file_name, url, hash, mime_type, size, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (project_id, hash) DO NOTHING
                    """,
                    (
                        project_id,
                        stored.filename,
                        stored.url,
                        stored.hash,
                        stored.mime_type,
                        stored.size,
                        status.value,
                    ),
                )
                inserted = cur.rowcount > 0
            conn.commit()
        return inserted

    def list_for_project(
        self,
        project_id: str,
        statuses: Iterable[DocumentStatus] | None = None,
    ) -> list[DocumentRecord]:
        """Return the project's documents in upload order, optionally by status."""
        status_values = [s.value for s in statuses] if statuses is not None else None
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, project_id, file_name, url, hash, mime_type,
                           size, status, uploaded_at
                    FROM documents
                    WHERE project_id = %s
                      AND (%s::text[] IS NULL OR status = ANY(%s::text[]))
                    ORDER BY uploaded_at, id
                    """,
                    (project_id, status_values, status_values),
                )
                rows = cur.fetchall()

        return [
            DocumentRecord(
                id=row["id"],
                project_id=str(row["project_id"]),
                file_name=row["file_name"],
                url=row["url"],
                hash=row["hash"],
                mime_type=row["mime_type"],
                size=row["size"],
                status=DocumentStatus(row["status"]),
                uploaded_at=row["uploaded_at"],
            )
            for row in rows
        ]

    def update_status(self, document_id: int, status: DocumentStatus) -> None:
        with get_connection() as conn:
            conn.execute(
                "UPDATE documents SET status = %s WHERE id = %s",
                (status.value, document_id),
            )
            conn.commit()
