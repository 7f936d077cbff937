from psycopg.rows import dict_row

from docvault.database.connection import get_connection
from docvault.database.models import ProjectRecord
from docvault.processor.exceptions import ProjectNotFoundError


class ProjectsRepository:
    """Database operations for the projects table."""

    def find_by_id(self, project_id: str) -> ProjectRecord:
        """Find a project by its primary key.

        Raises:
            ProjectNotFoundError: if no project with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, project_unique_id, project_name,
                           conversation, project_sheet, zip_url
                    FROM projects
                    WHERE id = %s
                    """,
                    (project_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise ProjectNotFoundError(f"Project {project_id} not found")

        return ProjectRecord(
            id=str(row["id"]),
            project_unique_id=row["project_unique_id"],
            project_name=row["project_name"],
            conversation=row["conversation"],
            project_sheet=row["project_sheet"],
            zip_url=row["zip_url"],
        )

    def update_zip_url(self, project_id: str, zip_url: str) -> None:
        """Remember the latest export archive for the project.

        Raises:
            ProjectNotFoundError: if no project with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE projects
                    SET zip_url = %s, updated_at = NOW()
                    WHERE id = %s
                    """,
                    (zip_url, project_id),
                )
                if cur.rowcount == 0:
                    raise ProjectNotFoundError(f"Project {project_id} not found")
            conn.commit()
