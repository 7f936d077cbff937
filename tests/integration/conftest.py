import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest
from psycopg.rows import dict_row

from docvault.config.settings import Settings
from docvault.database.connection import build_conninfo, close_pool, get_connection, init_pool
from docvault.database.models import JobKind, JobRecord, JobStatus, ProjectRecord

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "docvault" / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docvault_test")
    return Settings(storage_backend="memory")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        with psycopg.connect(build_conninfo(test_settings), connect_timeout=5) as conn:
            conn.execute(SCHEMA_PATH.read_text())
            conn.commit()
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run these tests")
    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def seed_project(db_conn: psycopg.Connection[Any]) -> Generator[ProjectRecord, None, None]:
    """A fresh project row; its documents and jobs go with it on cleanup."""
    unique_id = f"PRJ-{uuid.uuid4().hex[:12]}"
    with db_conn.cursor(row_factory=dict_row) as cur:
        cur.execute(
            """
            INSERT INTO projects (project_unique_id, project_name, conversation)
            VALUES (%s, %s, %s)
            RETURNING id
            """,
            (unique_id, "Integration project", "Please quote the attached plans."),
        )
        row = cur.fetchone()
        assert row is not None
    db_conn.commit()
    project = ProjectRecord(
        id=str(row["id"]),
        project_unique_id=unique_id,
        project_name="Integration project",
        conversation="Please quote the attached plans.",
    )
    try:
        yield project
    finally:
        db_conn.execute("DELETE FROM projects WHERE id = %s", (project.id,))
        db_conn.commit()


@pytest.fixture
def make_job(
    db_conn: psycopg.Connection[Any], seed_project: ProjectRecord
) -> Generator[Any, None, None]:
    """Insert pending jobs for the seeded project."""

    def _make(
        kind: JobKind,
        source_url: str | None = None,
        attempts: int = 0,
    ) -> JobRecord:
        with db_conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO archive_jobs (project_id, kind, source_url, status, attempts)
                VALUES (%s, %s, %s, 'pending', %s)
                RETURNING id
                """,
                (seed_project.id, kind.value, source_url, attempts),
            )
            row = cur.fetchone()
            assert row is not None
        db_conn.commit()
        return JobRecord(
            id=row[0],
            project_id=seed_project.id,
            kind=kind,
            status=JobStatus.PENDING,
            attempts=attempts,
            source_url=source_url,
        )

    yield _make
