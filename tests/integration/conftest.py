import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest
from psycopg.rows import dict_row

from cropdoc.config.settings import Settings
from cropdoc.database.connection import close_pool, get_connection, init_pool
from cropdoc.database.models import JobRecord

_REQUIRED_TABLES = ("diagnosis_jobs", "diagnoses", "user_diagnoses")


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "cropdoc_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            for table in _REQUIRED_TABLES:
                row = conn.execute("SELECT to_regclass(%s)", (table,)).fetchone()
                if row is None or row[0] is None:
                    raise RuntimeError(f"table {table} is missing")
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env and apply tests/integration/schema.sql"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def crop_log_id() -> str:
    return f"it-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def integration_cleanup(
    integration_pool: None, crop_log_id: str
) -> Generator[None, None, None]:
    yield
    with get_connection() as conn:
        conn.execute("DELETE FROM user_diagnoses WHERE crop_log_id = %s", (crop_log_id,))
        conn.execute("DELETE FROM diagnoses WHERE crop_log_id = %s", (crop_log_id,))
        conn.execute("DELETE FROM diagnosis_jobs WHERE crop_log_id = %s", (crop_log_id,))
        conn.commit()


@pytest.fixture
def seed_job(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: None,
    crop_log_id: str,
) -> JobRecord:
    with db_conn.cursor(row_factory=dict_row) as cur:
        cur.execute(
            """
            INSERT INTO diagnosis_jobs (user_id, crop_log_id, plant_id, image, status)
            VALUES (%s, %s, %s, %s, 'pending')
            RETURNING id
            """,
            ("it-user", crop_log_id, "it-plant", "aW1hZ2U="),
        )
        row = cur.fetchone()
        assert row is not None
    db_conn.commit()
    return JobRecord(
        id=row["id"],
        user_id="it-user",
        crop_log_id=crop_log_id,
        plant_id="it-plant",
        image="aW1hZ2U=",
        status="pending",
    )
