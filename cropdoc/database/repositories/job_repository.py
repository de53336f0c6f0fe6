from typing import Any

import psycopg
from psycopg.rows import dict_row

from cropdoc.database.connection import get_connection
from cropdoc.database.models import JobRecord

_JOB_COLUMNS = """
    id, user_id, crop_log_id, plant_id, image, status, latitude, longitude,
    diagnosis_id, error_message, locked_at, created_at, updated_at
"""


class JobRepository:
    """Database operations for the diagnosis_jobs table."""

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Claim the next pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_JOB_COLUMNS}
                FROM diagnosis_jobs
                WHERE status = 'pending'
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """
            )
            row = cur.fetchone()

        if row is None:
            return None

        conn.execute(
            """
            UPDATE diagnosis_jobs
            SET status = 'processing', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()

        row["status"] = "processing"
        return _to_record(row)

    def mark_done(self, job_id: int, diagnosis_id: str) -> None:
        """Mark a job as done and remember the diagnosis it produced."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE diagnosis_jobs
                SET status = 'done', diagnosis_id = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (diagnosis_id, job_id),
            )
            conn.commit()

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE diagnosis_jobs
                SET status = 'failed', error_message = %s, updated_at = NOW()
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
                    f"SELECT {_JOB_COLUMNS} FROM diagnosis_jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_record(row)


def _to_record(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        user_id=_optional_str(row["user_id"]),
        crop_log_id=str(row["crop_log_id"]),
        plant_id=str(row["plant_id"]),
        image=row["image"] or "",
        status=row["status"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        diagnosis_id=_optional_str(row["diagnosis_id"]),
        error_message=row["error_message"],
        locked_at=row["locked_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)
