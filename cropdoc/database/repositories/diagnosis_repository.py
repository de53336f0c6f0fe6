from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from cropdoc.database.connection import get_connection
from cropdoc.diagnosis.models import DiagnosisRecord
from cropdoc.processor.exceptions import DiagnosisNotFoundError


def diagnosis_path(crop_log_id: str) -> str:
    """Build the collection path for a crop log's diagnoses: crop_logs/{id}/diagnoses"""
    if not crop_log_id or "/" in crop_log_id:
        raise ValueError(f"Invalid crop log id: {crop_log_id!r}")
    return f"crop_logs/{crop_log_id}/diagnoses"


class DiagnosisRepository:
    """Database operations for the diagnoses and user_diagnoses tables."""

    def save(self, path: str, record: DiagnosisRecord) -> str:
        """Persist a diagnosis record under ``path`` and return its generated id."""
        context = record.context
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO diagnoses
                    (path, crop_log_id, plant_id, user_id, document, created_at)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        path,
                        context.crop_log_id,
                        context.plant_id,
                        context.user_id,
                        Jsonb(record.to_document()),
                        record.created_at,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO diagnoses returned no id")
        return str(row[0])

    def link_to_user(self, user_id: str, diagnosis_id: str, crop_log_id: str) -> None:
        """Index a diagnosis under the user who requested it."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO user_diagnoses (user_id, diagnosis_id, crop_log_id, created_at)
                VALUES (%s, %s, %s, NOW())
                """,
                (user_id, diagnosis_id, crop_log_id),
            )
            conn.commit()

    def find_by_id(self, diagnosis_id: str) -> dict[str, Any]:
        """Return the stored diagnosis document.

        Raises:
            DiagnosisNotFoundError: if no diagnosis with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT document FROM diagnoses WHERE id = %s",
                    (diagnosis_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DiagnosisNotFoundError(f"Diagnosis {diagnosis_id} not found")
        document: dict[str, Any] = row["document"]
        return document
