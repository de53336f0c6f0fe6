from datetime import datetime, timezone

from cropdoc.database.connection import get_connection
from cropdoc.database.repositories.diagnosis_repository import (
    DiagnosisRepository,
    diagnosis_path,
)
from cropdoc.diagnosis.models import DiagnosisContext
from cropdoc.diagnosis.normalizer import DiagnosisNormalizer


def test_save_and_find_round_trip(integration_cleanup: None, crop_log_id: str) -> None:
    context = DiagnosisContext(crop_log_id=crop_log_id, plant_id="it-plant", user_id="it-user")
    record = DiagnosisNormalizer().normalize(
        {"isHealthy": {"binary": True, "probability": 0.92}},
        context,
        created_at=datetime(2025, 5, 1, tzinfo=timezone.utc),
    )
    repo = DiagnosisRepository()

    diagnosis_id = repo.save(diagnosis_path(crop_log_id), record)
    document = repo.find_by_id(diagnosis_id)

    assert document["pestOrDisease"] == "Healthy"
    assert document["confidenceLevel"] == 0.92
    assert document["cropLogId"] == crop_log_id


def test_link_to_user(integration_cleanup: None, crop_log_id: str) -> None:
    context = DiagnosisContext(crop_log_id=crop_log_id, plant_id="it-plant", user_id="it-user")
    record = DiagnosisNormalizer().normalize({}, context)
    repo = DiagnosisRepository()
    diagnosis_id = repo.save(diagnosis_path(crop_log_id), record)

    repo.link_to_user("it-user", diagnosis_id, crop_log_id)

    with get_connection() as conn:
        row = conn.execute(
            "SELECT user_id FROM user_diagnoses WHERE diagnosis_id = %s",
            (diagnosis_id,),
        ).fetchone()
    assert row is not None
    assert str(row[0]) == "it-user"
