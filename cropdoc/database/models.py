from dataclasses import dataclass
from datetime import datetime


@dataclass
class JobRecord:
    """Represents a row from the diagnosis_jobs table."""

    id: int
    user_id: str | None
    crop_log_id: str
    plant_id: str
    image: str
    status: str
    latitude: float | None = None
    longitude: float | None = None
    diagnosis_id: str | None = None
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
