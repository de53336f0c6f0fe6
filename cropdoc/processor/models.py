from dataclasses import dataclass

from cropdoc.database.models import JobRecord
from cropdoc.diagnosis.models import DiagnosisContext, Location
from cropdoc.processor.exceptions import InvalidRequestError


@dataclass(frozen=True)
class DiagnosisRequest:
    """A validated request to diagnose one plant photo."""

    job_id: int
    image: str
    context: DiagnosisContext

    @classmethod
    def from_job(cls, job: JobRecord) -> "DiagnosisRequest":
        """Build a request from a queued job.

        Raises:
            InvalidRequestError: if the image, crop log or plant is missing.
        """
        missing = [
            name
            for name, value in (
                ("image", job.image),
                ("crop_log_id", job.crop_log_id),
                ("plant_id", job.plant_id),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise InvalidRequestError(
                f"Job {job.id} is missing {', '.join(missing)}"
            )

        location = None
        if job.latitude is not None and job.longitude is not None:
            location = Location(latitude=job.latitude, longitude=job.longitude)

        return cls(
            job_id=job.id,
            image=job.image,
            context=DiagnosisContext(
                crop_log_id=job.crop_log_id,
                plant_id=job.plant_id,
                location=location,
                user_id=job.user_id,
            ),
        )
