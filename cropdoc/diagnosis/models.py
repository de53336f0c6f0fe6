from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class HealthFlag:
    """Overall health classification reported by the vendor."""

    binary: bool
    probability: float | None = None


@dataclass(frozen=True)
class DiseaseSuggestion:
    """A ranked disease or pest candidate."""

    name: str
    probability: float | None = None
    description: str | None = None
    treatment: tuple[str, ...] = ()
    similar_images: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlantSuggestion:
    """A ranked plant species candidate."""

    plant_name: str
    probability: float | None = None
    similar_images: tuple[str, ...] = ()


@dataclass(frozen=True)
class VendorPayload:
    """Vendor response read into one shape, whatever schema it arrived in."""

    is_healthy: HealthFlag | None = None
    disease_suggestions: tuple[DiseaseSuggestion, ...] = ()
    plant_suggestions: tuple[PlantSuggestion, ...] = ()
    question: Any = None


@dataclass(frozen=True)
class DiseaseSignal:
    suggestions: tuple[DiseaseSuggestion, ...]


@dataclass(frozen=True)
class HealthSignal:
    flag: HealthFlag


@dataclass(frozen=True)
class IdentificationSignal:
    suggestions: tuple[PlantSuggestion, ...]


@dataclass(frozen=True)
class NoSignal:
    pass


Signal = DiseaseSignal | HealthSignal | IdentificationSignal | NoSignal


@dataclass(frozen=True)
class Location:
    """Geolocation where the photo was taken."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class DiagnosisContext:
    """Request context a diagnosis is attached to."""

    crop_log_id: str
    plant_id: str
    location: Location | None = None
    user_id: str | None = None


@dataclass(frozen=True)
class RuleOutcome:
    """What a precedence rule decided, before the post-pass."""

    pest_or_disease: str
    confidence_level: float = 0.0
    recommendations: tuple[str, ...] = ()
    related_images: tuple[str, ...] = ()


@dataclass(frozen=True)
class DiagnosisRecord:
    """Canonical diagnosis produced from one vendor response."""

    pest_or_disease: str
    confidence_level: float
    recommendations: tuple[str, ...]
    related_images: tuple[str, ...]
    source: str
    created_at: datetime
    context: DiagnosisContext
    raw: dict[str, Any] = field(default_factory=dict)
    review_status: str = "none"

    def to_document(self) -> dict[str, Any]:
        """Render the record as the camelCase JSON document that is persisted."""
        location = self.context.location
        return {
            "pestOrDisease": self.pest_or_disease,
            "confidenceLevel": self.confidence_level,
            "recommendations": list(self.recommendations),
            "relatedImages": list(self.related_images),
            "source": self.source,
            "createdAt": self.created_at.isoformat(),
            "cropLogId": self.context.crop_log_id,
            "plantId": self.context.plant_id,
            "userId": self.context.user_id,
            "latitude": location.latitude if location else None,
            "longitude": location.longitude if location else None,
            "reviewStatus": self.review_status,
            "rawApiResponse": self.raw,
        }
