"""Readers for the vendor response shapes the normalizer understands.

Each schema turns an untrusted JSON object into a VendorPayload. Readers never
raise on missing or mistyped fields: anything unusable is dropped so that the
precedence rules can fall through to the next signal.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from cropdoc.diagnosis.models import (
    DiseaseSuggestion,
    HealthFlag,
    PlantSuggestion,
    VendorPayload,
)


class VendorSchema(ABC):
    """Contract for a vendor response reader."""

    name: ClassVar[str]

    @abstractmethod
    def read(self, raw: dict[str, Any]) -> VendorPayload:
        """Read a decoded vendor response into a VendorPayload."""


class CanonicalSchema(VendorSchema):
    """Vendor-neutral camelCase shape (isHealthy, diseaseSuggestions, ...)."""

    name = "canonical"
    KEYS: ClassVar[frozenset[str]] = frozenset(
        {"isHealthy", "diseaseSuggestions", "plantSuggestions"}
    )

    def read(self, raw: dict[str, Any]) -> VendorPayload:
        return VendorPayload(
            is_healthy=_build_health_flag(raw.get("isHealthy")),
            disease_suggestions=tuple(
                _build_disease(item, details_key="details", images_key="similarImages")
                for item in _entries(raw.get("diseaseSuggestions"))
            ),
            plant_suggestions=tuple(
                _build_plant(item, name_keys=("plantName",), images_key="similarImages")
                for item in _entries(raw.get("plantSuggestions"))
            ),
            question=raw.get("question"),
        )


class PlantIdV3Schema(VendorSchema):
    """Plant.id v3 health assessment: everything lives under ``result``."""

    name = "v3"

    def read(self, raw: dict[str, Any]) -> VendorPayload:
        result = _object(raw.get("result"))
        disease = _object(result.get("disease"))
        classification = _object(result.get("classification"))
        plants = _entries(classification.get("suggestions")) or _entries(
            raw.get("suggestions")
        )
        return VendorPayload(
            is_healthy=_build_health_flag(result.get("is_healthy")),
            disease_suggestions=tuple(
                _build_disease(item, details_key="details", images_key="similar_images")
                for item in _entries(disease.get("suggestions"))
            ),
            plant_suggestions=tuple(
                _build_plant(item, name_keys=("plant_name", "name"), images_key="similar_images")
                for item in plants
            ),
            question=result.get("question", disease.get("question")),
        )


class PlantIdV2Schema(VendorSchema):
    """Plant.id v2: ``health_assessment.diseases`` plus top-level ``suggestions``."""

    name = "v2"

    def read(self, raw: dict[str, Any]) -> VendorPayload:
        assessment = _object(raw.get("health_assessment"))
        health = raw.get("is_healthy")
        if health is None:
            health = assessment.get("is_healthy")
        return VendorPayload(
            is_healthy=_build_health_flag(health),
            disease_suggestions=tuple(
                _build_disease(item, details_key="disease_details", images_key="similar_images")
                for item in _entries(assessment.get("diseases"))
            ),
            plant_suggestions=tuple(
                _build_plant(item, name_keys=("plant_name",), images_key="similar_images")
                for item in _entries(raw.get("suggestions"))
            ),
        )


class AutoSchema(VendorSchema):
    """Detects the shape of every response before reading it."""

    name = "auto"

    def read(self, raw: dict[str, Any]) -> VendorPayload:
        return detect_schema(raw).read(raw)


def detect_schema(raw: dict[str, Any]) -> VendorSchema:
    """Pick the reader matching the shape of ``raw``.

    Canonical keys win, then a v3 ``result`` object; anything else is read as v2.
    """
    if CanonicalSchema.KEYS & raw.keys():
        return CanonicalSchema()
    if isinstance(raw.get("result"), dict):
        return PlantIdV3Schema()
    return PlantIdV2Schema()


class VendorSchemaFactory:
    """Creates the configured vendor schema reader."""

    SCHEMAS: ClassVar[dict[str, type[VendorSchema]]] = {
        "auto": AutoSchema,
        "canonical": CanonicalSchema,
        "v2": PlantIdV2Schema,
        "v3": PlantIdV3Schema,
    }

    @classmethod
    def create(cls, name: str) -> VendorSchema:
        schema_cls = cls.SCHEMAS.get(name.lower())
        if schema_cls is None:
            raise ValueError(
                f"Unknown vendor schema '{name}'. Choose from: {list(cls.SCHEMAS)}"
            )
        return schema_cls()


def _build_health_flag(raw: Any) -> HealthFlag | None:
    if not isinstance(raw, dict):
        return None
    binary = _parse_binary(raw.get("binary"))
    if binary is None:
        return None
    return HealthFlag(binary=binary, probability=_number(raw.get("probability")))


def _parse_binary(raw: Any) -> bool | None:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        # v2 reports the classification as a word
        return {"healthy": True, "unhealthy": False}.get(raw.strip().lower())
    return None


def _build_disease(
    raw: dict[str, Any], *, details_key: str, images_key: str
) -> DiseaseSuggestion:
    details = _object(raw.get(details_key))
    description = _texts(details.get("description"))
    return DiseaseSuggestion(
        name=_string(raw.get("name")),
        probability=_number(raw.get("probability")),
        description=description[0] if description else None,
        treatment=_texts(details.get("treatment")),
        similar_images=_image_urls(raw.get(images_key)),
    )


def _build_plant(
    raw: dict[str, Any], *, name_keys: tuple[str, ...], images_key: str
) -> PlantSuggestion:
    name = next((_string(raw.get(k)) for k in name_keys if _string(raw.get(k))), "")
    return PlantSuggestion(
        plant_name=name,
        probability=_number(raw.get("probability")),
        similar_images=_image_urls(raw.get(images_key)),
    )


def _object(raw: Any) -> dict[str, Any]:
    return raw if isinstance(raw, dict) else {}


def _objects(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def _entries(raw: Any) -> list[dict[str, Any]]:
    """Ranked suggestion list; a malformed entry keeps its rank as a blank one."""
    if not isinstance(raw, list):
        return []
    return [_object(item) for item in raw]


def _string(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""


def _number(raw: Any) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError:
            return None
    if not isinstance(raw, (int, float)):
        return None
    try:
        return float(raw)
    except OverflowError:
        # integers beyond float range sit above any 0-100 scale
        return math.inf if raw > 0 else -math.inf


def _texts(raw: Any) -> tuple[str, ...]:
    """Flatten a string, ``{value}`` object, list, or category mapping into text."""
    if isinstance(raw, str):
        text = raw.strip()
        return (text,) if text else ()
    if isinstance(raw, list):
        return tuple(text for item in raw for text in _texts(item))
    if isinstance(raw, dict):
        if "value" in raw:
            return _texts(raw["value"])
        return tuple(text for value in raw.values() for text in _texts(value))
    return ()


def _image_urls(raw: Any) -> tuple[str, ...]:
    return tuple(
        url for url in (_string(item.get("url")) for item in _objects(raw)) if url
    )
