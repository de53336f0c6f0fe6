"""Vendor response to diagnosis record normalizer."""

import copy
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from cropdoc.diagnosis.exceptions import InvalidInputError
from cropdoc.diagnosis.models import DiagnosisContext, DiagnosisRecord
from cropdoc.diagnosis.rules import apply_rules
from cropdoc.diagnosis.schemas import AutoSchema, VendorSchema
from cropdoc.logging.logger import Log

DEFAULT_SOURCE = "AI_Plant.id"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DiagnosisNormalizer:
    """Maps a raw vendor response onto a canonical DiagnosisRecord.

    Holds no mutable state; one instance can serve any number of callers.
    """

    def __init__(
        self,
        *,
        schema: VendorSchema | None = None,
        source: str = DEFAULT_SOURCE,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._schema = schema if schema is not None else AutoSchema()
        self._source = source
        self._clock = clock

    def normalize(
        self,
        raw: Any,
        context: DiagnosisContext,
        created_at: datetime | None = None,
    ) -> DiagnosisRecord:
        """Build a diagnosis record from a decoded vendor response.

        Missing or malformed fields never fail; they fall through the
        precedence rules down to "Unknown Issue".

        Raises:
            InvalidInputError: if ``raw`` is not a mapping.
        """
        if not isinstance(raw, Mapping):
            raise InvalidInputError(
                f"Vendor response must be an object, got {type(raw).__name__}"
            )

        document = copy.deepcopy(dict(raw))
        payload = self._schema.read(document)
        signal, outcome = apply_rules(payload)
        Log.debug(f"Diagnosis decided by {type(signal).__name__}")

        record = DiagnosisRecord(
            pest_or_disease=outcome.pest_or_disease,
            confidence_level=outcome.confidence_level,
            recommendations=outcome.recommendations,
            related_images=outcome.related_images,
            source=self._source,
            created_at=created_at if created_at is not None else self._clock(),
            context=context,
            raw=document,
        )
        Log.info(
            f"Normalized diagnosis for crop log {context.crop_log_id}: "
            f"{record.pest_or_disease} ({record.confidence_level:.2f})"
        )
        return record
