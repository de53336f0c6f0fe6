from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from cropdoc.diagnosis.models import DiagnosisRecord
from cropdoc.processor.models import DiagnosisRequest


@dataclass(slots=True)
class PipelineContext:
    request: DiagnosisRequest
    raw_response: dict[str, Any] = field(default_factory=dict)
    record: DiagnosisRecord | None = None
    diagnosis_id: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
