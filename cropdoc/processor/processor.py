from cropdoc.config.settings import Settings
from cropdoc.database.models import JobRecord
from cropdoc.database.repositories.diagnosis_repository import DiagnosisRepository
from cropdoc.diagnosis.normalizer import DiagnosisNormalizer
from cropdoc.diagnosis.schemas import VendorSchemaFactory
from cropdoc.logging.logger import Log
from cropdoc.processor.models import DiagnosisRequest
from cropdoc.processor.pipeline import PipelineContext, PipelineStep
from cropdoc.processor.steps import (
    AssessHealthStep,
    LinkUserStep,
    NormalizeStep,
    PersistDiagnosisStep,
)
from cropdoc.vendor.base import BaseVendorClient
from cropdoc.vendor.factory import VendorClientFactory


class Processor:
    """Runs one diagnosis job through the pipeline.

    Pipeline: validate -> assess health -> normalize -> persist -> link user.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, job: JobRecord) -> str:
        """Diagnose the job's photo and return the stored diagnosis id."""
        Log.info(f"Processing job {job.id} for crop log {job.crop_log_id}")
        context = PipelineContext(request=DiagnosisRequest.from_job(job))
        for step in self._steps:
            context = step.run(context)
        return context.diagnosis_id


def build_processor(
    settings: Settings,
    vendor_client: BaseVendorClient | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    if vendor_client is None:
        vendor_client = VendorClientFactory.create(settings)
    normalizer = DiagnosisNormalizer(
        schema=VendorSchemaFactory.create(settings.vendor_schema),
        source=settings.diagnosis_source,
    )
    diagnosis_repo = DiagnosisRepository()
    return Processor(
        steps=[
            AssessHealthStep(vendor_client),
            NormalizeStep(normalizer),
            PersistDiagnosisStep(diagnosis_repo),
            LinkUserStep(diagnosis_repo),
        ]
    )
