from cropdoc.database.repositories.diagnosis_repository import (
    DiagnosisRepository,
    diagnosis_path,
)
from cropdoc.diagnosis.normalizer import DiagnosisNormalizer
from cropdoc.logging.logger import Log
from cropdoc.processor.pipeline import PipelineContext, PipelineStep
from cropdoc.vendor.base import BaseVendorClient


class AssessHealthStep(PipelineStep):
    def __init__(self, vendor_client: BaseVendorClient) -> None:
        self._vendor_client = vendor_client

    def run(self, context: PipelineContext) -> PipelineContext:
        request = context.request
        context.raw_response = self._vendor_client.assess_health(
            request.image,
            location=request.context.location,
        )
        Log.info(f"Received health assessment for job {request.job_id}")
        return context


class NormalizeStep(PipelineStep):
    def __init__(self, normalizer: DiagnosisNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        context.record = self._normalizer.normalize(
            context.raw_response,
            context.request.context,
        )
        return context


class PersistDiagnosisStep(PipelineStep):
    def __init__(self, diagnosis_repo: DiagnosisRepository) -> None:
        self._diagnosis_repo = diagnosis_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.record is None:
            raise ValueError("PipelineContext.record must be set before persist")
        path = diagnosis_path(context.record.context.crop_log_id)
        context.diagnosis_id = self._diagnosis_repo.save(path, context.record)
        Log.info(f"Stored diagnosis {context.diagnosis_id} under {path}")
        return context


class LinkUserStep(PipelineStep):
    def __init__(self, diagnosis_repo: DiagnosisRepository) -> None:
        self._diagnosis_repo = diagnosis_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        user_id = context.request.context.user_id
        if not user_id:
            Log.debug(f"Job {context.request.job_id} has no user, skipping user link")
            return context
        if not context.diagnosis_id:
            raise ValueError("PipelineContext.diagnosis_id must be set before linking")
        self._diagnosis_repo.link_to_user(
            user_id,
            context.diagnosis_id,
            context.request.context.crop_log_id,
        )
        Log.info(f"Diagnosis {context.diagnosis_id} added to user {user_id}")
        return context
