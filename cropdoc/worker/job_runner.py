from cropdoc.database.models import JobRecord
from cropdoc.database.repositories.job_repository import JobRepository
from cropdoc.logging.logger import Log
from cropdoc.processor.processor import Processor


class JobRunner:
    """Run one job and record its outcome. Failed jobs are not retried."""

    def __init__(self, processor: Processor, job_repo: JobRepository) -> None:
        self._processor = processor
        self._job_repo = job_repo

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling."""
        Log.info(f"Running job {job.id}")
        try:
            diagnosis_id = self._processor.process(job)
        except Exception as exc:
            Log.error(f"Job {job.id} failed: {exc}")
            self._job_repo.mark_failed(job.id, str(exc))
            return
        self._job_repo.mark_done(job.id, diagnosis_id)
        Log.info(f"Job {job.id} completed with diagnosis {diagnosis_id}")
