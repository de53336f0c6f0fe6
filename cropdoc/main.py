from cropdoc.config.settings import Settings
from cropdoc.database.connection import close_pool, init_pool
from cropdoc.database.repositories.job_repository import JobRepository
from cropdoc.logging.logger import Log
from cropdoc.processor.processor import build_processor
from cropdoc.worker.job_runner import JobRunner
from cropdoc.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        processor = build_processor(settings)
        job_repo = JobRepository()
        job_runner = JobRunner(processor, job_repo)
        worker = Worker(job_repo, job_runner, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
