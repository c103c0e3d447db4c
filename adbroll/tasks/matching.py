import logging
from typing import Optional

from celery import shared_task

from adbroll.models import MatchJob
from adbroll.services.match_queue_impl import MatchJobService

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def process_match_job(self, job_id: int) -> Optional[str]:
    """
    Claim and run a queued match job.

    A failed attempt puts the job back to ``pending`` while it still has
    attempts left; this task then schedules itself again. The job row, not the
    Celery retry counter, decides when to give up.

    Returns:
        The job status after this attempt, or None if the job could not be claimed.
    """
    job = MatchJobService().process(job_id)
    if job is None:
        return None

    if job.status == MatchJob.Status.PENDING:
        logger.warning(f"Match job {job.id} will be retried (attempt {job.attempts + 1}/{job.max_attempts}).")
        raise self.retry(max_retries=job.max_attempts)

    return job.status
