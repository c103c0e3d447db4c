import logging
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from adbroll.models import MatchJob
from adbroll.services.exceptions import JobError, ValidationError
from adbroll.services.matching_impl import BatchMatchOrchestrator, IndexRebuildOrchestrator

logger = logging.getLogger(__name__)


class MatchJobService:
    """
    Queue hand-off for matching runs.

    ``enqueue`` stores a ``pending`` job and, once the surrounding transaction
    commits, hands its id to ``dispatcher`` (normally the Celery task's
    ``delay``). A worker then ``claim``s the job with a conditional update, so
    only one worker ever runs a given attempt.

    A claim is a lease: a job left in ``processing`` longer than
    ``MATCH_JOB_LEASE_SECONDS`` (its worker died or was killed) can be claimed
    again, and the reclaim uses up one of its attempts.
    """

    def __init__(
        self,
        dispatcher: Optional[Callable[[int], Any]] = None,
        batch_orchestrator_factory: Callable[[], BatchMatchOrchestrator] = BatchMatchOrchestrator,
        rebuild_orchestrator_factory: Callable[[], IndexRebuildOrchestrator] = IndexRebuildOrchestrator,
    ):
        self.dispatcher = dispatcher
        self.batch_orchestrator_factory = batch_orchestrator_factory
        self.rebuild_orchestrator_factory = rebuild_orchestrator_factory

    def enqueue(self, kind: str, params: Optional[Dict[str, Any]] = None) -> MatchJob:
        if kind not in MatchJob.Kind.values:
            raise ValidationError(f"Unknown job kind '{kind}'", {"allowed": list(MatchJob.Kind.values)})

        job = MatchJob.objects.create(
            kind=kind,
            params=params or {},
            max_attempts=getattr(settings, "MATCH_JOB_MAX_ATTEMPTS", 3),
        )
        logger.info(f"Enqueued match job {job.id} ({kind}).")

        if self.dispatcher is not None:
            dispatcher = self.dispatcher
            transaction.on_commit(lambda: dispatcher(job.id))
        return job

    def claim(self, job_id: int) -> Optional[MatchJob]:
        """Moves a pending or lease-expired job to processing. Returns None if someone else holds it."""
        claimed = MatchJob.objects.filter(self._claimable(), pk=job_id).update(
            status=MatchJob.Status.PROCESSING,
            attempts=F("attempts") + 1,
            started_at=timezone.now(),
            updated_at=timezone.now(),
        )
        if not claimed:
            return None
        return MatchJob.objects.get(pk=job_id)

    def process(self, job_id: int) -> Optional[MatchJob]:
        """
        Claims and runs a job.

        Returns the job in its final state for this attempt (``completed``,
        ``failed``, or back to ``pending`` when a retry is allowed), or None if
        it could not be claimed.
        """
        job = self.claim(job_id)
        if job is None:
            logger.info(f"Match job {job_id} is not pending; skipping.")
            return None

        logger.info(f"Running match job {job.id} ({job.kind}), attempt {job.attempts}/{job.max_attempts}.")
        try:
            result = self.run(job)
        except Exception as e:
            logger.error(f"Match job {job.id} failed on attempt {job.attempts}: {e}", exc_info=True)
            return self._record_failure(job, e)

        job.status = MatchJob.Status.COMPLETED
        job.result = result
        job.last_error = None
        job.finished_at = timezone.now()
        job.save(update_fields=["status", "result", "last_error", "finished_at", "updated_at"])
        logger.info(f"Match job {job.id} completed.")
        return job

    def run(self, job: MatchJob) -> Dict[str, Any]:
        params = job.params or {}
        threshold = params.get("threshold")

        if job.kind == MatchJob.Kind.REBUILD_INDEX:
            return self.rebuild_orchestrator_factory().rebuild(threshold=threshold).to_response()

        if job.kind in (MatchJob.Kind.MATCH_BATCH, MatchJob.Kind.SMART_MATCH):
            orchestrator = self.batch_orchestrator_factory()
            use_ai = job.kind == MatchJob.Kind.SMART_MATCH
            batch_size = params.get("batch_size", 100)
            if params.get("all"):
                summary = orchestrator.match_all(batch_size=batch_size, threshold=threshold, use_ai=use_ai)
            else:
                summary = orchestrator.match_batch(offset=params.get("offset", 0), batch_size=batch_size, threshold=threshold, use_ai=use_ai)
            return summary.to_response()

        raise JobError(f"Unsupported job kind '{job.kind}'")

    def process_pending(self, limit: Optional[int] = None) -> Dict[str, int]:
        """
        Runs pending and lease-expired jobs oldest first.

        Jobs re-queued for retry wait for the next call. Expired jobs with no
        attempts left are failed without running and counted as failed.
        """
        expired = self.fail_exhausted_leases()
        job_ids = list(MatchJob.objects.filter(self._claimable()).order_by("created_at", "id").values_list("id", flat=True))
        if limit:
            job_ids = job_ids[:limit]

        stats = {"total": len(job_ids) + expired, "completed": 0, "failed": expired, "requeued": 0, "skipped": 0}
        for job_id in job_ids:
            job = self.process(job_id)
            if job is None:
                stats["skipped"] += 1
            elif job.status == MatchJob.Status.COMPLETED:
                stats["completed"] += 1
            elif job.status == MatchJob.Status.FAILED:
                stats["failed"] += 1
            else:
                stats["requeued"] += 1
        return stats

    def fail_exhausted_leases(self) -> int:
        """Fails processing jobs whose lease expired after their last allowed attempt."""
        expired = MatchJob.objects.filter(
            status=MatchJob.Status.PROCESSING,
            started_at__lt=self._lease_cutoff(),
            attempts__gte=F("max_attempts"),
        ).update(
            status=MatchJob.Status.FAILED,
            last_error="Worker lease expired on the last attempt",
            finished_at=timezone.now(),
            updated_at=timezone.now(),
        )
        if expired:
            logger.warning(f"Failed {expired} match jobs whose worker never finished the last attempt.")
        return expired

    @staticmethod
    def _lease_cutoff():
        return timezone.now() - timedelta(seconds=getattr(settings, "MATCH_JOB_LEASE_SECONDS", 900))

    def _claimable(self) -> Q:
        stale = Q(status=MatchJob.Status.PROCESSING, started_at__lt=self._lease_cutoff(), attempts__lt=F("max_attempts"))
        return Q(status=MatchJob.Status.PENDING) | stale

    def _record_failure(self, job: MatchJob, error: Exception) -> MatchJob:
        job.last_error = str(error)
        # Bad parameters will fail the same way on every attempt.
        retryable = not isinstance(error, ValidationError) and job.attempts < job.max_attempts
        if retryable:
            job.status = MatchJob.Status.PENDING
            logger.warning(f"Match job {job.id} re-queued ({job.attempts}/{job.max_attempts} attempts used).")
        else:
            job.status = MatchJob.Status.FAILED
            job.finished_at = timezone.now()
        job.save(update_fields=["status", "last_error", "finished_at", "updated_at"])
        return job
