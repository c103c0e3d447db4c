from django.db import models
from django.utils.translation import gettext_lazy as _


class MatchJob(models.Model):
    """
    A queued matching run.

    Jobs move through ``pending -> processing -> completed | failed``. A failed
    attempt goes back to ``pending`` until ``max_attempts`` is reached.
    """

    class Kind(models.TextChoices):
        MATCH_BATCH = "match_batch", _("Match batch")
        SMART_MATCH = "smart_match", _("Smart match (AI fallback)")
        REBUILD_INDEX = "rebuild_index", _("Rebuild index")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        PROCESSING = "processing", _("Processing")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")

    kind = models.CharField(max_length=20, choices=Kind.choices)
    params = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.PENDING, db_index=True)
    attempts = models.PositiveSmallIntegerField(default=0)
    max_attempts = models.PositiveSmallIntegerField(default=3)
    result = models.JSONField(null=True, blank=True)
    last_error = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    finished_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Match Job")
        verbose_name_plural = _("Match Jobs")
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="matchjob_status_created_idx"),
        ]

    def __str__(self):
        return f"MatchJob ({self.id}) - {self.kind} [{self.status}] attempt {self.attempts}/{self.max_attempts}"
