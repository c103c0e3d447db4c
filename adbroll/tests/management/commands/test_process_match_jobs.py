from io import StringIO

import pytest
from django.core.management import call_command

pytestmark = pytest.mark.django_db


class DummyService:
    def __init__(self, stats) -> None:
        self.stats = stats
        self.limit = "__unset__"

    def process_pending(self, limit=None):
        self.limit = limit
        return self.stats


def test_reports_outcomes(monkeypatch):
    dummy = DummyService({"total": 4, "completed": 2, "failed": 1, "requeued": 1, "skipped": 0})
    monkeypatch.setattr("adbroll.management.commands.process_match_jobs.MatchJobService", lambda: dummy)
    out = StringIO()

    call_command("process_match_jobs", "--limit", "4", stdout=out)

    assert dummy.limit == 4
    output = out.getvalue()
    assert "Processed 4 match jobs." in output
    assert "Completed: 2" in output
    assert "Re-queued: 1" in output
    assert "Failed: 1" in output
    assert "Skipped" not in output


def test_nothing_pending(monkeypatch):
    dummy = DummyService({"total": 0, "completed": 0, "failed": 0, "requeued": 0, "skipped": 0})
    monkeypatch.setattr("adbroll.management.commands.process_match_jobs.MatchJobService", lambda: dummy)
    out = StringIO()

    call_command("process_match_jobs", stdout=out)

    assert dummy.limit is None
    assert "No pending match jobs." in out.getvalue()
