from decimal import Decimal

import pytest
from django.core.management import CommandError, call_command

from adbroll.models import Video
from adbroll.services.exceptions import CatalogUnavailableError
from adbroll.services.matching_impl import MatchBatchSummary
from adbroll.tests.factories import ProductFactory, VideoFactory

pytestmark = pytest.mark.django_db


class DummyOrchestrator:
    def __init__(self, error=None) -> None:
        self.error = error
        self.batch_calls = []
        self.all_calls = []

    def match_batch(self, **kwargs):
        self.batch_calls.append(kwargs)
        if self.error:
            raise self.error
        return MatchBatchSummary(offset=kwargs["offset"], batch_size=kwargs["batch_size"], threshold=0.55, processed=2, matched=1, fuzzy=1, unmatched=1, next_offset=1, remaining=4)

    def match_all(self, **kwargs):
        self.all_calls.append(kwargs)
        return MatchBatchSummary(offset=0, batch_size=kwargs["batch_size"], threshold=0.55, processed=9, matched=3, direct=1, fuzzy=1, ai=1, unmatched=6, complete=True)


def test_single_batch_prints_summary(monkeypatch, capsys):
    dummy = DummyOrchestrator()
    monkeypatch.setattr("adbroll.management.commands.match_videos.BatchMatchOrchestrator", lambda: dummy)

    call_command("match_videos", "--batch-size", "2", "--offset", "10", "--threshold", "0.7")

    assert dummy.batch_calls == [{"offset": 10, "batch_size": 2, "threshold": 0.7, "use_ai": False}]
    out = capsys.readouterr().out
    assert "Matching videos from offset 10..." in out
    assert "Video matching finished." in out
    assert "Processed: 2" in out
    assert "Matched: 1 (0 direct, 1 fuzzy, 0 ai)" in out
    assert "Remaining: 4 (next offset 1)" in out


def test_all_batches_with_ai(monkeypatch, capsys):
    dummy = DummyOrchestrator()
    monkeypatch.setattr("adbroll.management.commands.match_videos.BatchMatchOrchestrator", lambda: dummy)

    call_command("match_videos", "--all", "--smart")

    assert dummy.all_calls == [{"batch_size": 100, "threshold": None, "use_ai": True}]
    assert dummy.batch_calls == []
    out = capsys.readouterr().out
    assert "Matching all unmatched videos..." in out
    assert "Matched: 3 (1 direct, 1 fuzzy, 1 ai)" in out
    assert "No unmatched videos remaining." in out


def test_service_error_becomes_command_error(monkeypatch):
    dummy = DummyOrchestrator(error=CatalogUnavailableError("Error fetching products: down"))
    monkeypatch.setattr("adbroll.management.commands.match_videos.BatchMatchOrchestrator", lambda: dummy)

    with pytest.raises(CommandError, match="Error fetching products: down"):
        call_command("match_videos")


def test_matches_against_the_database(capsys):
    product = ProductFactory(name="Audífonos Bluetooth Pro", category=None)
    video = VideoFactory(title="Estos audífonos bluetooth cambiaron mi vida", revenue=Decimal("10"))
    VideoFactory(title="Rutina de skincare nocturna", revenue=Decimal("5"))

    call_command("match_videos", "--all", "--batch-size", "1")

    video.refresh_from_db()
    assert video.product_id == product.id
    assert Video.objects.filter(match_attempted_at__isnull=True).count() == 0
    assert "Matched: 1 (0 direct, 1 fuzzy, 0 ai)" in capsys.readouterr().out
