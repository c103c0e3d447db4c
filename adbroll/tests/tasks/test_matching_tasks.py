from unittest.mock import Mock, patch

import pytest
from celery.exceptions import Retry

from adbroll.models import MatchJob
from adbroll.tasks.matching import process_match_job


def _job(status, attempts=1, max_attempts=3):
    return Mock(id=7, status=status, attempts=attempts, max_attempts=max_attempts)


class TestProcessMatchJob:
    @patch("adbroll.tasks.matching.MatchJobService")
    def test_returns_final_status(self, mock_service_class: Mock) -> None:
        mock_service_class.return_value.process.return_value = _job(MatchJob.Status.COMPLETED)

        result = process_match_job(7)

        assert result == MatchJob.Status.COMPLETED
        mock_service_class.return_value.process.assert_called_once_with(7)

    @patch("adbroll.tasks.matching.MatchJobService")
    def test_unclaimable_job_returns_none(self, mock_service_class: Mock) -> None:
        mock_service_class.return_value.process.return_value = None

        assert process_match_job(7) is None

    @patch("adbroll.tasks.matching.MatchJobService")
    def test_failed_job_is_not_retried(self, mock_service_class: Mock) -> None:
        mock_service_class.return_value.process.return_value = _job(MatchJob.Status.FAILED, attempts=3)

        assert process_match_job(7) == MatchJob.Status.FAILED

    @patch("adbroll.tasks.matching.MatchJobService")
    def test_requeued_job_schedules_a_retry(self, mock_service_class: Mock, caplog: pytest.LogCaptureFixture) -> None:
        mock_service_class.return_value.process.return_value = _job(MatchJob.Status.PENDING, attempts=1)

        with pytest.raises(Retry):
            process_match_job(7)

        assert "will be retried (attempt 2/3)" in caplog.text
