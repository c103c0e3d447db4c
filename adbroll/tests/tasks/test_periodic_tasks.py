from unittest.mock import patch

from adbroll.tasks.periodic import run_match_videos, run_process_match_jobs


@patch("adbroll.tasks.periodic.call_command")
def test_run_match_videos(mock_call_command):
    """Verify that the run_match_videos task matches every unmatched video."""
    run_match_videos()
    mock_call_command.assert_called_once_with("match_videos", all=True)


@patch("adbroll.tasks.periodic.call_command")
def test_run_process_match_jobs(mock_call_command):
    """Verify that the run_process_match_jobs task calls the correct management command."""
    run_process_match_jobs()
    mock_call_command.assert_called_once_with("process_match_jobs")
