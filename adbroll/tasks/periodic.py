"""Periodic tasks for Celery Beat."""

from celery import shared_task
from django.core.management import call_command


@shared_task
def run_match_videos():
    """Run the match_videos management command over every unmatched video."""
    call_command("match_videos", all=True)


@shared_task
def run_process_match_jobs():
    """Run the process_match_jobs management command."""
    call_command("process_match_jobs")
