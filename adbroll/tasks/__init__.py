from .matching import process_match_job
from .periodic import run_match_videos, run_process_match_jobs

__all__ = (
    "process_match_job",
    "run_match_videos",
    "run_process_match_jobs",
)
