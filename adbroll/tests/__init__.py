"""Adbroll test suite."""

from adbroll.config.celery import app as celery_app

# Tasks run in-process during tests; no broker is needed.
celery_app.conf.update(task_always_eager=True)
