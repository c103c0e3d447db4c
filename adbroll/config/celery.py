import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "adbroll.settings")

app = Celery("adbroll")

# Keys in Django settings must be prefixed with CELERY_
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks(["adbroll"])
