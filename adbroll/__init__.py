# Celery is imported lazily so that importing the package (e.g. from mypy or pre-commit) stays cheap.
# The app is available via: from adbroll.config.celery import app


def __getattr__(name):
    if name == "celery_app":
        from adbroll.config.celery import app as celery_app

        return celery_app
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
