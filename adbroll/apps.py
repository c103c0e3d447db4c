from django.apps import AppConfig


class AdbrollConfig(AppConfig):
    name = "adbroll"
    verbose_name = "Adbroll"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        # Shared tasks dispatched from web requests must use the configured app and broker.
        from adbroll.config import celery  # noqa: F401
