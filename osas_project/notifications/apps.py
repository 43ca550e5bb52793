from django.apps import AppConfig
import os


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Notifications & reminders"

    def ready(self):
        # runserver imports apps twice; only the reloaded child
        # (RUN_MAIN=true) owns the scheduler
        if os.environ.get("RUN_MAIN") != "true":
            return

        from .scheduler import start_scheduler
        start_scheduler()
