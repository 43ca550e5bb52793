from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)

# ============================================================
# GLOBAL SAFETY LOCK
# Prevents scheduler from starting more than once per process
# ============================================================
_scheduler = None


def start_scheduler():
    """
    Start APScheduler safely.

    - Respects ENABLE_SCHEDULER setting
    - Prevents double start (Django autoreload, imports)
    - max_instances=1 only guards THIS process; the reminder ledger
      is what keeps separate processes from double-sending
    """
    global _scheduler

    # --------------------------------------------
    # DEV / PROD TOGGLE
    # --------------------------------------------
    if not getattr(settings, "ENABLE_SCHEDULER", False):
        logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    # --------------------------------------------
    # SAFETY LOCK (NO DOUBLE START)
    # --------------------------------------------
    if _scheduler is not None:
        logger.info("APScheduler already running, skipping initialization")
        return _scheduler

    logger.info("Starting APScheduler...")

    _scheduler = BackgroundScheduler(
        timezone=settings.TIME_ZONE
    )

    # --------------------------------------------
    # DEADLINE REMINDERS: EVERY 5 MINUTES
    # --------------------------------------------
    _scheduler.add_job(
        run_deadline_reminders,
        trigger="interval",
        minutes=settings.REMINDER_INTERVAL_MINUTES,
        id="send_deadline_reminders",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    # --------------------------------------------
    # CALENDAR STATUS CHECK: DAILY
    # --------------------------------------------
    _scheduler.add_job(
        run_calendar_status_check,
        trigger="cron",
        hour=settings.CALENDAR_CHECK_HOUR,
        minute=settings.CALENDAR_CHECK_MINUTE,
        id="update_calendar_statuses",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    _scheduler.start()

    logger.info(
        "APScheduler started: deadline reminders every %s minutes, "
        "calendar status check daily at %02d:%02d",
        settings.REMINDER_INTERVAL_MINUTES,
        settings.CALENDAR_CHECK_HOUR,
        settings.CALENDAR_CHECK_MINUTE,
    )

    return _scheduler


def _run_command(name):
    """
    Jobs only wrap management commands; business logic stays out of
    the scheduler. A failed run is logged and retried on the next tick.
    """
    logger.info(f"Running scheduled {name} at {timezone.localtime():%Y-%m-%d %H:%M:%S}")

    try:
        call_command(name)
    except CommandError:
        logger.exception("Scheduled %s failed", name)


def run_deadline_reminders():
    _run_command("send_deadline_reminders")


def run_calendar_status_check():
    _run_command("update_calendar_statuses")
