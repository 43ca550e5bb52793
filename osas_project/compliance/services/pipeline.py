"""
compliance/services/pipeline.py

Deadline reminder run (every 5 minutes):

    scan → dispatch per recipient → clean up expired reminders

Deliberately NOT one transaction: every recipient is committed on its
own so one failure cannot undo reminders already delivered.
"""

import logging

from django.db import transaction

from monitoring.models import PipelineRun
from monitoring.reporting import RunReport, record_run
from notifications.services.cleanup import cleanup_expired_reminder_notifications

from .dispatcher import ReminderDispatcher
from .scanner import scan_upcoming_deadlines

logger = logging.getLogger(__name__)


def run_deadline_pipeline(context, *, dispatcher=None, lookahead=None):
    report = RunReport.start(PipelineRun.Pipeline.DEADLINE)
    using = context.using

    logger.info("Starting deadline reminder check at %s", context.now)

    try:
        scan = scan_upcoming_deadlines(context.now, lookahead=lookahead, using=using)
    except Exception as exc:
        logger.exception("Deadline scan failed")
        report.fail(f"Deadline scan failed: {exc}")
        return record_run(report, using=using)

    report.incr("reminders_skipped_compliant", scan.compliant_in_window)

    dispatcher = dispatcher or ReminderDispatcher()
    dispatcher.dispatch(scan.pending, report, now=context.now, using=using)

    try:
        with transaction.atomic(using=using):
            report.incr(
                "expired_reminders_cleaned",
                cleanup_expired_reminder_notifications(context.now, using=using),
            )
    except Exception as exc:
        logger.exception("Expired reminder cleanup failed")
        report.add_error(f"Expired reminder cleanup failed: {exc}")

    return record_run(report, using=using)
