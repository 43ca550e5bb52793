"""
notifications/services/cleanup.py

Removal of notifications that no longer belong on anyone's screen.

- Archived owners: notifications tied to an archived academic year or
  semester are deleted (part of the calendar run, also on demand).
- Expired reminders: unread deadline reminders whose deadline passed or
  whose document no longer needs resubmission.

Both operations are idempotent; an empty match set deletes nothing.
"""

import logging

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import Q

from academics.models import CalendarStatus
from compliance.models import ComplianceDocument
from monitoring.models import PipelineRun
from monitoring.reporting import RunReport, record_run
from notifications.models import Notification

logger = logging.getLogger(__name__)


def _deleted_notifications(per_model):
    return per_model.get(Notification._meta.label, 0)


def cleanup_archived_notifications(*, using=DEFAULT_DB_ALIAS):
    """
    Delete notifications whose owning year or semester is archived.
    Returns the number of notifications deleted.
    """
    _, per_model = (
        Notification.objects.using(using)
        .filter(
            Q(academic_year__status=CalendarStatus.ARCHIVED) |
            Q(semester__status=CalendarStatus.ARCHIVED)
        )
        .delete()
    )

    deleted = _deleted_notifications(per_model)
    if deleted:
        logger.info("Deleted %s notifications of archived years/semesters", deleted)

    return deleted


def cleanup_expired_reminder_notifications(now, *, using=DEFAULT_DB_ALIAS):
    """
    Delete unread deadline reminders that can no longer be acted on.
    """
    expired = (
        Q(document__isnull=True) |
        Q(document__resubmission_deadline__isnull=True) |
        Q(document__resubmission_deadline__lt=now) |
        ~Q(document__compliance_status=ComplianceDocument.ComplianceStatus.REJECTED_WITH_DEADLINE)
    )

    _, per_model = (
        Notification.objects.using(using)
        .filter(
            category=Notification.Category.DEADLINE_REMINDER,
            is_read=False,
        )
        .filter(expired)
        .delete()
    )

    deleted = _deleted_notifications(per_model)
    if deleted:
        logger.info("Cleaned up %s expired deadline reminder notifications", deleted)

    return deleted


def run_notification_cleanup(context):
    """
    On-demand cleanup ("force cleanup"). Safe to call at any time.
    """
    report = RunReport.start(PipelineRun.Pipeline.CLEANUP)

    try:
        with transaction.atomic(using=context.using):
            report.incr(
                "notifications_cleaned",
                cleanup_archived_notifications(using=context.using),
            )
    except Exception as exc:
        logger.exception("Notification cleanup failed")
        report.counts["notifications_cleaned"] = 0
        report.fail(f"Notification cleanup failed: {exc}")

    return record_run(report, using=context.using)
