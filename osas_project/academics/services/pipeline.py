"""
academics/services/pipeline.py

Daily calendar run:

    status engine → archival cascade → notification cleanup

All three execute inside ONE transaction. If anything fails the whole
run is rolled back, so an archived status is never visible without its
cascade; the next run recomputes from a clean state.
"""

import logging

from django.db import transaction

from monitoring.models import PipelineRun
from monitoring.reporting import RunReport, record_run
from notifications.services.cleanup import cleanup_archived_notifications

from .calendar import YEAR, SEMESTER, evaluate_statuses, apply_status_changes
from .cascade import apply_archival_cascade

logger = logging.getLogger(__name__)


# (entity, new status) → report counter
TRANSITION_COUNTERS = {
    (YEAR, "archived"): "years_archived",
    (YEAR, "active"): "years_activated",
    (YEAR, "inactive"): "years_deactivated",
    (SEMESTER, "archived"): "semesters_archived",
    (SEMESTER, "active"): "semesters_activated",
    (SEMESTER, "inactive"): "semesters_deactivated",
}


def run_calendar_pipeline(context):
    """
    Recompute every year/semester status for context.today and apply the
    consequences. Returns the recorded run summary.
    """
    report = RunReport.start(PipelineRun.Pipeline.CALENDAR)
    using = context.using

    logger.info("Starting calendar status check for %s", context.today)

    try:
        with transaction.atomic(using=using):
            changes = []
            for entity in (YEAR, SEMESTER):
                entity_changes = [
                    change
                    for change in evaluate_statuses(
                        entity, context.today, using=using, lock=True
                    )
                    if change.changed
                ]
                apply_status_changes(entity, entity_changes, using=using)
                changes.extend(entity_changes)

            cascade_counts = apply_archival_cascade(changes, using=using)
            notifications_cleaned = cleanup_archived_notifications(using=using)

    except Exception as exc:
        logger.exception("Calendar status check rolled back")
        report.fail(f"Calendar status check rolled back: {exc}")
        return record_run(report, using=using)

    # Counters are only filled once the transaction has committed
    for change in changes:
        report.incr(TRANSITION_COUNTERS[(change.entity, str(change.new_status))])
        report.transitions.append(change.to_dict())

    for name, value in cascade_counts.items():
        report.incr(name, value)
    report.incr("notifications_cleaned", notifications_cleaned)

    if not changes:
        logger.info("No academic years or semesters changed status")

    return record_run(report, using=using)
