"""
academics/services/calendar.py

Calendar status engine.

Status is a pure function of (today, start_date, end_date). The engine
evaluates every year and semester, and persists only the rows whose
computed status differs from the stored one. Re-running with the same
date produces no changes.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass

from django.db import DEFAULT_DB_ALIAS
from django.utils import timezone

from academics.models import AcademicYear, AcademicSemester, CalendarStatus

logger = logging.getLogger(__name__)


YEAR = "year"
SEMESTER = "semester"

ENTITY_MODELS = {
    YEAR: AcademicYear,
    SEMESTER: AcademicSemester,
}


def compute_status(today, start_date, end_date):
    """
    inactive  → today is before the period
    active    → start_date <= today <= end_date (both ends inclusive)
    archived  → today is after the period
    """
    if today < start_date:
        return CalendarStatus.INACTIVE
    if today <= end_date:
        return CalendarStatus.ACTIVE
    return CalendarStatus.ARCHIVED


@dataclass(frozen=True)
class StatusChange:
    entity: str
    pk: int
    old_status: str
    new_status: str

    @property
    def changed(self):
        return self.old_status != self.new_status

    @property
    def archived(self):
        return self.changed and self.new_status == CalendarStatus.ARCHIVED

    def to_dict(self):
        return {
            "entity": self.entity,
            "id": self.pk,
            "old_status": str(self.old_status),
            "new_status": str(self.new_status),
        }


def evaluate_statuses(entity, today, *, using=DEFAULT_DB_ALIAS, lock=False):
    """
    Compute a StatusChange for every row of the given entity type.

    `lock=True` takes row locks (SELECT ... FOR UPDATE) and must run
    inside a transaction.
    """
    qs = ENTITY_MODELS[entity].objects.using(using).order_by("pk")
    if lock:
        qs = qs.select_for_update()

    return [
        StatusChange(
            entity=entity,
            pk=pk,
            old_status=status,
            new_status=compute_status(today, start_date, end_date),
        )
        for pk, start_date, end_date, status in qs.values_list(
            "pk", "start_date", "end_date", "status"
        )
    ]


def apply_status_changes(entity, changes, *, using=DEFAULT_DB_ALIAS):
    """
    Persist changed statuses only. Returns the number of rows written.
    """
    by_status = defaultdict(list)
    for change in changes:
        if change.changed:
            by_status[change.new_status].append(change.pk)

    if not by_status:
        return 0

    model = ENTITY_MODELS[entity]
    now = timezone.now()
    written = 0

    for new_status, pks in by_status.items():
        written += (
            model.objects.using(using)
            .filter(pk__in=pks)
            .update(status=new_status, updated_at=now)
        )
        logger.info(
            "%s status -> %s for ids %s",
            model._meta.verbose_name.capitalize(), new_status, pks
        )

    return written
