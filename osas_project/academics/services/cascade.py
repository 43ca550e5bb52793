"""
academics/services/cascade.py

Side effects of a year or semester newly reaching ARCHIVED:

- organizations and councils scoped to an archived year lose recognition
- student data snapshots of archived semesters (and of every semester of
  an archived year) are deleted

Only transitions computed in the current run trigger a cascade; an entity
that was already archived is left alone.
"""

import logging

from django.db import DEFAULT_DB_ALIAS
from django.db.models import Q

from academics.models import StudentData
from organizations.models import Organization, Council, RecognitionStatus

from .calendar import YEAR, SEMESTER

logger = logging.getLogger(__name__)


def reset_recognition(model, year_ids, *, using=DEFAULT_DB_ALIAS):
    """
    Mark every still-recognized body scoped to the given years as
    UNRECOGNIZED. Returns the number of rows changed.
    """
    if not year_ids:
        return 0

    return (
        model.objects.using(using)
        .filter(academic_year_id__in=year_ids)
        .exclude(status=RecognitionStatus.UNRECOGNIZED)
        .update(status=RecognitionStatus.UNRECOGNIZED)
    )


def purge_student_data(*, semester_ids=(), year_ids=(), using=DEFAULT_DB_ALIAS):
    """
    Hard-delete student data of the given semesters and of every
    semester belonging to the given years. Returns rows deleted.
    """
    if not semester_ids and not year_ids:
        return 0

    _, per_model = (
        StudentData.objects.using(using)
        .filter(
            Q(semester_id__in=list(semester_ids)) |
            Q(semester__academic_year_id__in=list(year_ids))
        )
        .delete()
    )

    return per_model.get(StudentData._meta.label, 0)


def apply_archival_cascade(changes, *, using=DEFAULT_DB_ALIAS):
    """
    Apply the archival cascade for this run's status changes.
    """
    archived_years = [c.pk for c in changes if c.entity == YEAR and c.archived]
    archived_semesters = [c.pk for c in changes if c.entity == SEMESTER and c.archived]

    counts = {
        "orgs_reset": reset_recognition(Organization, archived_years, using=using),
        "councils_reset": reset_recognition(Council, archived_years, using=using),
        "student_data_purged": purge_student_data(
            semester_ids=archived_semesters,
            year_ids=archived_years,
            using=using,
        ),
    }

    if archived_years or archived_semesters:
        logger.info(
            "Archival cascade for years %s / semesters %s: %s",
            archived_years, archived_semesters, counts
        )

    return counts
