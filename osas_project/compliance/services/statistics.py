from datetime import timedelta

from django.db import DEFAULT_DB_ALIAS
from django.db.models import Count, Q
from django.utils import timezone

from compliance.models import ComplianceDocument


def get_deadline_statistics(now=None, *, using=DEFAULT_DB_ALIAS):
    """
    Counts of documents rejected with a resubmission deadline, bucketed
    by local calendar day relative to `now`.
    """
    now = now or timezone.now()
    today = timezone.localdate(now)
    tomorrow = today + timedelta(days=1)

    stats = (
        ComplianceDocument.objects.using(using)
        .filter(
            compliance_status=ComplianceDocument.ComplianceStatus.REJECTED_WITH_DEADLINE,
            resubmission_deadline__isnull=False,
        )
        .aggregate(
            total_pending_with_deadline=Count("pk"),
            due_today=Count("pk", filter=Q(resubmission_deadline__date=today)),
            due_tomorrow=Count("pk", filter=Q(resubmission_deadline__date=tomorrow)),
            due_this_week=Count(
                "pk",
                filter=Q(
                    resubmission_deadline__gte=now,
                    resubmission_deadline__lte=now + timedelta(days=7),
                ),
            ),
            overdue=Count("pk", filter=Q(resubmission_deadline__lt=now)),
        )
    )

    stats["as_of"] = now.isoformat()
    return stats
