"""
compliance/services/scanner.py

Finds documents whose resubmission deadline falls inside the reminder
window (now, now + lookahead]. Read-only.

Every document kind goes through the same query and comes back as a
PendingDocument, so the dispatcher never branches on kind.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS

from compliance.models import ComplianceDocument, ReminderLedgerEntry

logger = logging.getLogger(__name__)


def default_lookahead():
    return timedelta(minutes=settings.REMINDER_LOOKAHEAD_MINUTES)


@dataclass(frozen=True)
class Recipient:
    user: object
    role: str


@dataclass(frozen=True)
class PendingDocument:
    kind: str
    document: ComplianceDocument
    recipients: tuple

    @property
    def deadline_occurrence(self):
        return self.document.resubmission_deadline


@dataclass
class ScanResult:
    pending: list = field(default_factory=list)
    compliant_in_window: int = 0

    @property
    def recipient_count(self):
        return sum(len(p.recipients) for p in self.pending)


def resolve_recipients(document):
    """
    President first, then adviser. Missing references are dropped and a
    user holding both roles is listed once.
    """
    recipients = []
    seen = set()

    for user, role in (
        (document.president, ReminderLedgerEntry.Role.PRESIDENT),
        (document.adviser, ReminderLedgerEntry.Role.ADVISER),
    ):
        if user is None or user.pk in seen:
            continue
        seen.add(user.pk)
        recipients.append(Recipient(user=user, role=role))

    return tuple(recipients)


def documents_in_window(now, lookahead, *, using=DEFAULT_DB_ALIAS):
    return ComplianceDocument.objects.using(using).filter(
        resubmission_deadline__gt=now,
        resubmission_deadline__lte=now + lookahead,
    )


def scan_upcoming_deadlines(now, *, lookahead=None, using=DEFAULT_DB_ALIAS):
    """
    Documents rejected with a deadline that is strictly upcoming and at
    most `lookahead` away. Resubmitted/approved documents are excluded
    (compliance filter) and only counted.
    """
    if lookahead is None:
        lookahead = default_lookahead()
    window = documents_in_window(now, lookahead, using=using)

    rejected = (
        window
        .filter(compliance_status=ComplianceDocument.ComplianceStatus.REJECTED_WITH_DEADLINE)
        .select_related("president", "adviser", "organization", "council")
        .order_by("resubmission_deadline", "pk")
    )

    result = ScanResult(
        compliant_in_window=window.filter(
            compliance_status__in=ComplianceDocument.COMPLIANT_STATUSES
        ).count()
    )

    for document in rejected:
        result.pending.append(
            PendingDocument(
                kind=document.kind,
                document=document,
                recipients=resolve_recipients(document),
            )
        )

    logger.info(
        "Found %s documents with deadlines before %s (%s already compliant)",
        len(result.pending), now + lookahead, result.compliant_in_window
    )

    return result
