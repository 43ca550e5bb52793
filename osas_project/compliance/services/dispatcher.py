"""
compliance/services/dispatcher.py

Fans deadline reminders out to the in-app and email channels.

Per (document, recipient, deadline occurrence):

1. ledger entry exists            → skip (duplicate)
2. document no longer rejected    → skip (compliant / deadline moved)
3. notification + ledger entry    → one short transaction; a unique
                                    constraint conflict means another run
                                    got there first and rolls ours back
4. email                          → after commit; failures are logged and
                                    counted, the ledger entry stays so the
                                    in-app side is never repeated

A failure for one recipient never stops the batch.
"""

import logging

from django.db import DEFAULT_DB_ALIAS, IntegrityError, transaction

from compliance.models import ComplianceDocument, ReminderLedgerEntry
from notifications.services.deadline import InAppNotifier
from notifications.services.mailer import DeadlineMailer

logger = logging.getLogger(__name__)


class ReminderDispatcher:
    def __init__(self, notifier=None, mailer=None):
        self.notifier = notifier or InAppNotifier()
        self.mailer = mailer or DeadlineMailer()

    # =====================================================
    # BATCH
    # =====================================================
    def dispatch(self, pending_documents, report, *, now, using=DEFAULT_DB_ALIAS):
        for pending in pending_documents:
            for recipient in pending.recipients:
                report.incr("reminders_checked")
                self.dispatch_one(pending, recipient, report, now=now, using=using)

    # =====================================================
    # SINGLE RECIPIENT
    # =====================================================
    def dispatch_one(self, pending, recipient, report, *, now, using=DEFAULT_DB_ALIAS):
        document_id = pending.document.pk
        user = recipient.user

        try:
            if self._already_sent(pending, user, using=using):
                report.incr("reminders_skipped_duplicate")
                logger.info(
                    "Reminder for document %s already sent to %s %s, skipping",
                    document_id, recipient.role, user.pk
                )
                return

            entry, document = self._claim(pending, recipient, now=now, using=using)
        except IntegrityError:
            report.incr("reminders_skipped_duplicate")
            logger.info(
                "Reminder for document %s / user %s claimed by a concurrent run",
                document_id, user.pk
            )
            return
        except Exception as exc:
            report.incr("reminders_failed")
            report.add_error(
                f"In-app reminder failed for document {document_id}, "
                f"{recipient.role} {user.pk}: {exc}"
            )
            logger.exception(
                "In-app reminder failed for document %s, user %s",
                document_id, user.pk
            )
            return

        if entry is None:
            if document is not None and document.is_compliant:
                report.incr("reminders_skipped_compliant")
            return

        report.incr("reminders_sent")
        logger.info(
            "Deadline reminder sent for document %s (%s) to %s %s",
            document_id, pending.kind, recipient.role, user.pk
        )

        self._send_email(entry, document, recipient, report, using=using)

    def _already_sent(self, pending, user, *, using):
        return ReminderLedgerEntry.objects.using(using).filter(
            document_id=pending.document.pk,
            recipient=user,
            deadline_occurrence=pending.deadline_occurrence,
        ).exists()

    def _claim(self, pending, recipient, *, now, using):
        """
        Create the in-app notification and its ledger entry together.

        Returns (None, document) when the document no longer needs a
        reminder for this deadline occurrence.
        """
        with transaction.atomic(using=using):
            document = (
                ComplianceDocument.objects.using(using)
                .select_related("organization", "council")
                .filter(pk=pending.document.pk)
                .first()
            )

            if (
                document is None
                or document.compliance_status
                != ComplianceDocument.ComplianceStatus.REJECTED_WITH_DEADLINE
                or document.resubmission_deadline != pending.deadline_occurrence
            ):
                logger.info(
                    "Document %s changed since the scan, no reminder for this deadline",
                    pending.document.pk
                )
                return None, document

            self.notifier.notify(
                recipient=recipient.user,
                document=document,
                now=now,
                using=using,
            )

            entry = ReminderLedgerEntry.objects.using(using).create(
                document=document,
                recipient=recipient.user,
                deadline_occurrence=pending.deadline_occurrence,
                role=recipient.role,
                sent_at=now,
            )

        return entry, document

    def _send_email(self, entry, document, recipient, report, *, using):
        template = f"deadline_reminder_{recipient.role}"

        try:
            delivered = self.mailer.send(template, recipient.user, document)
        except Exception as exc:
            report.incr("email_failures")
            report.add_error(
                f"Reminder email failed for document {document.pk}, "
                f"{recipient.role} {recipient.user.pk}: {exc}"
            )
            logger.exception(
                "Failed to send reminder email to user %s (document=%s)",
                recipient.user.pk, document.pk
            )
            return

        if not delivered:
            return

        # Ledger entry stays even if the flag cannot be written
        try:
            ReminderLedgerEntry.objects.using(using).filter(pk=entry.pk).update(
                email_delivered=True
            )
        except Exception as exc:
            report.add_error(
                f"Could not flag email delivery for ledger entry {entry.pk} "
                f"(document {document.pk}, {recipient.role} {recipient.user.pk}): {exc}"
            )
            logger.exception(
                "Failed to flag email delivery on ledger entry %s", entry.pk
            )
