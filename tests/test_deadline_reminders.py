from datetime import timedelta
from smtplib import SMTPException
from unittest import mock

import pytest
from django.db import IntegrityError, OperationalError

from compliance.models import ComplianceDocument, ReminderLedgerEntry
from compliance.services.dispatcher import ReminderDispatcher
from compliance.services.pipeline import run_deadline_pipeline
from compliance.services.scanner import resolve_recipients, scan_upcoming_deadlines
from monitoring.context import RunContext
from monitoring.models import PipelineRun
from notifications.models import Notification
from notifications.services.deadline import InAppNotifier, build_reminder_message


class BrokenMailer:
    def __init__(self):
        self.attempts = 0

    def send(self, template, recipient, document):
        self.attempts += 1
        raise SMTPException("connection refused")


class FlakyNotifier(InAppNotifier):
    """Fails for one user, works for everyone else."""

    def __init__(self, failing_user):
        self.failing_user = failing_user

    def notify(self, *, recipient, document, now, using):
        if recipient.pk == self.failing_user.pk:
            raise RuntimeError("notification store rejected the row")
        return super().notify(recipient=recipient, document=document, now=now, using=using)


@pytest.mark.django_db
class TestReminderRun:
    def test_each_recipient_gets_one_reminder_per_deadline(
        self, run_context, make_document, president, adviser, mailoutbox
    ):
        document = make_document()

        first = run_deadline_pipeline(run_context)

        assert first["status"] == "success"
        assert first["counts"]["reminders_checked"] == 2
        assert first["counts"]["reminders_sent"] == 2
        assert ReminderLedgerEntry.objects.filter(document=document).count() == 2
        assert Notification.objects.filter(
            category=Notification.Category.DEADLINE_REMINDER,
            document=document,
        ).count() == 2
        assert sorted(m.to[0] for m in mailoutbox) == [adviser.email, president.email]
        assert all(m.subject.startswith("URGENT") for m in mailoutbox)
        assert set(
            ReminderLedgerEntry.objects.values_list("role", "email_delivered")
        ) == {("president", True), ("adviser", True)}
        assert set(ReminderLedgerEntry.objects.values_list("sent_at", flat=True)) == {run_context.now}

        second = run_deadline_pipeline(run_context)

        assert second["counts"]["reminders_sent"] == 0
        assert second["counts"]["reminders_skipped_duplicate"] == 2
        assert Notification.objects.count() == 2
        assert len(mailoutbox) == 2

    def test_compliant_documents_are_never_reminded(self, run_context, make_document, mailoutbox):
        make_document(status=ComplianceDocument.ComplianceStatus.RESUBMITTED)
        make_document(status=ComplianceDocument.ComplianceStatus.APPROVED)

        summary = run_deadline_pipeline(run_context)

        assert summary["counts"]["reminders_sent"] == 0
        assert summary["counts"]["reminders_skipped_compliant"] == 2
        assert not Notification.objects.exists()
        assert mailoutbox == []

    def test_only_deadlines_inside_the_window_are_picked(self, now, make_document):
        inside = make_document(deadline=now + timedelta(minutes=60))
        make_document(deadline=now + timedelta(hours=2))
        make_document(deadline=now - timedelta(minutes=1))
        make_document(deadline=now)

        scan = scan_upcoming_deadlines(now, lookahead=timedelta(minutes=60))

        assert [p.document.pk for p in scan.pending] == [inside.pk]
        assert scan.recipient_count == 2

    def test_moved_deadline_is_a_new_occurrence(self, now, make_document, mailoutbox):
        document = make_document(deadline=now + timedelta(minutes=30))
        run_deadline_pipeline(RunContext(now=now))

        document.resubmission_deadline = now + timedelta(days=1, minutes=30)
        document.save()

        later = RunContext(now=now + timedelta(days=1))
        summary = run_deadline_pipeline(later)

        assert summary["counts"]["reminders_sent"] == 2
        assert ReminderLedgerEntry.objects.filter(document=document).count() == 4
        assert len(mailoutbox) == 4

    def test_email_failure_keeps_the_in_app_reminder(self, run_context, make_document):
        make_document()
        mailer = BrokenMailer()
        dispatcher = ReminderDispatcher(mailer=mailer)

        first = run_deadline_pipeline(run_context, dispatcher=dispatcher)

        assert first["status"] == "success"
        assert first["counts"]["reminders_sent"] == 2
        assert first["counts"]["email_failures"] == 2
        assert len(first["errors"]) == 2
        assert Notification.objects.count() == 2
        assert not ReminderLedgerEntry.objects.filter(email_delivered=True).exists()

        second = run_deadline_pipeline(run_context, dispatcher=dispatcher)

        assert second["counts"]["reminders_skipped_duplicate"] == 2
        assert mailer.attempts == 2
        assert Notification.objects.count() == 2

    def test_notifier_failure_is_isolated_to_one_recipient(
        self, run_context, make_document, president, adviser, mailoutbox
    ):
        make_document()
        dispatcher = ReminderDispatcher(notifier=FlakyNotifier(failing_user=president))

        summary = run_deadline_pipeline(run_context, dispatcher=dispatcher)

        assert summary["status"] == "success"
        assert summary["counts"]["reminders_failed"] == 1
        assert summary["counts"]["reminders_sent"] == 1
        assert list(ReminderLedgerEntry.objects.values_list("recipient_id", flat=True)) == [adviser.pk]
        assert [m.to for m in mailoutbox] == [[adviser.email]]

        # The failed recipient is retried on the next run
        retry = run_deadline_pipeline(run_context)
        assert retry["counts"]["reminders_sent"] == 1
        assert retry["counts"]["reminders_skipped_duplicate"] == 1

    def test_document_resubmitted_after_scan_is_skipped(self, now, make_document):
        document = make_document()
        scan = scan_upcoming_deadlines(now)
        document.mark_resubmitted()

        dispatcher = ReminderDispatcher()
        entry, fresh = dispatcher._claim(
            scan.pending[0], scan.pending[0].recipients[0], now=now, using="default"
        )

        assert entry is None
        assert fresh.is_compliant
        assert not Notification.objects.exists()

    def test_concurrent_claim_rolls_back_the_notification(self, now, make_document):
        make_document()
        pending = scan_upcoming_deadlines(now).pending[0]
        recipient = pending.recipients[0]
        dispatcher = ReminderDispatcher()

        entry, _ = dispatcher._claim(pending, recipient, now=now, using="default")
        assert entry.role == ReminderLedgerEntry.Role.PRESIDENT

        with pytest.raises(IntegrityError):
            dispatcher._claim(pending, recipient, now=now, using="default")

        assert Notification.objects.count() == 1
        assert ReminderLedgerEntry.objects.count() == 1

    def test_overlapping_run_conflict_counts_as_duplicate(self, run_context, make_document, president):
        document = make_document()
        # Another run inserted the president's entry after our ledger check
        ReminderLedgerEntry.objects.create(
            document=document,
            recipient=president,
            deadline_occurrence=document.resubmission_deadline,
            role=ReminderLedgerEntry.Role.PRESIDENT,
        )

        with mock.patch.object(ReminderDispatcher, "_already_sent", return_value=False):
            summary = run_deadline_pipeline(run_context)

        assert summary["status"] == "success"
        assert summary["counts"]["reminders_skipped_duplicate"] == 1
        assert summary["counts"]["reminders_sent"] == 1
        assert summary["counts"]["reminders_failed"] == 0
        assert not Notification.objects.filter(recipient=president).exists()
        assert ReminderLedgerEntry.objects.count() == 2

    def test_ledger_lookup_failure_is_isolated_to_one_recipient(
        self, run_context, make_document, adviser, mailoutbox
    ):
        make_document()

        with mock.patch(
            "django.db.models.query.QuerySet.exists",
            side_effect=[OperationalError("database is locked"), False],
        ):
            summary = run_deadline_pipeline(run_context)

        assert summary["status"] == "success"
        assert summary["counts"]["reminders_failed"] == 1
        assert summary["counts"]["reminders_sent"] == 1
        assert "database is locked" in summary["errors"][0]
        assert list(ReminderLedgerEntry.objects.values_list("recipient_id", flat=True)) == [adviser.pk]
        assert [m.to for m in mailoutbox] == [[adviser.email]]
        assert PipelineRun.objects.filter(pipeline=PipelineRun.Pipeline.DEADLINE).count() == 1

    def test_delivery_flag_failure_keeps_the_reminder(self, run_context, make_document, mailoutbox):
        make_document()

        with mock.patch(
            "django.db.models.query.QuerySet.update",
            side_effect=[OperationalError("server closed the connection"), 1],
        ):
            summary = run_deadline_pipeline(run_context)

        assert summary["status"] == "success"
        assert summary["counts"]["reminders_sent"] == 2
        assert summary["counts"]["email_failures"] == 0
        assert len(summary["errors"]) == 1
        assert "server closed the connection" in summary["errors"][0]
        assert ReminderLedgerEntry.objects.count() == 2
        assert len(mailoutbox) == 2
        assert PipelineRun.objects.filter(pipeline=PipelineRun.Pipeline.DEADLINE).count() == 1

    def test_zero_lookahead_matches_nothing(self, now, make_document):
        make_document(deadline=now + timedelta(minutes=1))

        scan = scan_upcoming_deadlines(now, lookahead=timedelta(0))

        assert scan.pending == []

    def test_expired_reminders_are_cleaned_up(self, now, make_document):
        document = make_document(deadline=now + timedelta(minutes=10))
        run_deadline_pipeline(RunContext(now=now))
        assert Notification.objects.count() == 2

        summary = run_deadline_pipeline(RunContext(now=now + timedelta(minutes=11)))

        assert summary["counts"]["expired_reminders_cleaned"] == 2
        assert not Notification.objects.filter(document=document).exists()
        assert ReminderLedgerEntry.objects.filter(document=document).count() == 2


@pytest.mark.django_db
class TestRecipients:
    def test_president_first_then_adviser(self, make_document, president, adviser):
        recipients = resolve_recipients(make_document())

        assert [(r.user, r.role) for r in recipients] == [
            (president, "president"),
            (adviser, "adviser"),
        ]

    def test_same_user_in_both_roles_is_reminded_once(self, make_document, president):
        recipients = resolve_recipients(make_document(adviser=president))

        assert [(r.user, r.role) for r in recipients] == [(president, "president")]

    def test_missing_adviser_is_skipped(self, run_context, make_document, mailoutbox):
        make_document(adviser=None)

        summary = run_deadline_pipeline(run_context)

        assert summary["counts"]["reminders_checked"] == 1
        assert summary["counts"]["reminders_sent"] == 1
        assert len(mailoutbox) == 1

    def test_user_without_email_still_gets_in_app_reminder(
        self, run_context, make_document, make_user, mailoutbox
    ):
        silent = make_user("no-mail", email="")
        make_document(president=silent, adviser=None)

        summary = run_deadline_pipeline(run_context)

        assert summary["counts"]["reminders_sent"] == 1
        assert summary["counts"]["email_failures"] == 0
        assert mailoutbox == []
        assert Notification.objects.filter(recipient=silent).count() == 1
        assert not ReminderLedgerEntry.objects.get().email_delivered


@pytest.mark.django_db
def test_event_reminder_names_the_event(now, make_document):
    document = make_document(
        kind=ComplianceDocument.Kind.EVENT,
        document_type="narrative_report",
        event_title="Foundation Week",
    )

    message = build_reminder_message(document, now)

    assert "Foundation Week" in message
    assert "Computer Society" in message
    assert "45 minute(s) left" in message
