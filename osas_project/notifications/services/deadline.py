"""
notifications/services/deadline.py

In-app channel for resubmission deadline reminders.
"""

from django.db import DEFAULT_DB_ALIAS
from django.utils import timezone

from notifications.models import Notification


def format_deadline(deadline):
    return f"{timezone.localtime(deadline):%b %d, %Y %I:%M %p}"


def minutes_left(deadline, now):
    return max(int((deadline - now).total_seconds() // 60), 0)


def build_reminder_message(document, now):
    """
    Short in-app text; event documents also name the event.
    """
    deadline = format_deadline(document.resubmission_deadline)
    remaining = minutes_left(document.resubmission_deadline, now)
    label = document.document_type_label

    if document.kind == document.Kind.EVENT and document.event_title:
        subject = f"{label} for event “{document.event_title}” ({document.owner_name})"
    else:
        subject = f"{label} for {document.owner_name}"

    return (
        f"Your {subject} must be resubmitted by {deadline} "
        f"({remaining} minute(s) left). Please resubmit immediately."
    )


class InAppNotifier:
    """
    Creates the in-app half of a deadline reminder.

    The notification inherits the document's academic year so it is
    removed together with the year's other notifications on archival.
    """

    title = "URGENT: Resubmission deadline approaching"

    def notify(self, *, recipient, document, now, using=DEFAULT_DB_ALIAS):
        return Notification.objects.using(using).create(
            recipient=recipient,
            category=Notification.Category.DEADLINE_REMINDER,
            priority=Notification.Priority.DANGER,
            title=self.title,
            message=build_reminder_message(document, now),
            academic_year_id=document.academic_year_id,
            document=document,
        )
