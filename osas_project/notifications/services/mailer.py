"""
notifications/services/mailer.py

Email channel for deadline reminders.

Each template renders a formal subject/body pair for one recipient role.
Sends go through their own SMTP connection with a timeout so a single
slow recipient cannot hold up the rest of the batch. Failures raise;
the caller decides what to do with them.
"""

import logging

from django.conf import settings
from django.core.mail import EmailMessage, get_connection

from .deadline import format_deadline

logger = logging.getLogger(__name__)


SIGNATURE = "Respectfully,\nOffice of Student Affairs and Services"


# ============================================================
# TEMPLATES
# ============================================================

def _document_lines(document):
    lines = [
        f"Document type: {document.document_type_label}",
        f"Organization/Council: {document.owner_name}",
    ]
    if document.event_title:
        lines.append(f"Event: {document.event_title}")
    lines.append(f"Deadline: {format_deadline(document.resubmission_deadline)}")
    return "\n".join(f"- {line}" for line in lines)


def render_president_reminder(recipient, document):
    subject = "URGENT: Document Resubmission Deadline in 1 Hour"
    body = (
        f"Dear {recipient.get_full_name() or recipient.username},\n\n"
        f"This is an urgent reminder that a document of your organization "
        f"must be resubmitted before its deadline.\n\n"
        f"{_document_lines(document)}\n\n"
        f"Reason for rejection: {document.rejection_reason or 'See reviewer remarks.'}\n\n"
        f"You have less than one hour left. Please log into the system and "
        f"resubmit the required document to avoid delays in your "
        f"organization's recognition process.\n\n"
        f"If you have already resubmitted this document, please disregard "
        f"this reminder.\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


def render_adviser_reminder(recipient, document):
    subject = "URGENT: Advisee Document Resubmission Deadline in 1 Hour"
    body = (
        f"Dear {recipient.get_full_name() or recipient.username},\n\n"
        f"This is to inform you that a document of an organization you "
        f"advise is due for resubmission within the hour.\n\n"
        f"{_document_lines(document)}\n\n"
        f"Kindly coordinate with the organization president so the document "
        f"is resubmitted before the deadline.\n\n"
        f"This notice is issued for your guidance and appropriate action.\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


TEMPLATES = {
    "deadline_reminder_president": render_president_reminder,
    "deadline_reminder_adviser": render_adviser_reminder,
}


class DeadlineMailer:
    def __init__(self, timeout=None, from_email=None):
        self.timeout = timeout or settings.REMINDER_EMAIL_TIMEOUT
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def send(self, template, recipient, document):
        """
        Render and send one templated email.

        Returns False when the recipient has no address, True once the
        backend accepted the message. Transport errors propagate.
        """
        if not recipient.email:
            logger.info("User %s has no email address, email skipped", recipient.pk)
            return False

        subject, body = TEMPLATES[template](recipient, document)

        connection = get_connection(timeout=self.timeout)
        EmailMessage(
            subject=subject,
            body=body,
            from_email=self.from_email,
            to=[recipient.email],
            connection=connection,
        ).send(fail_silently=False)

        return True
