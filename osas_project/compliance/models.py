from django.conf import settings
from django.db import models
from django.utils import timezone


class ComplianceDocument(models.Model):
    """
    A recognition or event requirement submitted by an organization or
    council and reviewed by OSAS.

    One table serves the three document kinds; `kind` tags which owner
    reference is meaningful. President and adviser are stored on the
    document at submission time so reminders never need to resolve
    ownership again.
    """

    class Kind(models.TextChoices):
        ORGANIZATION = "organization", "Organization document"
        EVENT = "event", "Event document"
        COUNCIL = "council", "Council document"

    class ComplianceStatus(models.TextChoices):
        PENDING = "pending", "Pending review"
        REJECTED_WITH_DEADLINE = "rejected_with_deadline", "Rejected (resubmission required)"
        RESUBMITTED = "resubmitted", "Resubmitted"
        APPROVED = "approved", "Approved"

    # Statuses that satisfy a resubmission request
    COMPLIANT_STATUSES = (
        ComplianceStatus.RESUBMITTED,
        ComplianceStatus.APPROVED,
    )

    DOCUMENT_TYPE_LABELS = {
        "adviser_resume": "Adviser Resume",
        "student_profile": "Student Profile",
        "officers_list": "Officers List",
        "calendar_activities": "Calendar of Activities",
        "official_logo": "Official Logo",
        "officers_grade": "Officers Grade",
        "group_picture": "Group Picture",
        "constitution_bylaws": "Constitution & Bylaws",
        "members_list": "Members List",
        "good_moral": "Good Moral Certificate",
        "adviser_acceptance": "Adviser Acceptance",
        "budget_resolution": "Budget Resolution",
        "activity_proposal": "Activity Proposal",
        "letter_venue_equipment": "Letter for Venue & Equipment",
        "cv_speakers": "CV of Speakers",
        "accomplishment_report": "Accomplishment Report",
        "previous_plan_of_activities": "Previous Plan of Activities",
        "financial_report": "Financial Report",
    }

    # =====================================================
    # CLASSIFICATION
    # =====================================================
    kind = models.CharField(
        max_length=20,
        choices=Kind.choices,
        db_index=True
    )

    document_type = models.CharField(
        max_length=50,
        help_text="Requirement key, e.g. officers_list"
    )

    # =====================================================
    # OWNER (ONE OF, DEPENDING ON KIND)
    # =====================================================
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="documents"
    )

    council = models.ForeignKey(
        "organizations.Council",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="documents"
    )

    event_title = models.CharField(max_length=255, blank=True)

    academic_year = models.ForeignKey(
        "academics.AcademicYear",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="documents"
    )

    # =====================================================
    # REVIEW STATE
    # =====================================================
    compliance_status = models.CharField(
        max_length=30,
        choices=ComplianceStatus.choices,
        default=ComplianceStatus.PENDING,
        db_index=True
    )

    rejection_reason = models.TextField(blank=True)

    resubmission_deadline = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True
    )

    resubmitted_at = models.DateTimeField(null=True, blank=True)

    # =====================================================
    # REMINDER RECIPIENTS
    # =====================================================
    president = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="presided_documents"
    )

    adviser = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="advised_documents"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["resubmission_deadline"]
        indexes = [
            models.Index(fields=["compliance_status", "resubmission_deadline"], name="document_status_deadline_idx"),
        ]

    def __str__(self):
        return f"{self.get_kind_display()} #{self.pk} | {self.document_type_label}"

    @property
    def document_type_label(self):
        return self.DOCUMENT_TYPE_LABELS.get(
            self.document_type,
            self.document_type.replace("_", " ").capitalize(),
        )

    @property
    def owner_name(self):
        owner = self.council if self.kind == self.Kind.COUNCIL else self.organization
        return owner.name if owner else ""

    @property
    def is_compliant(self):
        return self.compliance_status in self.COMPLIANT_STATUSES

    def mark_resubmitted(self):
        """Stops further reminders for the current deadline."""
        self.compliance_status = self.ComplianceStatus.RESUBMITTED
        self.resubmitted_at = timezone.now()
        self.save(update_fields=["compliance_status", "resubmitted_at", "updated_at"])


class ReminderLedgerEntry(models.Model):
    """
    Proof that a deadline reminder went out.

    One row per (document, recipient, deadline occurrence). The unique
    constraint is what keeps overlapping reminder runs from notifying the
    same person twice; moving the deadline creates a new occurrence.
    """

    class Role(models.TextChoices):
        PRESIDENT = "president", "President"
        ADVISER = "adviser", "Adviser"

    document = models.ForeignKey(
        ComplianceDocument,
        on_delete=models.CASCADE,
        related_name="reminder_ledger"
    )

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="deadline_reminders"
    )

    deadline_occurrence = models.DateTimeField(
        help_text="Resubmission deadline value this reminder was sent for"
    )

    role = models.CharField(max_length=20, choices=Role.choices)

    sent_at = models.DateTimeField(default=timezone.now)
    email_delivered = models.BooleanField(default=False)

    class Meta:
        ordering = ["-sent_at"]
        verbose_name_plural = "reminder ledger entries"
        constraints = [
            models.UniqueConstraint(
                fields=["document", "recipient", "deadline_occurrence"],
                name="unique_reminder_per_deadline_occurrence",
            ),
        ]

    def __str__(self):
        return (
            f"Document #{self.document_id} -> user {self.recipient_id} "
            f"@ {self.deadline_occurrence:%Y-%m-%d %H:%M}"
        )
