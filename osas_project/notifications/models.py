from django.db import models
from django.conf import settings
from django.utils import timezone

from academics.models import AcademicYear, AcademicSemester
from compliance.models import ComplianceDocument


class Notification(models.Model):
    """
    A derived, user-facing notification.
    Notifications are NOT the source of truth. They reflect
    events happening to documents, events and the academic calendar,
    and are removed once their owning year or semester is archived.
    """

    # =====================================================
    # CATEGORY
    # =====================================================
    class Category(models.TextChoices):
        DEADLINE_REMINDER = "deadline_reminder", "Deadline reminder"
        DOCUMENT = "document", "Document"
        EVENT = "event", "Event"
        SYSTEM = "system", "System"

    # =====================================================
    # SEVERITY / PRIORITY (UI + sorting)
    # =====================================================
    class Priority(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        DANGER = "danger", "Danger"

    # =====================================================
    # CORE RELATIONSHIPS
    # =====================================================
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User who receives this notification"
    )

    # =====================================================
    # CLASSIFICATION
    # =====================================================
    category = models.CharField(
        max_length=30,
        choices=Category.choices,
        db_index=True
    )

    priority = models.CharField(
        max_length=20,
        choices=Priority.choices,
        default=Priority.INFO,
        db_index=True
    )

    # =====================================================
    # CONTENT
    # =====================================================
    title = models.CharField(
        max_length=200,
        help_text="Short headline shown in notification list"
    )

    message = models.TextField(
        help_text="Detailed message shown when expanded"
    )

    # =====================================================
    # OWNING ENTITY (DRIVES ARCHIVAL CLEANUP)
    # =====================================================
    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications"
    )

    semester = models.ForeignKey(
        AcademicSemester,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications"
    )

    document = models.ForeignKey(
        ComplianceDocument,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications"
    )

    # =====================================================
    # STATE
    # =====================================================
    is_read = models.BooleanField(
        default=False,
        db_index=True
    )

    read_at = models.DateTimeField(
        null=True,
        blank=True
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True
    )

    # =====================================================
    # DJANGO META
    # =====================================================
    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="notification_unread_idx"),
            models.Index(fields=["recipient", "category", "is_read"], name="notification_category_idx"),
        ]

    # =====================================================
    # STRING REPRESENTATION
    # =====================================================
    def __str__(self):
        return (
            f"{self.recipient} | "
            f"{self.category.upper()} | "
            f"{self.title}"
        )
