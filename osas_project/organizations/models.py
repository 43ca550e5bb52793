from django.conf import settings
from django.db import models


class RecognitionStatus(models.TextChoices):
    RECOGNIZED = "recognized", "Recognized"
    PENDING = "pending", "Pending"
    UNRECOGNIZED = "unrecognized", "Unrecognized"


class RecognizedBody(models.Model):
    """
    Shared shape of student organizations and college councils.

    Recognition is scoped to one academic year; when that year is archived
    the body falls back to UNRECOGNIZED until it re-applies.
    """

    name = models.CharField(max_length=200)
    code = models.CharField(max_length=30, blank=True)
    college = models.CharField(max_length=150, blank=True)

    academic_year = models.ForeignKey(
        "academics.AcademicYear",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)ss"
    )

    status = models.CharField(
        max_length=20,
        choices=RecognitionStatus.choices,
        default=RecognitionStatus.PENDING,
        db_index=True
    )

    president = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="presided_%(class)ss"
    )

    adviser = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="advised_%(class)ss"
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.status})"


class Organization(RecognizedBody):
    """Student organization (college-based or university-wide)."""


class Council(RecognizedBody):
    """College student council."""
