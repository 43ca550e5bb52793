from django.db import models
from django.db.models import F, Q


class CalendarStatus(models.TextChoices):
    INACTIVE = "inactive", "Inactive"
    ACTIVE = "active", "Active"
    ARCHIVED = "archived", "Archived"


class CalendarPeriod(models.Model):
    """
    A dated span of the academic calendar.

    The status column is derived from (today, start_date, end_date) by the
    calendar status engine; nothing else should write it.
    """

    start_date = models.DateField()
    end_date = models.DateField()

    status = models.CharField(
        max_length=20,
        choices=CalendarStatus.choices,
        default=CalendarStatus.INACTIVE,
        db_index=True
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def is_archived(self):
        return self.status == CalendarStatus.ARCHIVED


class AcademicYear(CalendarPeriod):
    school_year = models.CharField(
        max_length=20,
        help_text="Display label, e.g. 2024-2025"
    )

    class Meta:
        ordering = ["-start_date"]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gte=F("start_date")),
                name="academic_year_dates_ordered",
            ),
        ]

    def __str__(self):
        return f"A.Y. {self.school_year} ({self.status})"


class AcademicSemester(CalendarPeriod):
    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.CASCADE,
        related_name="semesters"
    )

    name = models.CharField(
        max_length=50,
        help_text="e.g. First Semester"
    )

    class Meta:
        ordering = ["-start_date"]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gte=F("start_date")),
                name="academic_semester_dates_ordered",
            ),
        ]

    def __str__(self):
        return f"{self.name} / {self.academic_year.school_year} ({self.status})"


class StudentData(models.Model):
    """
    Per-semester membership snapshot uploaded by organizations and councils.
    Ephemeral: purged as soon as its semester is archived.
    """

    semester = models.ForeignKey(
        AcademicSemester,
        on_delete=models.CASCADE,
        related_name="student_data"
    )

    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="student_data"
    )

    council = models.ForeignKey(
        "organizations.Council",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="student_data"
    )

    student_number = models.CharField(max_length=30)
    full_name = models.CharField(max_length=200, blank=True)
    payload = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "student data"
        indexes = [
            models.Index(fields=["semester", "student_number"], name="studentdata_semester_idx"),
        ]

    def __str__(self):
        return f"{self.student_number} @ semester {self.semester_id}"
