from django.db import models
from django.utils import timezone


class PipelineRun(models.Model):
    """
    Durable, append-only record of one scheduled or on-demand run.
    Rows are written once by the run reporter and never updated.
    """

    class Pipeline(models.TextChoices):
        CALENDAR = "calendar", "Calendar status check"
        DEADLINE = "deadline", "Deadline reminders"
        CLEANUP = "cleanup", "Notification cleanup"

    class Status(models.TextChoices):
        SUCCESS = "success", "Success"
        FAILED = "failed", "Failed"

    pipeline = models.CharField(
        max_length=20,
        choices=Pipeline.choices,
        db_index=True
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SUCCESS
    )

    started_at = models.DateTimeField(default=timezone.now)
    finished_at = models.DateTimeField(null=True, blank=True)

    counts = models.JSONField(default=dict, blank=True)
    transitions = models.JSONField(default=list, blank=True)
    errors = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["-started_at"]
        indexes = [
            models.Index(fields=["pipeline", "started_at"], name="pipelinerun_started_idx"),
        ]

    def __str__(self):
        return f"{self.get_pipeline_display()} | {self.status} | {self.started_at:%Y-%m-%d %H:%M}"

    @classmethod
    def latest_for(cls, pipeline, using=None):
        qs = cls.objects.using(using) if using else cls.objects
        return qs.filter(pipeline=pipeline).order_by("-started_at").first()
