"""
Run reporter.

Every pipeline run carries one RunReport. Services increment counters and
append errors while they work; the pipeline hands the finished report to
record_run(), which appends it to the PipelineRun table and to the run log
file, then returns the JSON-ready summary shown by the monitoring surface.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.db import DEFAULT_DB_ALIAS
from django.utils import timezone

from monitoring.models import PipelineRun

run_logger = logging.getLogger("osas.runs")


# ============================================================
# COUNTERS PER PIPELINE (ALWAYS PRESENT IN THE SUMMARY)
# ============================================================

CALENDAR_COUNTERS = (
    "years_archived",
    "years_activated",
    "years_deactivated",
    "semesters_archived",
    "semesters_activated",
    "semesters_deactivated",
    "orgs_reset",
    "councils_reset",
    "student_data_purged",
    "notifications_cleaned",
)

DEADLINE_COUNTERS = (
    "reminders_checked",
    "reminders_sent",
    "reminders_skipped_duplicate",
    "reminders_skipped_compliant",
    "reminders_failed",
    "email_failures",
    "expired_reminders_cleaned",
)

CLEANUP_COUNTERS = (
    "notifications_cleaned",
)

COUNTERS = {
    PipelineRun.Pipeline.CALENDAR: CALENDAR_COUNTERS,
    PipelineRun.Pipeline.DEADLINE: DEADLINE_COUNTERS,
    PipelineRun.Pipeline.CLEANUP: CLEANUP_COUNTERS,
}


@dataclass
class RunReport:
    pipeline: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    status: str = PipelineRun.Status.SUCCESS
    counts: dict = field(default_factory=dict)
    transitions: list = field(default_factory=list)
    errors: list = field(default_factory=list)

    @classmethod
    def start(cls, pipeline, *, started_at=None):
        report = cls(pipeline=pipeline, started_at=started_at or timezone.now())
        report.counts = {name: 0 for name in COUNTERS.get(pipeline, ())}
        return report

    def incr(self, name, amount=1):
        self.counts[name] = self.counts.get(name, 0) + amount

    def add_error(self, message):
        self.errors.append(str(message))

    def fail(self, message):
        self.status = PipelineRun.Status.FAILED
        self.add_error(message)

    def to_dict(self):
        duration_ms = None
        if self.finished_at:
            duration_ms = round(
                (self.finished_at - self.started_at).total_seconds() * 1000, 2
            )

        return {
            "pipeline": str(self.pipeline),
            "status": str(self.status),
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": duration_ms,
            "counts": dict(self.counts),
            "transitions": list(self.transitions),
            "errors": list(self.errors),
        }


def record_run(report, *, using=DEFAULT_DB_ALIAS):
    """
    Append a finished run to the durable log and return its summary.
    """
    if report.finished_at is None:
        report.finished_at = timezone.now()

    PipelineRun.objects.using(using).create(
        pipeline=report.pipeline,
        status=report.status,
        started_at=report.started_at,
        finished_at=report.finished_at,
        counts=report.counts,
        transitions=report.transitions,
        errors=report.errors,
    )

    summary = report.to_dict()

    run_logger.info(
        "%s run %s in %sms: %s",
        summary["pipeline"],
        summary["status"],
        summary["duration_ms"],
        json.dumps(summary["counts"], sort_keys=True),
    )
    for error in report.errors:
        run_logger.error("%s run error: %s", summary["pipeline"], error)

    return summary


def serialize_run(run):
    if run is None:
        return None

    return {
        "pipeline": run.pipeline,
        "status": run.status,
        "started_at": run.started_at.isoformat(),
        "finished_at": run.finished_at.isoformat() if run.finished_at else None,
        "counts": run.counts,
        "errors": run.errors,
    }
