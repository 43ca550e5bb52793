"""
academics/management/commands/update_calendar_statuses.py

Scheduled command (runs daily, shortly after midnight).

Recomputes every academic year and semester status, applies the archival
cascade and removes notifications of archived periods, all in one
transaction. Safe to run repeatedly.
"""

from datetime import datetime, time

from django.core.management.base import CommandError
from django.utils import timezone

from academics.services.pipeline import run_calendar_pipeline
from monitoring.commands import PipelineCommand


class Command(PipelineCommand):
    help = "Recompute academic year/semester statuses and apply archival cascades"
    label = "calendar status check"

    def add_arguments(self, parser):
        super().add_arguments(parser)
        parser.add_argument(
            "--date",
            help="Evaluate as of this local date (YYYY-MM-DD) instead of today",
        )

    def get_now(self, options):
        if not options.get("date"):
            return None

        try:
            as_of = datetime.strptime(options["date"], "%Y-%m-%d").date()
        except ValueError as exc:
            raise CommandError(f"Invalid --date: {options['date']}") from exc

        return timezone.make_aware(datetime.combine(as_of, time(hour=12)))

    def run(self, context, **options):
        return run_calendar_pipeline(context)
