"""
compliance/management/commands/send_deadline_reminders.py

Scheduled command (runs every 5 minutes).

Reminds presidents and advisers of documents whose resubmission deadline
is less than an hour away. The reminder ledger makes repeated and
overlapping runs safe: each recipient hears about a deadline once.
"""

from datetime import timedelta

from compliance.services.pipeline import run_deadline_pipeline
from monitoring.commands import PipelineCommand


class Command(PipelineCommand):
    help = "Send resubmission deadline reminders (1 hour before the deadline)"
    label = "deadline reminder check"

    def add_arguments(self, parser):
        super().add_arguments(parser)
        parser.add_argument(
            "--lookahead",
            type=int,
            help="Reminder window in minutes (defaults to REMINDER_LOOKAHEAD_MINUTES)",
        )

    def run(self, context, **options):
        lookahead = None
        if options.get("lookahead") is not None:
            lookahead = timedelta(minutes=options["lookahead"])

        return run_deadline_pipeline(context, lookahead=lookahead)
