"""
Shared shape of the unattended pipeline commands.

Subclasses implement run(context, **options) and return the recorded
summary. Exit status:

- 0         run completed (individual recipient failures included)
- non-zero  storage unreachable, or the run itself failed
"""

import json

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from monitoring.context import RunContext, StorageUnavailable


class PipelineCommand(BaseCommand):
    label = "pipeline"

    def add_arguments(self, parser):
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the run summary as JSON",
        )
        parser.add_argument(
            "--database",
            default="default",
            help="Database alias to run against",
        )

    def get_now(self, options):
        return None

    def run(self, context, **options):
        raise NotImplementedError

    def handle(self, *args, **options):
        started = timezone.localtime()

        self.stdout.write(
            self.style.NOTICE(
                f"[{started:%Y-%m-%d %H:%M:%S}] Starting {self.label}"
            )
        )

        try:
            context = RunContext.open(
                now=self.get_now(options),
                using=options["database"],
            )
        except StorageUnavailable as exc:
            raise CommandError(f"FATAL: {exc}") from exc

        summary = self.run(context, **options)

        if options["json"]:
            self.stdout.write(json.dumps(summary, indent=2, sort_keys=True))

        finished = timezone.localtime()
        counts = ", ".join(f"{k}={v}" for k, v in summary["counts"].items())

        if summary["status"] != "success":
            raise CommandError(
                f"[{finished:%Y-%m-%d %H:%M:%S}] {self.label} failed: "
                + "; ".join(summary["errors"])
            )

        for error in summary["errors"]:
            self.stderr.write(self.style.WARNING(f"ERROR: {error}"))

        self.stdout.write(
            self.style.SUCCESS(
                f"[{finished:%Y-%m-%d %H:%M:%S}] Completed {self.label}: {counts}"
            )
        )
