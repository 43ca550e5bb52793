"""
notifications/management/commands/cleanup_notifications.py

On-demand: delete notifications of archived academic years and semesters.
Deleting nothing is a normal outcome.
"""

from monitoring.commands import PipelineCommand
from notifications.services.cleanup import run_notification_cleanup


class Command(PipelineCommand):
    help = "Delete notifications whose academic year or semester is archived"
    label = "notification cleanup"

    def run(self, context, **options):
        return run_notification_cleanup(context)
