from collections import deque

from django.conf import settings
from django.contrib.admin.views.decorators import staff_member_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from compliance.services.pipeline import run_deadline_pipeline
from compliance.services.statistics import get_deadline_statistics
from monitoring.context import RunContext, StorageUnavailable
from monitoring.models import PipelineRun
from monitoring.reporting import serialize_run
from notifications.services.cleanup import run_notification_cleanup

LOG_TAIL_LINES = 50


def read_log_tail(path=None, lines=LOG_TAIL_LINES):
    path = path or settings.RUN_LOG_FILE
    try:
        with open(path, encoding="utf-8") as fh:
            return [line.rstrip("\n") for line in deque(fh, maxlen=lines)]
    except FileNotFoundError:
        return []


def _unavailable(exc):
    return JsonResponse({"error": str(exc)}, status=503)


@staff_member_required
@require_GET
def pipeline_status(request):
    """
    Latest run of each pipeline, live deadline statistics and the tail of
    the run log. Missing runs show up as null.
    """
    try:
        context = RunContext.open()
    except StorageUnavailable as exc:
        return _unavailable(exc)

    return JsonResponse({
        "runs": {
            pipeline: serialize_run(PipelineRun.latest_for(pipeline, using=context.using))
            for pipeline in PipelineRun.Pipeline.values
        },
        "statistics": get_deadline_statistics(context.now, using=context.using),
        "log_tail": read_log_tail(),
    })


@staff_member_required
@require_GET
def deadline_statistics(request):
    try:
        context = RunContext.open()
    except StorageUnavailable as exc:
        return _unavailable(exc)

    return JsonResponse(get_deadline_statistics(context.now, using=context.using))


@staff_member_required
@require_POST
def force_cleanup(request):
    try:
        context = RunContext.open()
    except StorageUnavailable as exc:
        return _unavailable(exc)

    return JsonResponse(run_notification_cleanup(context))


@staff_member_required
@require_POST
def run_reminders_now(request):
    try:
        context = RunContext.open()
    except StorageUnavailable as exc:
        return _unavailable(exc)

    return JsonResponse(run_deadline_pipeline(context))
