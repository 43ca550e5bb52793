from django.contrib import admin

from .models import PipelineRun


@admin.register(PipelineRun)
class PipelineRunAdmin(admin.ModelAdmin):
    list_display = ("pipeline", "status", "started_at", "finished_at")
    list_filter = ("pipeline", "status")
    ordering = ("-started_at",)
    readonly_fields = (
        "pipeline",
        "status",
        "started_at",
        "finished_at",
        "counts",
        "transitions",
        "errors",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
