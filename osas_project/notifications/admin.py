from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Notification
from .services.cleanup import cleanup_archived_notifications


PRIORITY_COLORS = {
    Notification.Priority.DANGER: "#dc2626",
    Notification.Priority.WARNING: "#d97706",
    Notification.Priority.INFO: "#2563eb",
}


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Read-mostly view of generated notifications. Rows are produced by the
    reminder run and removed by archival cleanup; staff only toggle read
    state or trigger a cleanup from here.
    """

    # =====================================================
    # LIST VIEW
    # =====================================================
    list_display = (
        "id",
        "recipient",
        "category",
        "priority_title",
        "owner",
        "is_read",
        "created_at",
    )

    list_filter = (
        "category",
        "priority",
        "is_read",
        "academic_year__status",
    )

    search_fields = (
        "title",
        "recipient__username",
        "recipient__email",
        "document__organization__name",
        "document__council__name",
    )

    list_select_related = ("recipient", "academic_year", "semester", "document")
    date_hierarchy = "created_at"
    list_per_page = 50

    # =====================================================
    # DETAIL VIEW
    # =====================================================
    fieldsets = (
        ("Message", {
            "fields": ("recipient", "category", "priority", "title", "message"),
        }),
        ("Owning period / document", {
            "fields": ("academic_year", "semester", "document"),
        }),
        ("Read state", {
            "fields": ("is_read", "read_at", "created_at"),
        }),
    )

    readonly_fields = ("created_at", "read_at")
    raw_id_fields = ("recipient", "document")

    actions = (
        "mark_read",
        "purge_archived",
    )

    @admin.display(description="Title", ordering="title")
    def priority_title(self, obj):
        return format_html(
            '<span style="color:{}; font-weight:600;">{}</span>',
            PRIORITY_COLORS.get(obj.priority, "#111827"),
            obj.title,
        )

    @admin.display(description="Owner")
    def owner(self, obj):
        if obj.document_id:
            return obj.document.owner_name
        if obj.semester_id:
            return obj.semester.name
        return obj.academic_year.school_year if obj.academic_year_id else "-"

    @admin.action(description="Mark selected notifications as read")
    def mark_read(self, request, queryset):
        updated = queryset.filter(is_read=False).update(
            is_read=True,
            read_at=timezone.now(),
        )
        self.message_user(request, f"{updated} notification(s) marked as read.")

    @admin.action(description="Delete notifications of archived years/semesters")
    def purge_archived(self, request, queryset):
        deleted = cleanup_archived_notifications()
        self.message_user(request, f"{deleted} archived notification(s) deleted.")
