from django.contrib import admin

from .models import ComplianceDocument, ReminderLedgerEntry


@admin.register(ComplianceDocument)
class ComplianceDocumentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "kind",
        "document_type",
        "owner_name",
        "compliance_status",
        "resubmission_deadline",
    )

    list_filter = (
        "kind",
        "compliance_status",
        "academic_year",
    )

    search_fields = (
        "document_type",
        "event_title",
        "organization__name",
        "council__name",
    )

    list_select_related = ("organization", "council")
    date_hierarchy = "resubmission_deadline"


@admin.register(ReminderLedgerEntry)
class ReminderLedgerEntryAdmin(admin.ModelAdmin):
    list_display = (
        "document",
        "recipient",
        "role",
        "deadline_occurrence",
        "sent_at",
        "email_delivered",
    )

    list_filter = ("role", "email_delivered")

    # The ledger is written by the reminder run only
    readonly_fields = (
        "document",
        "recipient",
        "role",
        "deadline_occurrence",
        "sent_at",
        "email_delivered",
    )

    def has_add_permission(self, request):
        return False
