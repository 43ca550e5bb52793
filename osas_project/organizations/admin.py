from django.contrib import admin

from .models import Organization, Council


class RecognizedBodyAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "college", "academic_year", "status", "president", "adviser")
    list_filter = ("status", "academic_year")
    search_fields = ("name", "code", "college")
    list_select_related = ("academic_year", "president", "adviser")
    ordering = ("name",)


@admin.register(Organization)
class OrganizationAdmin(RecognizedBodyAdmin):
    pass


@admin.register(Council)
class CouncilAdmin(RecognizedBodyAdmin):
    pass
