from django.contrib import admin

from .models import AcademicYear, AcademicSemester, StudentData


class AcademicSemesterInline(admin.TabularInline):
    model = AcademicSemester
    extra = 0
    fields = ("name", "start_date", "end_date", "status")
    readonly_fields = ("status",)


@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    list_display = ("school_year", "start_date", "end_date", "status", "updated_at")
    list_filter = ("status",)
    search_fields = ("school_year",)
    ordering = ("-start_date",)

    # Status is derived from the dates by the calendar status check
    readonly_fields = ("status", "updated_at")
    inlines = (AcademicSemesterInline,)


@admin.register(AcademicSemester)
class AcademicSemesterAdmin(admin.ModelAdmin):
    list_display = ("name", "academic_year", "start_date", "end_date", "status")
    list_filter = ("status", "academic_year")
    readonly_fields = ("status", "updated_at")
    list_select_related = ("academic_year",)


@admin.register(StudentData)
class StudentDataAdmin(admin.ModelAdmin):
    list_display = ("student_number", "full_name", "semester", "organization", "council")
    list_filter = ("semester",)
    search_fields = ("student_number", "full_name")
    list_per_page = 50
