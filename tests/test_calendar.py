from datetime import date, datetime
from unittest import mock

import pytest
from django.utils import timezone

from academics.models import AcademicYear, AcademicSemester, CalendarStatus, StudentData
from academics.services.calendar import (
    YEAR,
    compute_status,
    evaluate_statuses,
    apply_status_changes,
)
from academics.services.pipeline import run_calendar_pipeline
from monitoring.context import RunContext
from monitoring.models import PipelineRun
from notifications.models import Notification
from organizations.models import Organization, Council, RecognitionStatus


def context_for(day):
    return RunContext(now=timezone.make_aware(datetime(day.year, day.month, day.day, 12, 0)))


START = date(2024, 6, 1)
END = date(2025, 3, 31)


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2024, 5, 31), CalendarStatus.INACTIVE),
        (START, CalendarStatus.ACTIVE),
        (date(2024, 11, 15), CalendarStatus.ACTIVE),
        (END, CalendarStatus.ACTIVE),
        (date(2025, 4, 1), CalendarStatus.ARCHIVED),
    ],
)
def test_compute_status_boundaries(today, expected):
    assert compute_status(today, START, END) == expected


@pytest.mark.django_db
class TestStatusEngine:
    def test_only_changed_rows_are_written(self, make_year):
        stale = make_year(START, END, status=CalendarStatus.ACTIVE)
        current = make_year(date(2025, 1, 1), date(2025, 12, 31), status=CalendarStatus.ACTIVE, label="2025")

        changes = evaluate_statuses(YEAR, date(2025, 4, 1))
        by_pk = {c.pk: c for c in changes}

        assert by_pk[stale.pk].changed
        assert not by_pk[current.pk].changed
        assert apply_status_changes(YEAR, changes) == 1

        stale.refresh_from_db()
        assert stale.status == CalendarStatus.ARCHIVED

    def test_second_run_with_same_date_changes_nothing(self, year, make_semester):
        make_semester(year, date(2025, 1, 6), date(2025, 5, 31), status=CalendarStatus.INACTIVE)
        context = context_for(date(2025, 4, 1))

        first = run_calendar_pipeline(context)
        second = run_calendar_pipeline(context)

        assert len(first["transitions"]) == 2
        assert second["transitions"] == []
        assert all(value == 0 for value in second["counts"].values())

    def test_archived_year_reactivates_when_dates_cover_today(self, make_year, make_organization):
        archived = make_year(START, END, status=CalendarStatus.ARCHIVED)
        org = make_organization(archived, status=RecognitionStatus.UNRECOGNIZED)

        summary = run_calendar_pipeline(context_for(date(2024, 12, 1)))

        archived.refresh_from_db()
        assert archived.status == CalendarStatus.ACTIVE
        assert summary["counts"]["years_activated"] == 1
        assert summary["counts"]["orgs_reset"] == 0

        org.refresh_from_db()
        assert org.status == RecognitionStatus.UNRECOGNIZED

    def test_future_semester_is_inactive(self, year, make_semester):
        semester = make_semester(year, date(2025, 6, 1), date(2025, 10, 31), status=CalendarStatus.ACTIVE)

        summary = run_calendar_pipeline(context_for(date(2025, 4, 1)))

        semester.refresh_from_db()
        assert semester.status == CalendarStatus.INACTIVE
        assert summary["counts"]["semesters_deactivated"] == 1


@pytest.mark.django_db
class TestArchivalCascade:
    def test_year_end_scenario_resets_recognition(self, year, make_organization):
        for name in ("Computer Society", "Math Circle", "Debate Club"):
            make_organization(year, name=name)
        make_organization(year, name="Dormant Guild", status=RecognitionStatus.UNRECOGNIZED)
        make_organization(year, name="Engineering Council", model=Council)

        summary = run_calendar_pipeline(context_for(date(2025, 4, 1)))

        year.refresh_from_db()
        assert year.status == CalendarStatus.ARCHIVED
        assert summary["counts"]["years_archived"] == 1
        assert summary["counts"]["orgs_reset"] == 3
        assert summary["counts"]["councils_reset"] == 1
        assert summary["transitions"] == [
            {"entity": YEAR, "id": year.pk, "old_status": "active", "new_status": "archived"},
        ]
        assert not Organization.objects.filter(status=RecognitionStatus.RECOGNIZED).exists()

    def test_already_archived_year_does_not_cascade(self, make_year, make_organization):
        archived = make_year(START, END, status=CalendarStatus.ARCHIVED)
        org = make_organization(archived)

        summary = run_calendar_pipeline(context_for(date(2025, 4, 1)))

        assert summary["counts"]["orgs_reset"] == 0
        org.refresh_from_db()
        assert org.status == RecognitionStatus.RECOGNIZED

    def test_archived_semester_purges_student_data(self, year, make_semester):
        ended = make_semester(year, date(2024, 6, 1), date(2024, 10, 31), name="First Semester")
        running = make_semester(year, date(2024, 11, 1), date(2025, 3, 31))
        StudentData.objects.create(semester=ended, student_number="2024-0001")
        StudentData.objects.create(semester=ended, student_number="2024-0002")
        StudentData.objects.create(semester=running, student_number="2024-0003")

        summary = run_calendar_pipeline(context_for(date(2024, 11, 2)))

        assert summary["counts"]["semesters_archived"] == 1
        assert summary["counts"]["student_data_purged"] == 2
        assert list(StudentData.objects.values_list("student_number", flat=True)) == ["2024-0003"]

        again = run_calendar_pipeline(context_for(date(2024, 11, 2)))
        assert again["counts"]["student_data_purged"] == 0

    def test_archived_year_purges_student_data_of_its_semesters(self, year, make_semester):
        semester = make_semester(year, date(2024, 11, 1), date(2025, 3, 31))
        StudentData.objects.create(semester=semester, student_number="2024-0003")

        summary = run_calendar_pipeline(context_for(date(2025, 4, 1)))

        assert summary["counts"]["student_data_purged"] == 1
        assert not StudentData.objects.exists()

    def test_failure_rolls_back_the_whole_run(self, year, organization, president):
        Notification.objects.create(
            recipient=president,
            category=Notification.Category.DOCUMENT,
            title="Document approved",
            message="Officers list approved",
            academic_year=year,
        )

        with mock.patch(
            "academics.services.pipeline.cleanup_archived_notifications",
            side_effect=RuntimeError("disk full"),
        ):
            summary = run_calendar_pipeline(context_for(date(2025, 4, 1)))

        assert summary["status"] == PipelineRun.Status.FAILED
        assert "disk full" in summary["errors"][0]
        assert summary["counts"]["years_archived"] == 0

        year.refresh_from_db()
        organization.refresh_from_db()
        assert year.status == CalendarStatus.ACTIVE
        assert organization.status == RecognitionStatus.RECOGNIZED
        assert Notification.objects.count() == 1

        run = PipelineRun.objects.get()
        assert run.status == PipelineRun.Status.FAILED

        # Next run starts from the untouched state and succeeds
        retry = run_calendar_pipeline(context_for(date(2025, 4, 1)))
        assert retry["counts"]["years_archived"] == 1
        assert retry["counts"]["orgs_reset"] == 1
        assert retry["counts"]["notifications_cleaned"] == 1


@pytest.mark.django_db
def test_semester_and_year_models_render(year, make_semester):
    semester = make_semester(year, date(2024, 11, 1), date(2025, 3, 31))

    assert str(year) == "A.Y. 2024-2025 (active)"
    assert str(semester) == "Second Semester / 2024-2025 (active)"
    assert AcademicSemester.objects.filter(academic_year=year).count() == 1
    assert AcademicYear.objects.get().is_archived is False
