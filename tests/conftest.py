from datetime import date, datetime, timedelta

import pytest
from django.utils import timezone

from academics.models import AcademicYear, AcademicSemester, CalendarStatus
from compliance.models import ComplianceDocument
from monitoring.context import RunContext
from organizations.models import Organization, Council, RecognitionStatus


@pytest.fixture
def now():
    """Fixed clock reading: 1 April 2025, 09:00 local time."""
    return timezone.make_aware(datetime(2025, 4, 1, 9, 0))


@pytest.fixture
def run_context(now):
    return RunContext(now=now)


@pytest.fixture
def make_user(django_user_model):
    def _make(username, email=None, **extra):
        if email is None:
            email = f"{username}@example.edu"
        return django_user_model.objects.create_user(
            username=username,
            email=email,
            password="not-used",
            **extra,
        )

    return _make


@pytest.fixture
def president(make_user):
    return make_user("president", first_name="Paula", last_name="Reyes")


@pytest.fixture
def adviser(make_user):
    return make_user("adviser", first_name="Andres", last_name="Cruz")


@pytest.fixture
def make_year():
    def _make(start, end, status=CalendarStatus.ACTIVE, label=None):
        return AcademicYear.objects.create(
            school_year=label or f"{start.year}-{end.year}",
            start_date=start,
            end_date=end,
            status=status,
        )

    return _make


@pytest.fixture
def year(make_year):
    return make_year(date(2024, 6, 1), date(2025, 3, 31))


@pytest.fixture
def make_semester():
    def _make(academic_year, start, end, status=CalendarStatus.ACTIVE, name="Second Semester"):
        return AcademicSemester.objects.create(
            academic_year=academic_year,
            name=name,
            start_date=start,
            end_date=end,
            status=status,
        )

    return _make


@pytest.fixture
def make_organization(president, adviser):
    def _make(academic_year, name="Computer Society", status=RecognitionStatus.RECOGNIZED, model=Organization):
        return model.objects.create(
            name=name,
            academic_year=academic_year,
            status=status,
            president=president,
            adviser=adviser,
        )

    return _make


@pytest.fixture
def organization(make_organization, year):
    return make_organization(year)


@pytest.fixture
def council(make_organization, year):
    return make_organization(year, name="College of Engineering Council", model=Council)


@pytest.fixture
def make_document(now, president, adviser, organization):
    def _make(
        deadline=None,
        status=ComplianceDocument.ComplianceStatus.REJECTED_WITH_DEADLINE,
        kind=ComplianceDocument.Kind.ORGANIZATION,
        document_type="officers_list",
        **extra,
    ):
        fields = {
            "kind": kind,
            "document_type": document_type,
            "organization": organization,
            "academic_year": organization.academic_year,
            "compliance_status": status,
            "rejection_reason": "Missing signatures",
            "resubmission_deadline": deadline if deadline is not None else now + timedelta(minutes=45),
            "president": president,
            "adviser": adviser,
        }
        fields.update(extra)
        return ComplianceDocument.objects.create(**fields)

    return _make
