from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from campus_recruit.schemas.schemas import (
    ApplicationCreate, ApplicationStatusUpdate, JobCreate, Pagination, RegisterRequest, UserRole
)


def _job(**overrides) -> dict:
    body = {
        "title": "Data Analyst",
        "description": "Analyse placement data.",
        "requirements": "SQL and spreadsheets.",
        "location": "Pune",
        "job_type": "internship",
    }
    body.update(overrides)
    return body


def test_register_normalises_email_and_defaults_to_student() -> None:
    request = RegisterRequest(email="  Ana@Example.COM ", password="secret123", first_name=" Ana ", last_name="Roy")

    assert request.email == "ana@example.com"
    assert request.first_name == "Ana"
    assert request.role == UserRole.student


def test_register_rejects_short_password() -> None:
    with pytest.raises(ValidationError):
        RegisterRequest(email="a@example.com", password="12345", first_name="A", last_name="B")


def test_job_create_length_rules() -> None:
    with pytest.raises(ValidationError):
        JobCreate(**_job(description="too short"))
    with pytest.raises(ValidationError):
        JobCreate(**_job(title=""))
    with pytest.raises(ValidationError):
        JobCreate(**_job(job_type="freelance"))


def test_job_deadline_is_stored_as_naive_utc() -> None:
    deadline = datetime(2026, 6, 1, 17, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    job = JobCreate(**_job(application_deadline=deadline))

    assert job.application_deadline == datetime(2026, 6, 1, 12, 0)
    assert job.application_deadline.tzinfo is None


def test_application_create_limits() -> None:
    with pytest.raises(ValidationError):
        ApplicationCreate(job_id=1, cover_letter="x" * 2001)
    with pytest.raises(ValidationError):
        ApplicationCreate(job_id=1, resume_url="not a url")
    with pytest.raises(ValidationError):
        ApplicationCreate(job_id=0)

    assert ApplicationCreate(job_id=1, resume_url="https://cv.example.com/ana.pdf").resume_url is not None


def test_status_update_refuses_pending() -> None:
    with pytest.raises(ValidationError):
        ApplicationStatusUpdate(status="pending")
    with pytest.raises(ValidationError):
        ApplicationStatusUpdate(status="shortlisted", notes="n" * 1001)

    assert ApplicationStatusUpdate(status="reviewed").status.value == "reviewed"


@pytest.mark.parametrize("total, pages", [(0, 0), (1, 1), (10, 1), (11, 2), (25, 3)])
def test_pagination_page_count(total, pages) -> None:
    assert Pagination.build(page=1, limit=10, total=total).pages == pages
