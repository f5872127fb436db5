from datetime import datetime, timedelta

import pytest

from campus_recruit.core.errors import ValidationError
from campus_recruit.schemas.schemas import ApplicationStatus
from campus_recruit.services.application_service import status_transition

NOW = datetime(2026, 3, 1, 12, 0, 0)


def test_first_review_stamps_reviewed_at() -> None:
    values = status_transition({"reviewed_at": None}, "shortlisted", None, NOW)

    assert values["status"] == "shortlisted"
    assert values["reviewed_at"] == NOW
    assert values["updated_at"] == NOW
    assert "notes" not in values


def test_later_transitions_keep_the_first_reviewed_at() -> None:
    first_review = NOW - timedelta(days=2)

    values = status_transition({"reviewed_at": first_review}, ApplicationStatus.accepted, "Great fit", NOW)

    assert values["status"] == "accepted"
    assert "reviewed_at" not in values
    assert values["notes"] == "Great fit"


def test_any_non_pending_status_is_reachable() -> None:
    for status in ("reviewed", "shortlisted", "rejected", "accepted"):
        assert status_transition({"reviewed_at": NOW}, status, None, NOW)["status"] == status


def test_moving_back_to_pending_is_rejected() -> None:
    with pytest.raises(ValidationError):
        status_transition({"reviewed_at": NOW}, "pending", None, NOW)


def test_unknown_status_is_rejected() -> None:
    with pytest.raises(ValueError):
        status_transition({"reviewed_at": None}, "hired", None, NOW)
