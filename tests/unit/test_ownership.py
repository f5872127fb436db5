from campus_recruit.schemas.schemas import UserRole
from campus_recruit.services.application_service import can_review, can_view
from campus_recruit.services.job_service import can_manage

JOB = {"id": 1, "recruiter_id": 7}
APPLICATION = {"id": 3, "student_id": 9, "job_id": 1, "job_recruiter_id": 7}


def _caller(user_id: int, role: UserRole) -> dict:
    return {"user_id": user_id, "email": f"{user_id}@example.com", "role": role}


def test_owning_recruiter_and_admin_manage_the_job() -> None:
    assert can_manage(JOB, _caller(7, UserRole.recruiter))
    assert can_manage(JOB, _caller(1, UserRole.admin))
    assert not can_manage(JOB, _caller(8, UserRole.recruiter))


def test_owner_id_without_recruiter_role_is_not_an_owner() -> None:
    demoted = _caller(7, UserRole.student)

    assert not can_manage(JOB, demoted)
    assert not can_review(APPLICATION, demoted)
    assert not can_view(APPLICATION, demoted)


def test_job_and_application_ownership_agree() -> None:
    for caller in (_caller(7, UserRole.recruiter), _caller(8, UserRole.recruiter), _caller(7, UserRole.student)):
        assert can_manage(JOB, caller) == can_review(APPLICATION, caller)
