"""
Dashboard Service - role-specific aggregate counts.

Each role has exactly one handler in DASHBOARD_HANDLERS.
"""

from campus_recruit.db.postgres import execute_raw_sql
from campus_recruit.schemas.schemas import ApplicationStatus, JobStatus, UserRole


def _count(sql: str, params: dict = None) -> int:
    return int(execute_raw_sql(sql, params)[0]["total"])


def admin_dashboard(user_id: int) -> dict:
    return {
        "role": UserRole.admin,
        "total_users": _count("SELECT COUNT(*) AS total FROM users"),
        "total_jobs": _count("SELECT COUNT(*) AS total FROM jobs"),
        "total_applications": _count("SELECT COUNT(*) AS total FROM applications"),
        "total_students": _count(
            "SELECT COUNT(*) AS total FROM users WHERE role = :role", {"role": UserRole.student.value}
        ),
    }


def recruiter_dashboard(user_id: int) -> dict:
    received_sql = """
        SELECT COUNT(*) AS total FROM applications a
        JOIN jobs j ON a.job_id = j.id
        WHERE j.recruiter_id = :uid
    """
    return {
        "role": UserRole.recruiter,
        "my_jobs": _count("SELECT COUNT(*) AS total FROM jobs WHERE recruiter_id = :uid", {"uid": user_id}),
        "received_applications": _count(received_sql, {"uid": user_id}),
        "shortlisted_candidates": _count(
            received_sql + " AND a.status = :status",
            {"uid": user_id, "status": ApplicationStatus.shortlisted.value},
        ),
    }


def student_dashboard(user_id: int) -> dict:
    return {
        "role": UserRole.student,
        "available_jobs": _count(
            "SELECT COUNT(*) AS total FROM jobs WHERE status = :status", {"status": JobStatus.active.value}
        ),
        "my_applications": _count(
            "SELECT COUNT(*) AS total FROM applications WHERE student_id = :uid", {"uid": user_id}
        ),
        "shortlisted_applications": _count(
            "SELECT COUNT(*) AS total FROM applications WHERE student_id = :uid AND status = :status",
            {"uid": user_id, "status": ApplicationStatus.shortlisted.value},
        ),
    }


DASHBOARD_HANDLERS = {
    UserRole.admin: admin_dashboard,
    UserRole.recruiter: recruiter_dashboard,
    UserRole.student: student_dashboard,
}

if set(DASHBOARD_HANDLERS) != set(UserRole):
    raise RuntimeError("DASHBOARD_HANDLERS must define a handler for every role")


def dashboard_for(caller: dict) -> dict:
    return DASHBOARD_HANDLERS[caller["role"]](caller["user_id"])
