"""
Application Service - student applications and their status lifecycle.

Lifecycle: every application starts as 'pending'. An authorised reviewer
(the recruiter owning the job, or an admin) may move it to any of
reviewed / shortlisted / rejected / accepted, and between those freely.
It never returns to 'pending'.

reviewed_at is stamped by the first transition away from 'pending' and is
never overwritten afterwards (see status_transition()).

At most one application exists per (student, job). The explicit duplicate
check gives the friendly error; the unique constraint on the table is what
actually holds under concurrent requests.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import IntegrityError

from campus_recruit.core.errors import DuplicateApplication, Forbidden, JobClosed, NotFound, ValidationError
from campus_recruit.db.postgres import get_db_session
from campus_recruit.db.tables import applications, jobs, users, utcnow
from campus_recruit.schemas.schemas import ApplicationStatus, UserRole
from campus_recruit.services.job_service import (
    can_manage, ensure_can_manage, is_job_owner, is_open_for_applications, load_job
)

logger = logging.getLogger(__name__)

students = users.alias("students")


# ============================================================
# STATUS LIFECYCLE
# ============================================================

def status_transition(current: dict, new_status, notes: Optional[str], now: datetime) -> dict:
    """
    Column values for moving `current` to `new_status`.

    Pure function of its inputs so the lifecycle rules can be checked
    without a database.
    """
    new_status = ApplicationStatus(new_status)
    if new_status == ApplicationStatus.pending:
        raise ValidationError(
            "Status can only move away from 'pending'",
            errors=[{"field": "status", "message": "pending is only an initial status"}],
        )

    values = {"status": new_status.value, "updated_at": now}
    if current["reviewed_at"] is None:
        values["reviewed_at"] = now
    if notes:
        values["notes"] = notes
    return values


# ============================================================
# QUERIES
# ============================================================

def _application_query():
    return (
        select(
            applications,
            jobs.c.title.label("job_title"),
            jobs.c.location.label("job_location"),
            jobs.c.job_type.label("job_job_type"),
            jobs.c.recruiter_id.label("job_recruiter_id"),
            students.c.first_name.label("student_first_name"),
            students.c.last_name.label("student_last_name"),
            students.c.email.label("student_email"),
        )
        .join(jobs, jobs.c.id == applications.c.job_id)
        .join(students, students.c.id == applications.c.student_id)
    )


def to_application_response(row) -> dict:
    application = {col.name: row[col.name] for col in applications.columns}
    application["job"] = {
        "id": row["job_id"],
        "title": row["job_title"],
        "location": row["job_location"],
        "job_type": row["job_job_type"],
        "recruiter_id": row["job_recruiter_id"],
    }
    application["student"] = {
        "id": row["student_id"],
        "first_name": row["student_first_name"],
        "last_name": row["student_last_name"],
        "email": row["student_email"],
    }
    return application


def _load_application(db, application_id: int) -> dict:
    """The application row plus its job's recruiter_id, or NotFound."""
    row = db.execute(
        select(applications, jobs.c.recruiter_id.label("job_recruiter_id"))
        .join(jobs, jobs.c.id == applications.c.job_id)
        .where(applications.c.id == application_id)
    ).mappings().first()
    if row is None:
        raise NotFound("Application not found")
    return dict(row)


def _find_application(db, student_id: int, job_id: int):
    """Id row of the (student, job) application, or None."""
    return db.execute(
        select(applications.c.id).where(
            and_(applications.c.student_id == student_id, applications.c.job_id == job_id)
        )
    ).first()


def _fetch_detail(application_id: int) -> dict:
    with get_db_session() as db:
        row = db.execute(_application_query().where(applications.c.id == application_id)).mappings().first()
    if row is None:
        raise NotFound("Application not found")
    return to_application_response(row)


# ============================================================
# PERMISSIONS
# ============================================================

def can_view(application: dict, caller: dict) -> bool:
    return (
        caller["role"] == UserRole.admin
        or application["student_id"] == caller["user_id"]
        or is_job_owner(application["job_recruiter_id"], caller)
    )


def can_review(application: dict, caller: dict) -> bool:
    return caller["role"] == UserRole.admin or is_job_owner(application["job_recruiter_id"], caller)


def can_delete(application: dict, caller: dict) -> bool:
    return caller["role"] == UserRole.admin or application["student_id"] == caller["user_id"]


# ============================================================
# OPERATIONS
# ============================================================

def apply(student_id: int, job_id: int, cover_letter: Optional[str] = None, resume_url: Optional[str] = None) -> dict:
    """
    Submit an application for an open job.

    The openness check and the insert share one transaction with the job
    row locked, so the job cannot close between them.
    """
    now = utcnow()
    with get_db_session() as db:
        job = load_job(db, job_id, for_update=True)
        if not is_open_for_applications(job, now):
            raise JobClosed()

        if _find_application(db, student_id, job_id) is not None:
            raise DuplicateApplication()

        try:
            result = db.execute(applications.insert().values(
                student_id=student_id,
                job_id=job_id,
                status=ApplicationStatus.pending.value,
                cover_letter=cover_letter,
                resume_url=str(resume_url) if resume_url else None,
                applied_at=now,
                reviewed_at=None,
                created_at=now,
                updated_at=now,
            ))
        except IntegrityError:
            # lost a race against a concurrent apply for the same pair
            raise DuplicateApplication()
        application_id = result.inserted_primary_key[0]

    logger.info("Student %s applied to job %s (application %s)", student_id, job_id, application_id)
    return _fetch_detail(application_id)


def get_application(application_id: int, caller: dict) -> dict:
    with get_db_session() as db:
        application = _load_application(db, application_id)
    if not can_view(application, caller):
        raise Forbidden("Not authorized to view this application")
    return _fetch_detail(application_id)


def update_status(application_id: int, new_status, notes: Optional[str], caller: dict) -> dict:
    with get_db_session() as db:
        application = _load_application(db, application_id)
        if not can_review(application, caller):
            logger.info("User %s denied status update on application %s", caller["user_id"], application_id)
            raise Forbidden("Not authorized to update this application")

        values = status_transition(application, new_status, notes, utcnow())
        db.execute(update(applications).where(applications.c.id == application_id).values(**values))

    logger.info("Application %s moved %s -> %s by user %s",
                application_id, application["status"], values["status"], caller["user_id"])
    return _fetch_detail(application_id)


def delete_application(application_id: int, caller: dict) -> None:
    with get_db_session() as db:
        application = _load_application(db, application_id)
        if not can_delete(application, caller):
            raise Forbidden("Not authorized to delete this application")
        db.execute(delete(applications).where(applications.c.id == application_id))

    logger.info("Application %s deleted by user %s", application_id, caller["user_id"])


# One scope per role; each receives the base query and the caller.
def _admin_scope(stmt, caller):
    return stmt


def _recruiter_scope(stmt, caller):
    return stmt.where(jobs.c.recruiter_id == caller["user_id"])


def _student_scope(stmt, caller):
    return stmt.where(applications.c.student_id == caller["user_id"])


LIST_SCOPES = {
    UserRole.admin: _admin_scope,
    UserRole.recruiter: _recruiter_scope,
    UserRole.student: _student_scope,
}

if set(LIST_SCOPES) != set(UserRole):
    raise RuntimeError("LIST_SCOPES must define a scope for every role")


def list_for_caller(
    caller: dict,
    page: int,
    limit: int,
    status: Optional[ApplicationStatus] = None,
    job_id: Optional[int] = None,
    student_id: Optional[int] = None,
) -> dict:
    """
    Role-scoped listing. Explicit filters are ANDed onto the role scope,
    so they can only narrow what the caller is allowed to see.
    """
    stmt = LIST_SCOPES[caller["role"]](_application_query(), caller)
    if status:
        stmt = stmt.where(applications.c.status == ApplicationStatus(status).value)
    if job_id:
        stmt = stmt.where(applications.c.job_id == job_id)
    if student_id:
        stmt = stmt.where(applications.c.student_id == student_id)
    return _paginate(stmt, page, limit)


def list_for_job(job_id: int, caller: dict, page: int, limit: int) -> dict:
    with get_db_session() as db:
        job = load_job(db, job_id)
    ensure_can_manage(job, caller, "view applications for")
    stmt = _application_query().where(applications.c.job_id == job_id)
    return _paginate(stmt, page, limit)


def applications_visible_on_job(job: dict, caller: Optional[dict]) -> Optional[list]:
    """Applications shown on a job detail page, only to its owner or an admin."""
    if caller is None or not can_manage(job, caller):
        return None
    stmt = _application_query().where(applications.c.job_id == job["id"])
    with get_db_session() as db:
        rows = db.execute(stmt.order_by(applications.c.applied_at.desc(), applications.c.id.desc())).mappings().all()
    return [to_application_response(r) for r in rows]


def has_applied(student_id: int, job_id: int) -> bool:
    with get_db_session() as db:
        return _find_application(db, student_id, job_id) is not None


def _paginate(stmt, page: int, limit: int) -> dict:
    with get_db_session() as db:
        total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        rows = db.execute(
            stmt.order_by(applications.c.applied_at.desc(), applications.c.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        ).mappings().all()
    return {"applications": [to_application_response(r) for r in rows], "total": total}


def stats() -> dict:
    """Unscoped counts per status."""
    with get_db_session() as db:
        by_status = dict(
            db.execute(select(applications.c.status, func.count()).group_by(applications.c.status)).all()
        )

    result = {"total_applications": sum(by_status.values())}
    for status in ApplicationStatus:
        result[f"{status.value}_applications"] = by_status.get(status.value, 0)
    return result
