"""
Job Service - job postings and their ownership rules.

A job belongs to exactly one recruiter. Mutations go through a two-stage
guard: load_job() (404 when absent) then ensure_can_manage() (403 unless
owner or admin). Absence is therefore reported before permission, so a
caller without access still learns that the job exists.

Openness is computed, never persisted: see is_open_for_applications().
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, or_, select, update

from campus_recruit.core.errors import Forbidden, NotFound
from campus_recruit.db.postgres import get_db_session
from campus_recruit.db.tables import applications, jobs, users, utcnow
from campus_recruit.schemas.schemas import JobStatus, JobType, UserRole

logger = logging.getLogger(__name__)

NULLABLE_JOB_FIELDS = {"salary_min", "salary_max", "application_deadline"}


def is_open_for_applications(job, now: Optional[datetime] = None) -> bool:
    """Active and (no deadline or deadline still in the future)."""
    if JobStatus(job["status"]) != JobStatus.active:
        return False
    deadline = job["application_deadline"]
    if deadline is None:
        return True
    return (now or utcnow()) < deadline


def _job_query():
    return select(
        jobs,
        users.c.first_name.label("recruiter_first_name"),
        users.c.last_name.label("recruiter_last_name"),
        users.c.email.label("recruiter_email"),
    ).join(users, users.c.id == jobs.c.recruiter_id)


def to_job_response(row, application_count: Optional[int] = None) -> dict:
    job = {col.name: row[col.name] for col in jobs.columns}
    job["is_open"] = is_open_for_applications(job)
    if "recruiter_email" in row:
        job["recruiter"] = {
            "id": row["recruiter_id"],
            "first_name": row["recruiter_first_name"],
            "last_name": row["recruiter_last_name"],
            "email": row["recruiter_email"],
        }
    if application_count is not None:
        job["application_count"] = application_count
    return job


def load_job(db, job_id: int, for_update: bool = False) -> dict:
    """Stage one of the guard: the job row or NotFound."""
    stmt = select(jobs).where(jobs.c.id == job_id)
    if for_update:
        stmt = stmt.with_for_update()
    row = db.execute(stmt).mappings().first()
    if row is None:
        raise NotFound("Job not found")
    return dict(row)


def is_job_owner(recruiter_id: int, caller: dict) -> bool:
    """Ownership counts only while the caller still holds the recruiter role."""
    return caller["role"] == UserRole.recruiter and recruiter_id == caller["user_id"]


def can_manage(job: dict, caller: dict) -> bool:
    return caller["role"] == UserRole.admin or is_job_owner(job["recruiter_id"], caller)


def ensure_can_manage(job: dict, caller: dict, action: str) -> None:
    """Stage two of the guard: owner or admin, else Forbidden."""
    if not can_manage(job, caller):
        logger.info("User %s denied %s on job %s", caller["user_id"], action, job["id"])
        raise Forbidden(f"Not authorized to {action} this job")


def get_job(job_id: int) -> dict:
    with get_db_session() as db:
        row = db.execute(_job_query().where(jobs.c.id == job_id)).mappings().first()
    if row is None:
        raise NotFound("Job not found")
    return to_job_response(row)


def create_job(fields: dict, caller_id: int) -> dict:
    """
    Persist a new active job owned by caller_id.

    Role gating ({recruiter, admin}) is the access-control layer's job.
    """
    now = utcnow()
    values = dict(fields)
    values["job_type"] = JobType(values["job_type"]).value
    values.update(recruiter_id=caller_id, status=JobStatus.active.value, created_at=now, updated_at=now)

    with get_db_session() as db:
        result = db.execute(jobs.insert().values(**values))
        job_id = result.inserted_primary_key[0]

    logger.info("Job %s created by user %s", job_id, caller_id)
    return get_job(job_id)


def update_job(job_id: int, fields: dict, caller: dict) -> dict:
    """Partial update; only provided fields change. Nullable fields may be cleared."""
    values = {k: v for k, v in fields.items() if v is not None or k in NULLABLE_JOB_FIELDS}
    for key, enum in (("job_type", JobType), ("status", JobStatus)):
        if values.get(key) is not None:
            values[key] = enum(values[key]).value

    with get_db_session() as db:
        job = load_job(db, job_id)
        ensure_can_manage(job, caller, "update")
        if values:
            values["updated_at"] = utcnow()
            db.execute(update(jobs).where(jobs.c.id == job_id).values(**values))

    return get_job(job_id)


def delete_job(job_id: int, caller: dict) -> None:
    """Hard delete; the job's applications are removed in the same transaction."""
    with get_db_session() as db:
        job = load_job(db, job_id)
        ensure_can_manage(job, caller, "delete")
        removed = db.execute(delete(applications).where(applications.c.job_id == job_id)).rowcount
        db.execute(delete(jobs).where(jobs.c.id == job_id))

    logger.info("Job %s deleted by user %s (%s applications removed)", job_id, caller["user_id"], removed)


def list_jobs(
    page: int,
    limit: int,
    status: Optional[JobStatus] = None,
    job_type: Optional[JobType] = None,
    location: Optional[str] = None,
    recruiter_id: Optional[int] = None,
    search: Optional[str] = None,
) -> dict:
    """Filtered, paginated, newest-first job list."""
    stmt = _job_query()
    if status:
        stmt = stmt.where(jobs.c.status == JobStatus(status).value)
    if job_type:
        stmt = stmt.where(jobs.c.job_type == JobType(job_type).value)
    if location:
        stmt = stmt.where(jobs.c.location.ilike(f"%{location}%"))
    if recruiter_id:
        stmt = stmt.where(jobs.c.recruiter_id == recruiter_id)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(
            jobs.c.title.ilike(pattern),
            jobs.c.description.ilike(pattern),
            jobs.c.requirements.ilike(pattern),
        ))

    with get_db_session() as db:
        total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        rows = db.execute(
            stmt.order_by(jobs.c.created_at.desc(), jobs.c.id.desc()).limit(limit).offset((page - 1) * limit)
        ).mappings().all()

    return {"jobs": [to_job_response(r) for r in rows], "total": total}


def list_recruiter_jobs(recruiter_id: int, page: int, limit: int) -> dict:
    """Jobs owned by one recruiter, each with its application count."""
    counts = (
        select(applications.c.job_id, func.count().label("application_count"))
        .group_by(applications.c.job_id)
        .subquery()
    )
    stmt = (
        select(jobs, func.coalesce(counts.c.application_count, 0).label("application_count"))
        .outerjoin(counts, counts.c.job_id == jobs.c.id)
        .where(jobs.c.recruiter_id == recruiter_id)
    )

    with get_db_session() as db:
        total = db.execute(
            select(func.count()).select_from(jobs).where(jobs.c.recruiter_id == recruiter_id)
        ).scalar_one()
        rows = db.execute(
            stmt.order_by(jobs.c.created_at.desc(), jobs.c.id.desc()).limit(limit).offset((page - 1) * limit)
        ).mappings().all()

    return {
        "jobs": [to_job_response(r, application_count=r["application_count"]) for r in rows],
        "total": total,
    }


def job_stats() -> dict:
    with get_db_session() as db:
        by_status = dict(db.execute(select(jobs.c.status, func.count()).group_by(jobs.c.status)).all())
        by_type = dict(db.execute(select(jobs.c.job_type, func.count()).group_by(jobs.c.job_type)).all())

    return {
        "total_jobs": sum(by_status.values()),
        "active_jobs": by_status.get(JobStatus.active.value, 0),
        "inactive_jobs": by_status.get(JobStatus.inactive.value, 0),
        "closed_jobs": by_status.get(JobStatus.closed.value, 0),
        "job_type_stats": {t.value: by_type.get(t.value, 0) for t in JobType},
    }
