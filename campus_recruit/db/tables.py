"""
Relational schema (SQLAlchemy Core).

users 1:N jobs (recruiter_id), jobs 1:N applications (job_id),
users 1:N applications (student_id). At most one application per
(student_id, job_id) pair.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("role", String(20), nullable=False, default="student"),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    Index("ix_users_role", "role"),
    Index("ix_users_is_active", "is_active"),
)


jobs = Table(
    "jobs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False),
    Column("requirements", Text, nullable=False),
    Column("location", String(255), nullable=False),
    Column("salary_min", Numeric(10, 2, asdecimal=False), nullable=True),
    Column("salary_max", Numeric(10, 2, asdecimal=False), nullable=True),
    Column("job_type", String(20), nullable=False, default="full_time"),
    Column("status", String(20), nullable=False, default="active"),
    Column("recruiter_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("application_deadline", DateTime, nullable=True),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    Index("ix_jobs_recruiter_id", "recruiter_id"),
    Index("ix_jobs_status", "status"),
    Index("ix_jobs_job_type", "job_type"),
    Index("ix_jobs_application_deadline", "application_deadline"),
    Index("ix_jobs_created_at", "created_at"),
)


applications = Table(
    "applications",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
    Column("status", String(20), nullable=False, default="pending"),
    Column("cover_letter", Text, nullable=True),
    Column("resume_url", String(500), nullable=True),
    Column("notes", Text, nullable=True),
    Column("applied_at", DateTime, nullable=False),
    Column("reviewed_at", DateTime, nullable=True),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    UniqueConstraint("student_id", "job_id", name="uq_applications_student_job"),
    Index("ix_applications_job_id", "job_id"),
    Index("ix_applications_status", "status"),
)
