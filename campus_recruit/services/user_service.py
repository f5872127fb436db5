"""
User Service - identity store operations.

Covers registration/login, self-profile management and the admin user
directory. Password hashing always goes through prepare_user_fields().
"""

import logging
from typing import Optional

from sqlalchemy import delete, func, or_, select, update

from campus_recruit.core.auth import issue_token, prepare_user_fields, verify_password
from campus_recruit.core.config import get_settings
from campus_recruit.core.errors import EmailAlreadyExists, Forbidden, NotFound, Unauthorized, ValidationError
from campus_recruit.db.postgres import get_db_session
from campus_recruit.db.tables import applications, jobs, users, utcnow
from campus_recruit.schemas.schemas import UserRole

logger = logging.getLogger(__name__)


def public_profile(row) -> dict:
    """User row without the password hash."""
    profile = dict(row)
    profile.pop("password_hash", None)
    return profile


def _email_taken(db, email: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(users.c.id).where(users.c.email == email)
    if exclude_id is not None:
        stmt = stmt.where(users.c.id != exclude_id)
    return db.execute(stmt).first() is not None


def _load_user(db, user_id: int) -> dict:
    row = db.execute(select(users).where(users.c.id == user_id)).mappings().first()
    if row is None:
        raise NotFound("User not found")
    return dict(row)


def get_user_row(user_id: int) -> Optional[dict]:
    """Full user row (including password hash) or None."""
    with get_db_session() as db:
        row = db.execute(select(users).where(users.c.id == user_id)).mappings().first()
    return dict(row) if row else None


def create_user(fields: dict) -> dict:
    """Insert a user; fails with EmailAlreadyExists on a taken email."""
    now = utcnow()
    values = prepare_user_fields(fields)
    values.setdefault("role", UserRole.student.value)
    values.setdefault("is_active", True)
    values["role"] = UserRole(values["role"]).value
    values["created_at"] = now
    values["updated_at"] = now

    with get_db_session() as db:
        if _email_taken(db, values["email"]):
            raise EmailAlreadyExists()
        result = db.execute(users.insert().values(**values))
        user_id = result.inserted_primary_key[0]
        row = _load_user(db, user_id)

    logger.info("Created user %s with role %s", user_id, values["role"])
    return public_profile(row)


def _auth_payload(user: dict) -> dict:
    token = issue_token(user["id"], user["email"], user["role"])
    return {"user": public_profile(user), "token": token["token"], "expires_in": token["expires_in"]}


def register(fields: dict) -> dict:
    """Self-registration; admins are only created by admins or the seed."""
    if UserRole(fields.get("role", UserRole.student)) == UserRole.admin:
        raise ValidationError(
            "Cannot self-register as admin",
            errors=[{"field": "role", "message": "Role must be student or recruiter"}],
        )
    user = create_user({**fields, "is_active": True})
    return _auth_payload(user)


def login(email: str, password: str) -> dict:
    with get_db_session() as db:
        row = db.execute(select(users).where(users.c.email == email)).mappings().first()

    if row is None:
        raise Unauthorized("Invalid email or password")
    if not row["is_active"]:
        raise Unauthorized("Account is deactivated")
    if not verify_password(password, row["password_hash"]):
        raise Unauthorized("Invalid email or password")

    return _auth_payload(dict(row))


def update_profile(user_id: int, fields: dict) -> dict:
    """Self-service update of first/last name and email."""
    allowed = {k: v for k, v in fields.items() if k in ("first_name", "last_name", "email") and v is not None}

    with get_db_session() as db:
        _load_user(db, user_id)
        if "email" in allowed and _email_taken(db, allowed["email"], exclude_id=user_id):
            raise EmailAlreadyExists("Email already exists")
        if allowed:
            allowed["updated_at"] = utcnow()
            db.execute(update(users).where(users.c.id == user_id).values(**allowed))
        row = _load_user(db, user_id)

    return public_profile(row)


def change_password(user_id: int, current_password: str, new_password: str) -> None:
    with get_db_session() as db:
        user = _load_user(db, user_id)
        if not verify_password(current_password, user["password_hash"]):
            raise ValidationError(
                "Current password is incorrect",
                errors=[{"field": "current_password", "message": "Current password is incorrect"}],
            )
        values = prepare_user_fields({"password": new_password})
        values["updated_at"] = utcnow()
        db.execute(update(users).where(users.c.id == user_id).values(**values))


# ============================================================
# ADMIN DIRECTORY
# ============================================================

def list_users(page: int, limit: int, role: Optional[UserRole] = None, search: Optional[str] = None) -> dict:
    stmt = select(users)
    if role:
        stmt = stmt.where(users.c.role == UserRole(role).value)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(
            users.c.first_name.ilike(pattern),
            users.c.last_name.ilike(pattern),
            users.c.email.ilike(pattern),
        ))

    with get_db_session() as db:
        total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        rows = db.execute(
            stmt.order_by(users.c.created_at.desc(), users.c.id.desc()).limit(limit).offset((page - 1) * limit)
        ).mappings().all()

    return {"users": [public_profile(r) for r in rows], "total": total}


def get_user_for_caller(user_id: int, caller: dict) -> dict:
    """Admins may read anyone; other callers only themselves."""
    with get_db_session() as db:
        row = _load_user(db, user_id)
    if caller["role"] != UserRole.admin and caller["user_id"] != user_id:
        raise Forbidden("Not authorized to view this user")
    return public_profile(row)


def update_user(user_id: int, fields: dict) -> dict:
    """Admin update of any field, including role, active flag and password."""
    values = {k: v for k, v in fields.items() if v is not None}
    if "role" in values:
        values["role"] = UserRole(values["role"]).value
    values = prepare_user_fields(values)

    with get_db_session() as db:
        _load_user(db, user_id)
        if "email" in values and _email_taken(db, values["email"], exclude_id=user_id):
            raise EmailAlreadyExists("Email already exists")
        if values:
            values["updated_at"] = utcnow()
            db.execute(update(users).where(users.c.id == user_id).values(**values))
        row = _load_user(db, user_id)

    return public_profile(row)


def delete_user(user_id: int, caller: dict) -> None:
    """Hard delete, removing the user's jobs (with their applications) and own applications."""
    with get_db_session() as db:
        _load_user(db, user_id)
        if caller["user_id"] == user_id:
            raise ValidationError("Cannot delete your own account")

        owned_jobs = select(jobs.c.id).where(jobs.c.recruiter_id == user_id)
        db.execute(delete(applications).where(or_(
            applications.c.student_id == user_id,
            applications.c.job_id.in_(owned_jobs),
        )))
        db.execute(delete(jobs).where(jobs.c.recruiter_id == user_id))
        db.execute(delete(users).where(users.c.id == user_id))

    logger.info("User %s deleted by admin %s", user_id, caller["user_id"])


def toggle_user_status(user_id: int, caller: dict) -> dict:
    with get_db_session() as db:
        user = _load_user(db, user_id)
        if caller["user_id"] == user_id:
            raise ValidationError("Cannot deactivate your own account")
        db.execute(
            update(users).where(users.c.id == user_id).values(is_active=not user["is_active"], updated_at=utcnow())
        )
        row = _load_user(db, user_id)

    logger.info("User %s %s by admin %s", user_id, "activated" if row["is_active"] else "deactivated", caller["user_id"])
    return public_profile(row)


def user_stats() -> dict:
    with get_db_session() as db:
        total = db.execute(select(func.count()).select_from(users)).scalar_one()
        active = db.execute(select(func.count()).select_from(users).where(users.c.is_active.is_(True))).scalar_one()
        by_role = dict(db.execute(select(users.c.role, func.count()).group_by(users.c.role)).all())

    return {
        "total_users": total,
        "active_users": active,
        "inactive_users": total - active,
        "students": by_role.get(UserRole.student.value, 0),
        "recruiters": by_role.get(UserRole.recruiter.value, 0),
        "admins": by_role.get(UserRole.admin.value, 0),
    }


def ensure_default_admin() -> bool:
    """Create the configured default admin if its email is absent."""
    settings = get_settings()
    with get_db_session() as db:
        if _email_taken(db, settings.default_admin_email):
            return False

    create_user({
        "email": settings.default_admin_email,
        "password": settings.default_admin_password,
        "first_name": "Admin",
        "last_name": "User",
        "role": UserRole.admin.value,
        "is_active": True,
    })
    logger.info("Default admin user created")
    return True
