"""
Access-control dependencies for protected routes.

authenticate          -> resolves the caller from the bearer token (401 on failure)
authorize(roles)      -> authenticate + role-set membership (403 on failure)
optional_authenticate -> same resolution, but falls back to anonymous

The resolved caller is a dict: {"user_id", "email", "role"}. It is also
stored on request.state.caller for downstream use.

Usage:
    @router.get("/protected")
    async def route(caller: dict = Depends(authenticate)):
        return caller
"""

import logging
from typing import Iterable, Optional

from fastapi import Depends, Header, Request

from campus_recruit.core.auth import extract_bearer, verify_token
from campus_recruit.core.errors import Forbidden, PortalError, Unauthorized
from campus_recruit.schemas.schemas import UserRole
from campus_recruit.services.user_service import get_user_row

logger = logging.getLogger(__name__)


def resolve_caller(authorization: Optional[str]) -> dict:
    """Header value -> active user identity. Raises Unauthorized."""
    token = extract_bearer(authorization)
    claims = verify_token(token)

    user = get_user_row(claims["user_id"])
    if user is None:
        raise Unauthorized("User not found")
    if not user["is_active"]:
        raise Unauthorized("User account is deactivated")

    return {"user_id": user["id"], "email": user["email"], "role": UserRole(user["role"])}


async def authenticate(request: Request, authorization: Optional[str] = Header(None)) -> dict:
    """FastAPI dependency - Get current authenticated user."""
    try:
        caller = resolve_caller(authorization)
    except Unauthorized as exc:
        logger.info("Authentication failed for %s %s: %s", request.method, request.url.path, exc.message)
        raise

    request.state.caller = caller
    return caller


def authorize(allowed_roles: Iterable[UserRole]):
    """Dependency factory - require the caller's role to be in allowed_roles."""
    allowed = frozenset(UserRole(role) for role in allowed_roles)

    async def role_guard(caller: dict = Depends(authenticate)) -> dict:
        if caller["role"] not in allowed:
            logger.info("User %s (%s) denied; requires one of %s",
                        caller["user_id"], caller["role"].value, sorted(r.value for r in allowed))
            raise Forbidden()
        return caller

    return role_guard


async def optional_authenticate(request: Request, authorization: Optional[str] = Header(None)) -> Optional[dict]:
    """Dependency - resolve the caller if possible, otherwise continue anonymously."""
    if not authorization:
        return None
    try:
        caller = resolve_caller(authorization)
    except PortalError:
        return None

    request.state.caller = caller
    return caller


# Predefined role guards
admin_only = authorize({UserRole.admin})
recruiter_or_admin = authorize({UserRole.recruiter, UserRole.admin})
student_or_admin = authorize({UserRole.student, UserRole.admin})
