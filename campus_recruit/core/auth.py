"""
Authentication Utility - Password hashing and the token service.

Provides:
- Password hashing with bcrypt
- JWT issuance/verification carrying {userId, email, role}
- Strict "Bearer <token>" header parsing
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from campus_recruit.core.config import get_settings
from campus_recruit.core.errors import InvalidToken, MalformedHeader
from campus_recruit.schemas.schemas import UserRole

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def prepare_user_fields(fields: dict) -> dict:
    """
    Pre-persistence transform for user rows.

    Replaces a plain ``password`` entry with ``password_hash``; every
    create/update path for users goes through here so the hashing rule
    lives in one place.
    """
    prepared = dict(fields)
    password = prepared.pop("password", None)
    if password is not None:
        prepared["password_hash"] = hash_password(password)
    return prepared


# ============================================================
# TOKEN SERVICE
# ============================================================

def issue_token(user_id: int, email: str, role: str, expires_delta: Optional[timedelta] = None) -> dict:
    """
    Sign a token for the given identity.

    Returns {"token": str, "expires_in": seconds}.
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=settings.jwt_expire_minutes)
    issued_at = datetime.now(timezone.utc)
    claims = {
        "userId": user_id,
        "email": email,
        "role": UserRole(role).value,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return {"token": token, "expires_in": int(lifetime.total_seconds())}


def verify_token(token: str) -> dict:
    """
    Verify signature and expiry.

    Returns {"user_id", "email", "role", "issued_at", "expires_at"}.
    Raises InvalidToken on any failure.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise InvalidToken("Token has expired")
    except JWTError:
        raise InvalidToken()

    try:
        return {
            "user_id": int(payload["userId"]),
            "email": payload["email"],
            "role": UserRole(payload["role"]),
            "issued_at": datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            "expires_at": datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        }
    except (KeyError, TypeError, ValueError):
        raise InvalidToken("Token payload is incomplete")


def extract_bearer(header_value: Optional[str]) -> str:
    """Return the token from an exact "Bearer <token>" header value."""
    if not header_value:
        raise MalformedHeader("No authorization header provided")

    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise MalformedHeader()
    return parts[1]
