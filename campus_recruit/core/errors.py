"""
Error taxonomy for the portal.

Every error carries the HTTP status it maps to. Services raise these;
the handlers registered in campus_recruit.main turn them into the
standard response envelope.
"""

from typing import Any, Dict, List, Optional


class PortalError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(PortalError):
    status_code = 400
    default_message = "Validation failed"


class JobClosed(ValidationError):
    default_message = "This job is no longer accepting applications"


class Unauthorized(PortalError):
    status_code = 401
    default_message = "Authentication required"


class InvalidToken(Unauthorized):
    default_message = "Invalid or expired token"


class MalformedHeader(Unauthorized):
    default_message = "Invalid authorization header format"


class Forbidden(PortalError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(PortalError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(PortalError):
    status_code = 409
    default_message = "Resource already exists"


class EmailAlreadyExists(Conflict):
    default_message = "User with this email already exists"


class DuplicateApplication(Conflict):
    default_message = "You have already applied for this job"


class RateLimited(PortalError):
    status_code = 429
    default_message = "Too many requests, please try again later"
