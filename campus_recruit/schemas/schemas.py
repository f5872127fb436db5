"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, AnyHttpUrl, BaseModel, EmailStr, Field, field_validator, model_validator


T = TypeVar("T")


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    student = "student"
    recruiter = "recruiter"


class JobType(str, Enum):
    full_time = "full_time"
    part_time = "part_time"
    internship = "internship"
    contract = "contract"


class JobStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    closed = "closed"


class ApplicationStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    shortlisted = "shortlisted"
    rejected = "rejected"
    accepted = "accepted"


def _normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    return value.strip().lower()


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Deadlines are stored as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


NormalizedEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]
UtcDatetime = Annotated[datetime, AfterValidator(_to_naive_utc)]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class MessageResponse(BaseModel):
    message: str
    success: bool = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit)


# ============================================================
# USER / AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(..., min_length=6, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.student

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[NormalizedEmail] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=255)


class UserCreate(BaseModel):
    email: NormalizedEmail
    password: str = Field(..., min_length=6, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole
    is_active: bool = True


class UserUpdate(BaseModel):
    email: Optional[NormalizedEmail] = None
    password: Optional[str] = Field(None, min_length=6, max_length=255)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserResponse(BaseModel):
    """Public profile; never carries the password hash."""
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str


class UserPayload(BaseModel):
    user: UserResponse


class UserListPayload(BaseModel):
    users: List[UserResponse]
    pagination: Pagination


class AuthPayload(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"
    expires_in: int


class UserStats(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    students: int
    recruiters: int
    admins: int


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=10, max_length=5000)
    requirements: str = Field(..., min_length=10, max_length=2000)
    location: str = Field(..., min_length=1, max_length=255)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    job_type: JobType
    application_deadline: Optional[UtcDatetime] = None

    @field_validator("title", "description", "requirements", "location", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    requirements: Optional[str] = Field(None, min_length=10, max_length=2000)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    job_type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    application_deadline: Optional[UtcDatetime] = None

    @field_validator("title", "description", "requirements", "location", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class JobResponse(BaseModel):
    id: int
    title: str
    description: str
    requirements: str
    location: str
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    job_type: JobType
    status: JobStatus
    recruiter_id: int
    application_deadline: Optional[datetime] = None
    is_open: bool
    recruiter: Optional[UserSummary] = None
    application_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class JobPayload(BaseModel):
    job: JobResponse


class JobListPayload(BaseModel):
    jobs: List[JobResponse]
    pagination: Pagination


class JobStats(BaseModel):
    total_jobs: int
    active_jobs: int
    inactive_jobs: int
    closed_jobs: int
    job_type_stats: Dict[str, int]


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    job_id: int = Field(..., ge=1)
    cover_letter: Optional[str] = Field(None, max_length=2000)
    resume_url: Optional[AnyHttpUrl] = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def status_leaves_pending(self):
        if self.status == ApplicationStatus.pending:
            raise ValueError("Status can only move away from 'pending'")
        return self


class JobSummary(BaseModel):
    id: int
    title: str
    location: str
    job_type: JobType
    recruiter_id: int


class ApplicationResponse(BaseModel):
    id: int
    student_id: int
    job_id: int
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    job: Optional[JobSummary] = None
    student: Optional[UserSummary] = None


class ApplicationPayload(BaseModel):
    application: ApplicationResponse


class ApplicationListPayload(BaseModel):
    applications: List[ApplicationResponse]
    pagination: Pagination


class ApplicationStats(BaseModel):
    total_applications: int
    pending_applications: int
    reviewed_applications: int
    shortlisted_applications: int
    rejected_applications: int
    accepted_applications: int


class JobDetailPayload(BaseModel):
    """Job detail, personalised by the optional caller."""
    job: JobResponse
    applications: Optional[List[ApplicationResponse]] = None
    has_applied: Optional[bool] = None


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class AdminDashboard(BaseModel):
    role: UserRole = UserRole.admin
    total_users: int
    total_jobs: int
    total_applications: int
    total_students: int


class RecruiterDashboard(BaseModel):
    role: UserRole = UserRole.recruiter
    my_jobs: int
    received_applications: int
    shortlisted_candidates: int


class StudentDashboard(BaseModel):
    role: UserRole = UserRole.student
    available_jobs: int
    my_applications: int
    shortlisted_applications: int


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None
