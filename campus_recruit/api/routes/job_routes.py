"""
Job Routes

GET /jobs - List jobs with filters (public, optional auth)
GET /jobs/stats - Job counts (public)
GET /jobs/recruiter - Jobs owned by the caller (recruiter/admin)
GET /jobs/recruiter/{recruiter_id} - Jobs owned by a recruiter (recruiter/admin)
GET /jobs/{job_id} - Job details, personalised for the caller (public, optional auth)
POST /jobs - Create job posting (recruiter/admin)
PUT /jobs/{job_id} - Update job (owning recruiter or admin)
DELETE /jobs/{job_id} - Delete job and its applications (owning recruiter or admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from campus_recruit.core.access import optional_authenticate, recruiter_or_admin
from campus_recruit.core.config import get_settings
from campus_recruit.schemas.schemas import (
    ApiResponse, JobCreate, JobDetailPayload, JobListPayload, JobPayload, JobStats,
    JobStatus, JobType, MessageResponse, Pagination, UserRole, JobUpdate
)
from campus_recruit.services import application_service, job_service

settings = get_settings()

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=ApiResponse[JobListPayload])
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[JobStatus] = Query(None),
    job_type: Optional[JobType] = Query(None),
    location: Optional[str] = Query(None),
    recruiter_id: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None, description="Search in title, description and requirements"),
    caller: Optional[dict] = Depends(optional_authenticate)
):
    """List job postings with filters and pagination, newest first."""
    result = job_service.list_jobs(
        page, limit, status=status, job_type=job_type, location=location,
        recruiter_id=recruiter_id, search=search
    )
    return ApiResponse[JobListPayload](data={
        "jobs": result["jobs"],
        "pagination": Pagination.build(page, limit, result["total"]),
    })


@router.get("/stats", response_model=ApiResponse[JobStats])
async def get_job_stats():
    return ApiResponse[JobStats](data=job_service.job_stats())


def _recruiter_jobs_response(owner_id: int, page: int, limit: int):
    result = job_service.list_recruiter_jobs(owner_id, page, limit)
    return ApiResponse[JobListPayload](data={
        "jobs": result["jobs"],
        "pagination": Pagination.build(page, limit, result["total"]),
    })


@router.get("/recruiter", response_model=ApiResponse[JobListPayload])
async def get_my_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    caller: dict = Depends(recruiter_or_admin)
):
    """Jobs owned by the caller, each with its application count."""
    return _recruiter_jobs_response(caller["user_id"], page, limit)


@router.get("/recruiter/{recruiter_id}", response_model=ApiResponse[JobListPayload])
async def get_recruiter_jobs(
    recruiter_id: int = Path(..., ge=1),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    caller: dict = Depends(recruiter_or_admin)
):
    """Jobs owned by the given recruiter, each with its application count."""
    return _recruiter_jobs_response(recruiter_id, page, limit)


@router.get("/{job_id}", response_model=ApiResponse[JobDetailPayload], response_model_exclude_none=True)
async def get_job(job_id: int = Path(..., ge=1), caller: Optional[dict] = Depends(optional_authenticate)):
    """
    Get details of a specific job.

    Owners and admins also receive the job's applications; students
    receive whether they have already applied.
    """
    job = job_service.get_job(job_id)
    detail = {"job": job}
    if caller is not None:
        detail["applications"] = application_service.applications_visible_on_job(job, caller)
        if caller["role"] == UserRole.student:
            detail["has_applied"] = application_service.has_applied(caller["user_id"], job_id)
    return ApiResponse[JobDetailPayload](data=detail)


@router.post("", response_model=ApiResponse[JobPayload], status_code=201)
async def create_job(job: JobCreate, caller: dict = Depends(recruiter_or_admin)):
    """Create a new job posting owned by the caller."""
    created = job_service.create_job(job.model_dump(), caller["user_id"])
    return ApiResponse[JobPayload](message="Job created successfully", data={"job": created})


@router.put("/{job_id}", response_model=ApiResponse[JobPayload])
async def update_job(update: JobUpdate, job_id: int = Path(..., ge=1), caller: dict = Depends(recruiter_or_admin)):
    """Update a job posting. Only the owning recruiter or an admin can update."""
    updated = job_service.update_job(job_id, update.model_dump(exclude_unset=True), caller)
    return ApiResponse[JobPayload](message="Job updated successfully", data={"job": updated})


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: int = Path(..., ge=1), caller: dict = Depends(recruiter_or_admin)):
    """Delete a job posting together with its applications."""
    job_service.delete_job(job_id, caller)
    return MessageResponse(message="Job deleted successfully")
