"""
Application Routes

POST /applications - Apply to a job (student/admin)
GET /applications - List applications visible to the caller
GET /applications/stats - Application counts per status
GET /applications/job/{job_id} - Applications for one job (owning recruiter or admin)
GET /applications/{application_id} - Get application (applicant, owning recruiter or admin)
PUT /applications/{application_id}/status - Review an application (owning recruiter or admin)
DELETE /applications/{application_id} - Withdraw/remove application (applicant or admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from campus_recruit.core.access import authenticate, recruiter_or_admin, student_or_admin
from campus_recruit.core.config import get_settings
from campus_recruit.schemas.schemas import (
    ApiResponse, ApplicationCreate, ApplicationListPayload, ApplicationPayload, ApplicationStats,
    ApplicationStatus, ApplicationStatusUpdate, MessageResponse, Pagination
)
from campus_recruit.services import application_service

settings = get_settings()

router = APIRouter(prefix="/applications", tags=["Applications"])


def _list_response(result: dict, page: int, limit: int):
    return ApiResponse[ApplicationListPayload](data={
        "applications": result["applications"],
        "pagination": Pagination.build(page, limit, result["total"]),
    })


@router.post("", response_model=ApiResponse[ApplicationPayload], status_code=201)
async def apply_to_job(data: ApplicationCreate, caller: dict = Depends(student_or_admin)):
    """
    Apply to an open job.

    Fails with 400 if the job is not active or its deadline has passed,
    and with 409 if the caller already applied.
    """
    application = application_service.apply(
        caller["user_id"],
        data.job_id,
        cover_letter=data.cover_letter,
        resume_url=str(data.resume_url) if data.resume_url else None,
    )
    return ApiResponse[ApplicationPayload](
        message="Application submitted successfully", data={"application": application}
    )


@router.get("", response_model=ApiResponse[ApplicationListPayload])
async def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[ApplicationStatus] = Query(None),
    job_id: Optional[int] = Query(None, ge=1),
    student_id: Optional[int] = Query(None, ge=1),
    caller: dict = Depends(authenticate)
):
    """
    Students see their own applications, recruiters see applications to
    their jobs, admins see everything. Filters only narrow that scope.
    """
    result = application_service.list_for_caller(
        caller, page, limit, status=status, job_id=job_id, student_id=student_id
    )
    return _list_response(result, page, limit)


@router.get("/stats", response_model=ApiResponse[ApplicationStats])
async def get_application_stats(caller: dict = Depends(authenticate)):
    return ApiResponse[ApplicationStats](data=application_service.stats())


@router.get("/job/{job_id}", response_model=ApiResponse[ApplicationListPayload])
async def list_job_applications(
    job_id: int = Path(..., ge=1),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    caller: dict = Depends(recruiter_or_admin)
):
    result = application_service.list_for_job(job_id, caller, page, limit)
    return _list_response(result, page, limit)


@router.get("/{application_id}", response_model=ApiResponse[ApplicationPayload])
async def get_application(application_id: int = Path(..., ge=1), caller: dict = Depends(authenticate)):
    application = application_service.get_application(application_id, caller)
    return ApiResponse[ApplicationPayload](data={"application": application})


@router.put("/{application_id}/status", response_model=ApiResponse[ApplicationPayload])
async def update_application_status(
    data: ApplicationStatusUpdate,
    application_id: int = Path(..., ge=1),
    caller: dict = Depends(recruiter_or_admin)
):
    """Move an application to reviewed/shortlisted/rejected/accepted, optionally with notes."""
    application = application_service.update_status(application_id, data.status, data.notes, caller)
    return ApiResponse[ApplicationPayload](
        message="Application status updated successfully", data={"application": application}
    )


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(application_id: int = Path(..., ge=1), caller: dict = Depends(student_or_admin)):
    application_service.delete_application(application_id, caller)
    return MessageResponse(message="Application deleted successfully")
