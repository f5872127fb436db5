"""
Dashboard Routes

GET /dashboard - Role-specific counts for the authenticated user
"""

from typing import Union

from fastapi import APIRouter, Depends

from campus_recruit.core.access import authenticate
from campus_recruit.schemas.schemas import AdminDashboard, ApiResponse, RecruiterDashboard, StudentDashboard
from campus_recruit.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

DashboardData = Union[AdminDashboard, RecruiterDashboard, StudentDashboard]


@router.get("", response_model=ApiResponse[DashboardData])
async def get_dashboard(caller: dict = Depends(authenticate)):
    """
    admin: total users, jobs, applications and students
    recruiter: own jobs, applications received, shortlisted candidates
    student: active jobs, own applications, own shortlisted applications
    """
    return ApiResponse[DashboardData](data=dashboard_service.dashboard_for(caller))
