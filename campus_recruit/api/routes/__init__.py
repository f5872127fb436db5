"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from campus_recruit.api.routes.auth_routes import router as auth_router
from campus_recruit.api.routes.user_routes import router as user_router
from campus_recruit.api.routes.job_routes import router as job_router
from campus_recruit.api.routes.application_routes import router as application_router
from campus_recruit.api.routes.dashboard_routes import router as dashboard_router

# Main API router
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(dashboard_router)
