"""
User Routes (admin directory)

GET /users - List users (admin)
GET /users/stats - User counts (admin)
GET /users/{user_id} - Get user (admin or self)
POST /users - Create user with any role (admin)
PUT /users/{user_id} - Update user (admin)
DELETE /users/{user_id} - Delete user (admin)
PATCH /users/{user_id}/toggle-status - Activate/deactivate user (admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from campus_recruit.core.access import admin_only, authenticate
from campus_recruit.core.config import get_settings
from campus_recruit.schemas.schemas import (
    ApiResponse, MessageResponse, Pagination, UserCreate, UserListPayload, UserPayload,
    UserRole, UserStats, UserUpdate
)
from campus_recruit.services import user_service

settings = get_settings()

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=ApiResponse[UserListPayload])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    role: Optional[UserRole] = Query(None),
    search: Optional[str] = Query(None, description="Search first name, last name or email"),
    caller: dict = Depends(admin_only)
):
    """List all users, newest first."""
    result = user_service.list_users(page, limit, role=role, search=search)
    return ApiResponse[UserListPayload](data={
        "users": result["users"],
        "pagination": Pagination.build(page, limit, result["total"]),
    })


@router.get("/stats", response_model=ApiResponse[UserStats])
async def get_user_stats(caller: dict = Depends(admin_only)):
    return ApiResponse[UserStats](data=user_service.user_stats())


@router.get("/{user_id}", response_model=ApiResponse[UserPayload])
async def get_user(user_id: int = Path(..., ge=1), caller: dict = Depends(authenticate)):
    """Admins can read any user; everyone else only themselves."""
    user = user_service.get_user_for_caller(user_id, caller)
    return ApiResponse[UserPayload](data={"user": user})


@router.post("", response_model=ApiResponse[UserPayload], status_code=201)
async def create_user(data: UserCreate, caller: dict = Depends(admin_only)):
    user = user_service.create_user(data.model_dump())
    return ApiResponse[UserPayload](message="User created successfully", data={"user": user})


@router.put("/{user_id}", response_model=ApiResponse[UserPayload])
async def update_user(data: UserUpdate, user_id: int = Path(..., ge=1), caller: dict = Depends(admin_only)):
    user = user_service.update_user(user_id, data.model_dump(exclude_unset=True))
    return ApiResponse[UserPayload](message="User updated successfully", data={"user": user})


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int = Path(..., ge=1), caller: dict = Depends(admin_only)):
    """Delete a user together with their jobs and applications."""
    user_service.delete_user(user_id, caller)
    return MessageResponse(message="User deleted successfully")


@router.patch("/{user_id}/toggle-status", response_model=ApiResponse[UserPayload])
async def toggle_user_status(user_id: int = Path(..., ge=1), caller: dict = Depends(admin_only)):
    user = user_service.toggle_user_status(user_id, caller)
    state = "activated" if user["is_active"] else "deactivated"
    return ApiResponse[UserPayload](message=f"User {state} successfully", data={"user": user})
