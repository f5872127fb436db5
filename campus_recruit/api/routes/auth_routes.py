"""
Authentication Routes

POST /auth/register - Register new user and get JWT token
POST /auth/login - Login and get JWT token
GET /auth/profile - Get current user's profile
PUT /auth/profile - Update current user's profile
PUT /auth/change-password - Change current user's password
"""

from fastapi import APIRouter, Depends

from campus_recruit.core.access import authenticate
from campus_recruit.schemas.schemas import (
    ApiResponse, AuthPayload, ChangePasswordRequest, LoginRequest, MessageResponse,
    ProfileUpdate, RegisterRequest, UserPayload
)
from campus_recruit.services import user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ApiResponse[AuthPayload], status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new student or recruiter account.

    The response already carries a token; no separate login is needed.
    """
    payload = user_service.register(request.model_dump())
    return ApiResponse[AuthPayload](message="User registered successfully", data=payload)


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    payload = user_service.login(request.email, request.password)
    return ApiResponse[AuthPayload](message="Login successful", data=payload)


@router.get("/profile", response_model=ApiResponse[UserPayload])
async def get_profile(caller: dict = Depends(authenticate)):
    """Get current authenticated user's profile."""
    user = user_service.get_user_for_caller(caller["user_id"], caller)
    return ApiResponse[UserPayload](data={"user": user})


@router.put("/profile", response_model=ApiResponse[UserPayload])
async def update_profile(data: ProfileUpdate, caller: dict = Depends(authenticate)):
    """Update own first name, last name or email. Only provided fields are updated."""
    user = user_service.update_profile(caller["user_id"], data.model_dump(exclude_unset=True))
    return ApiResponse[UserPayload](message="Profile updated successfully", data={"user": user})


@router.put("/change-password", response_model=MessageResponse)
async def change_password(data: ChangePasswordRequest, caller: dict = Depends(authenticate)):
    """Verify the current password, then store the new one."""
    user_service.change_password(caller["user_id"], data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")
