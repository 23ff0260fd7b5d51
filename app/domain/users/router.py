"""User router - authentication, profile and notification settings endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    LoginRequest,
    NotificationSettingResponse,
    NotificationSettingsUpdate,
    ProfileUpdate,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from .service import UserService

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
router = APIRouter(prefix="/user", tags=["User"])

rate_limit_register = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")
rate_limit_login = create_rate_limiter(limit=10, window_seconds=300, key_prefix="login")


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@auth_router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    _: None = Depends(rate_limit_register),
    service: UserService = Depends(get_user_service),
):
    """Create a therapist account"""
    user = service.register(data)
    return RegisterResponse(message="User created successfully", userId=user.id)


@auth_router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(rate_limit_login),
    service: UserService = Depends(get_user_service),
):
    """Exchange email and password for a bearer token"""
    token, user = service.login(data)
    return TokenResponse(accessToken=token, user=UserResponse.model_validate(user))


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.update_profile(current_user, data)


@router.get("/notification-settings", response_model=list[NotificationSettingResponse])
async def get_notification_settings(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return [
        NotificationSettingResponse.from_model(s)
        for s in service.get_notification_settings(current_user)
    ]


@router.put("/notification-settings", response_model=list[NotificationSettingResponse])
async def update_notification_settings(
    data: NotificationSettingsUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update both the email and push channels"""
    return [
        NotificationSettingResponse.from_model(s)
        for s in service.update_notification_settings(current_user, data)
    ]
