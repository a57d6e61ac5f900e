# moviecatalog/routers/auth.py
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from moviecatalog.core.auth import CurrentUser, get_current_user, get_optional_user
from moviecatalog.core.config import Settings, get_app_settings
from moviecatalog.core.errors import CatalogError, InvalidCredentials, ValidationError
from moviecatalog.database import get_db
from moviecatalog.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    RegisterRequest,
    VerifyResponse,
)
from moviecatalog.schemas.envelope import auth_failure
from moviecatalog.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Register a new user and log them straight in.
    - Username >= 3 chars, password >= 6 chars, well-formed email
    - Username and email must be unused
    """
    try:
        user, token = user_service.register_user(
            db, payload.username, payload.email, payload.password, settings
        )
    except CatalogError as exc:
        return auth_failure(exc, not settings.is_production)
    return AuthResponse(message="User registered successfully", user=user.to_read(), token=token)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        user, token = user_service.authenticate_user(db, payload.email, payload.password, settings)
    except CatalogError as exc:
        return auth_failure(exc, not settings.is_production)
    return AuthResponse(message="Login successful", user=user.to_read(), token=token)


@router.get("/profile", response_model=ProfileResponse)
def read_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        user = user_service.get_user(db, current_user.id)
    except CatalogError as exc:
        return auth_failure(exc, not settings.is_production)
    return ProfileResponse(user=user.to_read())


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        user = user_service.update_profile(
            db, current_user.id, username=payload.username, email=payload.email
        )
    except CatalogError as exc:
        return auth_failure(exc, not settings.is_production)
    return ProfileUpdateResponse(message="Profile updated successfully", user=user.to_read())


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    payload: PasswordChangeRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    A wrong current password is a 400, not a 401: the session itself is fine.
    """
    try:
        user_service.change_password(
            db, current_user.id, payload.currentPassword, payload.newPassword, settings
        )
    except InvalidCredentials as exc:
        return auth_failure(ValidationError(exc.message))
    except CatalogError as exc:
        return auth_failure(exc, not settings.is_production)
    return MessageResponse(message="Password changed successfully")


@router.delete("/account", response_model=MessageResponse)
def delete_account(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Delete the caller's account together with all of their movies.
    """
    try:
        user_service.delete_account(db, current_user.id)
    except CatalogError as exc:
        return auth_failure(exc, not settings.is_production)
    return MessageResponse(message="Account deleted successfully")


@router.get("/verify", response_model=VerifyResponse)
def verify_token(
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    user = user_service.find_by_id(db, current_user.id) if current_user else None
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"valid": False, "error": "Invalid or missing authentication token"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return VerifyResponse(valid=True, user=user.to_read())
