from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from coachdesk.core.database import get_db
from coachdesk.schemas.auth import (
    LoginRequest, RefreshTokenRequest, ChangePasswordRequest,
    AdminResetPasswordRequest, TokenClaims,
)
from coachdesk.schemas.common import ErrorResponse
from coachdesk.services.auth_service import AuthService
from coachdesk.dependencies.auth import get_current_user, get_current_admin
from coachdesk.utils.helpers import format_response, get_client_ip, get_user_agent

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={401: {"model": ErrorResponse}},
)

@router.post("/login", status_code=200)
async def login(
    request: LoginRequest,
    http_request: Request,
    db: Session = Depends(get_db),
):
    """
    Email/password login
    - Verify credentials
    - Return access + refresh tokens and the user summary
    """
    result = AuthService.login(
        db=db,
        email=request.email,
        password=request.password,
        remember_me=request.remember_me,
        ip_address=get_client_ip(http_request),
        user_agent=get_user_agent(http_request),
    )
    return format_response(result)


@router.post("/refresh", status_code=200)
async def refresh_tokens(
    request: RefreshTokenRequest,
    http_request: Request,
    db: Session = Depends(get_db),
):
    """Exchange a valid refresh token for a new access + refresh token pair (rotation)."""
    result = AuthService.refresh_tokens(
        db=db,
        refresh_token=request.refresh_token,
        ip_address=get_client_ip(http_request),
        user_agent=get_user_agent(http_request),
    )
    return format_response(result)


@router.post("/logout", status_code=200)
async def logout(
    request: RefreshTokenRequest,
    db: Session = Depends(get_db),
):
    """Revoke the given refresh token. Always succeeds."""
    AuthService.logout(db=db, refresh_token=request.refresh_token)
    return format_response({"message": "Logged out successfully"})


@router.post("/logout-all", status_code=200)
async def logout_all(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Revoke every refresh token of the current user."""
    AuthService.logout_all(db=db, user_id=current_user.user_id)
    return format_response({"message": "Logged out from all devices"})


@router.post("/change-password", status_code=200, responses={400: {"model": ErrorResponse}})
async def change_password(
    request: ChangePasswordRequest,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = AuthService.change_password(
        db=db,
        user_id=current_user.user_id,
        current_password=request.current_password,
        new_password=request.new_password,
    )
    return format_response(result)


@router.post(
    "/admin/reset-password",
    status_code=200,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def admin_reset_password(
    request: AdminResetPasswordRequest,
    current_admin: TokenClaims = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Admin reset of a client's password; signs the client out everywhere."""
    result = AuthService.admin_reset_password(
        db=db,
        target_user_id=request.client_id,
        new_password=request.new_password,
    )
    return format_response(result)


@router.get("/me", status_code=200)
async def me(current_user: TokenClaims = Depends(get_current_user)):
    return format_response(current_user.model_dump(mode="json"))
