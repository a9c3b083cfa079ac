from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator
from typing import Any, Dict, Optional
from coachdesk.core.constants import UserRole


class TokenClaims(BaseModel):
    """Identity carried by a verified access token."""
    user_id: str
    email: str
    role: UserRole
    jti: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        try:
            return cls(
                user_id=payload.get("sub"),
                email=payload.get("email"),
                role=payload.get("role"),
                jti=payload.get("jti"),
            )
        except ValidationError as e:
            raise ValueError("Malformed token claims") from e


class LoginRequest(BaseModel):
    """Email/password login request"""
    email: EmailStr
    password: str = Field(..., min_length=1)
    remember_me: bool = False


class RefreshTokenRequest(BaseModel):
    """Request carrying a refresh token (refresh and logout)"""
    refresh_token: str = Field(..., min_length=1)


class PrincipalSummary(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole


class TokenPair(BaseModel):
    """Token response (access + refresh)"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class LoginResponse(TokenPair):
    user: PrincipalSummary


class ChangePasswordRequest(BaseModel):
    """Request to change password"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)
    confirm_password: Optional[str] = None

    @field_validator('confirm_password')
    def passwords_match(cls, v, info):
        new_password = info.data.get('new_password') if info and info.data else None
        if v is not None and new_password and v != new_password:
            raise ValueError('Passwords must match')
        return v


class AdminResetPasswordRequest(BaseModel):
    client_id: str
    new_password: str = Field(..., min_length=8)
