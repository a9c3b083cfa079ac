"""Custom error definitions for API exceptions.

Every error carries a stable ``code`` so clients can branch on it without
parsing messages. The access guard collapses the token and account errors
into ``UnauthenticatedError`` and keeps the original kind in ``reason``.
"""
from typing import Optional
from fastapi import HTTPException
from starlette import status


class AppError(HTTPException):
    code: str = "ERROR"
    default_detail: str = "Request failed"
    default_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(
            status_code=status_code or self.default_status,
            detail=detail or self.default_detail,
        )


class InvalidCredentialsError(AppError):
    code = "INVALID_CREDENTIALS"
    default_detail = "Invalid email or password"
    default_status = status.HTTP_401_UNAUTHORIZED


class AccountDisabledError(AppError):
    code = "ACCOUNT_DISABLED"
    default_detail = "Account is deactivated"
    default_status = status.HTTP_401_UNAUTHORIZED


class InvalidTokenError(AppError):
    code = "INVALID_TOKEN"
    default_detail = "Invalid token"
    default_status = status.HTTP_401_UNAUTHORIZED


class TokenExpiredError(AppError):
    code = "TOKEN_EXPIRED"
    default_detail = "Token expired"
    default_status = status.HTTP_401_UNAUTHORIZED


class TokenRevokedError(AppError):
    code = "TOKEN_REVOKED"
    default_detail = "Refresh token revoked or already used"
    default_status = status.HTTP_401_UNAUTHORIZED


class UnauthenticatedError(AppError):
    code = "UNAUTHENTICATED"
    default_detail = "Not authenticated"
    default_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: Optional[str] = None, reason: str = "missing_token"):
        super().__init__(detail=detail)
        self.reason = reason
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    default_detail = "Insufficient permissions"
    default_status = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    code = "NOT_FOUND"
    default_detail = "Resource not found"
    default_status = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    code = "CONFLICT"
    default_detail = "Resource already exists"
    default_status = status.HTTP_409_CONFLICT
