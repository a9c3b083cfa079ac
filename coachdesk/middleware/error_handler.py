"""Global error handlers for the application."""
import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from coachdesk.core.config import settings
from coachdesk.utils.errors import AppError, ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)

_GENERIC_MESSAGES = {
    UnauthenticatedError.code: "Unauthorized",
    ForbiddenError.code: "Forbidden",
}


def public_message(exc: AppError) -> str:
    """Message safe to show to the caller.

    Production responses for guard failures only name the kind. An expired
    access token keeps its message so clients know to refresh.
    """
    if not settings.is_production or exc.code not in _GENERIC_MESSAGES:
        return exc.detail
    if isinstance(exc, UnauthenticatedError) and exc.reason == "token_expired":
        return exc.detail
    return _GENERIC_MESSAGES[exc.code]


async def app_error_handler(request: Request, exc: AppError):
    reason = getattr(exc, "reason", None)
    logger.info(
        "%s %s rejected: %s%s",
        request.method,
        request.url.path,
        exc.code,
        f" ({reason})" if reason else "",
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"code": exc.code, "message": public_message(exc)},
        },
        headers=getattr(exc, "headers", None),
    )


async def http_exception_handler(request: Request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": {"code": "HTTP_ERROR", "message": exc.detail}},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"path": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {"code": "VALIDATION_ERROR", "message": "Validation failed", "details": details},
        },
    )
