from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from coachdesk import __version__
from coachdesk.core.config import settings
from coachdesk.core.logger import setup_logging
from coachdesk.middleware.cors import configure_cors
from coachdesk.middleware.logging import RequestLoggerMiddleware
from coachdesk.middleware import error_handler
from coachdesk.utils.errors import AppError

# Routers
from coachdesk.routers import auth as auth_router
from coachdesk.routers import users as users_router
from coachdesk.routers import health as health_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    setup_logging()
    description = (
        f"{settings.APP_NAME} API.\n\n"
        "Authentication, token rotation and access control for the coaching portal."
    )

    openapi_tags = [
        {"name": "authentication", "description": "Login, token refresh, logout and password management."},
        {"name": "users", "description": "Client provisioning and profile management."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title=f"{settings.APP_NAME} Backend API",
        version=__version__,
        description=description,
        openapi_tags=openapi_tags,
    )

    # Middleware
    configure_cors(app)
    app.add_middleware(RequestLoggerMiddleware)

    # Exception handlers
    app.add_exception_handler(AppError, error_handler.app_error_handler)
    app.add_exception_handler(StarletteHTTPException, error_handler.http_exception_handler)
    app.add_exception_handler(RequestValidationError, error_handler.validation_exception_handler)

    # Include routers
    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(users_router.router)

    return app


app = create_app()
