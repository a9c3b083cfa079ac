"""Service layer package."""

__all__ = [
    "access_guard",
    "auth_service",
    "session_store",
    "user_service",
]
