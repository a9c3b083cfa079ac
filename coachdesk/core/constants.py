"""Application constants such as user roles and token classes."""
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


# Roles allowed to act on records owned by other principals.
ELEVATED_ROLES = frozenset({UserRole.ADMIN})


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenError(str, Enum):
    INVALID = "invalid_token"
    EXPIRED = "token_expired"
