"""Per-request authentication and authorization checks.

These are plain functions over the request's pieces so they can be used
outside FastAPI; ``coachdesk.dependencies.auth`` wraps them as dependencies.
"""
import logging
from typing import Iterable, Optional
from sqlalchemy.orm import Session
from coachdesk.core.constants import ELEVATED_ROLES, TokenError, UserRole
from coachdesk.core.security import decode_access_token
from coachdesk.models.user import User
from coachdesk.schemas.auth import TokenClaims
from coachdesk.utils.errors import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


class AccessGuard:

    @staticmethod
    def authenticate(db: Session, authorization: Optional[str]) -> TokenClaims:
        token = extract_bearer_token(authorization)
        if token is None:
            raise UnauthenticatedError("No token provided", reason="missing_token")

        payload, error = decode_access_token(token)
        if error is TokenError.EXPIRED:
            raise UnauthenticatedError("Token expired", reason=TokenError.EXPIRED.value)
        if payload is None:
            raise UnauthenticatedError("Invalid token", reason=TokenError.INVALID.value)

        try:
            claims = TokenClaims.from_payload(payload)
        except ValueError:
            raise UnauthenticatedError("Invalid token", reason=TokenError.INVALID.value)

        # the account may have been disabled after the token was minted
        user = db.query(User.id, User.active).filter(User.id == claims.user_id).first()
        if user is None or not user.active:
            logger.warning("Access token for user %s rejected: user missing or inactive", claims.user_id)
            raise UnauthenticatedError("User not found or inactive", reason="account_disabled")

        return claims

    @staticmethod
    def require_role(claims: Optional[TokenClaims], allowed: Iterable[UserRole]) -> TokenClaims:
        if claims is None:
            raise UnauthenticatedError("Not authenticated", reason="missing_principal")
        if claims.role not in set(allowed):
            logger.info("User %s with role %s denied", claims.user_id, claims.role.value)
            raise ForbiddenError("Insufficient permissions")
        return claims

    @staticmethod
    def require_ownership(claims: Optional[TokenClaims], owner_id: Optional[str]) -> TokenClaims:
        if claims is None:
            raise UnauthenticatedError("Not authenticated", reason="missing_principal")
        if claims.role in ELEVATED_ROLES:
            return claims
        if owner_id is not None and str(owner_id) != claims.user_id:
            logger.info("User %s denied access to records of %s", claims.user_id, owner_id)
            raise ForbiddenError("Cannot access another user's data")
        return claims
