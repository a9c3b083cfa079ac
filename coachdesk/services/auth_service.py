from sqlalchemy.orm import Session
from coachdesk.models.user import User
from coachdesk.core.security import (
    hash_password, verify_password, create_access_token,
    create_refresh_token, decode_refresh_token,
)
from coachdesk.core.config import settings
from coachdesk.core.constants import TokenError
from coachdesk.services.session_store import SessionStore
from coachdesk.utils.helpers import utcnow
from datetime import timedelta
from typing import Optional
from coachdesk.utils.errors import (
    InvalidCredentialsError, AccountDisabledError, InvalidTokenError,
    TokenExpiredError, TokenRevokedError, NotFoundError,
)
from starlette import status
import logging

logger = logging.getLogger(__name__)

_dummy_hash: Optional[str] = None


def _timing_dummy_hash() -> str:
    """Hash verified against when the email is unknown, so both paths cost the same."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("coachdesk-timing-equaliser")
    return _dummy_hash


def principal_summary(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
    }


class AuthService:

    @staticmethod
    def _issue_tokens(
        db: Session,
        user: User,
        refresh_lifetime: timedelta,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> dict:
        access_token, _ = create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role,
        )
        refresh_token, _ = create_refresh_token(
            user_id=user.id,
            email=user.email,
            role=user.role,
            expires_delta=refresh_lifetime,
        )
        SessionStore.create(
            db,
            token=refresh_token,
            user_id=user.id,
            expires_at=utcnow() + refresh_lifetime,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    @staticmethod
    def login(
        db: Session,
        email: str,
        password: str,
        remember_me: bool = False,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> dict:
        """
        Email/password login
        - Verify credentials (password first, then the active flag)
        - Create access & refresh tokens
        - Track session (7 days, or 30 with remember_me)
        """

        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if user is None:
            verify_password(password, _timing_dummy_hash())
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("Login failed: bad password for user %s", user.id)
            raise InvalidCredentialsError()

        if not user.active:
            logger.info("Login refused: user %s is deactivated", user.id)
            raise AccountDisabledError()

        days = settings.REFRESH_TOKEN_REMEMBER_DAYS if remember_me else settings.REFRESH_TOKEN_EXPIRE_DAYS
        tokens = AuthService._issue_tokens(
            db,
            user,
            refresh_lifetime=timedelta(days=days),
            ip_address=ip_address,
            user_agent=user_agent,
        )

        user.last_login = utcnow()
        db.commit()

        logger.info("User %s logged in (remember_me=%s)", user.id, remember_me)
        return {**tokens, "user": principal_summary(user)}

    @staticmethod
    def refresh_tokens(
        db: Session,
        refresh_token: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> dict:
        """
        Exchange a refresh token for a new access + refresh pair.
        - Validate refresh JWT, then the stored session row
        - Consume the old row and store the new one (mandatory rotation)
        """

        payload, error = decode_refresh_token(refresh_token)
        if error is TokenError.EXPIRED:
            raise TokenExpiredError("Refresh token expired")
        if payload is None:
            raise InvalidTokenError("Invalid refresh token")

        session = SessionStore.find_by_token(db, refresh_token)
        if session is None:
            logger.warning("Refresh refused: token for user %s is not live", payload.get("sub"))
            raise TokenRevokedError()

        if session.is_expired():
            SessionStore.delete_by_token(db, refresh_token)
            db.commit()
            raise TokenExpiredError("Refresh token expired")

        user = db.query(User).filter(User.id == session.user_id).first()
        if user is None:
            raise TokenRevokedError()
        if not user.active:
            raise AccountDisabledError()

        if SessionStore.consume(db, refresh_token) is None:
            # another request rotated this token first
            db.rollback()
            logger.warning("Refresh refused: token for user %s was consumed concurrently", user.id)
            raise TokenRevokedError()

        tokens = AuthService._issue_tokens(
            db,
            user,
            refresh_lifetime=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
            ip_address=ip_address or session.ip_address,
            user_agent=user_agent or session.user_agent,
        )
        db.commit()

        logger.info("Rotated refresh token for user %s", user.id)
        return tokens

    @staticmethod
    def logout(db: Session, refresh_token: str) -> None:
        """Revoke a single refresh token. Unknown tokens are ignored."""
        deleted = SessionStore.delete_by_token(db, refresh_token)
        db.commit()
        if deleted:
            logger.info("Session revoked by logout")

    @staticmethod
    def logout_all(db: Session, user_id: str) -> int:
        """Revoke every refresh token of a user."""
        deleted = SessionStore.delete_all_for_user(db, user_id)
        db.commit()
        logger.info("Revoked %d session(s) for user %s", deleted, user_id)
        return deleted

    @staticmethod
    def change_password(
        db: Session,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> dict:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError(
                "Current password is incorrect",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        user.password_hash = hash_password(new_password)
        db.flush()

        # force re-authentication everywhere
        AuthService.logout_all(db, user.id)
        return {"message": "Password changed successfully"}

    @staticmethod
    def admin_reset_password(db: Session, target_user_id: str, new_password: str) -> dict:
        """Set a new password without the current one. Callers must be admins."""
        user = db.query(User).filter(User.id == target_user_id).first()
        if not user:
            raise NotFoundError("User not found")

        user.password_hash = hash_password(new_password)
        db.flush()

        AuthService.logout_all(db, user.id)
        logger.info("Password reset by admin for user %s", user.id)
        return {"message": "Password reset successfully"}
