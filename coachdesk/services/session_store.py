"""Persistence of refresh-token sessions.

None of these calls commit; the calling service owns the transaction so
that rotation (consume + create) lands atomically.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from coachdesk.core.security import hash_token
from coachdesk.models.session import UserSession


class SessionStore:

    @staticmethod
    def create(
        db: Session,
        token: str,
        user_id: str,
        expires_at: datetime,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> UserSession:
        session = UserSession(
            token_hash=hash_token(token),
            user_id=user_id,
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.add(session)
        db.flush()
        return session

    @staticmethod
    def find_by_token(db: Session, token: str) -> Optional[UserSession]:
        return (
            db.query(UserSession)
            .filter(UserSession.token_hash == hash_token(token))
            .first()
        )

    @staticmethod
    def delete_by_token(db: Session, token: str) -> int:
        return (
            db.query(UserSession)
            .filter(UserSession.token_hash == hash_token(token))
            .delete()
        )

    @staticmethod
    def delete_all_for_user(db: Session, user_id: str) -> int:
        return (
            db.query(UserSession)
            .filter(UserSession.user_id == user_id)
            .delete()
        )

    @staticmethod
    def consume(db: Session, token: str) -> Optional[UserSession]:
        """Delete the row for ``token`` and return it, or None if gone.

        Only one of several concurrent callers sees ``rowcount == 1``; the
        database serialises the DELETE on the row, so the others observe zero
        rows and must treat the token as already used.
        """
        session = SessionStore.find_by_token(db, token)
        if session is None:
            return None

        deleted = (
            db.query(UserSession)
            .filter(UserSession.token_hash == session.token_hash)
            .delete()
        )
        if deleted != 1:
            return None

        return session
