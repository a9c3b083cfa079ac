"""Refresh-token sessions.

One row per live refresh token. The row, not the JWT, decides whether a
refresh token may still be exchanged.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base
from coachdesk.utils.helpers import utcnow


class UserSession(Base):
    __tablename__ = "user_sessions"

    # sha256 of the refresh token; the raw token is never stored
    token_hash = Column(String(64), primary_key=True)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime, nullable=False)

    # Session metadata
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="sessions")

    def is_expired(self, now=None) -> bool:
        return self.expires_at <= (now or utcnow())
