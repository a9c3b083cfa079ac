from sqlalchemy import Column, String, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship, validates
from coachdesk.core.constants import UserRole
from coachdesk.core.database import Base
from coachdesk.models.base import IDMixin, TimestampMixin


class User(IDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Account status
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        index=True,
        nullable=False,
        default=UserRole.CLIENT,
    )
    active = Column(Boolean, default=True, nullable=False, index=True)
    last_login = Column(DateTime, nullable=True)

    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User {self.email}>"

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value
