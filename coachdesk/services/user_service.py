"""Principal administration: provisioning, profile updates and deactivation."""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from coachdesk.core.constants import UserRole
from coachdesk.core.security import hash_password
from coachdesk.models.user import User
from coachdesk.services.session_store import SessionStore
from coachdesk.utils.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def get_client(db: Session, client_id: str) -> User:
        """Client-scoped lookup; admin rows are invisible through the client routes."""
        user = (
            db.query(User)
            .filter(User.id == client_id, User.role == UserRole.CLIENT)
            .first()
        )
        if not user:
            raise NotFoundError("Client not found")
        return user

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def create_user(
        db: Session,
        email: str,
        name: str,
        password: str,
        role: UserRole = UserRole.CLIENT,
    ) -> User:
        if UserService.get_by_email(db, email):
            raise ConflictError("Email already in use")

        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role,
            active=True,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # lost a race with a concurrent create for the same email
            db.rollback()
            raise ConflictError("Email already in use")
        db.refresh(user)

        logger.info("Provisioned %s user %s", role.value, user.id)
        return user

    @staticmethod
    def list_clients(db: Session) -> list[User]:
        return (
            db.query(User)
            .filter(User.role == UserRole.CLIENT)
            .order_by(User.created_at.desc())
            .all()
        )

    @staticmethod
    def update_client(
        db: Session,
        user_id: str,
        name: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> User:
        """Admin update. Deactivating an account revokes all of its sessions."""
        user = UserService.get_client(db, user_id)

        if name is not None:
            user.name = name
        if active is not None and active != user.active:
            user.active = active
            if not active:
                revoked = SessionStore.delete_all_for_user(db, user.id)
                logger.info("Deactivated user %s, revoked %d session(s)", user.id, revoked)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_profile(db: Session, user_id: str, name: Optional[str] = None) -> User:
        """Self-service update; role and active flag are not editable here."""
        user = UserService.get_user(db, user_id)
        if name is not None:
            user.name = name
        db.commit()
        db.refresh(user)
        return user
