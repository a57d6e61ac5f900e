import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from moviecatalog.core.errors import DuplicateEmail, DuplicateUsername, InternalError
from moviecatalog.models.user import User

logger = logging.getLogger(__name__)

# fragments of the unique-violation message each backend produces
_EMAIL_MARKERS = ("users.email", "ix_users_email", "(email)")
_USERNAME_MARKERS = ("users.username", "ix_users_username", "(username)")

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    stmt = select(User).where(User.username == username)
    return db.exec(stmt).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    stmt = select(User).where(User.email == email)
    return db.exec(stmt).first()

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)

def _duplicate_error(db: Session, exc: IntegrityError, email: Optional[str]):
    """
    Map a unique-constraint violation to the field that caused it.
    """
    message = str(exc.orig).lower()
    if any(marker in message for marker in _EMAIL_MARKERS):
        return DuplicateEmail()
    if any(marker in message for marker in _USERNAME_MARKERS):
        return DuplicateUsername()
    # unknown driver wording: the row that won the race is committed by now
    if email is not None and get_user_by_email(db, email) is not None:
        return DuplicateEmail()
    return DuplicateUsername()

def _save(db: Session, user: User, email: Optional[str]) -> User:
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _duplicate_error(db, exc, email) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to save user")
        raise InternalError(f"Error saving user: {exc}") from exc
    db.refresh(user)
    return user

def create_user(db: Session, username: str, email: str, password_hash: str) -> User:
    db_user = User(
        username=username,
        email=email,
        password_hash=password_hash,
    )
    return _save(db, db_user, email)

def update_user(db: Session, user: User, **fields) -> User:
    for key, value in fields.items():
        setattr(user, key, value)
    user.updated_at = datetime.now(timezone.utc)
    return _save(db, user, fields.get("email"))

def delete_user(db: Session, user: User) -> None:
    # the ORM cascade removes owned movies; stores without enforced
    # foreign keys (sqlite by default) would otherwise keep them
    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete user %s", user.id)
        raise InternalError(f"Error deleting user: {exc}") from exc
