import logging
from typing import Optional, Tuple

from pydantic import EmailStr, TypeAdapter, ValidationError as PydanticValidationError
from sqlmodel import Session

from moviecatalog.core.config import Settings, get_settings
from moviecatalog.core.errors import (
    InvalidCredentials,
    NoFieldsProvided,
    NotFound,
    ValidationError,
    WeakPassword,
)
from moviecatalog.core.security import (
    BCRYPT_MAX_BYTES,
    create_access_token,
    hash_password,
    verify_password,
)
from moviecatalog.models.user import (
    EMAIL_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    User,
)
from moviecatalog.repositories.user_repo import (
    get_user_by_username,
    get_user_by_email,
    create_user as repo_create_user,
    get_user as repo_get_user,
    update_user as repo_update_user,
    delete_user as repo_delete_user,
)

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)

def _check_username(username: Optional[str]) -> str:
    username = (username or "").strip()
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters long"
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be less than {USERNAME_MAX_LENGTH} characters"
        )
    return username

def _check_email(email: Optional[str]) -> str:
    email = (email or "").strip()
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError(f"Email must be less than {EMAIL_MAX_LENGTH} characters")
    try:
        return _email_adapter.validate_python(email)
    except PydanticValidationError:
        raise ValidationError("Please provide a valid email address")

def _check_password(password: Optional[str]) -> str:
    password = password or ""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise WeakPassword()
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise WeakPassword(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
    return password

def create_user(
    db: Session,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    settings: Optional[Settings] = None,
) -> User:
    """
    Validate and insert a new user.
    Uniqueness is left to the store: a conflicting insert comes back as
    DuplicateUsername / DuplicateEmail.
    """
    settings = settings or get_settings()
    if not username or not email or not password:
        raise ValidationError("Username, email, and password are required")

    username = _check_username(username)
    email = _check_email(email)
    password = _check_password(password)

    hashed = hash_password(password, rounds=settings.BCRYPT_ROUNDS)
    user = repo_create_user(db, username, email, hashed)
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user

def register_user(
    db: Session,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    settings: Optional[Settings] = None,
) -> Tuple[User, str]:
    settings = settings or get_settings()
    user = create_user(db, username, email, password, settings)
    token = create_access_token(user.id, user.username, settings)
    return user, token

def authenticate_user(
    db: Session,
    email: Optional[str],
    password: Optional[str],
    settings: Optional[Settings] = None,
) -> Tuple[User, str]:
    settings = settings or get_settings()
    if not email or not password:
        raise ValidationError("Email and password are required")

    # same failure for a malformed or unknown email and a wrong password
    user = find_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentials()

    logger.info("User %s logged in", user.id)
    return user, create_access_token(user.id, user.username, settings)

def _normalize_email(email: str) -> Optional[str]:
    # stored addresses went through the same normalization on the way in
    try:
        return _email_adapter.validate_python(email.strip())
    except PydanticValidationError:
        return None

def find_by_email(db: Session, email: str) -> Optional[User]:
    normalized = _normalize_email(email)
    if normalized is None:
        return None
    return get_user_by_email(db, normalized)

def find_by_username(db: Session, username: str) -> Optional[User]:
    return get_user_by_username(db, username)

def find_by_id(db: Session, user_id: int) -> Optional[User]:
    return repo_get_user(db, user_id)

def get_user(db: Session, user_id: int) -> User:
    user = repo_get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user

def update_profile(
    db: Session,
    user_id: int,
    username: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    if username is None and email is None:
        raise NoFieldsProvided()

    user = get_user(db, user_id)
    changes = {}
    if username is not None:
        changes["username"] = _check_username(username)
    if email is not None:
        changes["email"] = _check_email(email)

    user = repo_update_user(db, user, **changes)
    logger.info("Updated profile of user %s", user.id)
    return user

def change_password(
    db: Session,
    user_id: int,
    current_password: Optional[str],
    new_password: Optional[str],
    settings: Optional[Settings] = None,
) -> None:
    settings = settings or get_settings()
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")

    user = get_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise InvalidCredentials("Current password is incorrect")

    new_password = _check_password(new_password)
    hashed = hash_password(new_password, rounds=settings.BCRYPT_ROUNDS)
    repo_update_user(db, user, password_hash=hashed)
    logger.info("Changed password of user %s", user.id)

def delete_account(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    repo_delete_user(db, user)
    logger.info("Deleted account %s and its movies", user_id)
