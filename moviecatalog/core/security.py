# moviecatalog/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from moviecatalog.core.config import Settings, get_settings
from moviecatalog.core.errors import InvalidToken

BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    """
    One-way salted bcrypt hash of a plain-text password.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # checkpw raises on malformed hashes and, on newer bcrypt releases,
    # on passwords over 72 bytes; both are plain mismatches here
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False


def create_access_token(
    user_id: int,
    username: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    if username is not None:
        payload["username"] = username
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> int:
    """
    Verify signature and expiry and return the user id the token was issued for.
    Raises InvalidToken for anything else.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token has expired")
    except jwt.InvalidTokenError:
        raise InvalidToken("Invalid token")

    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidToken("Invalid token subject")
