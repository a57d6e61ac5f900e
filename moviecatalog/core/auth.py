# moviecatalog/core/auth.py
"""
Request authentication.

A request is let through only when it carries a bearer token, the token
verifies, and the user it names still exists. Every failed step ends in the
same 401 so a caller cannot tell which one failed.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from moviecatalog.core.errors import InvalidToken, NotAuthenticated
from moviecatalog.core.security import decode_access_token
from moviecatalog.database import get_db
from moviecatalog.repositories.user_repo import get_user

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller, as handed to handlers."""
    id: int
    username: str
    email: str


def resolve_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    db: Session,
) -> Optional[CurrentUser]:
    if credentials is None or not credentials.credentials:
        logger.debug("Rejected request to %s: no bearer token", request.url.path)
        return None

    try:
        user_id = decode_access_token(credentials.credentials, request.app.state.settings)
    except InvalidToken as exc:
        logger.debug("Rejected request to %s: %s", request.url.path, exc.message)
        return None

    user = get_user(db, user_id)
    if user is None:
        logger.debug("Rejected request to %s: user %s no longer exists", request.url.path, user_id)
        return None

    return CurrentUser(id=user.id, username=user.username, email=user.email)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser:
    user = resolve_user(request, credentials, db)
    if user is None:
        raise NotAuthenticated()
    return user


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[CurrentUser]:
    return resolve_user(request, credentials, db)
