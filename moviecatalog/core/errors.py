# moviecatalog/core/errors.py
"""
Typed failures raised by the repositories and services.

Routers catch these and turn them into status codes and response envelopes;
nothing below the router layer knows about HTTP beyond ``status_code``.
"""
from typing import Any, List, Optional

from fastapi import status


class CatalogError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class InvalidPagination(ValidationError):
    default_message = (
        "Invalid pagination parameters. Page must be >= 1, "
        "limit must be between 1 and 100"
    )


class EmptyQuery(ValidationError):
    default_message = "Search query is required"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        super().__init__(message, errors or ["Please provide a search term"])


class NoFieldsProvided(ValidationError):
    default_message = "No valid fields to update"


class WeakPassword(ValidationError):
    default_message = "Password must be at least 6 characters long"


class InvalidCredentials(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class InvalidToken(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class NotAuthenticated(InvalidToken):
    # the only message a client ever sees for a rejected token
    default_message = "Invalid or missing authentication token"


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DuplicateUsername(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Username already exists"


class DuplicateEmail(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already exists"


class InternalError(CatalogError):
    default_message = "Internal server error"
