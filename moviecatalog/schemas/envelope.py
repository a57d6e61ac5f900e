# moviecatalog/schemas/envelope.py
import math
from typing import Any, List, Optional

from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from moviecatalog.core.errors import CatalogError, InternalError
from moviecatalog.models.movie import Movie, MovieRead

class Pagination(SQLModel):
    page: int
    limit: int
    total: int
    totalPages: int

    @classmethod
    def of(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, totalPages=math.ceil(total / limit))

class MovieListEnvelope(SQLModel):
    success: bool = True
    data: List[MovieRead]
    pagination: Pagination
    message: str

class MovieEnvelope(SQLModel):
    success: bool = True
    data: MovieRead
    message: str

class MessageEnvelope(SQLModel):
    success: bool = True
    message: str

def to_read(movie: Movie) -> MovieRead:
    return MovieRead.model_validate(movie, from_attributes=True)

def movie_list(
    items: List[Movie], total: int, page: int, limit: int, message: str
) -> MovieListEnvelope:
    return MovieListEnvelope(
        data=[to_read(m) for m in items],
        pagination=Pagination.of(page, limit, total),
        message=message,
    )

def failure(exc: CatalogError, expose_internal: bool = True) -> JSONResponse:
    """
    Render a typed failure as {success: false, message, errors?}.
    """
    errors: Optional[List[Any]] = exc.errors or None
    if isinstance(exc, InternalError) and not expose_internal:
        body = {"success": False, "message": InternalError.default_message}
    else:
        body = {"success": False, "message": exc.message}
        if errors:
            body["errors"] = errors
    return JSONResponse(status_code=exc.status_code, content=body)

def auth_failure(exc: CatalogError, expose_internal: bool = True) -> JSONResponse:
    """
    Render a typed failure as {error: message} for the auth endpoints.
    """
    message = exc.message
    if isinstance(exc, InternalError) and not expose_internal:
        message = InternalError.default_message
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=headers)
