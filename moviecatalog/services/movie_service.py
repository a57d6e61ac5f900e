import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session, SQLModel

from moviecatalog.core.errors import EmptyQuery, InvalidPagination, NotFound, ValidationError
from moviecatalog.models.movie import REQUIRED_FIELDS, Movie, MovieInput, MovieUpdate
from moviecatalog.repositories import movie_repo

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

_REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}

@dataclass
class MovieFilter:
    """
    Sparse filter criteria, every attribute optional.
    Raw strings as they arrive from the query string.
    """
    type: Optional[str] = None
    director: Optional[str] = None
    year_from: Optional[str] = None
    year_to: Optional[str] = None
    rating: Optional[str] = None
    location: Optional[str] = None

    def kind(self) -> Optional[str]:
        if not self.type or self.type == "All":
            return None
        return self.type

    def min_rating(self) -> Optional[float]:
        # non-numeric input is ignored rather than rejected
        if self.rating is None:
            return None
        try:
            value = float(self.rating)
        except (TypeError, ValueError):
            return None
        return value if math.isfinite(value) else None

def _describe(error: Dict[str, Any]) -> Dict[str, str]:
    field = ".".join(str(part) for part in error["loc"]) or "body"
    kind = error["type"]
    label = REQUIRED_FIELDS.get(field)

    if kind == "value_error":
        message = str(error.get("ctx", {}).get("error", error["msg"]))
    elif field == "kind" and kind == "enum":
        message = "Type must be either Movie or TV Show"
    elif label and kind in _REQUIRED_ERROR_TYPES:
        message = f"{label} is required"
    elif label and kind == "string_too_long":
        message = f"{label} must be less than {error['ctx']['max_length']} characters"
    elif field == "rating":
        message = "Rating must be a number between 0 and 10"
    else:
        message = error["msg"]
    return {"field": field, "message": message}

def _validate(schema: Type[SQLModel], data: Any) -> SQLModel:
    """
    Validate a request body, collecting every failing field at once.
    """
    if isinstance(data, SQLModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(errors=[_describe(err) for err in exc.errors()])

def _check_pagination(page: int, page_size: int) -> int:
    if page < 1 or page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise InvalidPagination()
    offset = (page - 1) * page_size
    if offset > movie_repo.MAX_SQL_INT:
        raise InvalidPagination()
    return offset

def list_movies(
    db: Session, owner_id: int, page: int = 1, page_size: int = 10
) -> Tuple[List[Movie], int]:
    offset = _check_pagination(page, page_size)
    return movie_repo.find_movies(db, movie_repo.owned_by(owner_id), page_size, offset)

def get_movie(db: Session, movie_id: int, owner_id: int) -> Optional[Movie]:
    """
    Another owner's movie is reported exactly like a missing one.
    """
    return movie_repo.get_movie(db, movie_id, owner_id)

def _get_owned(db: Session, movie_id: int, owner_id: int) -> Movie:
    movie = movie_repo.get_movie(db, movie_id, owner_id)
    if movie is None:
        raise NotFound(
            "Movie not found",
            ["Movie with the specified ID does not exist or you don't have permission to access it"],
        )
    return movie

def create_movie(db: Session, data: Any, owner_id: int) -> Movie:
    movie_in = _validate(MovieInput, data)
    movie = movie_repo.create_movie(db, owner_id, movie_in.model_dump(mode="json"))
    logger.info("User %s added movie %s", owner_id, movie.id)
    return movie

def update_movie(db: Session, movie_id: int, data: Any, owner_id: int) -> Movie:
    changes = _validate(MovieUpdate, data).model_dump(mode="json", exclude_unset=True)
    movie = _get_owned(db, movie_id, owner_id)
    movie = movie_repo.update_movie(db, movie, changes)
    logger.info("User %s updated movie %s", owner_id, movie.id)
    return movie

def delete_movie(db: Session, movie_id: int, owner_id: int) -> None:
    movie = _get_owned(db, movie_id, owner_id)
    movie_repo.delete_movie(db, movie)
    logger.info("User %s deleted movie %s", owner_id, movie_id)

def search_movies(
    db: Session, term: Optional[str], owner_id: int, page: int = 1, page_size: int = 10
) -> Tuple[List[Movie], int]:
    if not term or not term.strip():
        raise EmptyQuery()
    offset = _check_pagination(page, page_size)
    conditions = movie_repo.search_conditions(owner_id, term.strip())
    return movie_repo.find_movies(db, conditions, page_size, offset)

def filter_movies(
    db: Session,
    criteria: MovieFilter,
    owner_id: int,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Movie], int]:
    offset = _check_pagination(page, page_size)
    conditions = movie_repo.filter_conditions(
        owner_id,
        kind=criteria.kind(),
        director=criteria.director,
        year_from=criteria.year_from,
        year_to=criteria.year_to,
        min_rating=criteria.min_rating(),
        location=criteria.location,
    )
    return movie_repo.find_movies(db, conditions, page_size, offset)
