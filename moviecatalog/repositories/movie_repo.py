import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session, col, func, or_, select

from moviecatalog.core.errors import InternalError
from moviecatalog.models.movie import Movie

logger = logging.getLogger(__name__)

# largest value a 64-bit INTEGER column or OFFSET accepts
MAX_SQL_INT = 2**63 - 1

# columns a free-text search looks at
SEARCH_COLUMNS = (
    Movie.title,
    Movie.director,
    Movie.location,
    Movie.budget,
    Movie.duration,
    Movie.time_period,
)

def find_movies(
    db: Session,
    conditions: Sequence[ColumnElement[bool]],
    limit: int,
    offset: int,
) -> Tuple[List[Movie], int]:
    """
    Run one filtered page plus the matching total.
    Every condition carries its own bound parameters.
    """
    stmt = (
        select(Movie)
        .where(*conditions)
        .order_by(col(Movie.created_at).desc(), col(Movie.id).desc())
        .offset(offset)
        .limit(limit)
    )
    count_stmt = select(func.count()).select_from(Movie).where(*conditions)
    try:
        items = list(db.exec(stmt).all())
        total = db.exec(count_stmt).one()
    except SQLAlchemyError as exc:
        logger.exception("Movie query failed")
        raise InternalError(f"Error fetching movies: {exc}") from exc
    return items, total

def owned_by(owner_id: int) -> List[ColumnElement[bool]]:
    return [col(Movie.owner_id) == owner_id]

def search_conditions(owner_id: int, term: str) -> List[ColumnElement[bool]]:
    matches = [
        col(column).icontains(term, autoescape=True) for column in SEARCH_COLUMNS
    ]
    return owned_by(owner_id) + [or_(*matches)]

def filter_conditions(
    owner_id: int,
    kind: Optional[str] = None,
    director: Optional[str] = None,
    year_from: Optional[str] = None,
    year_to: Optional[str] = None,
    min_rating: Optional[float] = None,
    location: Optional[str] = None,
) -> List[ColumnElement[bool]]:
    conditions = owned_by(owner_id)
    if kind:
        conditions.append(col(Movie.kind) == kind)
    if director:
        conditions.append(col(Movie.director).icontains(director, autoescape=True))
    # time_period is free text: the range is a string comparison
    if year_from:
        conditions.append(col(Movie.time_period) >= year_from)
    if year_to:
        conditions.append(col(Movie.time_period) <= year_to)
    if min_rating is not None:
        conditions.append(col(Movie.rating) >= min_rating)
    if location:
        conditions.append(col(Movie.location).icontains(location, autoescape=True))
    return conditions

def get_movie(db: Session, movie_id: int, owner_id: int) -> Optional[Movie]:
    if not 0 < movie_id <= MAX_SQL_INT:
        return None
    stmt = select(Movie).where(Movie.id == movie_id, Movie.owner_id == owner_id)
    try:
        return db.exec(stmt).first()
    except SQLAlchemyError as exc:
        logger.exception("Failed to load movie %s", movie_id)
        raise InternalError(f"Error fetching movie: {exc}") from exc

def create_movie(db: Session, owner_id: int, data: Dict[str, Any]) -> Movie:
    movie = Movie(owner_id=owner_id, **data)
    db.add(movie)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create movie for user %s", owner_id)
        raise InternalError(f"Error creating movie: {exc}") from exc
    db.refresh(movie)
    return movie

def update_movie(db: Session, movie: Movie, changes: Dict[str, Any]) -> Movie:
    for key, value in changes.items():
        setattr(movie, key, value)
    movie.updated_at = datetime.now(timezone.utc)
    db.add(movie)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update movie %s", movie.id)
        raise InternalError(f"Error updating movie: {exc}") from exc
    db.refresh(movie)
    return movie

def delete_movie(db: Session, movie: Movie) -> None:
    db.delete(movie)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete movie %s", movie.id)
        raise InternalError(f"Error deleting movie: {exc}") from exc
