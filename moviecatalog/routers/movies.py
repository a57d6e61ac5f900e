# moviecatalog/routers/movies.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlmodel import Session

from moviecatalog.core.auth import CurrentUser, get_current_user
from moviecatalog.core.config import Settings, get_app_settings
from moviecatalog.core.errors import CatalogError, NotFound, ValidationError
from moviecatalog.database import get_db
from moviecatalog.repositories.movie_repo import MAX_SQL_INT
from moviecatalog.schemas.envelope import (
    MessageEnvelope,
    MovieEnvelope,
    MovieListEnvelope,
    failure,
    movie_list,
    to_read,
)
from moviecatalog.services import movie_service
from moviecatalog.services.movie_service import MovieFilter

router = APIRouter(prefix="/movies", tags=["movies"])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _to_int(raw: Optional[str], default: int) -> int:
    # missing or non-numeric falls back to the default, numbers are range-checked later
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _parse_id(raw: str) -> int:
    try:
        movie_id = int(raw)
    except ValueError:
        movie_id = 0
    if not 0 < movie_id <= MAX_SQL_INT:
        raise ValidationError("Invalid ID provided")
    return movie_id


@router.get(
    "",
    response_model=MovieListEnvelope,
    summary="List the current user's movies, newest first",
)
def list_movies(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    page_no, page_size = _to_int(page, DEFAULT_PAGE), _to_int(limit, DEFAULT_LIMIT)
    try:
        items, total = movie_service.list_movies(db, current_user.id, page_no, page_size)
    except CatalogError as exc:
        return failure(exc, not settings.is_production)
    return movie_list(items, total, page_no, page_size, "Your movies retrieved successfully")


@router.get("/search", response_model=MovieListEnvelope)
def search_movies(
    q: Optional[str] = Query(None, description="Text matched against title, director, location, budget, duration and year"),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    page_no, page_size = _to_int(page, DEFAULT_PAGE), _to_int(limit, DEFAULT_LIMIT)
    try:
        items, total = movie_service.search_movies(db, q, current_user.id, page_no, page_size)
    except CatalogError as exc:
        return failure(exc, not settings.is_production)
    return movie_list(items, total, page_no, page_size, f'Found {total} movies matching "{q.strip()}"')


@router.get("/filter", response_model=MovieListEnvelope)
def filter_movies(
    type: Optional[str] = Query(None, description='"Movie", "TV Show" or "All"'),
    director: Optional[str] = Query(None),
    yearFrom: Optional[str] = Query(None),
    yearTo: Optional[str] = Query(None),
    rating: Optional[str] = Query(None, description="Minimum rating"),
    location: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    criteria = MovieFilter(
        type=type,
        director=director,
        year_from=yearFrom,
        year_to=yearTo,
        rating=rating,
        location=location,
    )
    page_no, page_size = _to_int(page, DEFAULT_PAGE), _to_int(limit, DEFAULT_LIMIT)
    try:
        items, total = movie_service.filter_movies(db, criteria, current_user.id, page_no, page_size)
    except CatalogError as exc:
        return failure(exc, not settings.is_production)
    return movie_list(items, total, page_no, page_size, f"Found {total} movies matching your filters")


@router.get("/{movie_id}", response_model=MovieEnvelope)
def get_movie(
    movie_id: str = Path(..., description="The ID of the movie to fetch"),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        movie = movie_service.get_movie(db, _parse_id(movie_id), current_user.id)
        if movie is None:
            raise NotFound(
                "Movie not found",
                ["Movie with the specified ID does not exist or you don't have permission to view it"],
            )
    except CatalogError as exc:
        return failure(exc, not settings.is_production)
    return MovieEnvelope(data=to_read(movie), message="Movie retrieved successfully")


@router.post(
    "",
    response_model=MovieEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_movie(
    payload: Dict[str, Any] = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        movie = movie_service.create_movie(db, payload, current_user.id)
    except CatalogError as exc:
        return failure(exc, not settings.is_production)
    return MovieEnvelope(data=to_read(movie), message="Movie added to your favorites successfully")


@router.put("/{movie_id}", response_model=MovieEnvelope)
def update_movie(
    movie_id: str = Path(..., description="The ID of the movie to update"),
    payload: Dict[str, Any] = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        movie = movie_service.update_movie(db, _parse_id(movie_id), payload, current_user.id)
    except CatalogError as exc:
        return failure(exc, not settings.is_production)
    return MovieEnvelope(data=to_read(movie), message="Movie updated successfully")


@router.delete("/{movie_id}", response_model=MessageEnvelope)
def delete_movie(
    movie_id: str = Path(..., description="The ID of the movie to delete"),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Delete a movie owned by the authenticated user.
    """
    try:
        movie_service.delete_movie(db, _parse_id(movie_id), current_user.id)
    except CatalogError as exc:
        return failure(exc, not settings.is_production)
    return MessageEnvelope(message="Movie removed from your favorites successfully")
