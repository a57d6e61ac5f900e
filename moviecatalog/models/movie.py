# moviecatalog/models/movie.py
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
from pydantic import field_validator
from sqlmodel import SQLModel, Field, Relationship

class MediaKind(str, Enum):
    MOVIE   = "Movie"
    TV_SHOW = "TV Show"

# wire name -> label used in validation messages
REQUIRED_FIELDS = {
    "title":       "Title",
    "kind":        "Type",
    "director":    "Director",
    "budget":      "Budget",
    "location":    "Location",
    "duration":    "Duration",
    "time_period": "Year/Time",
}
TEXT_FIELDS = [name for name in REQUIRED_FIELDS if name != "kind"] + ["description"]

class MovieBase(SQLModel):
    title: str = Field(max_length=255, nullable=False)
    kind: str = Field(max_length=20, nullable=False, index=True)
    director: str = Field(max_length=255, nullable=False)
    budget: str = Field(max_length=100, nullable=False)
    location: str = Field(max_length=255, nullable=False)
    duration: str = Field(max_length=100, nullable=False)
    time_period: str = Field(max_length=100, nullable=False, index=True)
    description: Optional[str] = None
    rating: Optional[float] = None
    poster_url: Optional[str] = Field(default=None, max_length=500)

class Movie(MovieBase, table=True):
    __tablename__ = "movies"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # forward-reference to User
    owner: Optional["User"] = Relationship(back_populates="movies")

class MovieRead(MovieBase):
    id: int
    owner_id: int
    created_at: datetime
    updated_at: datetime


def _strip(value):
    return value.strip() if isinstance(value, str) else value

def _check_poster_url(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("Poster URL must be a valid URL")
    return value

class MovieInput(SQLModel):
    """
    Body of a create request. Every required text field must be non-empty
    once surrounding whitespace is dropped.
    """
    title: str = Field(min_length=1, max_length=255)
    kind: MediaKind
    director: str = Field(min_length=1, max_length=255)
    budget: str = Field(min_length=1, max_length=100)
    location: str = Field(min_length=1, max_length=255)
    duration: str = Field(min_length=1, max_length=100)
    time_period: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=10)
    poster_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator(*TEXT_FIELDS, "poster_url", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator("description")
    @classmethod
    def blank_description_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("poster_url")
    @classmethod
    def poster_url_is_http(cls, value: Optional[str]) -> Optional[str]:
        return _check_poster_url(value)

class MovieUpdate(SQLModel):
    """
    Body of an update request. Omitted fields keep their stored value;
    optional fields can be cleared with null, required ones cannot.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    kind: Optional[MediaKind] = None
    director: Optional[str] = Field(default=None, min_length=1, max_length=255)
    budget: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    duration: Optional[str] = Field(default=None, min_length=1, max_length=100)
    time_period: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=10)
    poster_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator(*TEXT_FIELDS, "poster_url", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def required_not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{REQUIRED_FIELDS[info.field_name]} is required")
        return value

    @field_validator("description")
    @classmethod
    def blank_description_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("poster_url")
    @classmethod
    def poster_url_is_http(cls, value: Optional[str]) -> Optional[str]:
        return _check_poster_url(value)
