# moviecatalog/models/user.py
from typing import Optional, List
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field, Relationship
from pydantic import EmailStr

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6

class UserBase(SQLModel):
    username: str = Field(index=True, nullable=False, unique=True, max_length=USERNAME_MAX_LENGTH)
    email: str = Field(index=True, nullable=False, unique=True, max_length=EMAIL_MAX_LENGTH)

class UserRead(SQLModel):
    id: int
    username: str
    email: EmailStr
    created_at: datetime

class User(UserBase, table=True):
    __tablename__ = "users"
    # ids of deleted accounts are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # forward-reference as string, no direct import of Movie
    movies: List["Movie"] = Relationship(
        back_populates="owner",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    def to_read(self) -> UserRead:
        return UserRead.model_validate(self, from_attributes=True)
