# moviecatalog/schemas/auth.py
from typing import Optional
from sqlmodel import SQLModel
from moviecatalog.models.user import UserRead

# request bodies: fields are checked by the user service so that a missing
# one produces the same {"error": ...} answer as an invalid one

class RegisterRequest(SQLModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class LoginRequest(SQLModel):
    email: Optional[str] = None
    password: Optional[str] = None

class ProfileUpdateRequest(SQLModel):
    username: Optional[str] = None
    email: Optional[str] = None

class PasswordChangeRequest(SQLModel):
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None

# responses

class AuthResponse(SQLModel):
    message: str
    user: UserRead
    token: str

class ProfileResponse(SQLModel):
    user: UserRead

class ProfileUpdateResponse(SQLModel):
    message: str
    user: UserRead

class MessageResponse(SQLModel):
    message: str

class VerifyResponse(SQLModel):
    valid: bool
    user: UserRead
