"""
Pydantic schemas for users and authentication.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional

from app.schemas.base import CamelModel, StrictCamelModel


class UserRegisterRequest(StrictCamelModel):
    """Request schema for self-registration. Registered users are never admins."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(
        ...,
        min_length=5,
        max_length=72,  # bcrypt limit
    )
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admins adding a user, possibly another admin."""
    is_admin: bool = False


class UserUpdateRequest(StrictCamelModel):
    """Partial user update. The username cannot be changed."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None

    @field_validator("first_name", "last_name", "password", "email", "is_admin")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class UserLoginRequest(BaseModel):
    """Request schema for user login."""
    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserResponse(CamelModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserEnvelope(BaseModel):
    user: UserResponse


class UserCreateResponse(BaseModel):
    user: UserResponse
    token: TokenResponse


class UserListEnvelope(BaseModel):
    users: List[UserResponse]


class UserDeleteResponse(BaseModel):
    deleted: str
