"""Pydantic schemas for User."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    avatar_url: str | None = None
    phone: str | None = Field(None, max_length=30)
    university: str | None = Field(None, max_length=200)


class UserCreate(UserBase):
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserResponse(UserBase):
    id: UUID
    email: str | None = None  # Only in own profile
    role: str = "user"
    is_verified: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}


class UserPublic(BaseModel):
    """Author card shown next to posts and comments."""
    id: UUID
    full_name: str
    avatar_url: str | None = None
    role: str = "user"

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class TokenRefresh(BaseModel):
    refresh_token: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
