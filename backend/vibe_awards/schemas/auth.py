"""Auth Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """User registration request."""
    email: EmailStr
    username: str = Field(min_length=2, max_length=50)
    password: str = Field(min_length=8, max_length=128)
    role: Literal["developer", "voter"] = "developer"

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not any(c.isalpha() for c in v):
            raise ValueError("Password must contain a letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain a number")
        return v


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public user info response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: str
    username: str
    email: str
    role: str
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    website_url: Optional[str] = None
    twitter_handle: Optional[str] = None
    linkedin_url: Optional[str] = None
    created_at: datetime


class AuthResponse(BaseModel):
    """Register/login response carrying the bearer token."""
    message: str
    token: str
    user: UserResponse
