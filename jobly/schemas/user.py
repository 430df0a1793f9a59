"""
Pydantic schemas for users and authentication.

No response schema includes the password hash.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional


class UserCreate(BaseModel):
    """Request schema for registration (POST /users, POST /register)."""
    username: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(
        ...,
        min_length=1,
        max_length=72,  # bcrypt limit
    )
    photo_url: Optional[str] = None


class UserUpdate(BaseModel):
    """Schema for PATCH /users/{username}; only fields sent are updated."""
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1, max_length=72)
    photo_url: Optional[str] = None

    @field_validator("username", "first_name", "last_name", "email", "password")
    @classmethod
    def not_null(cls, v):
        """Columns that are NOT NULL may be omitted, but not set to null."""
        if v is None:
            raise ValueError("may not be null")
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    token: str


class UserSummary(BaseModel):
    username: str
    first_name: str
    last_name: str
    email: str


class UserResponse(UserSummary):
    """User profile response (no sensitive data)."""
    photo_url: Optional[str] = None
    is_admin: bool = False


class UserListResponse(BaseModel):
    users: List[UserSummary]


class UserEnvelope(BaseModel):
    user: UserResponse
