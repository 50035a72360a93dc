from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.schemas.base import CamelModel
from app.core.constants import RoleEnum, FULL_NAME_MIN_LENGTH, FULL_NAME_MAX_LENGTH, PASSWORD_MIN_LENGTH, BIO_MAX_LENGTH

class UserBase(CamelModel):
    """Base user schema with common fields."""
    full_name: str = Field(..., min_length=FULL_NAME_MIN_LENGTH, max_length=FULL_NAME_MAX_LENGTH)
    email: EmailStr

class UserCreate(UserBase):
    """Schema for registering a new user, includes password."""
    password: str
    role: RoleEnum = RoleEnum.STUDENT

    @field_validator("full_name")
    def strip_full_name(cls, v):
        if not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip()

    @field_validator("password")
    def validate_password(cls, v):
        if not v or not v.strip():
            raise ValueError("Password cannot be empty or contain only whitespace.")
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
        return v

class UserUpdate(CamelModel):
    """Schema for updating a user's profile."""
    full_name: Optional[str] = Field(None, min_length=FULL_NAME_MIN_LENGTH, max_length=FULL_NAME_MAX_LENGTH)
    bio: Optional[str] = Field(None, max_length=BIO_MAX_LENGTH)
    avatar: Optional[str] = None

    @field_validator("full_name")
    def not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Full name cannot be empty")
        return v

class RoleUpdate(CamelModel):
    role: RoleEnum

class User(UserBase):
    """Main user schema for reading user data."""
    id: int
    role: RoleEnum
    avatar: Optional[str] = None
    bio: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

class UserSummary(CamelModel):
    id: int
    full_name: str
    avatar: Optional[str] = None

class UserStatusUpdate(CamelModel):
    is_active: bool

class PublicProfile(CamelModel):
    """What anyone may see about a user."""
    id: int
    full_name: str
    role: RoleEnum
    avatar: Optional[str] = None
    bio: Optional[str] = None

class UserPagination(CamelModel):
    current_page: int
    total_pages: int
    total_users: int
    limit: int

class UserList(CamelModel):
    users: List[User]
    pagination: UserPagination
