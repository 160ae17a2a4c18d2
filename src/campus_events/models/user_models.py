"""
# User Models

Pydantic models for campus users. Users are referenced by events (organizer, registrants),
clubs (faculty coordinator), registrations and attendance records.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from campus_events.utils.datetime_utils import utc_now


class UserRole(str, Enum):
    """Role of a user on campus."""

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class UserDocument(BaseModel):
    """MongoDB document model for a user."""

    user_id: str = Field(..., description="Unique user identifier")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Unique email address")
    role: UserRole = Field(default=UserRole.STUDENT, description="Campus role")
    department: Optional[str] = Field(None, max_length=100, description="Department")
    created_at: datetime = Field(default_factory=utc_now)


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Email address")
    role: UserRole = Field(default=UserRole.STUDENT, description="Campus role")
    department: Optional[str] = Field(None, max_length=100, description="Department")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class UserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    role: UserRole
    department: Optional[str] = None
    created_at: datetime


class UserSummary(BaseModel):
    """Reference to a user as embedded in event responses."""

    user_id: str
    name: str
    email: str
