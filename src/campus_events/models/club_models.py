"""
# Club Models

Pydantic models for campus clubs.

A club has a single **faculty coordinator**, the only user allowed to create events under it.
The club keeps a non-owning list of its event ids in `events`.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from campus_events.utils.datetime_utils import utc_now


class ClubCategory(str, Enum):
    ACADEMIC = "academic"
    TECHNICAL = "technical"
    CULTURAL = "cultural"
    SPORTS = "sports"
    SOCIAL = "social"
    ARTS = "arts"
    OTHER = "other"


class ClubDocument(BaseModel):
    """MongoDB document model for a club."""

    club_id: str = Field(..., description="Unique club identifier")
    name: str = Field(..., min_length=3, max_length=100, description="Club name")
    description: Optional[str] = Field(None, max_length=1000, description="Club description")
    category: ClubCategory = Field(default=ClubCategory.OTHER, description="Club category")
    faculty_coordinator_id: str = Field(..., description="User ID of the faculty coordinator")
    events: List[str] = Field(default_factory=list, description="IDs of events hosted by the club")
    is_active: bool = Field(default=True, description="Soft-delete flag")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateClubRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=100, description="Club name")
    description: Optional[str] = Field(None, max_length=1000, description="Club description")
    category: ClubCategory = Field(default=ClubCategory.OTHER, description="Club category")
    faculty_coordinator_id: str = Field(..., description="User ID of the faculty coordinator")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Club name must be at least 3 characters")
        return v


class ClubResponse(BaseModel):
    club_id: str
    name: str
    description: Optional[str] = None
    category: ClubCategory
    faculty_coordinator_id: str
    events: List[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ClubSummary(BaseModel):
    """Reference to a club as embedded in event responses."""

    club_id: str
    name: str
    category: ClubCategory
