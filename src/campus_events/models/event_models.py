"""
# Event Models

Pydantic models for campus events: the stored document, request payloads, search filter
and the resolved response returned by every event endpoint.

## Event Lifecycle

1.  **Create**: `CreateEventRequest` is validated at the HTTP boundary, then the repository
    checks temporal ordering and organizer authority before inserting an `EventDocument`.
2.  **Update**: `UpdateEventRequest` carries only the fields the caller sent
    (`model_dump(exclude_unset=True)`); omitted fields are left unchanged.
3.  **Register / Unregister**: user ids are appended to / removed from `registrations`.
4.  **Deactivate**: `is_active` flips to `False`. The event is hidden from listings and
    default search but remains retrievable by id. Deactivation is one-way.
5.  **Delete**: hard removal.

## Resolved Responses

`EventResponse` embeds `ClubSummary` and `UserSummary` objects in place of the raw ids stored
on the document, so clients get the club name, organizer contact and registrant list in one call.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from campus_events.models.club_models import ClubSummary
from campus_events.models.user_models import UserSummary
from campus_events.utils.datetime_utils import ensure_utc, utc_now


class EventType(str, Enum):
    """Kind of campus event."""

    WORKSHOP = "workshop"
    SEMINAR = "seminar"
    MEETING = "meeting"
    COMPETITION = "competition"
    CULTURAL = "cultural"
    SPORTS = "sports"
    SOCIAL = "social"
    CONFERENCE = "conference"
    OTHER = "other"


def _normalize_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Strip, drop blanks and deduplicate while keeping first-seen order."""
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class EventDocument(BaseModel):
    """
    MongoDB document model for an event.

    **Key Fields:**
    *   **club_id**: Owning club. The organizer must be that club's faculty coordinator.
    *   **max_capacity**: Optional upper bound on `len(registrations)`.
    *   **registrations**: Ordered user ids of registrants.
    *   **is_active**: Soft-delete flag.
    """

    event_id: str = Field(..., description="Unique event identifier")
    title: str = Field(..., max_length=200, description="Event title")
    description: str = Field(..., max_length=5000, description="Event description")
    start_date: datetime = Field(..., description="Event start instant (UTC)")
    end_date: datetime = Field(..., description="Event end instant (UTC)")
    location: str = Field(..., max_length=500, description="Venue")
    club_id: str = Field(..., description="Owning club ID")
    organizer_id: str = Field(..., description="Organizer user ID")
    max_capacity: Optional[int] = Field(None, gt=0, description="Maximum number of registrants")
    event_type: EventType = Field(default=EventType.OTHER, description="Type of event")
    image_url: Optional[str] = Field(None, description="Banner image URL")
    tags: List[str] = Field(default_factory=list, description="Search tags")
    registrations: List[str] = Field(default_factory=list, description="Registered user IDs")
    is_active: bool = Field(default=True, description="Soft-delete flag")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateEventRequest(BaseModel):
    """
    Request model for creating an event.

    Ordering of `start_date`/`end_date` and the "starts in the future" rule are checked by the
    repository at creation time against the current clock.
    """

    title: str = Field(..., max_length=200, description="Event title")
    description: str = Field(..., max_length=5000, description="Detailed description")
    start_date: datetime = Field(..., description="Start instant")
    end_date: datetime = Field(..., description="End instant")
    location: str = Field(..., max_length=500, description="Venue")
    club_id: str = Field(..., description="Owning club ID")
    max_capacity: Optional[int] = Field(None, gt=0, description="Capacity limit")
    event_type: EventType = Field(default=EventType.OTHER, description="Type of event")
    image_url: Optional[str] = Field(None, description="Banner image URL")
    tags: List[str] = Field(default_factory=list, description="Search tags")

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: List[str]) -> List[str]:
        return _normalize_tags(v)


class UpdateEventRequest(BaseModel):
    """
    Partial update. Only fields present in the payload are applied.

    An explicit `null` is treated as "leave unchanged", except for `max_capacity`
    where `null` removes the capacity bound.
    """

    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=500)
    max_capacity: Optional[int] = Field(None, gt=0)
    event_type: Optional[EventType] = None
    image_url: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _normalize_tags(v)

    def changes(self) -> dict:
        """Fields to `$set`, following the null-handling rules above."""
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k == "max_capacity"}


class EventSearchFilter(BaseModel):
    """
    Combinable search predicates. Every predicate that is set must match.

    `is_active` defaults to `True`; pass `None` to search active and inactive events alike.
    """

    title: Optional[str] = Field(None, description="Case-insensitive substring of the title")
    location: Optional[str] = Field(None, description="Case-insensitive substring of the location")
    event_type: Optional[EventType] = Field(None, description="Exact event type")
    start_date: Optional[datetime] = Field(None, description="Events starting at or after this instant")
    end_date: Optional[datetime] = Field(None, description="Events ending at or before this instant")
    tags: Optional[List[str]] = Field(None, description="Match events carrying any of these tags")
    is_active: Optional[bool] = Field(True, description="Active flag to match, or None for both")

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _normalize_tags(v)


class EventResponse(BaseModel):
    """Event with club, organizer and registrants resolved."""

    event_id: str
    title: str
    description: str
    start_date: datetime
    end_date: datetime
    location: str
    club_id: str
    club: Optional[ClubSummary] = None
    organizer_id: str
    organizer: Optional[UserSummary] = None
    max_capacity: Optional[int] = None
    event_type: EventType
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    registrations: List[UserSummary] = Field(default_factory=list)
    registration_count: int = 0
    is_active: bool
    created_at: datetime
    updated_at: datetime


class DeactivateEventResponse(BaseModel):
    message: str
    event: EventResponse


class RegisterForEventRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=500, description="Optional note for the organizer")


class ReminderFailure(BaseModel):
    email: str
    error: str


class ReminderReport(BaseModel):
    """Outcome of a reminder batch."""

    event_id: str
    sent_to: int = Field(..., description="Number of recipients the reminder was delivered to")
    failed: List[ReminderFailure] = Field(default_factory=list)
    policy: str
