"""
Pydantic models for the Campus Events API.

| Module | Contents |
|--------|----------|
| `event_models` | Events, search filter, reminder report |
| `club_models` | Clubs and club summaries |
| `user_models` | Users and user summaries |
| `registration_models` | Event registrations |
| `attendance_models` | Attendance records |
"""

from campus_events.models.attendance_models import (
    AttendanceDocument,
    AttendanceResponse,
    AttendanceStatus,
    MarkAttendanceRequest,
    UpdateAttendanceRequest,
)
from campus_events.models.club_models import ClubCategory, ClubDocument, ClubResponse, ClubSummary, CreateClubRequest
from campus_events.models.event_models import (
    CreateEventRequest,
    DeactivateEventResponse,
    EventDocument,
    EventResponse,
    EventSearchFilter,
    EventType,
    RegisterForEventRequest,
    ReminderFailure,
    ReminderReport,
    UpdateEventRequest,
)
from campus_events.models.registration_models import (
    RegistrationDocument,
    RegistrationResponse,
    RegistrationStatus,
    UpdateRegistrationStatusRequest,
)
from campus_events.models.user_models import CreateUserRequest, UserDocument, UserResponse, UserRole, UserSummary

__all__ = [
    "AttendanceDocument",
    "AttendanceResponse",
    "AttendanceStatus",
    "MarkAttendanceRequest",
    "UpdateAttendanceRequest",
    "ClubCategory",
    "ClubDocument",
    "ClubResponse",
    "ClubSummary",
    "CreateClubRequest",
    "CreateEventRequest",
    "DeactivateEventResponse",
    "EventDocument",
    "EventResponse",
    "EventSearchFilter",
    "EventType",
    "RegisterForEventRequest",
    "ReminderFailure",
    "ReminderReport",
    "UpdateEventRequest",
    "RegistrationDocument",
    "RegistrationResponse",
    "RegistrationStatus",
    "UpdateRegistrationStatusRequest",
    "CreateUserRequest",
    "UserDocument",
    "UserResponse",
    "UserRole",
    "UserSummary",
]
