"""
# Attendance Models

An attendance record states whether a user actually turned up to an event and who recorded it.
One record per `(user_id, event_id)`.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from campus_events.utils.datetime_utils import utc_now


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class AttendanceDocument(BaseModel):
    """MongoDB document model for an attendance record."""

    attendance_id: str = Field(..., description="Unique attendance identifier")
    user_id: str = Field(..., description="Attendee user ID")
    event_id: str = Field(..., description="Event ID")
    marked_by: str = Field(..., description="User ID of whoever recorded the attendance")
    marked_at: datetime = Field(default_factory=utc_now)
    status: AttendanceStatus = Field(default=AttendanceStatus.PRESENT)
    notes: Optional[str] = Field(None, max_length=500)


class MarkAttendanceRequest(BaseModel):
    user_id: str = Field(..., description="Attendee user ID")
    status: AttendanceStatus = Field(default=AttendanceStatus.PRESENT)
    notes: Optional[str] = Field(None, max_length=500)


class UpdateAttendanceRequest(BaseModel):
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = Field(None, max_length=500)


class AttendanceResponse(BaseModel):
    attendance_id: str
    user_id: str
    event_id: str
    marked_by: str
    marked_at: datetime
    status: AttendanceStatus
    notes: Optional[str] = None
