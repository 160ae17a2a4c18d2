"""
# Registration Models

A registration links one user to one event. The pair `(user_id, event_id)` is unique (see
`campus_events.database.event_indexes`); the record's identity never changes, only its status.

## Status Transitions

```
registered ──unregister──▶ cancelled ──register──▶ registered
registered ──mark attended / no-show──▶ attended | no-show
```
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from campus_events.utils.datetime_utils import utc_now


class RegistrationStatus(str, Enum):
    REGISTERED = "registered"
    CANCELLED = "cancelled"
    ATTENDED = "attended"
    NO_SHOW = "no-show"


class RegistrationDocument(BaseModel):
    """MongoDB document model for a registration."""

    registration_id: str = Field(..., description="Unique registration identifier")
    user_id: str = Field(..., description="Registered user ID")
    event_id: str = Field(..., description="Event ID")
    status: RegistrationStatus = Field(default=RegistrationStatus.REGISTERED)
    registration_date: datetime = Field(default_factory=utc_now)
    notes: Optional[str] = Field(None, max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RegistrationResponse(BaseModel):
    registration_id: str
    user_id: str
    event_id: str
    status: RegistrationStatus
    registration_date: datetime
    notes: Optional[str] = None
    updated_at: datetime


class UpdateRegistrationStatusRequest(BaseModel):
    """Only `attended` and `no-show` can be set directly; cancellation goes through unregister."""

    status: RegistrationStatus = Field(..., description="New status")
