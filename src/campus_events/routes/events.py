"""
# Event Routes

REST endpoints for campus events, registrations, attendance and reminders.

## API Endpoints

### Events
- `GET /api/events` - List events (active only by default)
- `GET /api/events/search` - Search by title, location, type, dates and tags (`is_active=true|false|any`)
- `GET /api/events/upcoming` - Next active events
- `GET /api/events/{event_id}` - Event details
- `POST /api/events` - Create an event (acting user must be the club's faculty coordinator)
- `PUT /api/events/{event_id}` - Partial update
- `DELETE /api/events/{event_id}` - Hard delete
- `PATCH /api/events/{event_id}/deactivate` - Soft delete

### Registration
- `POST /api/events/attendees/{event_id}` - Register the acting user
- `DELETE /api/events/attendees/{event_id}` - Unregister the acting user
- `GET /api/events/{event_id}/registrations` - Registration records
- `PATCH /api/events/{event_id}/registrations/{user_id}` - Mark attended / no-show

### Attendance
- `POST /api/events/{event_id}/attendance` - Record attendance
- `PUT /api/events/{event_id}/attendance/{user_id}` - Amend attendance
- `GET /api/events/{event_id}/attendance` - Attendance records

### Reminders
- `POST /api/events/reminder/{event_id}` - Email every registrant

Domain errors raised by the services are mapped 1:1 to HTTP statuses via `to_http_exception`;
anything else is logged and returned as a generic 500.
"""

from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from campus_events.errors import CampusEventsError, to_http_exception
from campus_events.managers.logging_manager import get_logger
from campus_events.models.attendance_models import AttendanceResponse, MarkAttendanceRequest, UpdateAttendanceRequest
from campus_events.models.event_models import (
    CreateEventRequest,
    DeactivateEventResponse,
    EventResponse,
    EventSearchFilter,
    EventType,
    RegisterForEventRequest,
    ReminderReport,
    UpdateEventRequest,
)
from campus_events.models.registration_models import RegistrationResponse, UpdateRegistrationStatusRequest
from campus_events.routes.dependencies import (
    get_attendance_service,
    get_current_user_id,
    get_event_repository,
    get_registration_service,
    get_reminder_service,
)
from campus_events.services.attendance_service import AttendanceService
from campus_events.services.event_repository import EventRepository
from campus_events.services.registration_service import RegistrationService
from campus_events.services.reminder_service import ReminderService

logger = get_logger(prefix="[Event Routes]")

router = APIRouter(prefix="/api/events", tags=["Events"])

ACTIVE_FILTERS = {"true": True, "false": False, "any": None}


def _split_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Accept both `?tags=a&tags=b` and `?tags=a,b`."""
    if not tags:
        return None
    return [part for tag in tags for part in tag.split(",")]


# ============================================================================
# Event queries
# ============================================================================


@router.get("", response_model=List[EventResponse])
async def list_events(
    active_only: bool = Query(True, description="Only return active events"),
    repository: EventRepository = Depends(get_event_repository),
):
    """List events ordered by start date."""
    try:
        return await repository.list(active_only=active_only)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list events: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list events")


@router.get("/search", response_model=List[EventResponse])
async def search_events(
    title: Optional[str] = Query(None, description="Substring of the title (case-insensitive)"),
    location: Optional[str] = Query(None, description="Substring of the location (case-insensitive)"),
    event_type: Optional[EventType] = Query(None, description="Exact event type"),
    start_date: Optional[datetime] = Query(None, description="Events starting at or after"),
    end_date: Optional[datetime] = Query(None, description="Events ending at or before"),
    tags: Optional[List[str]] = Query(None, description="Match any of these tags"),
    is_active: Literal["true", "false", "any"] = Query("true", description="Active flag to match, or `any` for both"),
    repository: EventRepository = Depends(get_event_repository),
):
    """Search events. All supplied filters must match."""
    try:
        search = EventSearchFilter(
            title=title,
            location=location,
            event_type=event_type,
            start_date=start_date,
            end_date=end_date,
            tags=_split_tags(tags),
            is_active=ACTIVE_FILTERS[is_active],
        )
        return await repository.search(search)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to search events: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to search events")


@router.get("/upcoming", response_model=List[EventResponse])
async def list_upcoming_events(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Defaults to UPCOMING_EVENTS_LIMIT"),
    repository: EventRepository = Depends(get_event_repository),
):
    try:
        return await repository.list_upcoming(limit=limit)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list upcoming events: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list upcoming events")


# ============================================================================
# Registration
# ============================================================================


@router.post("/attendees/{event_id}", response_model=EventResponse)
async def register_for_event(
    event_id: str,
    request: Optional[RegisterForEventRequest] = None,
    current_user_id: str = Depends(get_current_user_id),
    registration_service: RegistrationService = Depends(get_registration_service),
):
    """Register the acting user for an event."""
    try:
        return await registration_service.register(event_id, current_user_id, notes=request.notes if request else None)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to register for event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to register for event")


@router.delete("/attendees/{event_id}", response_model=EventResponse)
async def unregister_from_event(
    event_id: str,
    current_user_id: str = Depends(get_current_user_id),
    registration_service: RegistrationService = Depends(get_registration_service),
):
    """Unregister the acting user from an event."""
    try:
        return await registration_service.unregister(event_id, current_user_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to unregister from event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to unregister from event")


# ============================================================================
# Reminders
# ============================================================================


@router.post("/reminder/{event_id}", response_model=ReminderReport)
async def send_event_reminders(
    event_id: str,
    reminder_service: ReminderService = Depends(get_reminder_service),
):
    """Email a reminder to every registrant of the event."""
    try:
        return await reminder_service.send_event_reminders(event_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to send reminders for event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to send reminders")


# ============================================================================
# Single event CRUD
# ============================================================================


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, repository: EventRepository = Depends(get_event_repository)):
    try:
        return await repository.get_by_id(event_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to get event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get event")


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: CreateEventRequest,
    current_user_id: str = Depends(get_current_user_id),
    repository: EventRepository = Depends(get_event_repository),
):
    """Create an event. The acting user becomes the organizer."""
    try:
        return await repository.create(request, organizer_id=current_user_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to create event: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create event")


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    request: UpdateEventRequest,
    repository: EventRepository = Depends(get_event_repository),
):
    """Update only the fields present in the body."""
    try:
        return await repository.update(event_id, request)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to update event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update event")


@router.delete("/{event_id}")
async def delete_event(event_id: str, repository: EventRepository = Depends(get_event_repository)):
    try:
        await repository.delete(event_id)
        return {"message": "Event deleted successfully"}
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to delete event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete event")


@router.patch("/{event_id}/deactivate", response_model=DeactivateEventResponse)
async def deactivate_event(event_id: str, repository: EventRepository = Depends(get_event_repository)):
    try:
        event = await repository.deactivate(event_id)
        return DeactivateEventResponse(message="Event deactivated successfully", event=event)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to deactivate event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to deactivate event")


# ============================================================================
# Registration records
# ============================================================================


@router.get("/{event_id}/registrations", response_model=List[RegistrationResponse])
async def list_event_registrations(
    event_id: str,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    try:
        return await registration_service.list_event_registrations(event_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list registrations for event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list registrations")


@router.patch("/{event_id}/registrations/{user_id}", response_model=RegistrationResponse)
async def update_registration_status(
    event_id: str,
    user_id: str,
    request: UpdateRegistrationStatusRequest,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    try:
        return await registration_service.update_registration_status(event_id, user_id, request.status)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to update registration of %s for event %s: %s", user_id, event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update registration")


# ============================================================================
# Attendance
# ============================================================================


@router.post("/{event_id}/attendance", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
async def mark_attendance(
    event_id: str,
    request: MarkAttendanceRequest,
    current_user_id: str = Depends(get_current_user_id),
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    """Record attendance. Allowed for the event organizer or the attendee."""
    try:
        return await attendance_service.mark_attendance(event_id, request, marked_by=current_user_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to mark attendance for event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to mark attendance")


@router.put("/{event_id}/attendance/{user_id}", response_model=AttendanceResponse)
async def update_attendance(
    event_id: str,
    user_id: str,
    request: UpdateAttendanceRequest,
    current_user_id: str = Depends(get_current_user_id),
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    try:
        return await attendance_service.update_attendance(event_id, user_id, request, marked_by=current_user_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to update attendance for event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update attendance")


@router.get("/{event_id}/attendance", response_model=List[AttendanceResponse])
async def list_event_attendance(
    event_id: str,
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    try:
        return await attendance_service.list_event_attendance(event_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list attendance for event %s: %s", event_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list attendance")
