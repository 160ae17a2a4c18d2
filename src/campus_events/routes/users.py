"""
# User Routes

- `POST /api/users` - Create a user
- `GET /api/users` - List users
- `GET /api/users/{user_id}` - User details
- `GET /api/users/{user_id}/events` - Events organized by the user
- `GET /api/users/{user_id}/registrations` - The user's registrations
- `GET /api/users/{user_id}/attendance` - The user's attendance records
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from campus_events.errors import CampusEventsError, to_http_exception
from campus_events.managers.logging_manager import get_logger
from campus_events.models.attendance_models import AttendanceResponse
from campus_events.models.event_models import EventResponse
from campus_events.models.registration_models import RegistrationResponse
from campus_events.models.user_models import CreateUserRequest, UserResponse
from campus_events.routes.dependencies import (
    get_attendance_service,
    get_event_repository,
    get_registration_service,
    get_user_service,
)
from campus_events.services.attendance_service import AttendanceService
from campus_events.services.event_repository import EventRepository
from campus_events.services.registration_service import RegistrationService
from campus_events.services.user_service import UserService

logger = get_logger(prefix="[User Routes]")

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: CreateUserRequest, user_service: UserService = Depends(get_user_service)):
    try:
        return await user_service.create_user(request)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to create user: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.get("", response_model=List[UserResponse])
async def list_users(user_service: UserService = Depends(get_user_service)):
    try:
        return await user_service.list_users()
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to list users: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list users")


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, user_service: UserService = Depends(get_user_service)):
    try:
        return await user_service.get_user(user_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to get user %s: %s", user_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get user")


@router.get("/{user_id}/events", response_model=List[EventResponse])
async def list_organized_events(user_id: str, repository: EventRepository = Depends(get_event_repository)):
    try:
        return await repository.list_by_organizer(user_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list events organized by %s: %s", user_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list organized events")


@router.get("/{user_id}/registrations", response_model=List[RegistrationResponse])
async def list_user_registrations(
    user_id: str,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    try:
        return await registration_service.list_user_registrations(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to list registrations of %s: %s", user_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list registrations")


@router.get("/{user_id}/attendance", response_model=List[AttendanceResponse])
async def list_user_attendance(
    user_id: str,
    attendance_service: AttendanceService = Depends(get_attendance_service),
):
    try:
        return await attendance_service.list_user_attendance(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to list attendance of %s: %s", user_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list attendance")
