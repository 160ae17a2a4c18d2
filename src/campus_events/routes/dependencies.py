"""
# Route Dependencies

FastAPI dependency functions that hand services to route handlers.

The `DatabaseManager` lives on `app.state.db_manager` (set up by `campus_events.main.lifespan`),
and every service is built per request around it. Tests swap any of these with
`app.dependency_overrides`.

## Acting User

Authentication is out of scope for this service. The caller identifies itself with an
`X-User-Id` header, and `get_current_user_id` checks that the user exists.

```python
@router.post("")
async def create_event(
    request: CreateEventRequest,
    current_user_id: str = Depends(get_current_user_id),
    repository: EventRepository = Depends(get_event_repository),
):
    ...
```
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from campus_events.database.manager import DatabaseManager
from campus_events.managers.email_manager import EmailManager
from campus_events.managers.logging_manager import get_logger
from campus_events.services.attendance_service import AttendanceService
from campus_events.services.club_service import ClubService
from campus_events.services.event_repository import EventRepository
from campus_events.services.registration_service import RegistrationService
from campus_events.services.reminder_service import ReminderService
from campus_events.services.user_service import UserService

logger = get_logger(prefix="[Dependencies]")


def get_db_manager(request: Request) -> DatabaseManager:
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None:
        logger.error("Request received before the database manager was initialised")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable")
    return db_manager


def get_event_repository(db_manager: DatabaseManager = Depends(get_db_manager)) -> EventRepository:
    return EventRepository(db_manager)


def get_registration_service(
    db_manager: DatabaseManager = Depends(get_db_manager),
    repository: EventRepository = Depends(get_event_repository),
) -> RegistrationService:
    return RegistrationService(db_manager, repository)


def get_attendance_service(
    db_manager: DatabaseManager = Depends(get_db_manager),
    repository: EventRepository = Depends(get_event_repository),
) -> AttendanceService:
    return AttendanceService(db_manager, repository)


def get_club_service(db_manager: DatabaseManager = Depends(get_db_manager)) -> ClubService:
    return ClubService(db_manager)


def get_user_service(db_manager: DatabaseManager = Depends(get_db_manager)) -> UserService:
    return UserService(db_manager)


def get_email_manager() -> EmailManager:
    return EmailManager()


def get_reminder_service(
    registration_service: RegistrationService = Depends(get_registration_service),
    email_manager: EmailManager = Depends(get_email_manager),
) -> ReminderService:
    return ReminderService(registration_service, email_manager)


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    db_manager: DatabaseManager = Depends(get_db_manager),
) -> str:
    """Resolve the acting user from the `X-User-Id` header."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header is required")

    user = await db_manager.get_collection("users").find_one({"user_id": x_user_id}, {"_id": 1})
    if not user:
        logger.warning("Request with unknown acting user %s", x_user_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return x_user_id
