"""
# Domain Errors

Exceptions raised by the service layer. Each class carries the HTTP status it maps to, so the
route layer can translate any of them 1:1 with `to_http_exception`.

| Error | Status | Raised when |
|-------|--------|-------------|
| `ValidationError` | 400 | Missing/malformed input, bad date ordering |
| `CapacityExceededError` | 400 | Event is full |
| `InactiveEventError` | 400 | Event has been deactivated |
| `NotRegisteredError` | 400 | Unregistering a user who is not registered |
| `ForbiddenError` | 403 | Caller lacks authority (e.g. not the faculty coordinator) |
| `NotFoundError` | 404 | Event, club, user or record id absent |
| `ConflictError` | 409 | Uniqueness violation |
| `AlreadyRegisteredError` | 409 | Duplicate registration |
| `ReminderDeliveryError` | 500 | Reminder batch failed under the all-or-nothing policy |
| `EmailDeliveryError` | 500 | A single email could not be delivered |
"""

from fastapi import HTTPException, status


class CampusEventsError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CampusEventsError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CampusEventsError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(CampusEventsError):
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(CampusEventsError):
    status_code = status.HTTP_409_CONFLICT


class AlreadyRegisteredError(ConflictError):
    def __init__(self, message: str = "User is already registered for this event"):
        super().__init__(message)


class CapacityExceededError(CampusEventsError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Event is full"):
        super().__init__(message)


class InactiveEventError(CampusEventsError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Event is not active"):
        super().__init__(message)


class NotRegisteredError(CampusEventsError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "User is not registered for this event"):
        super().__init__(message)


class EmailDeliveryError(CampusEventsError):
    pass


class ReminderDeliveryError(CampusEventsError):
    def __init__(self, message: str, failed: list = None):
        super().__init__(message)
        self.failed = failed or []


def to_http_exception(error: CampusEventsError) -> HTTPException:
    """Maps a domain error to the `HTTPException` returned to the client."""
    return HTTPException(status_code=error.status_code, detail=error.message)
