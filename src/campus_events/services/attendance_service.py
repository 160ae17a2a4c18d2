"""
# Attendance Service

Records whether registered users turned up to events. Attendance may be marked by the event
organizer or by the attendee themself, only on active events and only for users holding a live
(not cancelled) registration. Marking attendance also moves that registration to `attended`
(present / late) or `no-show` (absent).
"""

from typing import Any, Callable, Dict, List
from uuid import uuid4

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from campus_events.database.manager import DatabaseManager
from campus_events.errors import (
    ConflictError,
    ForbiddenError,
    InactiveEventError,
    NotFoundError,
    NotRegisteredError,
)
from campus_events.managers.logging_manager import get_logger
from campus_events.models.attendance_models import (
    AttendanceDocument,
    AttendanceResponse,
    AttendanceStatus,
    MarkAttendanceRequest,
    UpdateAttendanceRequest,
)
from campus_events.models.registration_models import RegistrationStatus
from campus_events.services.event_repository import EventRepository
from campus_events.utils.datetime_utils import utc_now

logger = get_logger(prefix="[AttendanceService]")


class AttendanceService:
    def __init__(self, db_manager: DatabaseManager, event_repository: EventRepository, clock: Callable = utc_now):
        self.db_manager = db_manager
        self.event_repository = event_repository
        self.clock = clock

    @property
    def attendance(self):
        return self.db_manager.get_collection("attendance")

    @property
    def registrations(self):
        return self.db_manager.get_collection("registrations")

    @staticmethod
    def _check_authority(event: Dict[str, Any], user_id: str, marked_by: str) -> None:
        if marked_by not in (event.get("organizer_id"), user_id):
            raise ForbiddenError("Only the event organizer or the attendee can record attendance")

    async def _sync_registration(self, event_id: str, user_id: str, status: AttendanceStatus) -> None:
        new_status = RegistrationStatus.NO_SHOW if status == AttendanceStatus.ABSENT else RegistrationStatus.ATTENDED
        await self.registrations.update_one(
            {"event_id": event_id, "user_id": user_id, "status": {"$ne": RegistrationStatus.CANCELLED.value}},
            {"$set": {"status": new_status.value, "updated_at": self.clock()}},
        )

    async def mark_attendance(
        self, event_id: str, request: MarkAttendanceRequest, marked_by: str
    ) -> AttendanceResponse:
        """
        Create the attendance record for `request.user_id` at `event_id`.

        Raises:
            NotFoundError: Event or user does not exist.
            ForbiddenError: `marked_by` is neither the organizer nor the attendee.
            InactiveEventError: The event has been deactivated.
            NotRegisteredError: The user has no live registration for the event.
            ConflictError: Attendance was already recorded for this user and event.
        """
        event = await self.event_repository.get_document(event_id)
        user = await self.db_manager.get_collection("users").find_one({"user_id": request.user_id}, {"_id": 1})
        if not user:
            raise NotFoundError("User not found")
        self._check_authority(event, request.user_id, marked_by)
        if not event.get("is_active", True):
            raise InactiveEventError()

        registration = await self.registrations.find_one(
            {
                "event_id": event_id,
                "user_id": request.user_id,
                "status": {"$ne": RegistrationStatus.CANCELLED.value},
            },
            {"_id": 1},
        )
        if not registration:
            logger.warning("Attendance for unregistered user %s at event %s rejected", request.user_id, event_id)
            raise NotRegisteredError()

        record = AttendanceDocument(
            attendance_id=str(uuid4()),
            user_id=request.user_id,
            event_id=event_id,
            marked_by=marked_by,
            marked_at=self.clock(),
            status=request.status,
            notes=request.notes,
        )
        try:
            await self.attendance.insert_one(record.model_dump())
        except DuplicateKeyError:
            raise ConflictError("Attendance already marked for this user and event")

        await self._sync_registration(event_id, request.user_id, request.status)
        logger.info(
            "Marked user %s %s at event %s (by %s)", request.user_id, request.status.value, event_id, marked_by
        )
        return AttendanceResponse(**record.model_dump())

    async def update_attendance(
        self, event_id: str, user_id: str, request: UpdateAttendanceRequest, marked_by: str
    ) -> AttendanceResponse:
        event = await self.event_repository.get_document(event_id)
        self._check_authority(event, user_id, marked_by)

        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        changes.update({"marked_by": marked_by, "marked_at": self.clock()})
        updated = await self.attendance.find_one_and_update(
            {"event_id": event_id, "user_id": user_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError("Attendance record not found")

        if request.status is not None:
            await self._sync_registration(event_id, user_id, request.status)
        logger.info("Updated attendance of user %s at event %s", user_id, event_id)
        return AttendanceResponse(**updated)

    async def list_event_attendance(self, event_id: str) -> List[AttendanceResponse]:
        await self.event_repository.get_document(event_id)
        docs = await self.attendance.find({"event_id": event_id}).sort("marked_at", ASCENDING).to_list(length=None)
        return [AttendanceResponse(**doc) for doc in docs]

    async def list_user_attendance(self, user_id: str) -> List[AttendanceResponse]:
        docs = await self.attendance.find({"user_id": user_id}).sort("marked_at", DESCENDING).to_list(length=None)
        return [AttendanceResponse(**doc) for doc in docs]
