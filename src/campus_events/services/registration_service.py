"""
# Registration Service

Enforces the capacity and uniqueness rules when a user joins or leaves an event.

## Atomic Registration

`register` is a single conditional `find_one_and_update` on the event document:

```
filter: event_id == id
        AND is_active == true
        AND user not in registrations
        AND (max_capacity is null OR size(registrations) < max_capacity)
update: $push registrations user
```

MongoDB applies single-document updates atomically, so two concurrent registrations for the
last seat cannot both match. When nothing matches, the event is re-read to report *why*, in
priority order: `NotFoundError`, `InactiveEventError`, `CapacityExceededError`,
`AlreadyRegisteredError`.

The `registrations` collection mirrors the event's registrant list with one record per
`(user_id, event_id)` (unique index). If that index rejects the upsert, the `$push` is
rolled back and the call fails with `AlreadyRegisteredError`. Any other store failure during the
upsert also rolls the `$push` back before the error propagates, so a seat is never held without a
registration record.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from campus_events.database.manager import DatabaseManager
from campus_events.errors import (
    AlreadyRegisteredError,
    CampusEventsError,
    CapacityExceededError,
    ConflictError,
    InactiveEventError,
    NotFoundError,
    NotRegisteredError,
    ValidationError,
)
from campus_events.managers.logging_manager import get_logger
from campus_events.models.event_models import EventResponse
from campus_events.models.registration_models import RegistrationDocument, RegistrationResponse, RegistrationStatus
from campus_events.models.user_models import UserSummary
from campus_events.services.event_repository import USER_SUMMARY_PROJECTION, EventRepository
from campus_events.utils.datetime_utils import utc_now

logger = get_logger(prefix="[RegistrationService]")

SETTABLE_STATUSES = (RegistrationStatus.ATTENDED, RegistrationStatus.NO_SHOW)


class RegistrationService:
    """Registration and unregistration of users for events."""

    def __init__(self, db_manager: DatabaseManager, event_repository: EventRepository, clock: Callable = utc_now):
        self.db_manager = db_manager
        self.event_repository = event_repository
        self.clock = clock

    @property
    def events(self):
        return self.db_manager.get_collection("events")

    @property
    def registrations(self):
        return self.db_manager.get_collection("registrations")

    @staticmethod
    def build_register_filter(event_id: str, user_id: str) -> Dict[str, Any]:
        return {
            "event_id": event_id,
            "is_active": True,
            "registrations": {"$ne": user_id},
            "$or": [
                {"max_capacity": None},
                {"$expr": {"$lt": [{"$size": "$registrations"}, "$max_capacity"]}},
            ],
        }

    async def register(self, event_id: str, user_id: str, notes: Optional[str] = None) -> EventResponse:
        """
        Register a user for an event.

        Raises:
            NotFoundError: The event does not exist.
            InactiveEventError: The event has been deactivated.
            CapacityExceededError: `max_capacity` is set and already reached.
            AlreadyRegisteredError: The user is already registered.
        """
        now = self.clock()
        updated = await self.events.find_one_and_update(
            self.build_register_filter(event_id, user_id),
            {"$push": {"registrations": user_id}, "$set": {"updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            error = await self._classify_register_failure(event_id, user_id)
            logger.warning("Registration of user %s for event %s rejected: %s", user_id, event_id, error.message)
            raise error

        record = RegistrationDocument(
            registration_id=str(uuid4()),
            user_id=user_id,
            event_id=event_id,
            registration_date=now,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        try:
            await self.registrations.update_one(
                {"event_id": event_id, "user_id": user_id, "status": {"$ne": RegistrationStatus.REGISTERED.value}},
                {
                    "$set": record.model_dump(exclude={"registration_id", "user_id", "event_id", "created_at"}),
                    "$setOnInsert": record.model_dump(include={"registration_id", "created_at"}),
                },
                upsert=True,
            )
        except DuplicateKeyError:
            await self._release_seat(event_id, user_id)
            logger.warning("Duplicate registration record for user %s on event %s, rolled back", user_id, event_id)
            raise AlreadyRegisteredError()
        except PyMongoError as e:
            await self._release_seat(event_id, user_id)
            logger.error("Failed to record registration of user %s for event %s, rolled back: %s", user_id, event_id, e)
            raise

        logger.info("Registered user %s for event %s", user_id, event_id)
        return await self.event_repository.resolve(updated)

    async def _release_seat(self, event_id: str, user_id: str) -> None:
        await self.events.update_one({"event_id": event_id}, {"$pull": {"registrations": user_id}})

    async def _classify_register_failure(self, event_id: str, user_id: str) -> CampusEventsError:
        event = await self.events.find_one({"event_id": event_id})
        if not event:
            return NotFoundError("Event not found")
        if not event.get("is_active", True):
            return InactiveEventError()

        registrations = event.get("registrations", [])
        max_capacity = event.get("max_capacity")
        if max_capacity is not None and len(registrations) >= max_capacity:
            return CapacityExceededError()
        if user_id in registrations:
            return AlreadyRegisteredError()

        # The event changed between the conditional update and this read
        return ConflictError("Event was modified concurrently, please retry")

    async def unregister(self, event_id: str, user_id: str) -> EventResponse:
        """
        Remove a user from an event's registrant list and mark their registration cancelled.

        Raises:
            NotFoundError: The event does not exist.
            NotRegisteredError: The user is not registered for the event.
        """
        now = self.clock()
        updated = await self.events.find_one_and_update(
            {"event_id": event_id, "registrations": user_id},
            {"$pull": {"registrations": user_id}, "$set": {"updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            await self.event_repository.get_document(event_id)
            raise NotRegisteredError()

        await self.registrations.update_one(
            {"event_id": event_id, "user_id": user_id, "status": RegistrationStatus.REGISTERED.value},
            {"$set": {"status": RegistrationStatus.CANCELLED.value, "updated_at": now}},
        )

        logger.info("Unregistered user %s from event %s", user_id, event_id)
        return await self.event_repository.resolve(updated)

    async def list_event_registrations(self, event_id: str) -> List[RegistrationResponse]:
        await self.event_repository.get_document(event_id)
        docs = await self.registrations.find({"event_id": event_id}).sort("registration_date", ASCENDING).to_list(
            length=None
        )
        return [RegistrationResponse(**doc) for doc in docs]

    async def list_user_registrations(self, user_id: str) -> List[RegistrationResponse]:
        docs = await self.registrations.find({"user_id": user_id}).sort("registration_date", DESCENDING).to_list(
            length=None
        )
        return [RegistrationResponse(**doc) for doc in docs]

    async def update_registration_status(
        self, event_id: str, user_id: str, status: RegistrationStatus
    ) -> RegistrationResponse:
        """Set a live registration to `attended` or `no-show`."""
        if status not in SETTABLE_STATUSES:
            raise ValidationError("Status must be 'attended' or 'no-show'; use unregister to cancel")

        updated = await self.registrations.find_one_and_update(
            {"event_id": event_id, "user_id": user_id, "status": {"$ne": RegistrationStatus.CANCELLED.value}},
            {"$set": {"status": status.value, "updated_at": self.clock()}},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError("Registration not found")

        logger.info("Registration of user %s for event %s set to %s", user_id, event_id, status.value)
        return RegistrationResponse(**updated)

    async def get_recipients(self, event_id: str) -> Tuple[Dict[str, Any], List[UserSummary]]:
        """The event document and its registrants' names and emails, in registration order."""
        event = await self.event_repository.get_document(event_id)
        user_ids = event.get("registrations", [])
        if not user_ids:
            return event, []

        users = await (
            self.db_manager.get_collection("users")
            .find({"user_id": {"$in": user_ids}}, USER_SUMMARY_PROJECTION)
            .to_list(length=None)
        )
        user_map = {user["user_id"]: user for user in users}
        return event, [UserSummary(**user_map[uid]) for uid in user_ids if uid in user_map]
