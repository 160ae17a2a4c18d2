"""
# Event Repository

Query and mutation operations over the `events` collection.

## Operations

| Method | Description |
|--------|-------------|
| `list` | All (or only active) events, ascending by `start_date` |
| `get_by_id` | Single event, `NotFoundError` when absent |
| `create` | Validates input, dates and organizer authority, then inserts |
| `update` | Partial update; omitted fields are left unchanged |
| `delete` | Hard delete, including the event's registrations and attendance |
| `deactivate` | Soft delete (`is_active = False`) |
| `search` | Combinable filters over title, location, type, dates and tags |
| `list_by_club` / `list_by_organizer` / `list_upcoming` | Scoped listings (`UPCOMING_EVENTS_LIMIT` caps `list_upcoming` by default) |

Every read returns `EventResponse` objects with the club, organizer and registrants resolved
through batched `$in` lookups against `clubs` and `users`.
"""

import re
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from pymongo import ASCENDING, ReturnDocument

from campus_events.config import settings
from campus_events.database.manager import DatabaseManager
from campus_events.errors import ForbiddenError, NotFoundError, ValidationError
from campus_events.managers.logging_manager import get_logger
from campus_events.models.event_models import (
    CreateEventRequest,
    EventDocument,
    EventResponse,
    EventSearchFilter,
    UpdateEventRequest,
)
from campus_events.utils.datetime_utils import ensure_utc, utc_now

logger = get_logger(prefix="[EventRepository]")

REQUIRED_TEXT_FIELDS = ("title", "description", "location", "club_id")
CLUB_SUMMARY_PROJECTION = {"_id": 0, "club_id": 1, "name": 1, "category": 1}
USER_SUMMARY_PROJECTION = {"_id": 0, "user_id": 1, "name": 1, "email": 1}


class EventRepository:
    """
    Repository for campus events.

    Args:
        db_manager: Connected `DatabaseManager`.
        clock: Returns the current UTC instant. Used for the "starts in the future" check,
            upcoming listings and timestamps.
    """

    def __init__(self, db_manager: DatabaseManager, clock: Callable = utc_now):
        self.db_manager = db_manager
        self.clock = clock
        self.collection_name = "events"

    @property
    def events(self):
        return self.db_manager.get_collection(self.collection_name)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve_many(self, docs: List[Dict[str, Any]]) -> List[EventResponse]:
        """Attach club, organizer and registrant summaries to raw event documents."""
        if not docs:
            return []

        club_ids = sorted({doc["club_id"] for doc in docs})
        user_ids = set()
        for doc in docs:
            user_ids.add(doc["organizer_id"])
            user_ids.update(doc.get("registrations", []))

        clubs = await (
            self.db_manager.get_collection("clubs")
            .find({"club_id": {"$in": club_ids}}, CLUB_SUMMARY_PROJECTION)
            .to_list(length=None)
        )
        users = await (
            self.db_manager.get_collection("users")
            .find({"user_id": {"$in": sorted(user_ids)}}, USER_SUMMARY_PROJECTION)
            .to_list(length=None)
        )
        club_map = {club["club_id"]: club for club in clubs}
        user_map = {user["user_id"]: user for user in users}

        return [self._to_response(doc, club_map, user_map) for doc in docs]

    async def resolve(self, doc: Dict[str, Any]) -> EventResponse:
        return (await self.resolve_many([doc]))[0]

    @staticmethod
    def _to_response(doc: Dict[str, Any], club_map: Dict[str, dict], user_map: Dict[str, dict]) -> EventResponse:
        registrations = doc.get("registrations", [])
        data = {k: v for k, v in doc.items() if k != "_id"}
        data.update(
            {
                "club": club_map.get(doc["club_id"]),
                "organizer": user_map.get(doc["organizer_id"]),
                # Registrants whose user record has been removed are dropped from the resolved list
                "registrations": [user_map[uid] for uid in registrations if uid in user_map],
                "registration_count": len(registrations),
            }
        )
        return EventResponse(**data)

    async def _find_sorted(self, query: Dict[str, Any], limit: Optional[int] = None) -> List[EventResponse]:
        cursor = self.events.find(query).sort("start_date", ASCENDING)
        if limit:
            cursor = cursor.limit(limit)
        docs = await cursor.to_list(length=None)
        return await self.resolve_many(docs)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(self, active_only: bool = True) -> List[EventResponse]:
        query = {"is_active": True} if active_only else {}
        return await self._find_sorted(query)

    async def get_document(self, event_id: str) -> Dict[str, Any]:
        """Raw event document, or `NotFoundError`."""
        doc = await self.events.find_one({"event_id": event_id})
        if not doc:
            raise NotFoundError("Event not found")
        return doc

    async def get_by_id(self, event_id: str) -> EventResponse:
        return await self.resolve(await self.get_document(event_id))

    @staticmethod
    def build_search_query(search: EventSearchFilter) -> Dict[str, Any]:
        """
        Translate a search filter into a MongoDB query.

        Title and location are matched as case-insensitive substrings with the user input
        escaped, so characters such as `.` or `(` are taken literally.
        """
        query: Dict[str, Any] = {}
        if search.is_active is not None:
            query["is_active"] = search.is_active
        if search.title:
            query["title"] = {"$regex": re.escape(search.title), "$options": "i"}
        if search.location:
            query["location"] = {"$regex": re.escape(search.location), "$options": "i"}
        if search.event_type:
            query["event_type"] = search.event_type.value
        if search.start_date:
            query["start_date"] = {"$gte": search.start_date}
        if search.end_date:
            query["end_date"] = {"$lte": search.end_date}
        if search.tags:
            query["tags"] = {"$in": search.tags}
        return query

    async def search(self, search: EventSearchFilter) -> List[EventResponse]:
        query = self.build_search_query(search)
        logger.debug("Searching events with query: %s", query)
        return await self._find_sorted(query)

    async def list_by_club(self, club_id: str) -> List[EventResponse]:
        return await self._find_sorted({"club_id": club_id, "is_active": True})

    async def list_by_organizer(self, organizer_id: str) -> List[EventResponse]:
        return await self._find_sorted({"organizer_id": organizer_id})

    async def list_upcoming(self, limit: Optional[int] = None) -> List[EventResponse]:
        """Next active events; `limit` defaults to `UPCOMING_EVENTS_LIMIT`."""
        limit = limit or settings.UPCOMING_EVENTS_LIMIT
        return await self._find_sorted({"start_date": {"$gt": self.clock()}, "is_active": True}, limit=limit)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, request: CreateEventRequest, organizer_id: str) -> EventResponse:
        """
        Create an event under a club.

        Checks, in order:
        1. Required text fields are present and not blank (`ValidationError`).
        2. `start_date` is in the future and `end_date` is after it (`ValidationError`).
        3. The club exists (`NotFoundError`).
        4. `organizer_id` is the club's faculty coordinator (`ForbiddenError`).

        The new event id is then added to the club's `events` list.
        """
        if not organizer_id or any(not (getattr(request, name) or "").strip() for name in REQUIRED_TEXT_FIELDS):
            raise ValidationError("All required fields must be provided")

        now = self.clock()
        if request.start_date <= now:
            raise ValidationError("Event start date must be in the future")
        if request.end_date <= request.start_date:
            raise ValidationError("Event end date must be after start date")

        clubs = self.db_manager.get_collection("clubs")
        club = await clubs.find_one({"club_id": request.club_id})
        if not club:
            raise NotFoundError("Club not found")
        if club.get("faculty_coordinator_id") != organizer_id:
            logger.warning("User %s attempted to create an event for club %s", organizer_id, request.club_id)
            raise ForbiddenError("Only the faculty coordinator can create events for this club")

        event = EventDocument(
            event_id=str(uuid4()),
            organizer_id=organizer_id,
            created_at=now,
            updated_at=now,
            **request.model_dump(),
        )
        await self.events.insert_one(event.model_dump())
        await clubs.update_one(
            {"club_id": request.club_id},
            {"$addToSet": {"events": event.event_id}, "$set": {"updated_at": now}},
        )

        logger.info("Created event %s (%s) for club %s", event.event_id, event.title, event.club_id)
        return await self.resolve(event.model_dump())

    async def update(self, event_id: str, request: UpdateEventRequest) -> EventResponse:
        """
        Apply a partial update.

        Date ordering is re-checked against the merged stored and new values whenever either
        date changes. A new `max_capacity` is only applied if the current registrant count fits.
        """
        existing = await self.get_document(event_id)
        changes = request.changes()
        if not changes:
            return await self.resolve(existing)

        if "start_date" in changes or "end_date" in changes:
            start = changes.get("start_date") or ensure_utc(existing["start_date"])
            end = changes.get("end_date") or ensure_utc(existing["end_date"])
            if end <= start:
                raise ValidationError("Event end date must be after start date")

        query: Dict[str, Any] = {"event_id": event_id}
        new_capacity = changes.get("max_capacity")
        if new_capacity is not None:
            query["$expr"] = {"$lte": [{"$size": "$registrations"}, new_capacity]}

        changes["updated_at"] = self.clock()
        updated = await self.events.find_one_and_update(
            query, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        if updated is None:
            await self.get_document(event_id)
            raise ValidationError("Max capacity cannot be lower than the current number of registrations")

        logger.info("Updated event %s fields: %s", event_id, sorted(changes))
        return await self.resolve(updated)

    async def delete(self, event_id: str) -> None:
        """Hard delete. The event's registration and attendance records go with it."""
        deleted = await self.events.find_one_and_delete({"event_id": event_id})
        if not deleted:
            raise NotFoundError("Event not found")

        await self.db_manager.get_collection("clubs").update_one(
            {"club_id": deleted["club_id"]}, {"$pull": {"events": event_id}}
        )
        await self.db_manager.get_collection("registrations").delete_many({"event_id": event_id})
        await self.db_manager.get_collection("attendance").delete_many({"event_id": event_id})

        logger.info("Deleted event %s", event_id)

    async def deactivate(self, event_id: str) -> EventResponse:
        updated = await self.events.find_one_and_update(
            {"event_id": event_id},
            {"$set": {"is_active": False, "updated_at": self.clock()}},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError("Event not found")

        logger.info("Deactivated event %s", event_id)
        return await self.resolve(updated)
