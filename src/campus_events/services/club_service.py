"""Club management: creation, lookup and soft deletion."""

from typing import Callable, List
from uuid import uuid4

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from campus_events.database.manager import DatabaseManager
from campus_events.errors import ConflictError, NotFoundError, ValidationError
from campus_events.managers.logging_manager import get_logger
from campus_events.models.club_models import ClubDocument, ClubResponse, CreateClubRequest
from campus_events.models.user_models import UserRole
from campus_events.utils.datetime_utils import utc_now

logger = get_logger(prefix="[ClubService]")


class ClubService:
    def __init__(self, db_manager: DatabaseManager, clock: Callable = utc_now):
        self.db_manager = db_manager
        self.clock = clock

    @property
    def clubs(self):
        return self.db_manager.get_collection("clubs")

    async def create_club(self, request: CreateClubRequest) -> ClubResponse:
        """
        Create a club. The faculty coordinator must be an existing faculty or admin user,
        and club names are unique.
        """
        coordinator = await self.db_manager.get_collection("users").find_one(
            {"user_id": request.faculty_coordinator_id}
        )
        if not coordinator:
            raise NotFoundError("Faculty coordinator not found")
        if coordinator.get("role") == UserRole.STUDENT.value:
            raise ValidationError("Faculty coordinator must be a faculty member")

        now = self.clock()
        club = ClubDocument(club_id=str(uuid4()), created_at=now, updated_at=now, **request.model_dump())
        try:
            await self.clubs.insert_one(club.model_dump())
        except DuplicateKeyError:
            raise ConflictError("A club with this name already exists")

        logger.info("Created club %s (%s)", club.club_id, club.name)
        return ClubResponse(**club.model_dump())

    async def get_club(self, club_id: str) -> ClubResponse:
        doc = await self.clubs.find_one({"club_id": club_id})
        if not doc:
            raise NotFoundError("Club not found")
        return ClubResponse(**doc)

    async def list_clubs(self, active_only: bool = True) -> List[ClubResponse]:
        query = {"is_active": True} if active_only else {}
        docs = await self.clubs.find(query).sort("name", ASCENDING).to_list(length=None)
        return [ClubResponse(**doc) for doc in docs]

    async def deactivate_club(self, club_id: str) -> ClubResponse:
        updated = await self.clubs.find_one_and_update(
            {"club_id": club_id},
            {"$set": {"is_active": False, "updated_at": self.clock()}},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError("Club not found")

        logger.info("Deactivated club %s", club_id)
        return ClubResponse(**updated)
