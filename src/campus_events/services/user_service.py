"""User records. Authentication is handled outside this service."""

from typing import Callable, List
from uuid import uuid4

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from campus_events.database.manager import DatabaseManager
from campus_events.errors import ConflictError, NotFoundError
from campus_events.managers.logging_manager import get_logger
from campus_events.models.user_models import CreateUserRequest, UserDocument, UserResponse
from campus_events.utils.datetime_utils import utc_now

logger = get_logger(prefix="[UserService]")


class UserService:
    def __init__(self, db_manager: DatabaseManager, clock: Callable = utc_now):
        self.db_manager = db_manager
        self.clock = clock

    @property
    def users(self):
        return self.db_manager.get_collection("users")

    async def create_user(self, request: CreateUserRequest) -> UserResponse:
        data = request.model_dump()
        data["email"] = data["email"].lower()
        user = UserDocument(user_id=str(uuid4()), created_at=self.clock(), **data)
        try:
            await self.users.insert_one(user.model_dump())
        except DuplicateKeyError:
            raise ConflictError("A user with this email already exists")

        logger.info("Created user %s", user.user_id)
        return UserResponse(**user.model_dump())

    async def get_user(self, user_id: str) -> UserResponse:
        doc = await self.users.find_one({"user_id": user_id})
        if not doc:
            raise NotFoundError("User not found")
        return UserResponse(**doc)

    async def list_users(self) -> List[UserResponse]:
        docs = await self.users.find({}).sort("name", ASCENDING).to_list(length=None)
        return [UserResponse(**doc) for doc in docs]
