"""
Tests for club and user management.
"""

import pytest

from campus_events.errors import ConflictError, NotFoundError, ValidationError
from campus_events.models.club_models import CreateClubRequest
from campus_events.models.user_models import CreateUserRequest
from campus_events.services.club_service import ClubService
from campus_events.services.user_service import UserService
from tests.conftest import CLUB_ID, COORDINATOR_ID


@pytest.fixture
def clubs(db_manager, clock):
    return ClubService(db_manager, clock=clock)


@pytest.fixture
def users_service(db_manager, clock):
    return UserService(db_manager, clock=clock)


@pytest.mark.asyncio
async def test_create_club(clubs, collections):
    club = await clubs.create_club(
        CreateClubRequest(name="Robotics", category="technical", faculty_coordinator_id=COORDINATOR_ID)
    )

    assert club.name == "Robotics"
    assert club.events == []
    assert len(collections["clubs"].docs) == 2


@pytest.mark.asyncio
async def test_create_club_with_student_coordinator(clubs):
    with pytest.raises(ValidationError):
        await clubs.create_club(CreateClubRequest(name="Chess", faculty_coordinator_id="student-a"))


@pytest.mark.asyncio
async def test_create_club_with_unknown_coordinator(clubs):
    with pytest.raises(NotFoundError) as exc_info:
        await clubs.create_club(CreateClubRequest(name="Chess", faculty_coordinator_id="ghost"))

    assert exc_info.value.message == "Faculty coordinator not found"


@pytest.mark.asyncio
async def test_duplicate_club_name(clubs):
    with pytest.raises(ConflictError):
        await clubs.create_club(CreateClubRequest(name="AI Society", faculty_coordinator_id=COORDINATOR_ID))


@pytest.mark.asyncio
async def test_deactivate_club_hides_it_from_active_list(clubs):
    deactivated = await clubs.deactivate_club(CLUB_ID)

    assert deactivated.is_active is False
    assert await clubs.list_clubs(active_only=True) == []
    assert [c.club_id for c in await clubs.list_clubs(active_only=False)] == [CLUB_ID]


@pytest.mark.asyncio
async def test_get_missing_club(clubs):
    with pytest.raises(NotFoundError):
        await clubs.get_club("nope")


@pytest.mark.asyncio
async def test_create_and_get_user(users_service):
    created = await users_service.create_user(CreateUserRequest(name="Dana", email="Dana@Campus.edu", role="faculty"))

    fetched = await users_service.get_user(created.user_id)

    assert fetched.email == "dana@campus.edu"
    assert fetched.role == "faculty"


@pytest.mark.asyncio
async def test_get_missing_user(users_service):
    with pytest.raises(NotFoundError):
        await users_service.get_user("nope")
