"""
Tests for the event repository: creation rules, partial updates, deletion and search.
"""

from datetime import timedelta

import pytest

from campus_events.config import settings
from campus_events.errors import ForbiddenError, NotFoundError, ValidationError
from campus_events.models.event_models import CreateEventRequest, EventSearchFilter, EventType, UpdateEventRequest
from campus_events.services.event_repository import EventRepository
from tests.conftest import CLUB_ID, COORDINATOR_ID, FIXED_NOW


@pytest.fixture
def repository(db_manager, clock):
    return EventRepository(db_manager, clock=clock)


def create_request(**overrides):
    data = {
        "title": "Intro to Machine Learning",
        "description": "Hands-on workshop",
        "start_date": FIXED_NOW + timedelta(days=1),
        "end_date": FIXED_NOW + timedelta(days=1, hours=2),
        "location": "Lab 3",
        "club_id": CLUB_ID,
        "event_type": "workshop",
        "tags": ["ai", "ai", " ml "],
    }
    data.update(overrides)
    return CreateEventRequest(**data)


# ============================================================================
# create
# ============================================================================


@pytest.mark.asyncio
async def test_create_event_persists_and_links_club(repository, collections):
    """The coordinator can create an event; the club gains a back-reference."""
    event = await repository.create(create_request(), organizer_id=COORDINATOR_ID)

    assert event.title == "Intro to Machine Learning"
    assert event.is_active is True
    assert event.registrations == []
    assert event.tags == ["ai", "ml"]
    assert event.club.name == "AI Society"
    assert event.organizer.email == "rao@campus.edu"

    stored = collections["events"].docs[0]
    assert stored["event_id"] == event.event_id
    assert stored["organizer_id"] == COORDINATOR_ID
    assert collections["clubs"].docs[0]["events"] == [event.event_id]


@pytest.mark.asyncio
async def test_create_event_rejects_start_in_the_past(repository, collections):
    request = create_request(start_date=FIXED_NOW - timedelta(minutes=1), end_date=FIXED_NOW + timedelta(hours=1))

    with pytest.raises(ValidationError) as exc_info:
        await repository.create(request, organizer_id=COORDINATOR_ID)

    assert "future" in exc_info.value.message
    assert collections["events"].docs == []


@pytest.mark.asyncio
async def test_create_event_rejects_start_equal_to_now(repository):
    request = create_request(start_date=FIXED_NOW, end_date=FIXED_NOW + timedelta(hours=1))

    with pytest.raises(ValidationError):
        await repository.create(request, organizer_id=COORDINATOR_ID)


@pytest.mark.asyncio
@pytest.mark.parametrize("end_offset", [timedelta(0), timedelta(hours=-1)])
async def test_create_event_requires_end_after_start(repository, collections, end_offset):
    start = FIXED_NOW + timedelta(days=1)
    request = create_request(start_date=start, end_date=start + end_offset)

    with pytest.raises(ValidationError) as exc_info:
        await repository.create(request, organizer_id=COORDINATOR_ID)

    assert exc_info.value.message == "Event end date must be after start date"
    assert collections["events"].docs == []


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "description", "location", "club_id"])
async def test_create_event_rejects_blank_required_fields(repository, field):
    with pytest.raises(ValidationError) as exc_info:
        await repository.create(create_request(**{field: "   "}), organizer_id=COORDINATOR_ID)

    assert exc_info.value.message == "All required fields must be provided"


@pytest.mark.asyncio
async def test_create_event_unknown_club(repository):
    with pytest.raises(NotFoundError) as exc_info:
        await repository.create(create_request(club_id="missing-club"), organizer_id=COORDINATOR_ID)

    assert exc_info.value.message == "Club not found"


@pytest.mark.asyncio
@pytest.mark.parametrize("organizer_id", ["student-a", "faculty-2"])
async def test_create_event_by_non_coordinator_is_forbidden(repository, collections, organizer_id):
    with pytest.raises(ForbiddenError):
        await repository.create(create_request(), organizer_id=organizer_id)

    assert collections["events"].docs == []
    assert collections["clubs"].docs[0]["events"] == []


# ============================================================================
# read
# ============================================================================


@pytest.mark.asyncio
async def test_get_by_id_resolves_references(repository, collections, make_event):
    collections["events"].docs.append(make_event(registrations=["student-b", "ghost-user", "student-a"]))

    event = await repository.get_by_id("event-1")

    assert event.club.club_id == CLUB_ID
    assert event.organizer.name == "Dr. Rao"
    # Registration order is kept; registrants without a user record are not resolved
    assert [u.user_id for u in event.registrations] == ["student-b", "student-a"]
    assert event.registration_count == 3


@pytest.mark.asyncio
async def test_get_by_id_missing_event(repository):
    with pytest.raises(NotFoundError):
        await repository.get_by_id("nope")


@pytest.mark.asyncio
async def test_list_orders_by_start_date(repository, collections, make_event):
    collections["events"].docs.extend(
        [
            make_event(event_id="late", start_date=FIXED_NOW + timedelta(days=9), end_date=FIXED_NOW + timedelta(days=10)),
            make_event(event_id="early", start_date=FIXED_NOW + timedelta(days=2), end_date=FIXED_NOW + timedelta(days=3)),
            make_event(event_id="hidden", is_active=False),
        ]
    )

    active = await repository.list(active_only=True)
    everything = await repository.list(active_only=False)

    assert [e.event_id for e in active] == ["early", "late"]
    assert {e.event_id for e in everything} == {"early", "late", "hidden"}


@pytest.mark.asyncio
async def test_list_upcoming_excludes_past_and_inactive(repository, collections, make_event):
    collections["events"].docs.extend(
        [
            make_event(event_id="past", start_date=FIXED_NOW - timedelta(days=1), end_date=FIXED_NOW),
            make_event(event_id="inactive", is_active=False),
        ]
        + [
            make_event(event_id=f"e{i}", start_date=FIXED_NOW + timedelta(days=i), end_date=FIXED_NOW + timedelta(days=i, hours=1))
            for i in range(1, 5)
        ]
    )

    upcoming = await repository.list_upcoming(limit=3)

    assert [e.event_id for e in upcoming] == ["e1", "e2", "e3"]


@pytest.mark.asyncio
async def test_list_upcoming_default_limit_comes_from_settings(repository, collections, make_event, monkeypatch):
    monkeypatch.setattr(settings, "UPCOMING_EVENTS_LIMIT", 2)
    collections["events"].docs.extend(
        make_event(event_id=f"e{i}", start_date=FIXED_NOW + timedelta(days=i), end_date=FIXED_NOW + timedelta(days=i, hours=1))
        for i in range(1, 6)
    )

    upcoming = await repository.list_upcoming()

    assert [e.event_id for e in upcoming] == ["e1", "e2"]


@pytest.mark.asyncio
async def test_list_by_club_and_organizer(repository, collections, make_event):
    collections["events"].docs.extend(
        [
            make_event(event_id="a"),
            make_event(event_id="b", club_id="club-2", organizer_id="faculty-2"),
            make_event(event_id="c", is_active=False),
        ]
    )

    assert [e.event_id for e in await repository.list_by_club(CLUB_ID)] == ["a"]
    assert {e.event_id for e in await repository.list_by_organizer(COORDINATOR_ID)} == {"a", "c"}


# ============================================================================
# search
# ============================================================================


def test_build_search_query_defaults_to_active_only():
    assert EventRepository.build_search_query(EventSearchFilter()) == {"is_active": True}


def test_build_search_query_without_active_filter():
    assert EventRepository.build_search_query(EventSearchFilter(is_active=None)) == {}


def test_build_search_query_combines_filters():
    start = FIXED_NOW
    end = FIXED_NOW + timedelta(days=30)
    query = EventRepository.build_search_query(
        EventSearchFilter(
            title="machine",
            location="lab",
            event_type=EventType.WORKSHOP,
            start_date=start,
            end_date=end,
            tags=["ai", "ml"],
        )
    )

    assert query == {
        "is_active": True,
        "title": {"$regex": "machine", "$options": "i"},
        "location": {"$regex": "lab", "$options": "i"},
        "event_type": "workshop",
        "start_date": {"$gte": start},
        "end_date": {"$lte": end},
        "tags": {"$in": ["ai", "ml"]},
    }


def test_build_search_query_escapes_regex_input():
    query = EventRepository.build_search_query(EventSearchFilter(title="C++ (intro)"))

    assert query["title"]["$regex"] == r"C\+\+\ \(intro\)"


@pytest.mark.asyncio
async def test_search_by_type_and_tag(repository, collections, make_event):
    """Only active workshops tagged 'ai' come back, earliest first."""
    day = timedelta(days=1)
    collections["events"].docs.extend(
        [
            make_event(event_id="ws-ai-late", start_date=FIXED_NOW + 5 * day, end_date=FIXED_NOW + 6 * day),
            make_event(event_id="ws-web", tags=["web"]),
            make_event(event_id="seminar-ai", event_type="seminar"),
            make_event(event_id="ws-ai-early", tags=["ml", "ai"], start_date=FIXED_NOW + day, end_date=FIXED_NOW + 2 * day),
            make_event(event_id="ws-ai-inactive", is_active=False),
        ]
    )

    results = await repository.search(EventSearchFilter(event_type="workshop", tags=["ai"]))

    assert [e.event_id for e in results] == ["ws-ai-early", "ws-ai-late"]
    assert all(e.is_active and e.event_type == EventType.WORKSHOP and "ai" in e.tags for e in results)


# ============================================================================
# update
# ============================================================================


@pytest.mark.asyncio
async def test_update_with_empty_payload_changes_nothing(repository, collections, make_event):
    original = make_event()
    collections["events"].docs.append(make_event())

    before = await repository.get_by_id("event-1")
    after = await repository.update("event-1", UpdateEventRequest())

    assert after == before
    assert collections["events"].docs[0] == original


@pytest.mark.asyncio
async def test_update_only_touches_present_fields(repository, collections, make_event):
    collections["events"].docs.append(make_event())

    event = await repository.update("event-1", UpdateEventRequest(title="Advanced ML", description=None))

    assert event.title == "Advanced ML"
    assert event.description == "Hands-on workshop"
    assert event.location == "Lab 3"


@pytest.mark.asyncio
async def test_update_revalidates_date_order(repository, collections, make_event):
    collections["events"].docs.append(make_event())
    bad_end = make_event()["start_date"] - timedelta(hours=1)

    with pytest.raises(ValidationError):
        await repository.update("event-1", UpdateEventRequest(end_date=bad_end))

    assert collections["events"].docs[0]["end_date"] == make_event()["end_date"]


@pytest.mark.asyncio
async def test_update_capacity_below_registrant_count_is_rejected(repository, collections, make_event):
    collections["events"].docs.append(make_event(registrations=["student-a", "student-b"]))

    with pytest.raises(ValidationError):
        await repository.update("event-1", UpdateEventRequest(max_capacity=1))

    event = await repository.update("event-1", UpdateEventRequest(max_capacity=2))
    assert event.max_capacity == 2


@pytest.mark.asyncio
async def test_update_explicit_null_capacity_removes_bound(repository, collections, make_event):
    collections["events"].docs.append(make_event(max_capacity=5))

    event = await repository.update("event-1", UpdateEventRequest(max_capacity=None))

    assert event.max_capacity is None


@pytest.mark.asyncio
async def test_update_missing_event(repository):
    with pytest.raises(NotFoundError):
        await repository.update("nope", UpdateEventRequest(title="x"))


# ============================================================================
# delete / deactivate
# ============================================================================


@pytest.mark.asyncio
async def test_delete_removes_event_and_related_records(repository, collections, make_event, club):
    collections["events"].docs.append(make_event())
    collections["clubs"].docs[0]["events"] = ["event-1"]
    collections["registrations"].docs.append({"event_id": "event-1", "user_id": "student-a"})
    collections["attendance"].docs.append({"event_id": "event-1", "user_id": "student-a"})

    await repository.delete("event-1")

    assert collections["events"].docs == []
    assert collections["clubs"].docs[0]["events"] == []
    assert collections["registrations"].docs == []
    assert collections["attendance"].docs == []


@pytest.mark.asyncio
async def test_delete_missing_event(repository):
    with pytest.raises(NotFoundError):
        await repository.delete("nope")


@pytest.mark.asyncio
async def test_deactivated_event_hidden_from_listings_but_retrievable(repository, collections, make_event):
    collections["events"].docs.append(make_event())

    deactivated = await repository.deactivate("event-1")

    assert deactivated.is_active is False
    assert await repository.list(active_only=True) == []
    assert await repository.search(EventSearchFilter()) == []
    assert (await repository.get_by_id("event-1")).is_active is False


@pytest.mark.asyncio
async def test_deactivate_missing_event(repository):
    with pytest.raises(NotFoundError):
        await repository.deactivate("nope")
