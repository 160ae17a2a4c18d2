"""Shared fixtures: a fixed clock, document factories and a `DatabaseManager` backed by in-memory collections."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from tests.fakes import InMemoryCollection

FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

COORDINATOR_ID = "faculty-1"
CLUB_ID = "club-1"


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_event():
    """Factory for stored event documents."""

    def _make(**overrides):
        doc = {
            "event_id": "event-1",
            "title": "Intro to Machine Learning",
            "description": "Hands-on workshop",
            "start_date": FIXED_NOW + timedelta(days=7),
            "end_date": FIXED_NOW + timedelta(days=7, hours=2),
            "location": "Lab 3",
            "club_id": CLUB_ID,
            "organizer_id": COORDINATOR_ID,
            "max_capacity": None,
            "event_type": "workshop",
            "image_url": None,
            "tags": ["ai"],
            "registrations": [],
            "is_active": True,
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        doc.update(overrides)
        return doc

    return _make


@pytest.fixture
def users():
    return [
        {"user_id": COORDINATOR_ID, "name": "Dr. Rao", "email": "rao@campus.edu", "role": "faculty"},
        {"user_id": "student-a", "name": "Asha", "email": "asha@campus.edu", "role": "student"},
        {"user_id": "student-b", "name": "Ben", "email": "ben@campus.edu", "role": "student"},
        {"user_id": "student-c", "name": "Chen", "email": "chen@campus.edu", "role": "student"},
    ]


@pytest.fixture
def club():
    return {
        "club_id": CLUB_ID,
        "name": "AI Society",
        "description": "Machine learning club",
        "category": "technical",
        "faculty_coordinator_id": COORDINATOR_ID,
        "events": [],
        "is_active": True,
        "created_at": FIXED_NOW,
        "updated_at": FIXED_NOW,
    }


@pytest.fixture
def collections(users, club):
    return {
        "events": InMemoryCollection(),
        "clubs": InMemoryCollection([club], unique=("name",)),
        "users": InMemoryCollection(users, unique=("email",)),
        "registrations": InMemoryCollection(unique=("user_id", "event_id")),
        "attendance": InMemoryCollection(unique=("user_id", "event_id")),
    }


@pytest.fixture
def db_manager(collections):
    manager = MagicMock()
    manager.get_collection.side_effect = lambda name: collections[name]
    return manager
