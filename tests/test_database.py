"""
Tests for the database manager lifecycle guards and index declarations.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from campus_events.config import Settings
from campus_events.database.event_indexes import EVENT_INDEXES, create_event_indexes
from campus_events.database.manager import DatabaseManager


def test_get_collection_before_connect_raises():
    manager = DatabaseManager()

    with pytest.raises(ConnectionError):
        manager.get_collection("events")


@pytest.mark.asyncio
async def test_health_check_without_client():
    assert await DatabaseManager().health_check() is False


@pytest.mark.asyncio
async def test_health_check_reports_unreachable_server():
    manager = DatabaseManager()
    manager.client = MagicMock()
    manager.client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))

    assert await manager.health_check() is False


@pytest.mark.asyncio
async def test_health_check_ok():
    manager = DatabaseManager()
    manager.client = MagicMock()
    manager.client.admin.command = AsyncMock(return_value={"ok": 1})

    assert await manager.health_check() is True


@pytest.mark.asyncio
async def test_disconnect_closes_client():
    manager = DatabaseManager()
    client = MagicMock()
    manager.client = client
    manager.database = MagicMock()

    await manager.disconnect()

    client.close.assert_called_once()
    assert manager.client is None
    assert manager.database is None


def test_connection_string_with_credentials():
    manager = DatabaseManager(
        config=Settings(MONGODB_URL="mongodb://db:27017", MONGODB_USERNAME="app", MONGODB_PASSWORD="s3cret")
    )

    assert manager._connection_string() == "mongodb://app:s3cret@db:27017"


@pytest.mark.parametrize("collection", ["registrations", "attendance"])
def test_one_record_per_user_and_event(collection):
    unique = [
        index_def
        for index_def in EVENT_INDEXES
        if index_def["collection"] == collection and index_def["options"].get("unique")
    ]

    assert [index_def["index"] for index_def in unique] == [[("user_id", 1), ("event_id", 1)]]


@pytest.mark.asyncio
async def test_create_event_indexes_ensures_every_index():
    collection = MagicMock()
    collection.create_index = AsyncMock()
    db_manager = MagicMock()
    db_manager.get_collection.return_value = collection

    created = await create_event_indexes(db_manager)

    assert created == len(EVENT_INDEXES)
    assert collection.create_index.await_count == len(EVENT_INDEXES)


@pytest.mark.asyncio
async def test_create_event_indexes_skips_failed_secondary_index():
    async def _create_index(keys, name, unique=False):
        if name == "tags_idx":
            raise OperationFailure("index build failed")

    collection = MagicMock()
    collection.create_index = AsyncMock(side_effect=_create_index)
    db_manager = MagicMock()
    db_manager.get_collection.return_value = collection

    created = await create_event_indexes(db_manager)

    assert created == len(EVENT_INDEXES) - 1


@pytest.mark.asyncio
async def test_create_event_indexes_raises_on_unique_index_failure():
    collection = MagicMock()
    collection.create_index = AsyncMock(side_effect=OperationFailure("duplicate key"))
    db_manager = MagicMock()
    db_manager.get_collection.return_value = collection

    with pytest.raises(OperationFailure):
        await create_event_indexes(db_manager)
