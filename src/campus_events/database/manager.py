"""
# MongoDB Database Manager

This module owns the **MongoDB connection lifecycle** for the Campus Events API using Motor,
the async driver for MongoDB.

## Ownership

A `DatabaseManager` is constructed by the process entry point (`campus_events.main.lifespan`),
stored on `app.state.db_manager` and handed to every service through FastAPI dependencies.
There is no module-level instance. Services receive the handle they operate on.

```python
manager = DatabaseManager(settings)
await manager.connect()
await manager.create_indexes()

events = manager.get_collection("events")
event = await events.find_one({"event_id": "..."})

await manager.disconnect()
```

## Logging

- `[DATABASE]`: connection lifecycle and collection access
- `[DB_PERFORMANCE]`: timings for connect, disconnect and index creation
- `[DB_HEALTH]`: health check results
"""

import asyncio
import time
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from campus_events.config import Settings, settings as default_settings
from campus_events.managers.logging_manager import get_logger

db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
health_logger = get_logger(prefix="[DB_HEALTH]")


class DatabaseManager:
    """
    Manages the MongoDB client, database handle and index creation.

    **Lifecycle:**
    1. **Instantiation**: `client` and `database` are `None`
    2. **Connection**: `connect()` creates the client and pings the server
    3. **Operations**: `get_collection()` returns Motor collections
    4. **Shutdown**: `disconnect()` closes the connection pool

    Attributes:
        settings (`Settings`): Configuration used to build the client.
        client (`Optional[AsyncIOMotorClient]`): Motor client, `None` until connected.
        database (`Optional[AsyncIOMotorDatabase]`): Selected database, `None` until connected.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.settings: Settings = config or default_settings
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._connection_retries = 3

    def _connection_string(self) -> str:
        cfg = self.settings
        if cfg.MONGODB_USERNAME and cfg.MONGODB_PASSWORD:
            password = cfg.MONGODB_PASSWORD.get_secret_value()
            db_logger.debug("Using authenticated connection to MongoDB")
            return f"mongodb://{cfg.MONGODB_USERNAME}:{password}@{cfg.MONGODB_URL.replace('mongodb://', '')}"
        db_logger.debug("Using unauthenticated connection to MongoDB")
        return cfg.MONGODB_URL

    async def connect(self):
        """
        Establish the MongoDB connection with exponential backoff.

        Up to three attempts are made with delays of 1s and 2s between them. The client is
        created with `tz_aware=True` so stored instants come back as UTC-aware datetimes.

        Raises:
            `ServerSelectionTimeoutError`: If MongoDB is unreachable after all attempts.
            `ConnectionFailure`: If authentication fails or the connection is refused.
        """
        cfg = self.settings
        start_time = time.time()
        db_logger.info("Starting MongoDB connection process")

        for attempt in range(self._connection_retries):
            attempt_start = time.time()
            try:
                db_logger.info("Connection attempt %d/%d to MongoDB", attempt + 1, self._connection_retries)
                db_logger.info(
                    "MongoDB connection config - Database: %s, ServerTimeout: %dms, ConnTimeout: %dms",
                    cfg.MONGODB_DATABASE,
                    cfg.MONGODB_SERVER_SELECTION_TIMEOUT,
                    cfg.MONGODB_CONNECTION_TIMEOUT,
                )

                self.client = AsyncIOMotorClient(
                    self._connection_string(),
                    serverSelectionTimeoutMS=cfg.MONGODB_SERVER_SELECTION_TIMEOUT,
                    connectTimeoutMS=cfg.MONGODB_CONNECTION_TIMEOUT,
                    tz_aware=True,
                )
                self.database = self.client[cfg.MONGODB_DATABASE]

                ping_start = time.time()
                await self.client.admin.command("ping")
                ping_duration = time.time() - ping_start

                perf_logger.info(
                    "MongoDB connection established in %.3fs (ping: %.3fs)", time.time() - start_time, ping_duration
                )
                db_logger.info("Successfully connected to MongoDB database: %s", cfg.MONGODB_DATABASE)
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                perf_logger.warning("Connection attempt %d failed after %.3fs", attempt + 1, time.time() - attempt_start)
                db_logger.warning(
                    "Failed to connect to MongoDB (attempt %d/%d): %s", attempt + 1, self._connection_retries, e
                )
                if attempt == self._connection_retries - 1:
                    db_logger.error("All connection attempts failed after %.3fs", time.time() - start_time)
                    raise

                backoff_time = 2**attempt
                db_logger.info("Waiting %.1fs before retry (exponential backoff)", backoff_time)
                await asyncio.sleep(backoff_time)

    async def disconnect(self):
        """Close the Motor client. Safe to call when not connected."""
        start_time = time.time()
        db_logger.info("Starting MongoDB disconnection process")

        if self.client is None:
            db_logger.warning("Disconnect called but no active MongoDB connection found")
            return

        self.client.close()
        self.client = None
        self.database = None
        perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
        db_logger.info("Successfully disconnected from MongoDB")

    async def health_check(self) -> bool:
        """
        Ping the server.

        Returns:
            `bool`: `True` if the database responds, `False` otherwise. Never raises.
        """
        start_time = time.time()
        if self.client is None:
            health_logger.warning("Health check failed: no MongoDB client initialised")
            return False

        try:
            await self.client.admin.command("ping")
            health_logger.debug("Database health check passed in %.3fs", time.time() - start_time)
            return True
        except (ServerSelectionTimeoutError, ConnectionFailure) as e:
            health_logger.error("Connection error during health check: %s", e)
            return False
        except Exception as e:
            health_logger.error("Unexpected error during health check: %s", e)
            return False

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Retrieve a collection from the connected database.

        Raises:
            `ConnectionError`: If `connect()` has not been called.
        """
        if self.database is None:
            db_logger.error("Attempted to get collection '%s' without database connection", collection_name)
            raise ConnectionError("Database not connected. Call connect() first.")

        return self.database[collection_name]

    async def create_indexes(self):
        """Create every index declared in `campus_events.database.event_indexes`."""
        from campus_events.database.event_indexes import create_event_indexes

        start_time = time.time()
        db_logger.info("Starting database index creation process")
        try:
            await create_event_indexes(self)
        except (ConnectionError, TimeoutError) as e:
            perf_logger.error("Database index creation failed after %.3fs", time.time() - start_time)
            db_logger.error("Failed to create database indexes: %s", e)
            raise

        perf_logger.info("Database index creation completed in %.3fs", time.time() - start_time)

