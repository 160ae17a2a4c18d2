"""
# Campus Events Indexes

Declares the indexes for the five collections backing the API. The unique compound indexes on
`registrations` and `attendance` enforce one record per (user, event) pair.

## Index Catalog

| Collection | Fields | Type | Purpose |
|------------|--------|------|---------|
| `events` | `event_id` | Unique | Primary lookup |
| `events` | `is_active`, `start_date` | Compound | Active listings sorted by date |
| `events` | `club_id` | Single | Events by club |
| `events` | `organizer_id` | Single | Events by organizer |
| `events` | `event_type` | Single | Search by type |
| `events` | `tags` | Multikey | Search by tag |
| `clubs` | `club_id` | Unique | Primary lookup |
| `clubs` | `name` | Unique | One club per name |
| `users` | `user_id` | Unique | Primary lookup |
| `users` | `email` | Unique | One account per email |
| `registrations` | `user_id`, `event_id` | Unique | **Integrity**: one registration per user and event |
| `registrations` | `event_id` / `user_id` / `status` | Single | Listing and filtering |
| `attendance` | `user_id`, `event_id` | Unique | **Integrity**: one attendance record per user and event |
| `attendance` | `event_id` / `user_id` / `marked_by` / `status` | Single | Listing and filtering |
"""

from typing import TYPE_CHECKING, Any, Dict, List

from pymongo import ASCENDING

from campus_events.managers.logging_manager import get_logger

if TYPE_CHECKING:
    from campus_events.database.manager import DatabaseManager

logger = get_logger(prefix="[EventIndexes]")

EVENT_INDEXES: List[Dict[str, Any]] = [
    # Events
    {"collection": "events", "index": [("event_id", ASCENDING)], "options": {"name": "event_id_idx", "unique": True}},
    {
        "collection": "events",
        "index": [("is_active", ASCENDING), ("start_date", ASCENDING)],
        "options": {"name": "active_start_date_idx"},
    },
    {"collection": "events", "index": [("club_id", ASCENDING)], "options": {"name": "club_id_idx"}},
    {"collection": "events", "index": [("organizer_id", ASCENDING)], "options": {"name": "organizer_id_idx"}},
    {"collection": "events", "index": [("event_type", ASCENDING)], "options": {"name": "event_type_idx"}},
    {"collection": "events", "index": [("tags", ASCENDING)], "options": {"name": "tags_idx"}},
    # Clubs
    {"collection": "clubs", "index": [("club_id", ASCENDING)], "options": {"name": "club_id_idx", "unique": True}},
    {"collection": "clubs", "index": [("name", ASCENDING)], "options": {"name": "club_name_idx", "unique": True}},
    # Users
    {"collection": "users", "index": [("user_id", ASCENDING)], "options": {"name": "user_id_idx", "unique": True}},
    {"collection": "users", "index": [("email", ASCENDING)], "options": {"name": "email_idx", "unique": True}},
    # Registrations
    {
        "collection": "registrations",
        "index": [("user_id", ASCENDING), ("event_id", ASCENDING)],
        "options": {"name": "user_event_unique_idx", "unique": True},
    },
    {"collection": "registrations", "index": [("event_id", ASCENDING)], "options": {"name": "event_id_idx"}},
    {"collection": "registrations", "index": [("user_id", ASCENDING)], "options": {"name": "user_id_idx"}},
    {"collection": "registrations", "index": [("status", ASCENDING)], "options": {"name": "status_idx"}},
    # Attendance
    {
        "collection": "attendance",
        "index": [("user_id", ASCENDING), ("event_id", ASCENDING)],
        "options": {"name": "user_event_unique_idx", "unique": True},
    },
    {"collection": "attendance", "index": [("event_id", ASCENDING)], "options": {"name": "event_id_idx"}},
    {"collection": "attendance", "index": [("user_id", ASCENDING)], "options": {"name": "user_id_idx"}},
    {"collection": "attendance", "index": [("marked_by", ASCENDING)], "options": {"name": "marked_by_idx"}},
    {"collection": "attendance", "index": [("status", ASCENDING)], "options": {"name": "status_idx"}},
]


async def create_event_indexes(db_manager: "DatabaseManager") -> int:
    """
    Create all indexes in `EVENT_INDEXES`. `create_index` is idempotent, so this runs on every startup.

    A failure on a unique index is raised. Failures on secondary indexes are logged and skipped.

    Returns:
        int: Number of indexes created or confirmed.
    """
    created = 0
    for index_def in EVENT_INDEXES:
        collection = db_manager.get_collection(index_def["collection"])
        options = index_def["options"]
        try:
            await collection.create_index(index_def["index"], **options)
            created += 1
            logger.debug("Ensured index %s on %s", options["name"], index_def["collection"])
        except Exception as e:
            if options.get("unique"):
                logger.error("Failed to create unique index %s on %s: %s", options["name"], index_def["collection"], e)
                raise
            logger.warning("Could not create index %s on %s: %s", options["name"], index_def["collection"], e)

    logger.info("Ensured %d indexes across campus event collections", created)
    return created
