"""MongoDB access layer: connection manager and index declarations."""

from campus_events.database.manager import DatabaseManager

__all__ = ["DatabaseManager"]
