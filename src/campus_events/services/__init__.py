"""Domain services operating on an injected `DatabaseManager`."""
